"""Service layer public API.

Callers import from :mod:`plantbook.services` without knowing the internal
layout.

Re-exports
----------
- Base primitives (from ``plantbook.services._shared.base``)
    * :class:`BaseService`
    * :class:`ServiceContext`

- Shared DTOs (from ``plantbook.services._shared.dto``)
    * :class:`PaginationIn`
    * :class:`PageOut`

- Services
    * :class:`TokenService`, :class:`AuthService`, :class:`AuthGate`
    * :class:`IdentityService`, :class:`PostService`, :class:`EngagementService`
"""

from __future__ import annotations

from ._shared.base import BaseService, ServiceContext
from ._shared.dto import PageOut, PaginationIn
from .auth.gate import AuthGate
from .auth.service import AuthService
from .engagement.service import EngagementService
from .identity.service import IdentityService
from .posts.service import PostService
from .tokens.service import TokenService

__all__ = [
    # Base
    "BaseService",
    "ServiceContext",
    # Shared DTOs
    "PaginationIn",
    "PageOut",
    # Services
    "TokenService",
    "AuthService",
    "AuthGate",
    "IdentityService",
    "PostService",
    "EngagementService",
]
