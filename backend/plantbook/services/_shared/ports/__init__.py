"""
plantbook.services._shared.ports
================================

*Ports* (hexagonal interfaces) that the service layer depends on.

Modules
-------
- :mod:`token_provider`:
    :class:`~.TokenProvider`, abstraction for signing and decoding tokens.

- :mod:`refresh_token_store`:
    :class:`~.RefreshTokenStore` and :class:`~.RefreshSessionView`, the
    per-user set of valid (hashed) refresh tokens.

- :mod:`blob_store`:
    :class:`~.BlobStore`, image persistence returning public URLs.

- :mod:`identity_provider`:
    :class:`~.IdentityProvider`, external OAuth-style sign-in.

Concrete adapters live under ``plantbook.infra``; the in-memory/stub
variants defined here back the unit tests.
"""

from __future__ import annotations

from .blob_store import ALLOWED_IMAGE_TYPES, BlobStore, InMemoryBlobStore, check_blob
from .identity_provider import ExternalIdentity, IdentityProvider, StaticIdentityProvider
from .refresh_token_store import (
    InMemoryRefreshTokenStore,
    RefreshSessionView,
    RefreshTokenStore,
    hash_token,
)
from .token_provider import (
    ACCESS_TOKEN_TYPE,
    REFRESH_TOKEN_TYPE,
    StubTokenProvider,
    TokenProvider,
)

__all__ = [
    "ACCESS_TOKEN_TYPE",
    "REFRESH_TOKEN_TYPE",
    "TokenProvider",
    "StubTokenProvider",
    "RefreshTokenStore",
    "RefreshSessionView",
    "InMemoryRefreshTokenStore",
    "hash_token",
    "BlobStore",
    "InMemoryBlobStore",
    "ALLOWED_IMAGE_TYPES",
    "check_blob",
    "IdentityProvider",
    "ExternalIdentity",
    "StaticIdentityProvider",
]
