"""Service fixtures wired to in-memory port doubles."""

from __future__ import annotations

import pytest

from plantbook.services._shared.ports import (
    InMemoryBlobStore,
    InMemoryRefreshTokenStore,
    StubTokenProvider,
)
from plantbook.services.tokens.dto import AuthTokenConfig
from plantbook.services.tokens.service import TokenService


@pytest.fixture()
def refresh_store() -> InMemoryRefreshTokenStore:
    return InMemoryRefreshTokenStore(max_sessions=3)


@pytest.fixture()
def tokens(refresh_store) -> TokenService:
    return TokenService(
        token_provider=StubTokenProvider(),
        refresh_store=refresh_store,
        token_cfg=AuthTokenConfig(max_sessions=3),
    )


@pytest.fixture()
def blobs() -> InMemoryBlobStore:
    return InMemoryBlobStore()
