from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from plantbook.models.base import as_utc
from plantbook.models.refresh_session import RefreshSession
from plantbook.services._shared.ports import RefreshSessionView, RefreshTokenStore
from plantbook.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork


@dataclass(slots=True)
class SQLRefreshTokenStore(RefreshTokenStore):
    """
    Refresh token store on the ``refresh_sessions`` table.

    Each call runs in its own read-write unit of work, so callers must not
    hold an open one. ``discard`` is a single ``DELETE``; its rowcount tells
    which of several concurrent callers actually removed the row.

    :param max_sessions: Live sessions kept per user; oldest are evicted.
    """

    max_sessions: int = 10

    @staticmethod
    def _now() -> datetime:
        return datetime.now(UTC)

    @staticmethod
    def _view(row: RefreshSession) -> RefreshSessionView:
        return RefreshSessionView(
            user_id=row.user_id,
            token_hash=row.token_hash,
            issued_at=as_utc(row.issued_at),
            expires_at=as_utc(row.expires_at),
            device=row.device,
        )

    def add(
        self,
        *,
        user_id: int,
        token_hash: str,
        issued_at: datetime,
        expires_at: datetime,
        device: str | None = None,
    ) -> None:
        now = self._now()
        with SQLAlchemyUnitOfWork() as uow:
            repo = uow.refresh_sessions
            repo.purge_expired(user_id, now=now)
            repo.add(
                RefreshSession(
                    user_id=user_id,
                    token_hash=token_hash,
                    issued_at=issued_at,
                    expires_at=expires_at,
                    device=(device or None) and device[:120],
                )
            )
            live = repo.live_for_user(user_id, now=now)
            overflow = len(live) - self.max_sessions
            if overflow > 0:
                repo.delete_ids([row.id for row in live[:overflow]])

    def contains(self, user_id: int, token_hash: str) -> bool:
        with SQLAlchemyUnitOfWork() as uow:
            return uow.refresh_sessions.is_live(user_id, token_hash, now=self._now())

    def discard(self, user_id: int, token_hash: str) -> bool:
        now = self._now()
        with SQLAlchemyUnitOfWork() as uow:
            repo = uow.refresh_sessions
            repo.purge_expired(user_id, now=now)
            return repo.delete_where(user_id=user_id, token_hash=token_hash) > 0

    def clear(self, user_id: int) -> int:
        now = self._now()
        with SQLAlchemyUnitOfWork() as uow:
            repo = uow.refresh_sessions
            repo.purge_expired(user_id, now=now)
            return repo.delete_where(user_id=user_id)

    def sessions(self, user_id: int) -> list[RefreshSessionView]:
        with SQLAlchemyUnitOfWork() as uow:
            rows = uow.refresh_sessions.live_for_user(user_id, now=self._now())
            return [self._view(row) for row in rows]
