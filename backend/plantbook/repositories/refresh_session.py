"""Refresh session repository backing the SQL refresh-token store."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, select

from plantbook.models.refresh_session import RefreshSession
from plantbook.repositories.base import BaseRepository


class RefreshSessionRepository(BaseRepository[RefreshSession]):
    """Persistence-only repository for :class:`RefreshSession`."""

    model = RefreshSession

    def _filterable_fields(self):
        return {
            "user_id": RefreshSession.user_id,
            "token_hash": RefreshSession.token_hash,
        }

    def live_for_user(self, user_id: int, *, now: datetime) -> list[RefreshSession]:
        """Unexpired sessions of a user, oldest first."""
        stmt = (
            select(RefreshSession)
            .where(RefreshSession.user_id == user_id, RefreshSession.expires_at > now)
            .order_by(RefreshSession.issued_at.asc(), RefreshSession.id.asc())
        )
        return list(self.session.execute(stmt).scalars())

    def is_live(self, user_id: int, token_hash: str, *, now: datetime) -> bool:
        stmt = select(RefreshSession.id).where(
            RefreshSession.user_id == user_id,
            RefreshSession.token_hash == token_hash,
            RefreshSession.expires_at > now,
        )
        return self.session.execute(stmt).first() is not None

    def purge_expired(self, user_id: int, *, now: datetime) -> int:
        stmt = (
            delete(RefreshSession)
            .where(RefreshSession.user_id == user_id, RefreshSession.expires_at <= now)
            .execution_options(synchronize_session=False)
        )
        return int(self.session.execute(stmt).rowcount or 0)

    def delete_ids(self, ids: list[int]) -> int:
        if not ids:
            return 0
        stmt = (
            delete(RefreshSession)
            .where(RefreshSession.id.in_(ids))
            .execution_options(synchronize_session=False)
        )
        return int(self.session.execute(stmt).rowcount or 0)
