"""Refresh session repository: set operations over ``refresh_tokens`` rows."""

from __future__ import annotations

from sqlalchemy import delete, func, select

from postboard.models.refresh_token import RefreshToken
from postboard.repositories.base import BaseRepository


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    """
    Persistence-only access to a user's active session set.

    Every mutation is a single SQL statement. :meth:`consume` is the
    conditional half of a rotation: the ``DELETE`` only matches when the
    ``(jti, user_id)`` pair is currently present, and the returned rowcount
    tells the caller whether it won.
    """

    model = RefreshToken

    def _pk_attr(self):
        return RefreshToken.jti

    def _filterable_fields(self):
        return {"user_id": RefreshToken.user_id, "jti": RefreshToken.jti}

    def add_member(self, user_id: int, jti: str) -> None:
        """Insert ``jti`` into ``user_id``'s set and flush."""
        self.session.add(RefreshToken(jti=jti, user_id=user_id))
        self.session.flush()

    def consume(self, user_id: int, jti: str) -> bool:
        """
        Delete the ``(user_id, jti)`` member if present.

        :returns: ``True`` when exactly one row was removed.
        """
        stmt = delete(RefreshToken).where(
            RefreshToken.jti == jti,
            RefreshToken.user_id == user_id,
        )
        result = self.session.execute(stmt)
        return result.rowcount == 1

    def delete_all_for_user(self, user_id: int) -> int:
        """Delete every member of the user's set. :returns: Rows removed."""
        result = self.session.execute(delete(RefreshToken).where(RefreshToken.user_id == user_id))
        return int(result.rowcount or 0)

    def has_member(self, user_id: int, jti: str) -> bool:
        stmt = (
            select(func.count())
            .select_from(RefreshToken)
            .where(RefreshToken.jti == jti, RefreshToken.user_id == user_id)
        )
        return bool(self.session.execute(stmt).scalar())

    def jtis_for_user(self, user_id: int) -> list[str]:
        stmt = select(RefreshToken.jti).where(RefreshToken.user_id == user_id).order_by(RefreshToken.jti)
        return list(self.session.execute(stmt).scalars().all())
