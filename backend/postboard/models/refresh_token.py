"""Refresh session membership rows (one row per active session)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from postboard.core.extensions import db

from .base import CreatedAtMixin, ReprMixin

if TYPE_CHECKING:
    from .user import User


class RefreshToken(CreatedAtMixin, ReprMixin, db.Model):
    """
    Member of a user's active refresh-token set.

    The table *is* the per-user session set, keyed by ``jti``. A row exists
    only while its session is active; rotation swaps one row for another and
    replay containment deletes all of a user's rows. The primary key on ``jti``
    keeps a member unique across users.
    """

    __tablename__ = "refresh_tokens"

    jti: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    user: Mapped[User] = relationship(back_populates="refresh_tokens")

    __repr_fields__ = ("user_id",)
