"""Accounts: the identities that own posts, comments and refresh sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from postboard.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .refresh_token import RefreshToken


class User(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    A registered account.

    ``email`` is stored lowercased and trimmed, so logins match regardless
    of case. ``password_hash`` only ever holds a salted digest. Removing an
    account removes its whole session set (``refresh_tokens``) in the same
    delete.
    """

    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        UniqueConstraint("username", name="uq_users_username"),
    )
    __repr_fields__ = ("id", "username")

    username: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(String(254), nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    bio: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    profile_image: Mapped[str] = mapped_column(String(500), nullable=False, default="")

    refresh_tokens: Mapped[list[RefreshToken]] = relationship(
        back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )

    @validates("email")
    def _clean_email(self, key: str, value: str) -> str:
        """:raises ValueError: Blank, non-string or without an ``@``."""
        cleaned = value.strip().lower() if isinstance(value, str) else ""
        if "@" not in cleaned:
            raise ValueError("A valid email address is required.")
        return cleaned

    @validates("username")
    def _clean_username(self, key: str, value: str) -> str:
        cleaned = value.strip() if isinstance(value, str) else ""
        if not cleaned:
            raise ValueError("A username is required.")
        return cleaned
