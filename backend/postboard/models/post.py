"""Post model (owned resource)."""

from __future__ import annotations

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from postboard.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin


class Post(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """A post. ``owner_id`` is stamped from the authenticated identity at creation and never reassigned."""

    __tablename__ = "posts"
    __repr_fields__ = ("id", "owner_id")

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    sender_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    owner_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
