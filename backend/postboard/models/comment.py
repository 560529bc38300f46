"""Comment model (owned resource attached to a post)."""

from __future__ import annotations

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from postboard.core.extensions import db

from .base import CreatedAtMixin, PKMixin, ReprMixin


class Comment(PKMixin, CreatedAtMixin, ReprMixin, db.Model):
    """A comment on a post, owned by the identity that created it."""

    __tablename__ = "comments"
    __repr_fields__ = ("id", "post_id")

    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    author: Mapped[str] = mapped_column(String(100), nullable=False)
    owner_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
