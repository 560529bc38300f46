# postboard/services/comments/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class CommentCreateIn:
    """
    Input DTO for commenting on a post.

    :param content: Comment body.
    :type content: str
    :param author: Display name of the author.
    :type author: str
    """

    content: str
    author: str


@dataclass(frozen=True, slots=True)
class CommentUpdateIn:
    content: str | None = None
    author: str | None = None


@dataclass(frozen=True, slots=True)
class CommentOut:
    id: int
    post_id: int
    content: str
    author: str
    owner_id: int
    created_at: datetime | None
