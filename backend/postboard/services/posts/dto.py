# postboard/services/posts/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class PostCreateIn:
    """
    Input DTO for creating a post. The owner comes from the service context.

    :param title: Post title.
    :type title: str
    :param sender_id: Free-form sender identifier used for filtering.
    :type sender_id: str
    """

    title: str
    sender_id: str


@dataclass(frozen=True, slots=True)
class PostUpdateIn:
    """Partial update; ``None`` fields are left untouched."""

    title: str | None = None
    sender_id: str | None = None


@dataclass(frozen=True, slots=True)
class PostOut:
    id: int
    title: str
    sender_id: str
    owner_id: int
    created_at: datetime | None
    updated_at: datetime | None
