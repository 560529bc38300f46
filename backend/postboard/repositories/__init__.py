"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from postboard.repositories.base import BaseRepository, parse_sort_tokens
from postboard.repositories.comment import CommentRepository
from postboard.repositories.post import PostRepository
from postboard.repositories.refresh_token import RefreshTokenRepository
from postboard.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "parse_sort_tokens",
    "UserRepository",
    "RefreshTokenRepository",
    "PostRepository",
    "CommentRepository",
]
