"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import (
    LoginSchema,
    RefreshTokenSchema,
    RegisterResponseSchema,
    RegisterSchema,
    SessionResponseSchema,
)
from .comment import CommentCreateSchema, CommentSchema, CommentUpdateSchema
from .post import PostCreateSchema, PostFilterSchema, PostSchema, PostUpdateSchema
from .user import UserSchema

__all__ = [
    "LoginSchema",
    "RegisterSchema",
    "RefreshTokenSchema",
    "RegisterResponseSchema",
    "SessionResponseSchema",
    "UserSchema",
    "PostSchema",
    "PostCreateSchema",
    "PostUpdateSchema",
    "PostFilterSchema",
    "CommentSchema",
    "CommentCreateSchema",
    "CommentUpdateSchema",
]
