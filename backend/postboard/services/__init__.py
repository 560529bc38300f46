"""Service layer public API.

This package exposes the essential building blocks for the service layer so that
callers can import from :mod:`postboard.services` without knowing internal structure.

Re-exports
----------
- Base primitives (from ``postboard.services._shared.base``)
    * :class:`BaseService`
    * :class:`ServiceContext`

- Auth (from ``postboard.services.auth``)
    * :class:`AuthService`, :class:`AccessGuard`
    * DTOs: :class:`RegisterIn`, :class:`LoginIn`, :class:`RefreshIn`,
      :class:`LogoutIn`, :class:`SessionOut`, :class:`UserOut`,
      :class:`AuthTokenConfig`

- Posts / comments
    * :class:`PostService`, :class:`CommentService` and their DTOs
"""

from __future__ import annotations

from ._shared.base import BaseService, ServiceContext
from ._shared.policies.ownership import Identity, OwnershipAuthorizer
from .auth.dto import (
    AuthTokenConfig,
    LoginIn,
    LogoutIn,
    RefreshIn,
    RegisterIn,
    SessionOut,
    UserOut,
)
from .auth.guard import AccessGuard
from .auth.service import AuthService
from .comments.dto import CommentCreateIn, CommentOut, CommentUpdateIn
from .comments.service import CommentService
from .posts.dto import PostCreateIn, PostOut, PostUpdateIn
from .posts.service import PostService

__all__ = [
    # Base
    "BaseService",
    "ServiceContext",
    "Identity",
    "OwnershipAuthorizer",
    # Auth
    "AuthService",
    "AccessGuard",
    "AuthTokenConfig",
    "RegisterIn",
    "LoginIn",
    "RefreshIn",
    "LogoutIn",
    "SessionOut",
    "UserOut",
    # Posts
    "PostService",
    "PostCreateIn",
    "PostUpdateIn",
    "PostOut",
    # Comments
    "CommentService",
    "CommentCreateIn",
    "CommentUpdateIn",
    "CommentOut",
]
