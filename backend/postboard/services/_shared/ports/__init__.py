"""
postboard.services._shared.ports
================================

Collection of *ports* (hexagonal interfaces) that the session core depends
on. Concrete adapters live under ``postboard.infra``.

Modules
-------
- :mod:`token_codec`:
    :class:`~.TokenCodec`: signed, expiring bearer tokens, plus the internal
    :class:`~.TokenError` taxonomy.

- :mod:`refresh_token_store`:
    :class:`~.RefreshTokenStore` and :class:`~.RotationResult`: the per-user
    session registry with atomic rotation. :class:`~.InMemoryRefreshTokenStore`
    is the lock-based reference adapter.

- :mod:`password_hasher`:
    :class:`~.PasswordHasher`: swappable ``{hash, verify}`` capability.

- :mod:`clock`:
    :data:`~.Clock`: injected current-time source.
"""

from __future__ import annotations

from .clock import Clock, utc_now
from .password_hasher import PasswordHasher
from .refresh_token_store import (
    InMemoryRefreshTokenStore,
    RefreshTokenStore,
    RotationResult,
    generate_jti,
)
from .token_codec import (
    AccessClaims,
    BadSignatureError,
    ExpiredTokenError,
    MalformedTokenError,
    RefreshClaims,
    TokenCodec,
    TokenError,
)

__all__ = [
    "Clock",
    "utc_now",
    "PasswordHasher",
    "RefreshTokenStore",
    "RotationResult",
    "InMemoryRefreshTokenStore",
    "generate_jti",
    "TokenCodec",
    "TokenError",
    "MalformedTokenError",
    "BadSignatureError",
    "ExpiredTokenError",
    "AccessClaims",
    "RefreshClaims",
]
