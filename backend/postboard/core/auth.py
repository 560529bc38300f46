"""Session core wiring: token codec, session registry and password hasher."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta

from flask import Flask, current_app

from postboard.core.config import PLACEHOLDER_JWT_SECRET
from postboard.services._shared.ports import (
    InMemoryRefreshTokenStore,
    PasswordHasher,
    RefreshTokenStore,
    TokenCodec,
)
from postboard.services.auth.dto import AuthTokenConfig

log = logging.getLogger(__name__)

EXTENSION_KEY = "postboard.auth"
STORE_BACKENDS = ("sql", "redis", "memory")


@dataclass(frozen=True, slots=True)
class AuthComponents:
    """Process-wide collaborators shared by every request."""

    codec: TokenCodec
    refresh_store: RefreshTokenStore
    hasher: PasswordHasher
    token_cfg: AuthTokenConfig


def build_refresh_store(backend: str) -> RefreshTokenStore:
    """
    Instantiate the session registry named by ``REFRESH_TOKEN_STORE``.

    :raises RuntimeError: Unknown backend, or ``redis`` without a client.
    """
    if backend == "sql":
        from postboard.infra.sql.sql_refresh_token_store import SQLRefreshTokenStore

        return SQLRefreshTokenStore()
    if backend == "redis":
        from postboard.core.extensions import get_redis
        from postboard.infra.redis.redis_refresh_token_store import RedisRefreshTokenStore

        return RedisRefreshTokenStore(get_redis())
    if backend == "memory":
        return InMemoryRefreshTokenStore()
    raise RuntimeError(f"Unknown REFRESH_TOKEN_STORE {backend!r}; expected one of {STORE_BACKENDS}.")


def init_app(app: Flask) -> None:
    """
    Build the session core from configuration and attach it to ``app``.

    Parameters
    ----------
    app: flask.Flask
        Application whose config provides ``JWT_SECRET_KEY``,
        ``JWT_ALGORITHM``, ``JWT_ISSUER``, ``ACCESS_TOKEN_EXPIRES``,
        ``REFRESH_TOKEN_STORE`` and ``PASSWORD_HASH_METHOD``.

    Raises
    ------
    RuntimeError
        When a non-debug, non-testing app still uses the placeholder key.
    """
    from postboard.infra.jwt.jwt_token_codec import JWTTokenCodec
    from postboard.infra.security.werkzeug_password_hasher import WerkzeugPasswordHasher

    secret = app.config.get("JWT_SECRET_KEY") or PLACEHOLDER_JWT_SECRET
    if secret == PLACEHOLDER_JWT_SECRET and not (app.debug or app.testing):
        raise RuntimeError("JWT_SECRET_KEY must be set outside development.")

    backend = str(app.config.get("REFRESH_TOKEN_STORE", "sql")).strip().lower()
    components = AuthComponents(
        codec=JWTTokenCodec(
            secret=secret,
            algorithm=app.config.get("JWT_ALGORITHM", "HS256"),
            issuer=app.config.get("JWT_ISSUER", "postboard-api"),
        ),
        refresh_store=build_refresh_store(backend),
        hasher=WerkzeugPasswordHasher(method=app.config.get("PASSWORD_HASH_METHOD", "scrypt")),
        token_cfg=AuthTokenConfig(
            access_expires=timedelta(seconds=int(app.config.get("ACCESS_TOKEN_EXPIRES", 900)))
        ),
    )
    app.extensions[EXTENSION_KEY] = components
    log.info("Session core ready (refresh store=%s)", backend)


def get_components(app: Flask | None = None) -> AuthComponents:
    """Return the collaborators attached by :func:`init_app`."""
    target = app or current_app
    try:
        return target.extensions[EXTENSION_KEY]
    except KeyError as exc:
        raise RuntimeError("Session core is not initialized. Call init_app() first.") from exc
