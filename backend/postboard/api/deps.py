"""Per-request plumbing shared by the v1 blueprints."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, request

from postboard.core.auth import get_components
from postboard.core.logger import ensure_request_id
from postboard.services import AccessGuard, AuthService, Identity, ServiceContext

F = TypeVar("F", bound=Callable[..., Any])


def get_access_guard() -> AccessGuard:
    return AccessGuard(get_components().codec)


def get_auth_service() -> AuthService:
    """Auth service wired to the session core built at startup."""
    parts = get_components()
    return AuthService(
        codec=parts.codec,
        refresh_store=parts.refresh_store,
        hasher=parts.hasher,
        token_cfg=parts.token_cfg,
        ctx=service_context(),
    )


def current_identity() -> Identity | None:
    return g.get("identity")


def service_context() -> ServiceContext:
    identity = current_identity()
    return ServiceContext(
        actor_id=None if identity is None else identity.user_id,
        request_id=ensure_request_id(),
    )


def require_auth(func: F) -> F:
    """
    Resolve the bearer token into ``g.identity`` before the view runs.

    A missing or bad token raises ``UnauthenticatedError`` (401) and the view
    body, with any resource lookup in it, never executes.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        g.identity = get_access_guard().authenticate(request.headers.get("Authorization"))
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def json_response(payload: Any, *, status: int = 200) -> Response:
    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Log the view's wall time at DEBUG as ``elapsed_ms``."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        started = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            current_app.logger.debug(
                "view timing",
                extra={
                    "endpoint": request.endpoint,
                    "elapsed_ms": round((time.perf_counter() - started) * 1000, 2),
                },
            )

    return wrapper  # type: ignore[return-value]
