"""Liveness and dependency probe."""

from __future__ import annotations

from flask import Blueprint, current_app
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from postboard.api.deps import json_response, timing
from postboard.core.auth import get_components
from postboard.core.extensions import db

bp = Blueprint("health", __name__)


def _probe_db() -> str:
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        current_app.logger.exception("Health probe failed: database")
        return "fail"
    return "ok"


def _probe_session_registry() -> str:
    try:
        get_components().refresh_store.contains("0", "health-probe")
    except (RedisError, SQLAlchemyError):
        current_app.logger.exception("Health probe failed: session registry")
        return "fail"
    return "ok"


@bp.get("/health")
@timing
def healthcheck():
    """Report database and session-registry reachability.

    Always answers 200 so load balancers can tell "up but degraded" apart
    from "down"; callers inspect the per-dependency fields.
    """
    return json_response(
        {
            "status": "ok",
            "db": _probe_db(),
            "refresh_store": current_app.config.get("REFRESH_TOKEN_STORE", "sql"),
            "refresh_store_status": _probe_session_registry(),
            "version": current_app.config.get("APP_VERSION", "dev"),
        }
    )
