"""Extension singletons (database, migrations, Redis) and their binding."""

from __future__ import annotations

import logging
import sqlite3

import redis  # type: ignore[import-untyped]
from flask import Flask
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import MetaData, event
from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

#: Deterministic constraint names; migrations and ``violates()`` rely on them.
NAMING_CONVENTION = {
    "pk": "pk_%(table_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
}

db: SQLAlchemy = SQLAlchemy(
    metadata=MetaData(naming_convention=NAMING_CONVENTION),
    session_options={"autoflush": False},
)
migrate = Migrate(render_as_batch=True)
redis_client: redis.Redis | None = None


@event.listens_for(Engine, "connect")
def _sqlite_enforce_foreign_keys(dbapi_connection, connection_record) -> None:
    """SQLite ignores ``ON DELETE CASCADE`` unless the pragma is on."""
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def _connect_redis(url: str) -> redis.Redis:
    client = redis.Redis.from_url(url)
    try:
        client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Redis unreachable at {url!r}") from exc
    return client


def init_app(app: Flask) -> None:
    """
    Bind the database, Alembic and, when ``REDIS_URL`` is set, Redis.

    Importing :mod:`postboard.models` here registers every table on
    ``db.metadata`` before Flask-Migrate inspects it.

    :raises RuntimeError: If ``REDIS_URL`` is set but Redis does not answer.
    """
    global redis_client

    db.init_app(app)
    from postboard import models  # noqa: F401

    migrate.init_app(app, db)

    url = app.config.get("REDIS_URL")
    redis_client = _connect_redis(url) if url else None
    if redis_client is None:
        app.extensions.pop("redis_client", None)
    else:
        app.extensions["redis_client"] = redis_client
        log.info("Redis connected")


def get_redis() -> redis.Redis:
    """
    :returns: The client bound by :func:`init_app`.
    :raises RuntimeError: When no ``REDIS_URL`` was configured.
    """
    if redis_client is None:
        raise RuntimeError("Redis is not configured; set REDIS_URL.")
    return redis_client
