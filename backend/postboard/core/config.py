"""Environment-driven settings, one class per deployment stage."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Final

from dotenv import load_dotenv

#: Selects the config class: ``development`` | ``testing`` | ``production``.
ENV_VAR: Final[str] = "APP_ENV"

#: Default signing key; :func:`postboard.core.auth.init_app` refuses it
#: unless the app runs in debug or testing mode.
PLACEHOLDER_JWT_SECRET: Final[str] = "CHANGE_ME_JWT"

_TRUTHY = frozenset({"1", "true", "yes", "y", "on"})

load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """``True`` for 1/true/yes/y/on (any case); ``default`` when unset."""
    raw = os.getenv(name)
    return default if raw is None else raw.strip().lower() in _TRUTHY


def env_int(name: str, default: int) -> int:
    """
    Integer environment variable.

    :raises ValueError: If the variable is set to a non-integer.
    """
    raw = (os.getenv(name) or "").strip()
    return int(raw) if raw else default


class BaseConfig:
    """
    Settings shared by every stage.

    Session core
    ------------
    ``JWT_SECRET_KEY``
        Process-wide HMAC key for access and refresh tokens, handed to the
        token codec once at startup.
    ``ACCESS_TOKEN_EXPIRES``
        Access-token lifetime in seconds. Refresh tokens carry no expiry;
        they live exactly as long as their session-set membership.
    ``REFRESH_TOKEN_STORE``
        ``sql``, ``redis`` or ``memory``; ``redis`` whenever ``REDIS_URL``
        is set, else ``sql``.
    ``PASSWORD_HASH_METHOD``
        Werkzeug method string for new digests.
    """

    API_BASE_PREFIX = "/api"
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")

    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", PLACEHOLDER_JWT_SECRET)
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_ISSUER = os.getenv("JWT_ISSUER", "postboard-api")
    ACCESS_TOKEN_EXPIRES = env_int("ACCESS_TOKEN_EXPIRES", 15 * 60)
    PASSWORD_HASH_METHOD = os.getenv("PASSWORD_HASH_METHOD", "scrypt")

    REDIS_URL = os.getenv("REDIS_URL") or None
    REFRESH_TOKEN_STORE = os.getenv("REFRESH_TOKEN_STORE", "redis" if REDIS_URL else "sql")

    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    PROPAGATE_EXCEPTIONS = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    APP_VERSION = os.getenv("APP_VERSION", "dev")
    APIDOCS_ENABLED = env_bool("APIDOCS_ENABLED", True)

    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")
    CORS_MAX_AGE = env_int("CORS_MAX_AGE", 600)
    USE_PROXYFIX = env_bool("USE_PROXYFIX", True)
    PROXYFIX_HOPS = env_int("PROXYFIX_HOPS", 1)

    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Local runs: debug on unless ``FLASK_DEBUG`` says otherwise."""

    DEBUG = env_bool("FLASK_DEBUG", True)


class TestingConfig(BaseConfig):
    """
    Test suite settings.

    In-memory SQLite (or ``TEST_DATABASE_URL``), the SQL session registry,
    five-second access tokens and cheap pbkdf2 digests.
    """

    TESTING = True
    JWT_SECRET_KEY = "testing-jwt-secret-key-of-sufficient-length"
    ACCESS_TOKEN_EXPIRES = 5
    PASSWORD_HASH_METHOD = "pbkdf2:sha256:1000"
    REDIS_URL = None
    REFRESH_TOKEN_STORE = "sql"
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    LOG_LEVEL = "WARNING"


class ProductionConfig(BaseConfig):
    # JWT_SECRET_KEY must come from the environment; the placeholder is refused.
    SQLALCHEMY_ECHO = False


CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Config class named by ``APP_ENV``; unknown or unset means development."""
    return CONFIG_MAP.get(os.getenv(ENV_VAR, "development").strip().lower(), DevelopmentConfig)
