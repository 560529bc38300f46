"""Pytest fixtures for the postboard API.

Each test gets freshly created tables on an in-memory SQLite database
(Flask-SQLAlchemy keeps a single static connection for ``:memory:``), so data
never leaks between cases and commits made by the code under test are real.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
from postboard.core.auth import get_components
from postboard.core.config import TestingConfig
from postboard.core.extensions import db as _db  # Flask-SQLAlchemy instance
from postboard.factory import create_app  # application factory under test
from postboard.infra.jwt.jwt_token_codec import JWTTokenCodec
from postboard.infra.security.werkzeug_password_hasher import WerkzeugPasswordHasher
from postboard.services import AuthService, AuthTokenConfig
from postboard.services._shared.ports import InMemoryRefreshTokenStore

from tests.helpers.utils import FrozenClock

TEST_SECRET = "unit-test-signing-key-with-enough-entropy"


@pytest.fixture(scope="session")
def app():
    """Create a Flask application configured for testing.

    Returns
    -------
    flask.Flask
        Application instance with :class:`TestingConfig` applied.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    os.environ.pop("TEST_DATABASE_URL", None)
    return create_app(TestingConfig)


@pytest.fixture()
def db(app):
    """Create all tables before the test and drop them afterwards.

    No app context stays pushed, so requests made through ``client`` get their
    own context (and their own ``g``) exactly like in production.
    """
    with app.app_context():
        _db.create_all()
    yield _db
    with app.app_context():
        _db.session.remove()
        _db.drop_all()


@pytest.fixture()
def app_ctx(app, db):
    """Push an application context for service/repository level tests."""
    with app.app_context():
        yield app
        _db.session.remove()


@pytest.fixture()
def session(app_ctx):
    """Flask-scoped SQLAlchemy session, also bound for the factories."""
    from tests.factories import bind_session

    bind_session(_db.session)
    yield _db.session
    bind_session(None)


@pytest.fixture()
def client(app, db):
    """Return a Flask test client."""
    return app.test_client()


@pytest.fixture()
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


@pytest.fixture()
def freeze_time() -> Callable[[Any], Any]:
    """Factory returning :func:`freezegun.freeze_time`.

    Examples
    --------
    >>> def test_with_frozen_time(freeze_time):
    ...     with freeze_time("2024-01-01") as frozen:
    ...         frozen.tick(5)
    """

    from freezegun import freeze_time as _freeze_time

    def _factory(target: Any = None) -> Any:
        return _freeze_time(target or "2024-01-01")

    return _factory


# -- Session core doubles ------------------------------------------------------


@pytest.fixture()
def clock() -> FrozenClock:
    """Controllable clock starting at a fixed UTC instant."""
    return FrozenClock(datetime(2024, 1, 1, 12, 0, tzinfo=UTC))


@pytest.fixture()
def codec(clock) -> JWTTokenCodec:
    return JWTTokenCodec(secret=TEST_SECRET, clock=clock)


@pytest.fixture()
def hasher() -> WerkzeugPasswordHasher:
    return WerkzeugPasswordHasher(method=TestingConfig.PASSWORD_HASH_METHOD)


@pytest.fixture()
def memory_store() -> InMemoryRefreshTokenStore:
    return InMemoryRefreshTokenStore()


@pytest.fixture()
def auth_service(session, codec, memory_store, hasher) -> AuthService:
    """AuthService wired to the controllable clock and an in-memory registry."""
    return AuthService(
        codec=codec,
        refresh_store=memory_store,
        hasher=hasher,
        token_cfg=AuthTokenConfig(access_expires=timedelta(seconds=5)),
    )


@pytest.fixture()
def app_auth_service(session, app) -> AuthService:
    """AuthService wired exactly like the running app (SQL registry)."""
    components = get_components(app)
    return AuthService(
        codec=components.codec,
        refresh_store=components.refresh_store,
        hasher=components.hasher,
        token_cfg=components.token_cfg,
    )


# -- HTTP helpers ----------------------------------------------------------------


@pytest.fixture()
def register_user(client):
    """Register through the API and return ``(payload, response_data)``."""

    counter = {"n": 0}

    def _register(**overrides):
        counter["n"] += 1
        n = counter["n"]
        payload = {
            "username": f"member{n}",
            "email": f"member{n}@example.com",
            "password": "Sup3r-secret!",
        }
        payload.update(overrides)
        resp = client.post("/api/v1/auth/register", json=payload)
        assert resp.status_code == 201, resp.get_json()
        return payload, resp.get_json()["data"]

    return _register


@pytest.fixture()
def bearer():
    """Build an ``Authorization`` header for an access token."""

    def _bearer(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    return _bearer
