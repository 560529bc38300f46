"""Unit tests for AuthService: registration, login, rotation, replay containment, logout."""

from __future__ import annotations

import logging

import pytest
from postboard.models.user import User
from postboard.services import LoginIn, LogoutIn, RefreshIn, RegisterIn, SessionOut
from postboard.services._shared.errors import (
    DuplicateIdentityError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    ValidationError,
)
from postboard.services._shared.ports import ExpiredTokenError

PASSWORD = "correct horse battery"


@pytest.fixture()
def alice(auth_service):
    return auth_service.register(RegisterIn(username="alice", email="Alice@Example.com", password=PASSWORD))


@pytest.fixture()
def bob(auth_service):
    return auth_service.register(RegisterIn(username="bob", email="bob@example.com", password=PASSWORD))


def _login(service, email="alice@example.com", password=PASSWORD) -> SessionOut:
    return service.login(LoginIn(email=email, password=password))


def _jti(codec, refresh_token: str) -> str:
    return codec.verify_refresh(refresh_token).jti


class _Capture(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


@pytest.fixture()
def service_logs():
    handler = _Capture()
    logger = logging.getLogger("postboard.services.auth.service")
    previous = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    yield handler.records
    logger.removeHandler(handler)
    logger.setLevel(previous)


# --------------------------------------------------------------------------- #
# Register
# --------------------------------------------------------------------------- #


class TestRegister:
    def test_creates_user_with_digest_and_empty_session_set(self, auth_service, alice, session, memory_store):
        row = session.get(User, alice.id)

        assert alice.email == "alice@example.com"
        assert row.password_hash != PASSWORD
        assert auth_service.hasher.verify(row.password_hash, PASSWORD)
        assert memory_store.list_jtis(str(alice.id)) == []

    @pytest.mark.parametrize("missing", ["username", "email", "password"])
    def test_missing_field_is_validation_error(self, auth_service, missing):
        data = {"username": "carol", "email": "carol@example.com", "password": PASSWORD, missing: None}

        with pytest.raises(ValidationError) as exc:
            auth_service.register(RegisterIn(**data))

        assert missing in exc.value.errors

    def test_blank_field_counts_as_missing(self, auth_service):
        with pytest.raises(ValidationError):
            auth_service.register(RegisterIn(username="   ", email="x@example.com", password=PASSWORD))

    def test_malformed_email_is_validation_error(self, auth_service):
        with pytest.raises(ValidationError):
            auth_service.register(RegisterIn(username="carol", email="no-at-sign", password=PASSWORD))

    def test_duplicate_email_keeps_first_credentials(self, auth_service, alice, session):
        digest_before = session.get(User, alice.id).password_hash

        with pytest.raises(DuplicateIdentityError):
            auth_service.register(
                RegisterIn(username="alice2", email="ALICE@example.com", password="another password")
            )

        assert session.get(User, alice.id).password_hash == digest_before
        assert session.query(User).count() == 1
        assert _login(auth_service).user_id == alice.id
        with pytest.raises(InvalidCredentialsError):
            _login(auth_service, password="another password")

    def test_duplicate_username_is_rejected(self, auth_service, alice):
        with pytest.raises(DuplicateIdentityError) as exc:
            auth_service.register(RegisterIn(username="alice", email="other@example.com", password=PASSWORD))
        assert exc.value.field_name == "username"


# --------------------------------------------------------------------------- #
# Login
# --------------------------------------------------------------------------- #


class TestLogin:
    def test_login_opens_a_session(self, auth_service, alice, codec, memory_store):
        session = _login(auth_service)

        assert session.user_id == alice.id
        assert codec.verify(session.access_token).subject == str(alice.id)
        assert memory_store.list_jtis(str(alice.id)) == [_jti(codec, session.refresh_token)]

    def test_email_lookup_is_case_insensitive(self, auth_service, alice):
        assert _login(auth_service, email="  ALICE@example.com ").user_id == alice.id

    def test_multiple_logins_grow_the_set(self, auth_service, alice, memory_store):
        first, second = _login(auth_service), _login(auth_service)

        assert first.refresh_token != second.refresh_token
        assert len(memory_store.list_jtis(str(alice.id))) == 2

    def test_wrong_password_and_unknown_email_look_the_same(self, auth_service, alice):
        with pytest.raises(InvalidCredentialsError) as wrong:
            _login(auth_service, password="nope")
        with pytest.raises(InvalidCredentialsError) as unknown:
            _login(auth_service, email="ghost@example.com")

        assert str(wrong.value) == str(unknown.value) == "Invalid email or password"

    def test_unknown_email_still_verifies_a_digest(self, auth_service, monkeypatch):
        calls = []
        real = auth_service.hasher

        class _Spy:
            def hash(self, raw):
                return real.hash(raw)

            def verify(self, digest, raw):
                calls.append(digest)
                return real.verify(digest, raw)

        monkeypatch.setattr(auth_service, "hasher", _Spy())
        with pytest.raises(InvalidCredentialsError):
            _login(auth_service, email="ghost@example.com")

        assert len(calls) == 1 and calls[0]

    @pytest.mark.parametrize("email,password", [(None, PASSWORD), ("alice@example.com", ""), (None, None)])
    def test_missing_fields_are_validation_errors(self, auth_service, email, password):
        with pytest.raises(ValidationError):
            auth_service.login(LoginIn(email=email, password=password))


# --------------------------------------------------------------------------- #
# Refresh
# --------------------------------------------------------------------------- #


class TestRefresh:
    def test_rotation_yields_new_pair_and_consumes_old(self, auth_service, alice, codec, memory_store):
        t0 = _login(auth_service)

        t1 = auth_service.refresh(RefreshIn(refresh_token=t0.refresh_token))

        assert t1.refresh_token != t0.refresh_token
        assert t1.user_id == alice.id
        assert codec.verify(t1.access_token).subject == str(alice.id)
        assert memory_store.list_jtis(str(alice.id)) == [_jti(codec, t1.refresh_token)]

    def test_replay_of_consumed_token_revokes_the_family(self, auth_service, alice, memory_store):
        t0 = _login(auth_service)
        t1 = auth_service.refresh(RefreshIn(refresh_token=t0.refresh_token))

        with pytest.raises(InvalidRefreshTokenError):
            auth_service.refresh(RefreshIn(refresh_token=t0.refresh_token))
        with pytest.raises(InvalidRefreshTokenError):
            auth_service.refresh(RefreshIn(refresh_token=t1.refresh_token))

        assert memory_store.list_jtis(str(alice.id)) == []

    def test_replay_revokes_other_devices_of_the_same_user(self, auth_service, alice):
        phone = _login(auth_service)
        laptop = _login(auth_service)
        auth_service.refresh(RefreshIn(refresh_token=phone.refresh_token))

        with pytest.raises(InvalidRefreshTokenError):
            auth_service.refresh(RefreshIn(refresh_token=phone.refresh_token))

        with pytest.raises(InvalidRefreshTokenError):
            auth_service.refresh(RefreshIn(refresh_token=laptop.refresh_token))

    def test_replay_is_logged_as_warning(self, auth_service, alice, service_logs):
        t0 = _login(auth_service)
        _login(auth_service)
        auth_service.refresh(RefreshIn(refresh_token=t0.refresh_token))

        with pytest.raises(InvalidRefreshTokenError):
            auth_service.refresh(RefreshIn(refresh_token=t0.refresh_token))

        warnings = [r for r in service_logs if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert warnings[0].user_id == alice.id
        assert warnings[0].revoked == 2
        assert t0.refresh_token not in warnings[0].getMessage()

    def test_isolation_between_users(self, auth_service, alice, bob, memory_store):
        a0 = _login(auth_service)
        b0 = _login(auth_service, email="bob@example.com")
        auth_service.refresh(RefreshIn(refresh_token=a0.refresh_token))

        with pytest.raises(InvalidRefreshTokenError):
            auth_service.refresh(RefreshIn(refresh_token=a0.refresh_token))

        b1 = auth_service.refresh(RefreshIn(refresh_token=b0.refresh_token))
        assert b1.user_id == bob.id
        assert len(memory_store.list_jtis(str(bob.id))) == 1

    @pytest.mark.parametrize("token", [None, "", "garbage", "a.b.c"])
    def test_unusable_tokens_fail_without_revoking(self, auth_service, alice, memory_store, token):
        _login(auth_service)

        with pytest.raises(InvalidRefreshTokenError):
            auth_service.refresh(RefreshIn(refresh_token=token))

        assert len(memory_store.list_jtis(str(alice.id))) == 1

    @pytest.mark.parametrize("subject", ["\u00b2", "\u0663", "-1", "1e3"])
    def test_non_ascii_digit_subject_is_rejected(self, auth_service, codec, alice, memory_store, subject):
        _login(auth_service)
        forged = codec.issue_refresh(subject, "jti-x")

        with pytest.raises(InvalidRefreshTokenError):
            auth_service.refresh(RefreshIn(refresh_token=forged))

        assert len(memory_store.list_jtis(str(alice.id))) == 1

    def test_access_token_cannot_refresh(self, auth_service, alice):
        t0 = _login(auth_service)

        with pytest.raises(InvalidRefreshTokenError):
            auth_service.refresh(RefreshIn(refresh_token=t0.access_token))

    def test_failure_messages_do_not_distinguish_causes(self, auth_service, alice):
        t0 = _login(auth_service)
        auth_service.refresh(RefreshIn(refresh_token=t0.refresh_token))
        messages = set()
        for token in ("garbage", t0.refresh_token):
            with pytest.raises(InvalidRefreshTokenError) as exc:
                auth_service.refresh(RefreshIn(refresh_token=token))
            messages.add(str(exc.value))

        assert messages == {"Invalid refresh token"}

    def test_deleted_account_invalidates_its_tokens(self, auth_service, alice, session):
        t0 = _login(auth_service)
        session.delete(session.get(User, alice.id))
        session.commit()

        with pytest.raises(InvalidRefreshTokenError):
            auth_service.refresh(RefreshIn(refresh_token=t0.refresh_token))

    def test_second_refresh_with_same_token_loses(self, auth_service, alice, memory_store):
        t0 = _login(auth_service)
        winner = auth_service.refresh(RefreshIn(refresh_token=t0.refresh_token))

        with pytest.raises(InvalidRefreshTokenError):
            auth_service.refresh(RefreshIn(refresh_token=t0.refresh_token))

        # the losing presentation is indistinguishable from theft
        with pytest.raises(InvalidRefreshTokenError):
            auth_service.refresh(RefreshIn(refresh_token=winner.refresh_token))


# --------------------------------------------------------------------------- #
# Logout
# --------------------------------------------------------------------------- #


class TestLogout:
    def test_logout_is_idempotent_and_blocks_refresh(self, auth_service, alice, memory_store):
        t0 = _login(auth_service)

        assert auth_service.logout(LogoutIn(refresh_token=t0.refresh_token)) == "Logged out successfully"
        assert auth_service.logout(LogoutIn(refresh_token=t0.refresh_token)) == "Logged out successfully"

        with pytest.raises(InvalidRefreshTokenError):
            auth_service.refresh(RefreshIn(refresh_token=t0.refresh_token))
        assert memory_store.list_jtis(str(alice.id)) == []

    def test_logout_ends_only_one_session(self, auth_service, alice):
        phone = _login(auth_service)
        laptop = _login(auth_service)

        auth_service.logout(LogoutIn(refresh_token=phone.refresh_token))

        assert auth_service.refresh(RefreshIn(refresh_token=laptop.refresh_token)).user_id == alice.id

    def test_missing_token_is_rejected(self, auth_service):
        with pytest.raises(InvalidRefreshTokenError, match="Refresh token is required"):
            auth_service.logout(LogoutIn(refresh_token=None))

    def test_unresolvable_token_fails(self, auth_service):
        with pytest.raises(InvalidRefreshTokenError, match="Logout failed"):
            auth_service.logout(LogoutIn(refresh_token="never-issued"))

    def test_token_of_deleted_user_fails(self, auth_service, alice, session):
        t0 = _login(auth_service)
        session.delete(session.get(User, alice.id))
        session.commit()

        with pytest.raises(InvalidRefreshTokenError, match="Logout failed"):
            auth_service.logout(LogoutIn(refresh_token=t0.refresh_token))


# --------------------------------------------------------------------------- #
# Access token expiry through the service
# --------------------------------------------------------------------------- #


def test_access_tokens_expire_after_configured_ttl(auth_service, alice, codec, clock):
    t0 = _login(auth_service)

    clock.advance(seconds=6)

    with pytest.raises(ExpiredTokenError):
        codec.verify(t0.access_token)


def test_sql_registry_replay_containment(app_auth_service):
    """Same containment scenario against the relational registry the app uses."""
    app_auth_service.register(RegisterIn(username="dora", email="dora@example.com", password=PASSWORD))
    t0 = _login(app_auth_service, email="dora@example.com")
    t1 = app_auth_service.refresh(RefreshIn(refresh_token=t0.refresh_token))

    with pytest.raises(InvalidRefreshTokenError):
        app_auth_service.refresh(RefreshIn(refresh_token=t0.refresh_token))
    with pytest.raises(InvalidRefreshTokenError):
        app_auth_service.refresh(RefreshIn(refresh_token=t1.refresh_token))
