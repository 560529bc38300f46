"""Unit tests for AccessGuard."""

from __future__ import annotations

from datetime import timedelta

import pytest
from postboard.infra.jwt.jwt_token_codec import JWTTokenCodec
from postboard.services import AccessGuard, Identity
from postboard.services._shared.errors import UnauthenticatedError


@pytest.fixture()
def guard(codec) -> AccessGuard:
    return AccessGuard(codec)


def test_valid_bearer_resolves_identity(guard, codec):
    token = codec.issue(5, timedelta(seconds=30))

    assert guard.authenticate(f"Bearer {token}") == Identity(user_id=5)


def test_scheme_is_case_insensitive(guard, codec):
    token = codec.issue(5, timedelta(seconds=30))

    assert guard.authenticate(f"bearer {token}").user_id == 5


@pytest.mark.parametrize("header", [None, "", "Bearer", "Bearer   ", "Basic dXNlcjpwYXNz", "Token abc"])
def test_missing_or_foreign_scheme_is_unauthenticated(guard, header):
    with pytest.raises(UnauthenticatedError):
        guard.authenticate(header)


def test_expired_token_is_unauthenticated_even_with_valid_signature(guard, codec, clock):
    token = codec.issue(5, timedelta(seconds=5))
    clock.advance(seconds=6)

    with pytest.raises(UnauthenticatedError):
        guard.authenticate(f"Bearer {token}")


def test_bad_signature_is_unauthenticated(guard, clock):
    foreign = JWTTokenCodec(secret="a-different-process-signing-key-0002", clock=clock)

    with pytest.raises(UnauthenticatedError):
        guard.authenticate(f"Bearer {foreign.issue(5, timedelta(seconds=30))}")


def test_refresh_token_cannot_authenticate_requests(guard, codec):
    with pytest.raises(UnauthenticatedError):
        guard.authenticate(f"Bearer {codec.issue_refresh(5, 'jti')}")


def test_all_failures_share_one_message(guard, codec, clock):
    expired = codec.issue(5, timedelta(seconds=1))
    clock.advance(seconds=2)
    messages = set()
    for header in (None, "Bearer nope", f"Bearer {expired}"):
        with pytest.raises(UnauthenticatedError) as exc:
            guard.authenticate(header)
        messages.add(str(exc.value))

    assert messages == {"Invalid or missing access token"}


@pytest.mark.parametrize("subject", ["²", "٣", "-5", " 5"])
def test_non_ascii_or_signed_subject_is_unauthenticated(guard, codec, subject):
    token = codec.issue(subject, timedelta(seconds=30))

    with pytest.raises(UnauthenticatedError):
        guard.authenticate(f"Bearer {token}")
