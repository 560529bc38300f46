"""Unit tests for JWTTokenCodec with an injected clock."""

from __future__ import annotations

from datetime import timedelta

import jwt
import pytest
from postboard.infra.jwt.jwt_token_codec import JWTTokenCodec
from postboard.services._shared.ports import (
    BadSignatureError,
    ExpiredTokenError,
    MalformedTokenError,
    TokenError,
)


class TestAccessTokens:
    def test_issue_then_verify_returns_subject_and_instants(self, codec, clock):
        token = codec.issue(42, timedelta(seconds=5))

        claims = codec.verify(token)

        assert claims.subject == "42"
        assert claims.issued_at == clock.now
        assert claims.expires_at == clock.now + timedelta(seconds=5)

    def test_token_is_valid_until_the_expiry_instant(self, codec, clock):
        token = codec.issue(1, timedelta(seconds=5))

        clock.advance(seconds=5)
        assert codec.verify(token).subject == "1"

        clock.advance(seconds=1)
        with pytest.raises(ExpiredTokenError):
            codec.verify(token)

    def test_expiry_keeps_sub_second_precision(self, codec, clock):
        clock.advance(seconds=0.9)
        token = codec.issue(7, timedelta(seconds=5))

        assert codec.verify(token).expires_at == clock.now + timedelta(seconds=5)

        clock.advance(seconds=4.5)
        assert codec.verify(token).subject == "7"

        clock.advance(seconds=0.5)
        assert codec.verify(token).subject == "7"

        clock.advance(microseconds=1)
        with pytest.raises(ExpiredTokenError):
            codec.verify(token)

    def test_signature_from_another_key_is_rejected(self, codec, clock):
        foreign = JWTTokenCodec(secret="some-other-signing-key-entirely-different", clock=clock)
        token = foreign.issue(1, timedelta(minutes=5))

        with pytest.raises(BadSignatureError):
            codec.verify(token)

    def test_tampered_payload_fails_signature_check(self, codec):
        header, payload, signature = codec.issue(1, timedelta(minutes=5)).split(".")
        other_payload = codec.issue(2, timedelta(minutes=5)).split(".")[1]

        with pytest.raises(BadSignatureError):
            codec.verify(".".join([header, other_payload, signature]))

    @pytest.mark.parametrize("garbage", ["", "not-a-jwt", "a.b.c", "Bearer x.y"])
    def test_unparseable_tokens_are_malformed(self, codec, garbage):
        with pytest.raises(MalformedTokenError):
            codec.verify(garbage)

    def test_refresh_token_is_not_accepted_as_access(self, codec):
        refresh = codec.issue_refresh(7, "some-jti")

        with pytest.raises(MalformedTokenError):
            codec.verify(refresh)

    def test_missing_expiry_claim_is_malformed(self, codec, clock):
        token = jwt.encode(
            {"sub": "1", "iat": int(clock.now.timestamp()), "type": "access", "iss": codec.issuer},
            codec.secret,
            algorithm="HS256",
        )

        with pytest.raises(MalformedTokenError):
            codec.verify(token)

    def test_wrong_issuer_is_rejected(self, codec, clock):
        other = JWTTokenCodec(secret=codec.secret, issuer="someone-else", clock=clock)

        with pytest.raises(TokenError):
            codec.verify(other.issue(1, timedelta(minutes=1)))

    def test_each_issue_produces_a_distinct_token(self, codec):
        assert codec.issue(1, timedelta(minutes=1)) != codec.issue(1, timedelta(minutes=1))


class TestRefreshTokens:
    def test_round_trip_keeps_owner_and_jti(self, codec):
        claims = codec.verify_refresh(codec.issue_refresh(9, "jti-abc"))

        assert claims.subject == "9"
        assert claims.jti == "jti-abc"

    def test_refresh_tokens_never_expire_by_time(self, codec, clock):
        token = codec.issue_refresh(9, "jti-abc")

        clock.advance(days=365)

        assert codec.verify_refresh(token).jti == "jti-abc"

    def test_access_token_is_not_accepted_as_refresh(self, codec):
        with pytest.raises(MalformedTokenError):
            codec.verify_refresh(codec.issue(1, timedelta(minutes=1)))

    def test_forged_refresh_token_has_bad_signature(self, codec, clock):
        forged = JWTTokenCodec(secret="attacker-controlled-signing-key-0001", clock=clock)

        with pytest.raises(BadSignatureError):
            codec.verify_refresh(forged.issue_refresh(1, "jti"))
