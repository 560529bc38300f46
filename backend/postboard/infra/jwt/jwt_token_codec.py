# postboard/infra/jwt/jwt_token_codec.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4

import jwt

from postboard.services._shared.ports import (
    AccessClaims,
    BadSignatureError,
    Clock,
    ExpiredTokenError,
    MalformedTokenError,
    RefreshClaims,
    TokenCodec,
    utc_now,
)

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


@dataclass(slots=True)
class JWTTokenCodec(TokenCodec):
    """
    HMAC-signed JWT codec built on PyJWT.

    The signing key and the clock are explicit constructor arguments; nothing
    is read from ambient state, so two codecs with different keys can coexist
    (one per test, one per app).

    Expiry is checked against the injected clock rather than by PyJWT, which
    would read the system time itself.

    :param secret: Process-wide signing key.
    :param algorithm: HMAC algorithm (``HS256`` by default).
    :param issuer: ``iss`` claim stamped on and required from every token.
    :param clock: Current-time source returning aware UTC datetimes.
    """

    secret: str
    algorithm: str = "HS256"
    issuer: str = "postboard-api"
    clock: Clock = field(default=utc_now)

    # ------------------------------ access ------------------------------

    def issue(self, user_id: int | str, ttl: timedelta) -> str:
        now = self.clock()
        payload = {
            "sub": str(user_id),
            # fractional NumericDates keep sub-second precision of now + ttl
            "iat": now.timestamp(),
            "exp": (now + ttl).timestamp(),
            "type": ACCESS_TOKEN_TYPE,
            "jti": uuid4().hex,
            "iss": self.issuer,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> AccessClaims:
        claims = self._decode(token, required=("sub", "iat", "exp", "type"))
        if claims["type"] != ACCESS_TOKEN_TYPE:
            raise MalformedTokenError("Access token required.")
        try:
            issued_at = datetime.fromtimestamp(float(claims["iat"]), tz=UTC)
            expires_at = datetime.fromtimestamp(float(claims["exp"]), tz=UTC)
        except (TypeError, ValueError, OverflowError) as exc:
            raise MalformedTokenError("Invalid time claims.") from exc
        if self.clock() > expires_at:
            raise ExpiredTokenError("Access token expired.")
        return AccessClaims(subject=claims["sub"], issued_at=issued_at, expires_at=expires_at)

    # ------------------------------ refresh -----------------------------

    def issue_refresh(self, user_id: int | str, jti: str) -> str:
        payload = {
            "sub": str(user_id),
            "iat": int(self.clock().timestamp()),
            "type": REFRESH_TOKEN_TYPE,
            "jti": jti,
            "iss": self.issuer,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify_refresh(self, token: str) -> RefreshClaims:
        claims = self._decode(token, required=("sub", "type", "jti"))
        if claims["type"] != REFRESH_TOKEN_TYPE:
            raise MalformedTokenError("Refresh token required.")
        return RefreshClaims(subject=claims["sub"], jti=str(claims["jti"]))

    # ------------------------------ helpers -----------------------------

    def _decode(self, token: str, *, required: tuple[str, ...]) -> dict[str, Any]:
        """Check structure and signature; map PyJWT errors onto the codec taxonomy."""
        if not isinstance(token, str) or not token:
            raise MalformedTokenError("Empty token.")
        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                    "require": list(required),
                },
            )
        except jwt.InvalidSignatureError as exc:
            raise BadSignatureError(str(exc)) from exc
        except jwt.InvalidTokenError as exc:
            raise MalformedTokenError(str(exc)) from exc
