from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol


class TokenError(Exception):
    """
    Base class for token verification failures.

    Internal diagnostics only: services collapse every subclass into a single
    coarse error before anything reaches a client.
    """

    reason = "invalid"


class MalformedTokenError(TokenError):
    """The token cannot be parsed, or lacks required claims."""

    reason = "malformed"


class BadSignatureError(TokenError):
    """The signature does not match the payload under the configured key."""

    reason = "bad_signature"


class ExpiredTokenError(TokenError):
    """The token's ``exp`` instant lies in the past."""

    reason = "expired"


@dataclass(frozen=True, slots=True)
class AccessClaims:
    """
    Verified access-token payload.

    :ivar subject: User identifier (string form, as carried in ``sub``).
    :ivar issued_at: Issuance instant (UTC).
    :ivar expires_at: Expiry instant (UTC).
    """

    subject: str
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True, slots=True)
class RefreshClaims:
    """
    Verified refresh-token payload.

    :ivar subject: Owning user identifier (string form).
    :ivar jti: Session-set member this token stands for.
    """

    subject: str
    jti: str


class TokenCodec(Protocol):
    """Port for creating and verifying signed bearer tokens."""

    def issue(self, user_id: int | str, ttl: timedelta) -> str:
        """Return a signed access token for ``user_id`` expiring at now + ``ttl``."""
        ...

    def verify(self, token: str) -> AccessClaims:
        """
        Verify an access token.

        :raises MalformedTokenError: Unparseable token or wrong token type.
        :raises BadSignatureError: Signature mismatch.
        :raises ExpiredTokenError: ``now > expiresAt``.
        """
        ...

    def issue_refresh(self, user_id: int | str, jti: str) -> str:
        """Return a signed, non-expiring refresh token naming ``jti``."""
        ...

    def verify_refresh(self, token: str) -> RefreshClaims:
        """Verify a refresh token's structure and signature (membership is the store's job)."""
        ...
