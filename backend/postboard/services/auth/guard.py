# postboard/services/auth/guard.py
from __future__ import annotations

import logging

from postboard.services._shared.errors import UnauthenticatedError
from postboard.services._shared.policies.ownership import Identity
from postboard.services._shared.ports import TokenCodec, TokenError

log = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"


class AccessGuard:
    """
    Resolve an ``Authorization`` header into an :class:`Identity`.

    Signature and expiry checks only; no store or database lookup happens
    here, so the guard can run before any resource is loaded.

    :param codec: Token codec sharing the process-wide signing key.
    """

    def __init__(self, codec: TokenCodec) -> None:
        self.codec = codec

    def authenticate(self, raw_header: str | None) -> Identity:
        """
        :param raw_header: Raw ``Authorization`` header value.
        :returns: Identity of the token subject.
        :raises UnauthenticatedError: Missing header, wrong scheme, or any
            token failure (malformed, bad signature, expired).
        """
        token = self._extract_bearer(raw_header)
        try:
            claims = self.codec.verify(token)
        except TokenError as exc:
            log.debug("Access token rejected", extra={"reason": exc.reason})
            raise UnauthenticatedError() from exc
        if not (claims.subject.isascii() and claims.subject.isdecimal()):
            raise UnauthenticatedError()
        return Identity(user_id=int(claims.subject))

    @staticmethod
    def _extract_bearer(raw_header: str | None) -> str:
        if not raw_header:
            raise UnauthenticatedError()
        parts = raw_header.strip().split(None, 1)
        if len(parts) != 2 or parts[0].lower() != BEARER_SCHEME or not parts[1].strip():
            raise UnauthenticatedError()
        return parts[1].strip()
