from __future__ import annotations

import secrets
import threading
from collections.abc import Iterable
from enum import Enum, auto
from typing import Protocol


class RotationResult(Enum):
    """Outcome of an atomic refresh rotation attempt."""

    OK = auto()
    NOT_FOUND = auto()


def generate_jti() -> str:
    """Return an unguessable session identifier (256 bits, URL-safe)."""
    return secrets.token_urlsafe(32)


class RefreshTokenStore(Protocol):
    """
    Per-user registry of active refresh sessions.

    Each user owns an unordered set of session identifiers (``jti``). A
    refresh token is valid exactly while its ``jti`` is a member of its
    owner's set; removal is the only state transition, so a consumed token
    is indistinguishable from one that never existed.

    ``rotate`` MUST be a single conditional operation: remove ``old_jti`` and
    insert ``new_jti`` only if ``old_jti`` is present. Of two concurrent
    rotations presenting the same ``old_jti`` at most one returns ``OK``.
    """

    def new_jti(self) -> str:
        """Generate a new random session identifier."""
        ...

    def add(self, user_id: str, jti: str) -> None:
        """Insert ``jti`` into ``user_id``'s set (new login / new device)."""
        ...

    def rotate(self, user_id: str, old_jti: str, new_jti: str) -> RotationResult:
        """Atomically swap ``old_jti`` for ``new_jti`` if ``old_jti`` is a member."""
        ...

    def remove(self, user_id: str, jti: str) -> bool:
        """Remove a single member. Idempotent. :returns: True if it was present."""
        ...

    def revoke_all(self, user_id: str) -> int:
        """Clear the user's whole set. :returns: Number of members removed."""
        ...

    def contains(self, user_id: str, jti: str) -> bool:
        """Return whether ``jti`` is currently an active member."""
        ...

    def list_jtis(self, user_id: str) -> Iterable[str]:
        """
        Sorted active members of the user's set.

        Inspection only (tests and diagnostics); no request path depends on it.
        """
        ...


class InMemoryRefreshTokenStore(RefreshTokenStore):
    """
    In-memory session registry.

    .. note::
       A single lock serializes every mutation, which makes ``rotate``
       trivially atomic. Suitable for unit tests and single-process dev runs.
    """

    def __init__(self) -> None:
        self._by_user: dict[str, set[str]] = {}
        self._lock = threading.Lock()

    def new_jti(self) -> str:
        return generate_jti()

    def add(self, user_id: str, jti: str) -> None:
        with self._lock:
            self._by_user.setdefault(user_id, set()).add(jti)

    def rotate(self, user_id: str, old_jti: str, new_jti: str) -> RotationResult:
        with self._lock:
            members = self._by_user.get(user_id)
            if not members or old_jti not in members:
                return RotationResult.NOT_FOUND
            members.discard(old_jti)
            members.add(new_jti)
            return RotationResult.OK

    def remove(self, user_id: str, jti: str) -> bool:
        with self._lock:
            members = self._by_user.get(user_id)
            if not members or jti not in members:
                return False
            members.discard(jti)
            return True

    def revoke_all(self, user_id: str) -> int:
        with self._lock:
            return len(self._by_user.pop(user_id, set()))

    def contains(self, user_id: str, jti: str) -> bool:
        with self._lock:
            return jti in self._by_user.get(user_id, set())

    def list_jtis(self, user_id: str) -> list[str]:
        with self._lock:
            return sorted(self._by_user.get(user_id, set()))
