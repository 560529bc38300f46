from __future__ import annotations

from typing import Protocol


class PasswordHasher(Protocol):
    """
    Port for one-way, salted password digests.

    Any memory-hard primitive qualifies; services depend only on this pair.
    """

    def hash(self, raw: str) -> str: ...

    def verify(self, digest: str, raw: str) -> bool: ...
