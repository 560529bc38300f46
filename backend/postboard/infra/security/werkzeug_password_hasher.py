from __future__ import annotations

from dataclasses import dataclass

from werkzeug.security import check_password_hash, generate_password_hash

from postboard.services._shared.ports import PasswordHasher


@dataclass(frozen=True, slots=True)
class WerkzeugPasswordHasher(PasswordHasher):
    """
    Password hasher delegating to :mod:`werkzeug.security`.

    :param method: Werkzeug method string, e.g. ``"scrypt"`` or
        ``"pbkdf2:sha256:600000"``. Digests embed their own method and salt,
        so changing it only affects newly hashed passwords.
    """

    method: str = "scrypt"

    def hash(self, raw: str) -> str:
        return generate_password_hash(raw, method=self.method)

    def verify(self, digest: str, raw: str) -> bool:
        if not digest:
            return False
        return check_password_hash(digest, raw)
