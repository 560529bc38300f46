"""Account lookups used by registration and login."""

from __future__ import annotations

from sqlalchemy import exists, select

from postboard.models.user import User
from postboard.repositories.base import BaseRepository


def normalize_email(email: str) -> str:
    """Canonical form stored in ``users.email``."""
    return email.strip().lower()


class UserRepository(BaseRepository[User]):
    """
    Persistence for :class:`User`.

    Digests are written by the auth service; this class never sees a
    plaintext password and offers no way to overwrite ``password_hash``.
    """

    model = User

    def _sortable_fields(self):
        return {"id": User.id, "username": User.username, "created_at": User.created_at}

    def _filterable_fields(self):
        return {"email": User.email, "username": User.username}

    def _updatable_fields(self):
        return {"username", "bio", "profile_image"}

    def get_by_email(self, email: str) -> User | None:
        """
        :param email: Address as typed by the client (any case, padded).
        :returns: Matching user or ``None``.
        """
        stmt = select(User).where(User.email == normalize_email(email))
        return self.session.execute(stmt).scalar_one_or_none()

    def exists_by_email(self, email: str) -> bool:
        stmt = select(exists().where(User.email == normalize_email(email)))
        return bool(self.session.execute(stmt).scalar())

    def exists_by_username(self, username: str) -> bool:
        stmt = select(exists().where(User.username == username.strip()))
        return bool(self.session.execute(stmt).scalar())
