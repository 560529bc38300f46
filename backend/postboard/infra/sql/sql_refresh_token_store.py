# comments in English; reST docstrings
from __future__ import annotations

from collections.abc import Callable

from postboard.services._shared.ports import RefreshTokenStore, RotationResult, generate_jti
from postboard.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork


class SQLRefreshTokenStore(RefreshTokenStore):
    """
    Relational session registry backed by the ``refresh_tokens`` table.

    Each operation runs in its own read-write unit of work. ``rotate`` issues
    a conditional ``DELETE`` for ``(old_jti, user_id)`` and only inserts the
    replacement when exactly one row went away; on databases with row locks a
    concurrent delete of the same row blocks until the first transaction
    commits and then matches nothing.

    :param uow_factory: Callable returning a fresh read-write unit of work.
    """

    def __init__(self, uow_factory: Callable[[], SQLAlchemyUnitOfWork] = SQLAlchemyUnitOfWork) -> None:
        self._uow_factory = uow_factory

    def new_jti(self) -> str:
        return generate_jti()

    def add(self, user_id: str, jti: str) -> None:
        with self._uow_factory() as uow:
            uow.refresh_tokens.add_member(int(user_id), jti)

    def rotate(self, user_id: str, old_jti: str, new_jti: str) -> RotationResult:
        with self._uow_factory() as uow:
            if not uow.refresh_tokens.consume(int(user_id), old_jti):
                return RotationResult.NOT_FOUND
            uow.refresh_tokens.add_member(int(user_id), new_jti)
        return RotationResult.OK

    def remove(self, user_id: str, jti: str) -> bool:
        with self._uow_factory() as uow:
            return uow.refresh_tokens.consume(int(user_id), jti)

    def revoke_all(self, user_id: str) -> int:
        with self._uow_factory() as uow:
            return uow.refresh_tokens.delete_all_for_user(int(user_id))

    def contains(self, user_id: str, jti: str) -> bool:
        with self._uow_factory() as uow:
            return uow.refresh_tokens.has_member(int(user_id), jti)

    def list_jtis(self, user_id: str) -> list[str]:
        with self._uow_factory() as uow:
            return uow.refresh_tokens.jtis_for_user(int(user_id))
