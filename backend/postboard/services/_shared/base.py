"""Request context and the base class every application service extends."""

from __future__ import annotations

from dataclasses import dataclass

from postboard.services._shared.policies.ownership import Identity, OwnershipAuthorizer
from postboard.uow.sqlalchemy_uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork


@dataclass(slots=True)
class ServiceContext:
    """
    Who is calling, and under which request.

    :param actor_id: Id resolved by the access guard; ``None`` when anonymous.
    :param request_id: Correlation id copied into service log lines.
    """

    actor_id: int | None = None
    request_id: str | None = None

    @property
    def identity(self) -> Identity | None:
        if self.actor_id is None:
            return None
        return Identity(user_id=self.actor_id)


class BaseService:
    """
    Orchestration only: open a unit of work, call repositories, apply policy.

    Subclasses raise :mod:`postboard.services._shared.errors` and never
    touch ``db.session`` directly; HTTP translation happens in the API layer.
    """

    def __init__(self, *, ctx: ServiceContext | None = None) -> None:
        self.ctx = ctx if ctx is not None else ServiceContext()
        self.authorizer = OwnershipAuthorizer()

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork()

    def ro_uow(self) -> SQLAlchemyReadOnlyUnitOfWork:
        return SQLAlchemyReadOnlyUnitOfWork()

    def ensure_owner(self, owner_id: int, *, msg: str | None = None) -> None:
        """
        Deny unless the calling identity owns the loaded resource.

        Load first: a missing resource is a :class:`NotFoundError`, and only
        an existing one can be denied.

        :raises AuthorizationError: Anonymous caller or a different owner.
        """
        self.authorizer.authorize(self.ctx.identity, owner_id, msg=msg)
