"""Ownership policy for mutating operations on owned resources."""

from __future__ import annotations

from dataclasses import dataclass

from postboard.services._shared.errors import AuthorizationError, UnauthenticatedError


@dataclass(frozen=True, slots=True)
class Identity:
    """Authenticated principal resolved by the access guard."""

    user_id: int


def is_owner(*, actor_id, owner_id) -> bool:
    """Return True if the actor owns the resource."""
    if actor_id is None or owner_id is None:
        return False
    return str(actor_id) == str(owner_id)


class OwnershipAuthorizer:
    """
    Equality check between the acting identity and a resource's owner.

    Invoked only for update/delete. Reads are ownership-blind.
    """

    def authorize(self, identity: Identity | None, owner_id: int, *, msg: str | None = None) -> None:
        """
        Allow the mutation or raise.

        :param identity: Identity attached by the guard.
        :param owner_id: ``owner_id`` stored on the resource.
        :param msg: Stable denial message for this resource/action.
        :raises UnauthenticatedError: If no identity is present.
        :raises AuthorizationError: If the identity is not the owner.
        """
        if identity is None:
            raise UnauthenticatedError()
        if not is_owner(actor_id=identity.user_id, owner_id=owner_id):
            raise AuthorizationError(msg or "Forbidden")
