"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never import Flask or HTTP
helpers. They are the stable contract between repositories, policies and
application services; ``postboard/core/errors.py`` renders them as RFC 7807
responses.

Security-sensitive errors (:class:`InvalidCredentialsError`,
:class:`InvalidRefreshTokenError`, :class:`UnauthenticatedError`) are
coarse: their messages never say whether an account exists or
whether a refresh token is unknown, consumed or revoked.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


def violates(exc: Exception, constraint_name: str) -> bool:
    """
    Check whether an ``IntegrityError`` originates from a specific constraint.

    :param exc: The exception raised by SQLAlchemy during flush/commit.
    :param constraint_name: Constraint name to look for (e.g. ``uq_users_email``).
    :returns: ``True`` when the driver message mentions the constraint.
    """
    orig = getattr(exc, "orig", None)
    message = str(orig).lower() if orig else ""
    return constraint_name.lower() in message


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - The API layer translates them into ``APIError`` instances.
    """


# --------------------------------------------------------------------------- #
# Input / conflict errors
# --------------------------------------------------------------------------- #


class ValidationError(ServiceError):
    """
    Raised when required input is missing or malformed.

    :param message: Short summary.
    :param errors: Optional mapping ``field -> [messages]``.
    """

    def __init__(self, message: str = "Validation failed", errors: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or {}


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "Post").
    :param key: Identifier or search key.
    """

    entity: str
    key: str | int

    def __str__(self) -> str:
        return f"{self.entity} not found"


@dataclass(slots=True)
class DuplicateIdentityError(ServiceError):
    """
    Raised when registration collides with an existing identity.

    :param field_name: Colliding field (``email`` or ``username``).
    """

    field_name: str = field(default="email")

    def __str__(self) -> str:
        return "User already exists"


# --------------------------------------------------------------------------- #
# Authentication / authorization
# --------------------------------------------------------------------------- #


class InvalidCredentialsError(ServiceError):
    """Raised when an email/password pair does not authenticate."""

    def __init__(self, message: str = "Invalid email or password") -> None:
        super().__init__(message)


class InvalidRefreshTokenError(ServiceError):
    """Raised for any refresh token that cannot be used (unknown, consumed, revoked)."""

    def __init__(self, message: str = "Invalid refresh token") -> None:
        super().__init__(message)


class UnauthenticatedError(ServiceError):
    """Raised when a request carries no usable access token."""

    def __init__(self, message: str = "Invalid or missing access token") -> None:
        super().__init__(message)


class AuthorizationError(ServiceError):
    """Raised when an authenticated actor may not act on a resource."""

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message)
