"""Plain data carried in and out of :class:`~postboard.services.auth.service.AuthService`."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Registration request.

    Any field may be ``None`` or blank; the service names every missing
    one in a single error. ``password`` is plaintext and is hashed before
    it reaches a repository.
    """

    username: str | None
    email: str | None
    password: str | None


@dataclass(frozen=True, slots=True)
class LoginIn:
    email: str | None
    password: str | None


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """``refresh_token``: the encoded refresh JWT being rotated."""

    refresh_token: str | None


@dataclass(frozen=True, slots=True)
class LogoutIn:
    """``refresh_token``: the encoded refresh JWT whose session ends."""

    refresh_token: str | None


@dataclass(frozen=True, slots=True)
class SessionOut:
    """Access/refresh pair minted for ``user_id``."""

    user_id: int
    access_token: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class UserOut:
    # profile only; never the digest or the session set
    id: int
    username: str
    email: str
    bio: str
    profile_image: str


@dataclass(frozen=True, slots=True)
class AuthTokenConfig:
    """``access_expires``: lifetime stamped into every access token."""

    access_expires: timedelta = timedelta(minutes=15)
