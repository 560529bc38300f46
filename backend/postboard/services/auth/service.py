# postboard/services/auth/service.py
from __future__ import annotations

import logging
from functools import lru_cache

from sqlalchemy.exc import IntegrityError

from postboard.repositories.user import UserRepository
from postboard.services._shared.base import BaseService, ServiceContext
from postboard.services._shared.errors import (
    DuplicateIdentityError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    NotFoundError,
    ValidationError,
    violates,
)
from postboard.services._shared.ports import (
    PasswordHasher,
    RefreshClaims,
    RefreshTokenStore,
    RotationResult,
    TokenCodec,
    TokenError,
)
from postboard.services.auth.dto import (
    AuthTokenConfig,
    LoginIn,
    LogoutIn,
    RefreshIn,
    RegisterIn,
    SessionOut,
    UserOut,
)

log = logging.getLogger(__name__)

LOGOUT_ACK = "Logged out successfully"
_MISSING_FIELD = "Missing data for required field."


@lru_cache(maxsize=8)
def _dummy_digest(hasher: PasswordHasher) -> str:
    """Digest verified when the email is unknown, so timing matches a real check."""
    return hasher.hash("postboard-dummy-password")


def _missing(**fields: str | None) -> dict[str, list[str]]:
    return {name: [_MISSING_FIELD] for name, value in fields.items() if not value or not str(value).strip()}


class AuthService(BaseService):
    """
    Authentication and session lifecycle (register / login / refresh / logout).

    Access tokens are stateless and verified by signature and expiry only.
    Refresh tokens are signed envelopes around a ``jti`` that must be a member
    of the owner's session set in the :class:`RefreshTokenStore`:

    * login adds a member;
    * refresh swaps the presented member for a new one in a single
      conditional operation;
    * logout removes one member and is idempotent;
    * presenting a well-signed refresh token whose member is gone is treated
      as replay of a consumed token and clears the owner's whole set.

    Every refresh failure surfaces as the same :class:`InvalidRefreshTokenError`.
    """

    def __init__(
        self,
        *,
        codec: TokenCodec,
        refresh_store: RefreshTokenStore,
        hasher: PasswordHasher,
        token_cfg: AuthTokenConfig | None = None,
        ctx: ServiceContext | None = None,
    ) -> None:
        """
        Initialize the service with its collaborators.

        :param codec: Signs and verifies access/refresh tokens.
        :param refresh_store: Per-user session registry with atomic rotation.
        :param hasher: Password digest capability.
        :param token_cfg: Access token lifetime.
        :param ctx: Request-scoped context.
        """
        super().__init__(ctx=ctx)
        self.codec = codec
        self.refresh_store = refresh_store
        self.hasher = hasher
        self.cfg = token_cfg or AuthTokenConfig()

    # ------------------------------------------------------------------ #
    # Register
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn) -> UserOut:
        """
        Create a user with an empty session set.

        :param dto: Registration input.
        :returns: The created user.
        :raises ValidationError: If a required field is absent or malformed.
        :raises DuplicateIdentityError: If the email or username is taken.
        """
        errors = _missing(username=dto.username, email=dto.email, password=dto.password)
        if errors:
            raise ValidationError("Missing required fields", errors=errors)

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            if repo.exists_by_email(dto.email):
                raise DuplicateIdentityError("email")
            if repo.exists_by_username(dto.username):
                raise DuplicateIdentityError("username")

            try:
                user = repo.model(
                    username=dto.username,
                    email=dto.email,
                    password_hash=self.hasher.hash(dto.password),
                )
            except ValueError as exc:
                raise ValidationError(str(exc)) from exc

            try:
                repo.add(user)
            except IntegrityError as exc:
                # Lost a race against a concurrent registration
                if violates(exc, "uq_users_username"):
                    raise DuplicateIdentityError("username") from exc
                raise DuplicateIdentityError("email") from exc
            out = self._to_user_out(user)

        log.info("User registered", extra={"user_id": out.id})
        return out

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> SessionOut:
        """
        Authenticate credentials and open a new session.

        Concurrent logins simply add more members to the user's set.

        :raises ValidationError: If email or password is absent.
        :raises InvalidCredentialsError: Unknown email or wrong password.
        """
        errors = _missing(email=dto.email, password=dto.password)
        if errors:
            raise ValidationError("Missing required fields", errors=errors)

        with self.ro_uow() as uow:
            user = uow.users.get_by_email(dto.email)
            digest = user.password_hash if user is not None else _dummy_digest(self.hasher)
            verified = self.hasher.verify(digest, dto.password)
            if user is None or not verified:
                raise InvalidCredentialsError()
            user_id = user.id

        session = self.issue_session(user_id)
        log.info("User logged in", extra={"user_id": user_id})
        return session

    def issue_session(self, user_id: int) -> SessionOut:
        """
        Add a new member to ``user_id``'s set and sign a token pair for it.

        :param user_id: Existing user identifier.
        :returns: Fresh access/refresh pair.
        """
        jti = self.refresh_store.new_jti()
        self.refresh_store.add(str(user_id), jti)
        return self._sign_pair(user_id, jti)

    # ------------------------------------------------------------------ #
    # Refresh with atomic rotation
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> SessionOut:
        """
        Rotate a refresh token and emit a new token pair.

        :param dto: Refresh input.
        :returns: New pair; the presented token is consumed.
        :raises InvalidRefreshTokenError: Unknown, consumed, revoked or
            unverifiable token, or the owner no longer exists.
        """
        if not dto.refresh_token:
            raise InvalidRefreshTokenError("Refresh token is required")

        claims = self._resolve_refresh(dto.refresh_token, InvalidRefreshTokenError())
        user_id = self._owner_id(claims, InvalidRefreshTokenError())

        new_jti = self.refresh_store.new_jti()
        result = self.refresh_store.rotate(str(user_id), claims.jti, new_jti)

        if result is RotationResult.NOT_FOUND:
            # A well-signed token whose member is gone was already consumed
            revoked = self.refresh_store.revoke_all(str(user_id))
            log.warning(
                "Refresh token replay detected; session set revoked",
                extra={"user_id": user_id, "revoked": revoked},
            )
            raise InvalidRefreshTokenError()

        log.info("Refresh token rotated", extra={"user_id": user_id})
        return self._sign_pair(user_id, new_jti)

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, dto: LogoutIn) -> str:
        """
        End the session named by a refresh token.

        Idempotent: a token whose member is already gone still acknowledges.

        :returns: Acknowledgement message.
        :raises InvalidRefreshTokenError: Token absent, unverifiable, or its
            owner does not exist.
        """
        if not dto.refresh_token:
            raise InvalidRefreshTokenError("Refresh token is required")

        failure = InvalidRefreshTokenError("Logout failed")
        claims = self._resolve_refresh(dto.refresh_token, failure)
        user_id = self._owner_id(claims, failure)

        removed = self.refresh_store.remove(str(user_id), claims.jti)
        log.info("User logged out", extra={"user_id": user_id, "revoked": int(removed)})
        return LOGOUT_ACK

    # ------------------------------------------------------------------ #
    # Profile
    # ------------------------------------------------------------------ #

    def get_user(self, user_id: int) -> UserOut:
        """
        :raises NotFoundError: If the user does not exist.
        """
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            return self._to_user_out(user)

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _sign_pair(self, user_id: int, jti: str) -> SessionOut:
        return SessionOut(
            user_id=user_id,
            access_token=self.codec.issue(user_id, self.cfg.access_expires),
            refresh_token=self.codec.issue_refresh(user_id, jti),
        )

    def _resolve_refresh(self, token: str, failure: InvalidRefreshTokenError) -> RefreshClaims:
        try:
            return self.codec.verify_refresh(token)
        except TokenError as exc:
            log.debug("Refresh token rejected", extra={"reason": exc.reason})
            raise failure from exc

    def _owner_id(self, claims: RefreshClaims, failure: InvalidRefreshTokenError) -> int:
        """Return the token owner's id, failing when the account is gone."""
        if not (claims.subject.isascii() and claims.subject.isdecimal()):
            raise failure
        user_id = int(claims.subject)
        with self.ro_uow() as uow:
            if uow.users.get(user_id) is None:
                raise failure
        return user_id

    @staticmethod
    def _to_user_out(user) -> UserOut:
        return UserOut(
            id=user.id,
            username=user.username,
            email=user.email,
            bio=user.bio or "",
            profile_image=user.profile_image or "",
        )
