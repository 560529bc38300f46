"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint, request
from marshmallow import ValidationError as SchemaValidationError

from postboard.api.deps import (
    current_identity,
    get_auth_service,
    json_response,
    require_auth,
    timing,
)
from postboard.core.errors import BadRequest, Unauthorized
from postboard.schemas import (
    LoginSchema,
    RefreshTokenSchema,
    RegisterResponseSchema,
    RegisterSchema,
    SessionResponseSchema,
    UserSchema,
)
from postboard.services import LoginIn, LogoutIn, RefreshIn, RegisterIn
from postboard.services._shared.errors import (
    DuplicateIdentityError,
    InvalidCredentialsError,
    ValidationError,
)

bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshTokenSchema()
session_schema = SessionResponseSchema()
register_response_schema = RegisterResponseSchema()
user_schema = UserSchema()


def _details(exc: Exception) -> dict | None:
    errors = getattr(exc, "errors", None) or getattr(exc, "messages", None)
    return {"errors": errors} if errors else None


def _load_refresh_payload(failure_message: str) -> dict:
    try:
        return refresh_schema.load(request.get_json(silent=True) or {})
    except SchemaValidationError as exc:
        raise Unauthorized(failure_message) from exc


@bp.post("/register")
@timing
def register():
    """Register a new user and open their first session.

    Every registration failure answers 401.
    ---
    tags: [Auth]
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            username: {type: string}
            email: {type: string, format: email}
            password: {type: string}
    responses:
      201:
        description: Account created; body carries id, access_token and refresh_token
      401:
        description: Missing field or duplicate email/username
    """

    service = get_auth_service()
    try:
        payload = register_schema.load(request.get_json(silent=True) or {})
        user = service.register(RegisterIn(**payload))
    except (SchemaValidationError, ValidationError, DuplicateIdentityError) as exc:
        message = str(exc) if not isinstance(exc, SchemaValidationError) else "Validation failed"
        raise Unauthorized(message, details=_details(exc)) from exc

    session = service.issue_session(user.id)
    body = {
        "data": register_response_schema.dump(
            {
                "id": user.id,
                "access_token": session.access_token,
                "refresh_token": session.refresh_token,
            }
        )
    }
    return json_response(body, status=201)


@bp.post("/login")
@timing
def login():
    """Authenticate credentials and issue an access/refresh pair.

    Each login adds a session; other devices keep theirs.
    ---
    tags: [Auth]
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            email: {type: string, format: email}
            password: {type: string}
    responses:
      200:
        description: user_id, access_token, refresh_token
      400:
        description: Missing field or invalid credentials
    """

    service = get_auth_service()
    try:
        payload = login_schema.load(request.get_json(silent=True) or {})
        session = service.login(LoginIn(**payload))
    except (SchemaValidationError, ValidationError, InvalidCredentialsError) as exc:
        message = str(exc) if not isinstance(exc, SchemaValidationError) else "Validation failed"
        raise BadRequest(message, details=_details(exc)) from exc
    return json_response({"data": session_schema.dump(session)})


@bp.post("/refresh-token")
@timing
def refresh_token():
    """Rotate a refresh token into a new access/refresh pair.

    Presenting an already rotated token ends every session of its owner.
    ---
    tags: [Auth]
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            refresh_token: {type: string}
    responses:
      200:
        description: New pair; the presented token is no longer valid
      401:
        description: Invalid, consumed or missing refresh token
    """

    payload = _load_refresh_payload("Invalid refresh token")
    session = get_auth_service().refresh(RefreshIn(**payload))
    return json_response({"data": session_schema.dump(session)})


@bp.post("/logout")
@timing
def logout():
    """End one session; repeating the call with the same token succeeds again.
    ---
    tags: [Auth]
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            refresh_token: {type: string}
    responses:
      200:
        description: Logged out
      401:
        description: Token missing or not verifiable
    """

    payload = _load_refresh_payload("Logout failed")
    message = get_auth_service().logout(LogoutIn(**payload))
    return json_response({"message": message})


@bp.get("/whoami")
@require_auth
@timing
def whoami():
    """Return the authenticated user profile.
    ---
    tags: [Auth]
    security:
      - Bearer: []
    responses:
      200:
        description: Public profile of the caller
      401:
        description: Missing, invalid or expired access token
    """

    identity = current_identity()
    user = get_auth_service().get_user(identity.user_id)
    return json_response({"data": user_schema.dump(user)})
