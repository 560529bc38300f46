"""
Problem-details (RFC 7807) rendering for every error the API can raise.

Bodies carry ``type``, ``title``, ``status``, ``detail``, ``instance``, a
stable snake_case ``code``, optional ``details`` and the ``request_id``;
the media type is ``application/problem+json``.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from postboard.core.logger import ensure_request_id
from postboard.services._shared.errors import (
    AuthorizationError,
    DuplicateIdentityError,
    InvalidRefreshTokenError,
    NotFoundError,
    ServiceError,
    UnauthenticatedError,
    ValidationError,
)

log = logging.getLogger(__name__)

PROBLEM_MIMETYPE = "application/problem+json"

_CODES: dict[int, str] = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    415: "unsupported_media_type",
    422: "validation_error",
    500: "internal_server_error",
    503: "service_unavailable",
}


def problem_response(
    status: int, message: str, *, code: str | None = None, details: dict[str, Any] | None = None
) -> tuple[Response, int]:
    """
    Render one problem document and log it (5xx at ERROR, the rest at WARNING).

    :param status: HTTP status.
    :param message: Client-safe summary, sent as ``detail``.
    :param code: Machine-readable code; derived from ``status`` when omitted.
    :param details: Structured extras such as field errors.
    """
    status = int(status)
    code = code or _CODES.get(status, "error")
    body: dict[str, Any] = {
        "type": "about:blank",
        "title": HTTPStatus(status).phrase,
        "status": status,
        "detail": message,
        "instance": request.path,
        "code": code,
        "request_id": ensure_request_id(),
    }
    if details:
        body["details"] = details

    log.log(
        logging.ERROR if status >= 500 else logging.WARNING,
        "%s %s: %s",
        status,
        code,
        message,
        exc_info=status >= 500,
    )
    resp = jsonify(body)
    resp.mimetype = PROBLEM_MIMETYPE
    return resp, status


class APIError(Exception):
    """
    Error raised from the API layer with an explicit HTTP status.

    Subclasses fix ``status_code`` and ``default_message``.
    """

    status_code: int = HTTPStatus.BAD_REQUEST
    default_message = "Bad request"

    def __init__(self, message: str | None = None, details: dict[str, Any] | None = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    @property
    def code(self) -> str:
        return _CODES.get(int(self.status_code), "error")


class BadRequest(APIError):
    pass


class Unauthorized(APIError):
    status_code = HTTPStatus.UNAUTHORIZED
    default_message = "Unauthorized"


class Forbidden(APIError):
    status_code = HTTPStatus.FORBIDDEN
    default_message = "Forbidden"


class NotFound(APIError):
    status_code = HTTPStatus.NOT_FOUND
    default_message = "Resource not found"


class Conflict(APIError):
    status_code = HTTPStatus.CONFLICT
    default_message = "Conflict"


class UnprocessableEntity(APIError):
    status_code = HTTPStatus.UNPROCESSABLE_ENTITY
    default_message = "Validation failed"


def translate_service_error(exc: ServiceError) -> APIError:
    """
    Default HTTP meaning of a service error; anything unmapped is a 400.

    Endpoints with their own contract (registration answers 401 even on a
    duplicate) translate before this runs.
    """
    message = str(exc) or None
    if isinstance(exc, NotFoundError):
        return NotFound(message)
    if isinstance(exc, AuthorizationError):
        return Forbidden(message)
    if isinstance(exc, (UnauthenticatedError, InvalidRefreshTokenError)):
        return Unauthorized(message)
    if isinstance(exc, DuplicateIdentityError):
        return Conflict(message)
    if isinstance(exc, ValidationError):
        return UnprocessableEntity(message, details={"errors": exc.errors} if exc.errors else None)
    return BadRequest(message)


def init_app(app: Flask) -> None:
    """Register the handlers; database and unexpected errors never leak internals."""

    @app.errorhandler(APIError)
    def _api_error(err: APIError):
        return problem_response(err.status_code, err.message, details=err.details)

    @app.errorhandler(ServiceError)
    def _service_error(err: ServiceError):
        return _api_error(translate_service_error(err))

    @app.errorhandler(MarshmallowValidationError)
    def _schema_error(err: MarshmallowValidationError):
        return problem_response(
            HTTPStatus.UNPROCESSABLE_ENTITY, "Validation failed", details={"errors": err.messages}
        )

    @app.errorhandler(HTTPException)
    def _http_error(err: HTTPException):
        status = err.code or HTTPStatus.INTERNAL_SERVER_ERROR
        if status == HTTPStatus.NOT_FOUND:
            message = f"Route '{request.path}' not found"
        else:
            message = (err.description or HTTPStatus(status).phrase).strip()
        return problem_response(status, message)

    @app.errorhandler(IntegrityError)
    def _integrity_error(err: IntegrityError):
        return problem_response(HTTPStatus.CONFLICT, "Resource conflict")

    @app.errorhandler(OperationalError)
    def _operational_error(err: OperationalError):
        return problem_response(HTTPStatus.SERVICE_UNAVAILABLE, "Service temporarily unavailable")

    @app.errorhandler(Exception)
    def _unexpected(err: Exception):
        return problem_response(HTTPStatus.INTERNAL_SERVER_ERROR, "Unexpected error")
