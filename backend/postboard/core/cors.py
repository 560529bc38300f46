"""Cross-origin access for the browser client."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

ALLOWED_HEADERS = ["Authorization", "Content-Type", "X-Request-ID"]
EXPOSED_HEADERS = ["X-Request-ID"]


def _origins(raw: object) -> list[str]:
    return [part.strip() for part in str(raw or "").split(",") if part.strip()]


def init_app(app: Flask) -> None:
    """
    Enable CORS on ``API_BASE_PREFIX`` routes for ``CORS_ORIGINS``.

    ``CORS_ORIGINS`` is comma separated. Blank or ``*`` opens the API to any
    origin, in which case credentials are not allowed; tokens travel in the
    ``Authorization`` header, never in cookies.
    """
    origins = _origins(app.config.get("CORS_ORIGINS"))
    wildcard = origins in ([], ["*"])
    base = app.config.get("API_BASE_PREFIX", "/api").rstrip("/")

    CORS(
        app,
        resources={base + "/*": {"origins": "*" if wildcard else origins}},
        allow_headers=ALLOWED_HEADERS,
        expose_headers=EXPOSED_HEADERS,
        supports_credentials=not wildcard,
        max_age=app.config.get("CORS_MAX_AGE"),
    )
