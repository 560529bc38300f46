"""Interactive API documentation: Swagger UI and its JSON document via flasgger."""

from __future__ import annotations

from typing import Any

from flasgger import Swagger
from flask import Flask

DOCUMENT_ROUTE = "/apispec.json"
UI_ROUTE = "/apidocs/"

BEARER_SECURITY = {
    "Bearer": {
        "type": "apiKey",
        "name": "Authorization",
        "in": "header",
        "description": 'Access token with the scheme prefix, e.g. "Bearer eyJhbGciOi...".',
    }
}


def _template(app: Flask) -> dict[str, Any]:
    return {
        "swagger": "2.0",
        "info": {
            "title": "Postboard API",
            "version": app.config.get("APP_VERSION", "dev"),
            "description": "Posts and comments with rotating refresh-token sessions.",
        },
        "basePath": "/",
        "securityDefinitions": BEARER_SECURITY,
        "tags": [
            {"name": "Auth", "description": "Registration, login and session lifecycle"},
            {"name": "Posts"},
            {"name": "Comments"},
        ],
    }


def _config(app: Flask) -> dict[str, Any]:
    api_prefix = app.config.get("API_BASE_PREFIX", "/api").rstrip("/") + "/"
    return {
        "headers": [],
        "specs": [
            {
                "endpoint": "apispec",
                "route": DOCUMENT_ROUTE,
                "rule_filter": lambda rule: rule.rule.startswith(api_prefix),
                "model_filter": lambda tag: True,
            }
        ],
        "static_url_path": "/flasgger_static",
        "swagger_ui": True,
        "specs_route": UI_ROUTE,
    }


def init_app(app: Flask) -> None:
    """Serve ``/apispec.json`` and ``/apidocs/`` unless ``APIDOCS_ENABLED`` is false."""
    if app.config.get("APIDOCS_ENABLED", True):
        Swagger(app, template=_template(app), config=_config(app))
