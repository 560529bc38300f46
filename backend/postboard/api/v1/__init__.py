"""Version 1 of the HTTP API."""

from __future__ import annotations

from flask import Blueprint

from .auth import bp as auth_bp
from .comments import bp as comments_bp
from .health import bp as health_bp
from .posts import bp as posts_bp

API_VERSION = "v1"

#: ``(blueprint, prefix relative to /api/v1)``; health sits at the version root.
REGISTRY: tuple[tuple[Blueprint, str], ...] = (
    (health_bp, ""),
    (auth_bp, "/auth"),
    (posts_bp, "/posts"),
    (comments_bp, "/comments"),
)
