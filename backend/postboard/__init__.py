"""postboard: posts and comments API with rotating refresh-token sessions."""

from __future__ import annotations

from .factory import create_app

__all__ = ["create_app"]
