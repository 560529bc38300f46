"""Application factory for the postboard API."""

from __future__ import annotations

from flask import Flask

from postboard.core.config import BaseConfig, get_config
from postboard.core.logger import configure_logging


def create_app(config: str | type[BaseConfig] | object | None = None) -> Flask:
    """
    Build a configured Flask app.

    Wiring order matters: the session core needs the database and Redis
    bindings, and error handlers go last so they cover every blueprint.

    :param config: Config class, object or import path. Defaults to the class
        selected by ``APP_ENV``.
    :returns: Ready-to-serve application.
    """
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config if config is not None else get_config())
    # Deployment-local overrides (e.g. secrets) live in instance/config.py
    app.config.from_pyfile("config.py", silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    from postboard import api
    from postboard.core import apidocs, auth, cors, errors, extensions, logger, proxy

    for component in (proxy, extensions, logger, cors, auth, api, apidocs, errors):
        component.init_app(app)

    return app
