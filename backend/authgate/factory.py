"""Application factory for the auth service."""

from __future__ import annotations

from flask import Flask

from authgate.core.config import BaseConfig, get_config
from authgate.core.logger import configure_logging


def create_app(config: str | type[BaseConfig] | object | None = None) -> Flask:
    """
    Build a configured application.

    :param config: Config object or import path; ``APP_ENV`` decides when omitted.
    :raises RuntimeError: Production boot without a real JWT secret or Redis.
    """
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config if config is not None else get_config())
    app.config.from_pyfile("config.py", silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    # Order matters: auth components need the database and Redis bound,
    # routes and error handlers need the auth components.
    from authgate import cli
    from authgate.api import init_app as init_api
    from authgate.core import errors, extensions, logger, security

    extensions.init_app(app)
    logger.init_app(app)
    security.init_app(app)
    init_api(app)
    errors.init_app(app)
    cli.init_app(app)
    return app
