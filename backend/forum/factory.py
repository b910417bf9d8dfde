"""Application factory: configuration, extensions, session gate and routes."""

from __future__ import annotations

from flask import Flask

from forum import cli, models
from forum.api import init_app as init_api
from forum.api import session_gate
from forum.core import cors, errors, extensions, proxy
from forum.core.config import BaseConfig, get_config
from forum.core.extensions import db
from forum.core.logger import configure_logging
from forum.core.logger import init_app as init_logging


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_config_filename: str | None = "config.py",
) -> Flask:
    """
    Build the forum API.

    :param config: Config object or import path; ``APP_ENV`` decides when omitted.
    :param instance_config_filename: Optional override file in the instance folder.
    """
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(get_config() if config is None else config)
    if instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    proxy.init_app(app)
    extensions.init_app(app)
    cors.init_app(app)

    # before_request order: request id first, then the session gate
    init_logging(app)
    session_gate.init_app(app)

    init_api(app)
    errors.init_app(app)
    cli.init_app(app)

    app.shell_context_processor(_shell_context)
    return app


def _shell_context() -> dict[str, object]:
    return {
        "db": db,
        "User": models.User,
        "Post": models.Post,
        "Comment": models.Comment,
    }
