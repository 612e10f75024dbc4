"""Application factory wiring the token service and blueprints."""

from __future__ import annotations

from flask import Flask

from jwtauth.core.config import BaseConfig, get_config
from jwtauth.core.logger import configure_logging, init_app as init_logging
from jwtauth.services._shared.ports.blacklist_store import BlacklistStore


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    store: BlacklistStore | None = None,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application.

    :param config: Config object/class (or import path); defaults to the
        class selected by ``APP_ENV``.
    :param store: Optional blacklist backend overriding ``REDIS_URL``.
    """

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    from jwtauth.core import extensions

    extensions.init_app(app, store=store)

    init_logging(app)

    from jwtauth.api import init_app as init_api

    init_api(app)

    from jwtauth.core import errors

    errors.init_app(app)

    return app
