"""Application factory for the customer directory API."""

from __future__ import annotations

from flask import Flask

from customer_directory.core.config import BaseConfig, get_config
from customer_directory.core.logger import configure_logging


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """
    Build a configured Flask application.

    :param config: Config class, object or import string. Defaults to the
        class selected by ``APP_ENV``.
    :param instance_relative_config: Load overrides from the instance folder.
    :param instance_config_filename: Optional instance override file.
    :returns: Ready-to-serve application.
    :raises RuntimeError: If the token secrets are missing or identical.
    """
    app = Flask(__name__, instance_relative_config=instance_relative_config)
    app.config.from_object(config if config is not None else get_config())
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    # Envelope keys keep their declared order
    app.json.sort_keys = False  # type: ignore[attr-defined]

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    # Extensions first, error handlers after the blueprints
    from customer_directory import cli
    from customer_directory.api import init_app as init_api
    from customer_directory.core import cors, errors, extensions, logger

    for init in (extensions.init_app, logger.init_app, cors.init_app, init_api, errors.init_app):
        init(app)
    cli.init_app(app)

    return app
