"""Application factory wiring Flask extensions, adapters and blueprints."""

from __future__ import annotations

from typing import Any

from flask import Flask

from scholarhub.core.config import BaseConfig, get_config
from scholarhub.core.logger import configure_logging
from scholarhub.core.logger import init_app as init_logging


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
    **adapter_overrides: Any,
) -> Flask:
    """Build and configure the Flask application.

    :param config: Config object or import path; defaults to the class
        selected by ``APP_ENV``.
    :param adapter_overrides: Forwarded to :func:`scholarhub.infra.init_app`
        (``token_provider``, ``revocation_store``, ``search_index``,
        ``task_runner``) to swap adapters, mainly in tests.
    """

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    from scholarhub.core import http

    http.init_proxy(app)

    from scholarhub.core import extensions

    extensions.init_app(app)

    init_logging(app)

    http.init_cors(app)

    from scholarhub import infra

    infra.init_app(app, **adapter_overrides)

    from scholarhub.api import init_app as init_api

    init_api(app)

    from scholarhub.core import errors

    errors.init_app(app)

    from scholarhub import cli as app_cli

    app_cli.init_app(app)

    return app
