"""WSGI-level HTTP concerns: reverse-proxy headers and CORS."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS
from werkzeug.middleware.proxy_fix import ProxyFix


def init_proxy(app: Flask) -> None:
    """Trust one hop of ``X-Forwarded-*`` headers unless ``USE_PROXYFIX`` is off."""
    if app.config.get("USE_PROXYFIX", True):
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)


def init_cors(app: Flask) -> None:
    """Configure CORS for API endpoints from ``CORS_ORIGINS``.

    Bearer tokens travel in the ``Authorization`` header, never in cookies,
    so credentials support is only enabled for an explicit origin list.
    A blank value or ``"*"`` allows any origin.
    """
    raw_origins = app.config.get("CORS_ORIGINS", "") or ""
    origins = [o.strip() for o in raw_origins.split(",") if o.strip()]
    wildcard = len(origins) == 0 or origins == ["*"]

    CORS(
        app,
        resources={r"/api/*": {"origins": "*" if wildcard else origins}},
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
        expose_headers=["Location", "X-Request-ID"],
        supports_credentials=not wildcard,
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
