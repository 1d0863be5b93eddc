"""HTTP surface of scholarhub: versioned blueprints mounted under ``API_BASE_PREFIX``."""

from __future__ import annotations

from flask import Flask


def _mount_point(*segments: str) -> str:
    """Join URL segments into ``/a/b`` form, skipping empty ones."""
    return "/" + "/".join(s.strip("/") for s in segments if s.strip("/"))


def init_app(app: Flask) -> None:
    """Mount every v1 blueprint, e.g. ``auth`` at ``/api/v1/auth``."""
    from scholarhub.api.v1 import API_VERSION, REGISTRY

    api_base = app.config.get("API_BASE_PREFIX", "/api")
    for bp, rel_prefix in REGISTRY:
        app.register_blueprint(bp, url_prefix=_mount_point(api_base, API_VERSION, rel_prefix))


__all__ = ["init_app"]
