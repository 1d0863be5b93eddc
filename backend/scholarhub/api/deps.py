"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, jsonify, request

from scholarhub.infra import Container, get_container

F = TypeVar("F", bound=Callable[..., Any])


def services() -> Container:
    """Return the service container bound to the current application."""

    return get_container()


def require_auth(func: F) -> F:
    """
    Authorize the request's bearer session token.

    The resolved :class:`~scholarhub.services._shared.dto.Identity` is passed
    to the view as the ``identity`` keyword argument; nothing is stored on
    ``flask.g``.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        header = request.headers.get("Authorization")
        kwargs["identity"] = services().auth.authorize(header)
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def json_body() -> dict[str, Any]:
    """Return the JSON object sent with the request, or an empty mapping."""

    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
