"""Canonical mapping of result status keys to HTTP status codes."""

from __future__ import annotations

HTTP_STATUS_MAP: dict[str, int] = {
    "ok": 200,
    "created": 201,
    "no_content": 204,
    "bad_request": 400,
    "unauthorized": 401,
    "forbidden": 403,
    "not_found": 404,
    "conflict": 409,
    "validation_error": 422,
    "too_many_requests": 429,
    "internal_error": 500,
}


def http_status(key: str) -> int:
    """Resolve a status key; unknown keys are treated as internal errors."""
    return HTTP_STATUS_MAP.get(key, HTTP_STATUS_MAP["internal_error"])
