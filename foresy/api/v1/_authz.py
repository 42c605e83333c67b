"""Shared authentication and rendering helpers for API v1 route modules."""

from __future__ import annotations

from fastapi import Depends, Header, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response
from sqlalchemy.orm import Session

from foresy.auth.gateway import AuthContext, authenticate_access_token
from foresy.core.config import Config
from foresy.core.dependencies import get_db_session, get_settings
from foresy.core.exceptions import AuthenticationError
from foresy.core.http_status import http_status
from foresy.core.result import ServiceResult
from foresy.services.rate_limit_service import client_ip, get_rate_limiter


def _extract_bearer_token(authorization: str | None) -> str:
    if authorization is None or not authorization.strip():
        raise AuthenticationError("Authorization header is required.", code="missing_token")
    parts = authorization.strip().split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise AuthenticationError("Authorization header must use Bearer token.", code="invalid_token")
    token = parts[1].strip()
    if not token:
        raise AuthenticationError("Authorization header is required.", code="missing_token")
    return token


def authorize(
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
    settings: Config = Depends(get_settings),
) -> AuthContext:
    """Route dependency resolving the bearer token into a user and session."""
    return authenticate_access_token(db, _extract_bearer_token(authorization), settings=settings)


def request_origin(request: Request) -> tuple[str, str | None]:
    peer = request.client.host if request.client else None
    return client_ip(request.headers, peer), request.headers.get("user-agent")


def enforce_rate_limit(request: Request, endpoint: str) -> None:
    ip_address, _ = request_origin(request)
    get_rate_limiter().hit(endpoint, ip_address)


def render_result(result: ServiceResult, success_status: int | None = None) -> Response:
    """Render a service result through the canonical status map."""
    if result.failure:
        body = {"error": result.message or result.error, "code": result.error}
        return JSONResponse(status_code=result.http_status, content=body)

    status_code = success_status or result.http_status
    if status_code == http_status("no_content"):
        return Response(status_code=status_code)
    body = dict(result.data)
    if result.message:
        body.setdefault("message", result.message)
    if result.meta:
        body["meta"] = result.meta
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))
