"""JWT token utilities built on PyJWT."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from foresy.core.config import Config, get_config
from foresy.core.exceptions import AuthenticationError

ACCESS_TOKEN_USE = "access"
REFRESH_TOKEN_USE = "refresh"


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = 900


def _now() -> datetime:
    return datetime.now(timezone.utc)


def encode_jwt(payload: dict[str, Any], ttl: timedelta, settings: Config | None = None) -> str:
    """Sign ``payload`` with iat/exp/jti claims added."""
    cfg = settings or get_config()
    if not cfg.JWT_SECRET:
        raise AuthenticationError("JWT secret must be configured.")

    now = _now()
    body = dict(payload)
    body.setdefault("iat", int(now.timestamp()))
    body.setdefault("exp", int((now + ttl).timestamp()))
    body.setdefault("jti", str(uuid.uuid4()))
    return jwt.encode(body, cfg.JWT_SECRET, algorithm=cfg.JWT_ALGORITHM)


def decode_token(token: str, settings: Config | None = None) -> dict[str, Any]:
    """Decode and verify a token, mapping library errors onto AuthenticationError."""
    cfg = settings or get_config()
    if not token:
        raise AuthenticationError("Missing token.")
    try:
        payload = jwt.decode(token, cfg.JWT_SECRET, algorithms=[cfg.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError as exc:
        raise AuthenticationError("Token has expired", code="token_expired") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthenticationError("Invalid token", code="invalid_token") from exc
    if not isinstance(payload, dict):
        raise AuthenticationError("Invalid token", code="invalid_token")
    return payload


def encode_access_token(user_id: int, session_id: int, settings: Config | None = None) -> str:
    """Short-lived token bound to one server-side session."""
    cfg = settings or get_config()
    payload = {"user_id": user_id, "session_id": session_id, "token_use": ACCESS_TOKEN_USE}
    return encode_jwt(payload, ttl=timedelta(minutes=cfg.ACCESS_TOKEN_TTL_MINUTES), settings=cfg)


def create_refresh_token(user_id: int, session_id: int | None = None, settings: Config | None = None) -> str:
    cfg = settings or get_config()
    ttl = timedelta(days=cfg.REFRESH_TOKEN_TTL_DAYS)
    payload: dict[str, Any] = {
        "user_id": user_id,
        "refresh_exp": int((_now() + ttl).timestamp()),
        "token_use": REFRESH_TOKEN_USE,
    }
    if session_id is not None:
        payload["session_id"] = session_id
    return encode_jwt(payload, ttl=ttl, settings=cfg)


def create_token_pair(user_id: int, session_id: int, settings: Config | None = None) -> TokenPair:
    cfg = settings or get_config()
    return TokenPair(
        access_token=encode_access_token(user_id=user_id, session_id=session_id, settings=cfg),
        refresh_token=create_refresh_token(user_id=user_id, session_id=session_id, settings=cfg),
        expires_in=cfg.ACCESS_TOKEN_TTL_MINUTES * 60,
    )


def refresh_window_open(claims: dict[str, Any]) -> bool:
    """True when the ``refresh_exp`` claim is present and still in the future."""
    refresh_exp = claims.get("refresh_exp")
    if refresh_exp is None:
        return False
    try:
        return int(refresh_exp) > int(_now().timestamp())
    except (TypeError, ValueError):
        return False
