"""Resolve an access token into an authenticated user and live session."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta

from sqlalchemy.orm import Session

from foresy.auth.jwt import ACCESS_TOKEN_USE, decode_token
from foresy.core.config import Config, get_config
from foresy.core.exceptions import AuthenticationError
from foresy.models import User, UserSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthContext:
    user: User
    session: UserSession

    @property
    def user_id(self) -> int:
        return self.user.id


def _claim_id(claims: dict, key: str) -> int:
    value = claims.get(key)
    if value is None or isinstance(value, bool):
        raise AuthenticationError(f"Token is missing {key}", code="invalid_token")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise AuthenticationError(f"Token has an invalid {key}", code="invalid_token") from exc


def authenticate_access_token(db: Session, token: str, settings: Config | None = None) -> AuthContext:
    """Decode the token, load user and session, and slide the session forward.

    The session refresh is committed before returning so that the calling
    route starts from a clean transaction.
    """
    cfg = settings or get_config()
    try:
        claims = decode_token(token, settings=cfg)
        token_use = claims.get("token_use", ACCESS_TOKEN_USE)
        if token_use != ACCESS_TOKEN_USE:
            raise AuthenticationError("Invalid token", code="invalid_token")

        user_id = _claim_id(claims, "user_id")
        session_id = _claim_id(claims, "session_id")

        user = db.get(User, user_id)
        if user is None or not user.active:
            raise AuthenticationError("Invalid token", code="invalid_token")

        session = db.get(UserSession, session_id)
        if session is None or session.user_id != user.id:
            raise AuthenticationError("Invalid session", code="invalid_session")
        if not session.is_active:
            raise AuthenticationError("Session expired", code="session_expired")

        session.refresh(timedelta(hours=cfg.SESSION_TTL_HOURS))
        db.commit()
    except AuthenticationError as exc:
        logger.info(
            "auth.token_rejected",
            extra={"event": "auth.token_rejected", "error_type": type(exc).__name__, "code": exc.error_code},
        )
        raise
    return AuthContext(user=user, session=session)
