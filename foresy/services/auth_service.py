"""Password authentication and server-side session lifecycle."""

from __future__ import annotations

import re
from datetime import timedelta

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from foresy.auth.jwt import create_token_pair, decode_token, refresh_window_open
from foresy.core.exceptions import AuthenticationError, ConflictError, ContractViolation, DomainValidationError, PermissionDenied
from foresy.core.result import ServiceResult
from foresy.core.security import hash_password, verify_password
from foresy.models import User, UserSession
from foresy.models.base import utcnow
from foresy.services.base_service import BaseService

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 6


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email)) and len(email) <= 320


def serialize_user(user: User) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "provider": user.provider.value if user.provider else None,
    }


def serialize_session(session: UserSession) -> dict:
    return {
        "id": session.id,
        "created_at": session.created_at,
        "last_activity_at": session.last_activity_at,
        "expires_at": session.expires_at,
        "ip_address": session.ip_address,
        "user_agent": session.user_agent,
    }


class AuthenticationService(BaseService):
    """Signup, login, refresh, logout and session revocation."""

    def _session_ttl(self) -> timedelta:
        return timedelta(hours=self.settings.SESSION_TTL_HOURS)

    def open_session(self, user: User, ip_address: str | None = None, user_agent: str | None = None) -> dict:
        """Create a session row and sign the token pair bound to it."""
        session = UserSession(
            user_id=user.id,
            expires_at=utcnow() + self._session_ttl(),
            ip_address=ip_address,
            user_agent=(user_agent or "")[:512] or None,
        )
        self.db.add(session)
        self.db.flush()
        tokens = create_token_pair(user_id=user.id, session_id=session.id, settings=self.settings)
        return {
            "token": tokens.access_token,
            "refresh_token": tokens.refresh_token,
            "token_type": tokens.token_type,
            "expires_in": tokens.expires_in,
            "email": user.email,
            "user": serialize_user(user),
        }

    def signup(
        self,
        email: str | None,
        password: str | None,
        password_confirmation: str | None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> ServiceResult:
        def action() -> ServiceResult:
            normalized = normalize_email(email)
            if not normalized or not password:
                raise ContractViolation("Email and password are required")
            if not is_valid_email(normalized):
                raise DomainValidationError("Email is invalid", field="email")
            if len(password) < MIN_PASSWORD_LENGTH:
                raise DomainValidationError(
                    f"Password is too short (minimum is {MIN_PASSWORD_LENGTH} characters)", field="password"
                )
            if password_confirmation is not None and password_confirmation != password:
                raise DomainValidationError("Password confirmation doesn't match Password", field="password_confirmation")
            if self.db.scalar(select(User.id).where(User.email == normalized)) is not None:
                raise ConflictError("Email has already been taken", code="email_taken", field="email")

            user = User(
                email=normalized,
                password_hash=hash_password(password, rounds=self.settings.BCRYPT_ROUNDS),
                active=True,
            )
            self.db.add(user)
            try:
                self.db.flush()
            except IntegrityError as exc:
                raise ConflictError("Email has already been taken", code="email_taken", field="email") from exc

            payload = self.open_session(user, ip_address=ip_address, user_agent=user_agent)
            self.commit()
            self.logger.info("auth.signup.succeeded", extra={"event": "auth.signup.succeeded", "user_id": user.id})
            self.metrics.increment("auth.signup.succeeded")
            return ServiceResult.created(**payload)

        return self.run("auth.signup", action)

    def login(
        self,
        email: str | None,
        password: str | None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> ServiceResult:
        def action() -> ServiceResult:
            normalized = normalize_email(email)
            if not normalized or not password:
                raise AuthenticationError("Invalid credentials", code="invalid_credentials")
            user = self.db.scalar(select(User).where(User.email == normalized))
            if user is None or not verify_password(password, user.password_hash):
                raise AuthenticationError("Invalid credentials", code="invalid_credentials")
            if not user.active:
                raise PermissionDenied("Account is inactive", code="account_inactive")

            payload = self.open_session(user, ip_address=ip_address, user_agent=user_agent)
            self.commit()
            self.logger.info("auth.login.succeeded", extra={"event": "auth.login.succeeded", "user_id": user.id})
            self.metrics.increment("auth.login.succeeded")
            return ServiceResult.ok(**payload)

        return self.run("auth.login", action)

    def _resolve_refresh_session(self, user: User, session_id: object) -> UserSession:
        if session_id is not None:
            try:
                candidate = self.db.get(UserSession, int(session_id))
            except (TypeError, ValueError):
                candidate = None
            if candidate is not None and candidate.user_id == user.id and candidate.is_active:
                return candidate

        sessions = self.db.scalars(
            select(UserSession)
            .where(UserSession.user_id == user.id, UserSession.expires_at > utcnow())
            .order_by(UserSession.created_at.desc(), UserSession.id.desc())
        )
        for session in sessions:
            if session.is_active:
                return session
        raise AuthenticationError("No active session", code="session_expired")

    def refresh(self, refresh_token: str | None, ip_address: str | None = None, user_agent: str | None = None) -> ServiceResult:
        def action() -> ServiceResult:
            if not refresh_token:
                raise AuthenticationError("Refresh token is required", code="invalid_token")
            claims = decode_token(refresh_token, settings=self.settings)
            if not refresh_window_open(claims):
                raise AuthenticationError("Refresh token has expired", code="token_expired")
            user_id = claims.get("user_id")
            if user_id is None:
                raise AuthenticationError("Invalid token", code="invalid_token")
            try:
                user = self.db.get(User, int(user_id))
            except (TypeError, ValueError) as exc:
                raise AuthenticationError("Invalid token", code="invalid_token") from exc
            if user is None or not user.active:
                raise AuthenticationError("Invalid token", code="invalid_token")

            previous = self._resolve_refresh_session(user, claims.get("session_id"))
            payload = self.open_session(user, ip_address=ip_address or previous.ip_address, user_agent=user_agent or previous.user_agent)
            self.commit()
            self.logger.info("auth.refresh.succeeded", extra={"event": "auth.refresh.succeeded", "user_id": user.id})
            self.metrics.increment("auth.refresh.succeeded")
            return ServiceResult.ok(**payload)

        return self.run("auth.refresh", action)

    def logout(self, session: UserSession) -> ServiceResult:
        def action() -> ServiceResult:
            session.expire()
            self.commit()
            self.logger.info("auth.logout", extra={"event": "auth.logout", "user_id": session.user_id})
            return ServiceResult.ok(message="Logged out successfully")

        return self.run("auth.logout", action)

    def revoke(self, session: UserSession) -> ServiceResult:
        def action() -> ServiceResult:
            session.expire()
            self.commit()
            self.logger.info("auth.revoke", extra={"event": "auth.revoke", "user_id": session.user_id})
            return ServiceResult.ok(message="Token revoked successfully")

        return self.run("auth.revoke", action)

    def revoke_all(self, user: User) -> ServiceResult:
        def action() -> ServiceResult:
            active = [
                session
                for session in self.db.scalars(
                    select(UserSession).where(UserSession.user_id == user.id, UserSession.expires_at > utcnow())
                )
                if session.is_active
            ]
            for session in active:
                session.expire()
            self.commit()
            self.logger.info(
                "auth.revoke_all",
                extra={"event": "auth.revoke_all", "user_id": user.id, "revoked_count": len(active)},
            )
            return ServiceResult.ok(message="All tokens revoked successfully", revoked_count=len(active))

        return self.run("auth.revoke_all", action)

    def list_sessions(self, user: User) -> ServiceResult:
        def action() -> ServiceResult:
            sessions = [
                serialize_session(session)
                for session in self.db.scalars(
                    select(UserSession)
                    .where(UserSession.user_id == user.id)
                    .order_by(UserSession.created_at.desc(), UserSession.id.desc())
                )
                if session.is_active
            ]
            return ServiceResult.ok(sessions=sessions)

        return self.run("auth.sessions", action)
