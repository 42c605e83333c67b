"""Find-or-create users from OAuth provider callbacks."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from foresy.auth.oauth import OAuthPayload
from foresy.core.exceptions import AuthenticationError, DomainValidationError
from foresy.core.result import ServiceResult
from foresy.models import User
from foresy.models.enums import OAuthProvider
from foresy.services.auth_service import AuthenticationService, is_valid_email, normalize_email

SUPPORTED_PROVIDERS = frozenset(provider.value for provider in OAuthProvider)


class OAuthService(AuthenticationService):
    """Bridge between provider identities and local users."""

    def _user_creation_failed(self) -> DomainValidationError:
        return DomainValidationError("User creation failed", code="user_creation_failed")

    def find_or_initialize(self, payload: OAuthPayload) -> User:
        provider = OAuthProvider(payload.provider)
        user = self.db.scalar(select(User).where(User.provider == provider, User.uid == payload.uid))
        email = normalize_email(payload.email)

        if user is None:
            user = User(provider=provider, uid=payload.uid, name=payload.display_name(), active=True)
            self.db.add(user)
        elif not (user.name or "").strip():
            user.name = payload.display_name()

        if email:
            user.email = email
        if not user.email or not is_valid_email(user.email):
            raise self._user_creation_failed()

        stmt = select(User.id).where(User.email == user.email)
        if user.id is not None:
            stmt = stmt.where(User.id != user.id)
        if self.db.scalar(stmt) is not None:
            raise self._user_creation_failed()
        return user

    def callback(self, payload: OAuthPayload | None, ip_address: str | None = None, user_agent: str | None = None) -> ServiceResult:
        def action() -> ServiceResult:
            if payload is None:
                raise AuthenticationError("OAuth payload is missing", code="oauth_failed")
            if payload.provider not in SUPPORTED_PROVIDERS:
                raise AuthenticationError("Unsupported OAuth provider", code="invalid_provider")

            user = self.find_or_initialize(payload)
            try:
                self.db.flush()
            except IntegrityError as exc:
                raise self._user_creation_failed() from exc
            if not user.active:
                raise AuthenticationError("Account is inactive", code="account_inactive")

            session_payload = self.open_session(user, ip_address=ip_address, user_agent=user_agent)
            self.commit()
            self.logger.info(
                "auth.oauth.succeeded",
                extra={"event": "auth.oauth.succeeded", "user_id": user.id, "provider": payload.provider},
            )
            self.metrics.increment("auth.oauth.succeeded", provider=payload.provider)
            return ServiceResult.ok(**session_payload)

        return self.run("auth.oauth", action)
