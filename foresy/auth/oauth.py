"""Normalised OAuth callback payload."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from foresy.core.exceptions import AuthenticationError


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class OAuthPayload:
    provider: str
    uid: str
    email: str | None = None
    name: str | None = None
    nickname: str | None = None

    @classmethod
    def from_callback(cls, provider: str | None, body: Any) -> "OAuthPayload":
        """Build the payload from a callback body.

        Accepts the flat ``{uid, email, name, nickname}`` shape as well as the
        ``{uid, info: {...}}`` shape emitted by omniauth-style brokers.
        """
        if not isinstance(body, dict) or not body:
            raise AuthenticationError("OAuth payload is missing", code="oauth_failed")

        info = body.get("info") if isinstance(body.get("info"), dict) else {}
        resolved_provider = _text(provider) or _text(body.get("provider"))
        uid = _text(body.get("uid"))
        if not resolved_provider or not uid:
            raise AuthenticationError("OAuth payload is incomplete", code="oauth_failed")

        return cls(
            provider=resolved_provider,
            uid=uid,
            email=_text(body.get("email", info.get("email"))),
            name=_text(body.get("name", info.get("name"))),
            nickname=_text(body.get("nickname", info.get("nickname"))),
        )

    def display_name(self) -> str:
        return self.name or self.nickname or "No Name"
