"""Auth schema module."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class SignupRequest(BaseModel):
    email: str | None = None
    password: str | None = None
    password_confirmation: str | None = None


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class RefreshRequest(BaseModel):
    refresh_token: str | None = None


class OAuthCallbackRequest(BaseModel):
    """Provider identity as posted by the OAuth broker; extra keys are kept."""

    model_config = ConfigDict(extra="allow")

    provider: str | None = None
    uid: str | int | None = None
    email: str | None = None
    name: str | None = None
    nickname: str | None = None
    info: dict | None = None


class UserOut(BaseModel):
    id: int
    email: str
    name: str | None = None
    provider: str | None = None


class TokenResponse(BaseModel):
    token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int
    email: str
    user: UserOut


class SessionOut(BaseModel):
    id: int
    created_at: datetime
    last_activity_at: datetime
    expires_at: datetime
    ip_address: str | None = None
    user_agent: str | None = None


class SessionListResponse(BaseModel):
    sessions: list[SessionOut]


class RevokeAllResponse(BaseModel):
    message: str
    revoked_count: int
