from __future__ import annotations

from sqlalchemy import select

from foresy.auth.oauth import OAuthPayload
from foresy.models import User
from foresy.models.enums import OAuthProvider
from foresy.services.oauth_service import OAuthService


def test_new_oauth_user_is_created_with_fallback_name(db_session):
    payload = OAuthPayload(provider="github", uid="gh-1", email="dev@example.com", nickname="devnick")

    result = OAuthService(db_session).callback(payload)

    assert result.success
    user = db_session.scalar(select(User).where(User.uid == "gh-1"))
    assert user.provider == OAuthProvider.GITHUB
    assert user.name == "devnick"
    assert user.password_hash is None
    assert result.value("user")["provider"] == "github"


def test_existing_user_keeps_name_and_updates_email(db_session):
    user = User(email="old@example.com", provider=OAuthProvider.GOOGLE, uid="g-1", name="Original Name", active=True)
    db_session.add(user)
    db_session.commit()

    payload = OAuthPayload(provider="google_oauth2", uid="g-1", email="new@example.com", name="Other Name")
    result = OAuthService(db_session).callback(payload)

    assert result.success
    db_session.refresh(user)
    assert user.name == "Original Name"
    assert user.email == "new@example.com"


def test_blank_name_is_replaced(db_session):
    user = User(email="blank@example.com", provider=OAuthProvider.GITHUB, uid="gh-2", name="  ", active=True)
    db_session.add(user)
    db_session.commit()

    OAuthService(db_session).callback(OAuthPayload(provider="github", uid="gh-2"))

    db_session.refresh(user)
    assert user.name == "No Name"


def test_unsupported_provider_is_unauthorized(db_session):
    result = OAuthService(db_session).callback(OAuthPayload(provider="facebook", uid="1", email="a@example.com"))

    assert result.status == "unauthorized"
    assert OAuthService(db_session).callback(None).status == "unauthorized"


def test_persist_failures_are_validation_errors(db_session, make_user):
    make_user(email="taken@example.com")

    no_email = OAuthService(db_session).callback(OAuthPayload(provider="github", uid="gh-3"))
    taken = OAuthService(db_session).callback(OAuthPayload(provider="github", uid="gh-4", email="taken@example.com"))

    assert no_email.status == "validation_error"
    assert no_email.message == "User creation failed"
    assert taken.status == "validation_error"
    assert db_session.scalar(select(User).where(User.uid == "gh-4")) is None
