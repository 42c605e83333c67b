from __future__ import annotations

from datetime import timedelta

from foresy.auth.jwt import create_refresh_token, decode_token, encode_jwt
from foresy.core.metrics import InMemoryMetricsSink
from foresy.models import User, UserSession
from foresy.models.base import utcnow
from foresy.services.auth_service import AuthenticationService

PASSWORD = "password123"


def test_signup_creates_user_and_session(db_session):
    metrics = InMemoryMetricsSink()
    result = AuthenticationService(db_session, metrics=metrics).signup("New@Example.com", "secret1", "secret1")

    assert result.status == "created"
    assert result.value("email") == "new@example.com"
    claims = decode_token(result.value("token"))
    assert db_session.get(UserSession, claims["session_id"]).user_id == claims["user_id"]
    assert metrics.get("auth.signup.succeeded") == 1


def test_signup_rules(db_session, make_user):
    make_user(email="taken@example.com")
    service = AuthenticationService(db_session)

    assert service.signup("short@example.com", "12345", "12345").status == "validation_error"
    assert service.signup("mismatch@example.com", "secret1", "secret2").status == "validation_error"
    assert service.signup("not-an-email", "secret1", "secret1").status == "validation_error"
    assert service.signup("TAKEN@example.com", "secret1", "secret1").status == "conflict"
    assert service.signup(None, "secret1", "secret1").status == "bad_request"


def test_login_success_and_failures(db_session, make_user):
    make_user(email="ok@example.com")
    make_user(email="off@example.com", active=False)
    service = AuthenticationService(db_session)

    ok = service.login("OK@example.com", PASSWORD)
    assert ok.success
    assert ok.value("user")["email"] == "ok@example.com"

    assert service.login("ok@example.com", "wrong-password").status == "unauthorized"
    assert service.login("ok@example.com", None).status == "unauthorized"
    assert service.login("ghost@example.com", PASSWORD).status == "unauthorized"
    assert service.login("off@example.com", PASSWORD).status == "forbidden"


def test_refresh_issues_new_pair(db_session, make_user):
    make_user(email="ok@example.com")
    service = AuthenticationService(db_session)
    login = service.login("ok@example.com", PASSWORD)

    refreshed = service.refresh(login.value("refresh_token"))

    assert refreshed.success
    assert decode_token(refreshed.value("token"))["session_id"] != decode_token(login.value("token"))["session_id"]


def test_refresh_falls_back_to_latest_active_session(db_session, make_user):
    user = make_user()
    service = AuthenticationService(db_session)
    service.open_session(user)
    db_session.commit()

    result = service.refresh(create_refresh_token(user_id=user.id))

    assert result.success


def test_refresh_without_active_session_is_unauthorized(db_session, make_user):
    user = make_user()
    db_session.add(UserSession(user_id=user.id, expires_at=utcnow() - timedelta(minutes=1)))
    db_session.commit()

    result = AuthenticationService(db_session).refresh(create_refresh_token(user_id=user.id))

    assert result.status == "unauthorized"


def test_refresh_rejects_tokens_without_refresh_exp(db_session, make_user):
    user = make_user()
    token = encode_jwt({"user_id": user.id}, ttl=timedelta(days=1))

    assert AuthenticationService(db_session).refresh(token).status == "unauthorized"
    assert AuthenticationService(db_session).refresh("garbage").status == "unauthorized"


def test_logout_and_revoke_all(db_session, make_user):
    user = make_user()
    service = AuthenticationService(db_session)
    first = service.open_session(user)
    service.open_session(user)
    db_session.commit()
    current = db_session.get(UserSession, decode_token(first["token"])["session_id"])

    assert service.logout(current).success
    assert not current.is_active

    result = service.revoke_all(db_session.get(User, user.id))
    assert result.value("revoked_count") == 1
    assert service.list_sessions(user).value("sessions") == []
