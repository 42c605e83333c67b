from __future__ import annotations

from datetime import timedelta

from foresy.auth.jwt import encode_jwt
from foresy.models import User
from foresy.models.enums import OAuthProvider

PASSWORD = "password123"


def test_signup_login_and_protected_access(client):
    signup = client.post(
        "/api/v1/signup",
        json={"email": "new@example.com", "password": "secret1", "password_confirmation": "secret1"},
    )
    assert signup.status_code == 201
    assert signup.json()["email"] == "new@example.com"

    login = client.post("/api/v1/auth/login", json={"email": "new@example.com", "password": "secret1"})
    assert login.status_code == 200
    body = login.json()
    assert body["token_type"] == "bearer"

    sessions = client.get("/api/v1/auth/sessions", headers={"Authorization": f"Bearer {body['token']}"})
    assert sessions.status_code == 200
    assert len(sessions.json()["sessions"]) == 2


def test_login_error_statuses(client, make_user):
    make_user(email="inactive@example.com", active=False)

    assert client.post("/api/v1/auth/login", json={"email": "x@example.com"}).status_code == 401
    assert client.post("/api/v1/auth/login", json={"email": "inactive@example.com", "password": PASSWORD}).status_code == 403


def test_malformed_json_is_bad_request(client):
    response = client.post(
        "/api/v1/auth/login", content="{not json", headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400
    assert response.json()["code"] == "bad_request"


def test_missing_or_bad_bearer_is_unauthorized(client):
    assert client.get("/api/v1/auth/sessions").status_code == 401
    assert client.get("/api/v1/auth/sessions", headers={"Authorization": "Token abc"}).status_code == 401
    assert client.get("/api/v1/auth/sessions", headers={"Authorization": "Bearer "}).status_code == 401


def test_token_without_session_id_is_unauthorized(client, make_user):
    user = make_user()
    token = encode_jwt({"user_id": user.id, "token_use": "access"}, ttl=timedelta(minutes=5))

    response = client.get("/api/v1/auth/sessions", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["error"]


def test_logout_invalidates_the_token(client, make_user, auth_headers):
    headers = auth_headers(make_user())

    assert client.delete("/api/v1/auth/logout", headers=headers).status_code == 200
    assert client.get("/api/v1/auth/sessions", headers=headers).status_code == 401


def test_revoke_all_reports_count(client, make_user, auth_headers):
    user = make_user()
    auth_headers(user)
    headers = auth_headers(user)

    response = client.delete("/api/v1/auth/revoke_all", headers=headers)

    assert response.status_code == 200
    assert response.json()["revoked_count"] == 2
    assert client.delete("/api/v1/auth/revoke", headers=headers).status_code == 401


def test_refresh_endpoint(client, make_user):
    make_user(email="r@example.com")
    login = client.post("/api/v1/auth/login", json={"email": "r@example.com", "password": PASSWORD}).json()

    refreshed = client.post("/api/v1/auth/refresh", json={"refresh_token": login["refresh_token"]})

    assert refreshed.status_code == 200
    assert refreshed.json()["token"] != login["token"]
    assert client.post("/api/v1/auth/refresh", json={"refresh_token": "junk"}).status_code == 401


def test_login_is_rate_limited(client):
    payload = {"email": "nobody@example.com", "password": "whatever"}
    statuses = [client.post("/api/v1/auth/login", json=payload).status_code for _ in range(6)]

    assert statuses[:5] == [401] * 5
    assert statuses[5] == 429


def test_rate_limit_response_has_retry_after(client):
    for _ in range(5):
        client.post("/api/v1/auth/login", json={})
    response = client.post("/api/v1/auth/login", json={})

    assert response.status_code == 429
    assert int(response.headers["Retry-After"]) >= 1


def test_oauth_callback_keeps_existing_name(client, db_session):
    user = User(email="oauth@example.com", provider=OAuthProvider.GITHUB, uid="42", name="Keep Me", active=True)
    db_session.add(user)
    db_session.commit()

    response = client.post(
        "/api/v1/auth/github/callback",
        json={"uid": "42", "email": "oauth@example.com", "name": "Changed"},
    )

    assert response.status_code == 200
    assert response.json()["user"]["name"] == "Keep Me"


def test_oauth_callback_rejects_unknown_provider_and_empty_body(client):
    assert client.post("/api/v1/auth/gitlab/callback", json={"uid": "1", "email": "a@example.com"}).status_code == 401
    assert client.post("/api/v1/auth/github/callback").status_code == 401
    assert client.post("/api/v1/auth/github/callback", json={"uid": "7"}).status_code == 422
