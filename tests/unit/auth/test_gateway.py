from __future__ import annotations

from datetime import timedelta

import pytest

from foresy.auth.gateway import authenticate_access_token
from foresy.auth.jwt import encode_access_token, encode_jwt
from foresy.core.exceptions import AuthenticationError
from foresy.models import UserSession
from foresy.models.base import as_utc, utcnow


def _open_session(db_session, user, expires_in=timedelta(hours=1)):
    session = UserSession(user_id=user.id, expires_at=utcnow() + expires_in)
    db_session.add(session)
    db_session.commit()
    return session


def test_valid_token_refreshes_session(db_session, make_user):
    user = make_user()
    session = _open_session(db_session, user, expires_in=timedelta(minutes=5))
    before = as_utc(session.expires_at)

    context = authenticate_access_token(db_session, encode_access_token(user.id, session.id))

    assert context.user.id == user.id
    assert context.session.id == session.id
    assert as_utc(context.session.expires_at) > before


@pytest.mark.parametrize("missing", ["user_id", "session_id"])
def test_tokens_missing_identity_claims_are_rejected(db_session, make_user, missing):
    user = make_user()
    session = _open_session(db_session, user)
    claims = {"user_id": user.id, "session_id": session.id, "token_use": "access"}
    claims.pop(missing)

    with pytest.raises(AuthenticationError):
        authenticate_access_token(db_session, encode_jwt(claims, ttl=timedelta(minutes=5)))


def test_expired_session_is_unauthorized(db_session, make_user):
    user = make_user()
    session = _open_session(db_session, user, expires_in=timedelta(seconds=-1))

    with pytest.raises(AuthenticationError) as exc_info:
        authenticate_access_token(db_session, encode_access_token(user.id, session.id))

    assert exc_info.value.status_key == "unauthorized"
    assert exc_info.value.error_code == "session_expired"


def test_session_of_another_user_is_rejected(db_session, make_user):
    owner = make_user()
    intruder = make_user()
    session = _open_session(db_session, owner)

    with pytest.raises(AuthenticationError):
        authenticate_access_token(db_session, encode_access_token(intruder.id, session.id))


def test_inactive_user_is_rejected(db_session, make_user):
    user = make_user(active=False)
    session = _open_session(db_session, user)

    with pytest.raises(AuthenticationError):
        authenticate_access_token(db_session, encode_access_token(user.id, session.id))


def test_rejection_log_omits_token(db_session, make_user, caplog):
    user = make_user()
    token = encode_jwt({"user_id": user.id, "token_use": "access"}, ttl=timedelta(minutes=5))

    with caplog.at_level("INFO", logger="foresy.auth.gateway"):
        with pytest.raises(AuthenticationError):
            authenticate_access_token(db_session, token)

    assert caplog.records
    assert all(token not in record.getMessage() for record in caplog.records)
    assert caplog.records[-1].error_type == "AuthenticationError"
