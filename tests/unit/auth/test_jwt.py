from __future__ import annotations

from datetime import timedelta

import jwt as pyjwt
import pytest

from foresy.auth.jwt import (
    create_refresh_token,
    create_token_pair,
    decode_token,
    encode_access_token,
    encode_jwt,
    refresh_window_open,
)
from foresy.core.config import get_config
from foresy.core.exceptions import AuthenticationError


def test_access_token_carries_user_and_session():
    claims = decode_token(encode_access_token(user_id=3, session_id=9))

    assert claims["user_id"] == 3
    assert claims["session_id"] == 9
    assert claims["token_use"] == "access"
    assert claims["exp"] - claims["iat"] == 15 * 60


def test_refresh_token_carries_refresh_exp():
    claims = decode_token(create_refresh_token(user_id=3, session_id=9))

    assert claims["session_id"] == 9
    assert refresh_window_open(claims)
    assert not refresh_window_open({"user_id": 3})


def test_expired_token_maps_to_authentication_error():
    token = encode_jwt({"user_id": 1, "session_id": 1}, ttl=timedelta(seconds=-5))

    with pytest.raises(AuthenticationError, match="Token has expired"):
        decode_token(token)


def test_tampered_or_foreign_tokens_are_invalid():
    foreign = pyjwt.encode({"user_id": 1}, "another-secret-value-for-signing-0000", algorithm="HS256")

    with pytest.raises(AuthenticationError, match="Invalid token"):
        decode_token(foreign)
    with pytest.raises(AuthenticationError, match="Invalid token"):
        decode_token("not.a.jwt")


def test_token_pair_expires_in_matches_config():
    pair = create_token_pair(user_id=1, session_id=2)

    assert pair.token_type == "bearer"
    assert pair.expires_in == get_config().ACCESS_TOKEN_TTL_MINUTES * 60
    assert pair.access_token != pair.refresh_token
