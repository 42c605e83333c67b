from __future__ import annotations

import pytest

from foresy.auth.oauth import OAuthPayload
from foresy.core.exceptions import AuthenticationError


def test_flat_body_is_normalised():
    payload = OAuthPayload.from_callback("github", {"uid": 123, "email": " Dev@Example.com ", "nickname": "dev"})

    assert payload.provider == "github"
    assert payload.uid == "123"
    assert payload.email == "Dev@Example.com"
    assert payload.display_name() == "dev"


def test_info_block_is_read():
    payload = OAuthPayload.from_callback(
        "google_oauth2", {"uid": "g-1", "info": {"email": "a@example.com", "name": "Ada"}}
    )

    assert payload.email == "a@example.com"
    assert payload.display_name() == "Ada"


def test_display_name_falls_back_to_placeholder():
    assert OAuthPayload(provider="github", uid="1").display_name() == "No Name"


@pytest.mark.parametrize("body", [None, {}, {"email": "a@example.com"}, "uid=1"])
def test_incomplete_payloads_are_unauthorized(body):
    with pytest.raises(AuthenticationError):
        OAuthPayload.from_callback("github", body)
