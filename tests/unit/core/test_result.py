from __future__ import annotations

import pytest

from foresy.core.exceptions import ConflictError, RateLimitExceeded
from foresy.core.http_status import HTTP_STATUS_MAP, http_status
from foresy.core.result import ServiceResult


def test_status_map_is_canonical():
    assert HTTP_STATUS_MAP["validation_error"] == 422
    assert HTTP_STATUS_MAP["conflict"] == 409
    assert HTTP_STATUS_MAP["too_many_requests"] == 429
    assert http_status("unknown_key") == 500


def test_created_result_renders_201():
    result = ServiceResult.created(cra={"id": 1})

    assert result.success
    assert result.http_status == 201
    assert result.value("cra") == {"id": 1}


def test_failed_result_refuses_data_access():
    result = ServiceResult.from_exception(ConflictError("dup", code="duplicate_entry"))

    assert result.failure
    assert result.http_status == 409
    assert result.error == "duplicate_entry"
    with pytest.raises(ValueError):
        result.value("entry")


def test_exception_payload_includes_field_when_given():
    exc = RateLimitExceeded(retry_after=12)

    assert exc.retry_after == 12
    assert exc.to_dict() == {"error": "Rate limit exceeded", "code": "rate_limited"}
    assert ConflictError("taken", field="email").to_dict()["field"] == "email"
