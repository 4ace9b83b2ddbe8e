"""
Unit tests for the domain error to HTTP mapping.
"""
import pytest
from fastapi import HTTPException

from mockprep.core.errors import (
    EvaluationError,
    InvalidStateError,
    NotFoundError,
    PersistenceError,
    ValidationError,
    to_http_exception,
)
from mockprep.core.logging_config import sanitize_log_data


@pytest.mark.parametrize("exc, status_code, detail", [
    (ValidationError("Response is required"), 400, "Response is required"),
    (InvalidStateError("Cannot complete a cancelled interview"), 409, "Cannot complete a cancelled interview"),
    (NotFoundError("Interview not found"), 404, "Interview not found"),
    (NotFoundError(), 404, "Not found"),
])
def test_client_errors_keep_their_message(exc, status_code, detail):
    http_exc = to_http_exception(exc, "Failed to do the thing")

    assert http_exc.status_code == status_code
    assert http_exc.detail == detail


@pytest.mark.parametrize("exc", [
    EvaluationError("model timed out talking to upstream"),
    PersistenceError("update_interview failed"),
    RuntimeError("boom"),
])
def test_server_errors_are_generic(exc):
    http_exc = to_http_exception(exc, "Failed to submit response")

    assert http_exc.status_code == 500
    assert http_exc.detail == "Failed to submit response"


def test_http_exceptions_pass_through():
    exc = HTTPException(status_code=401, detail="Unauthorized")

    assert to_http_exception(exc, "Failed") is exc


def test_sanitize_log_data_masks_secrets():
    sanitized = sanitize_log_data({
        "openai_api_key": "sk-123",
        "database": "sqlite://",
        "livekit": {"api_secret": "s", "url": "wss://lk.example"},
        "identity_jwt_secret": None,
    })

    assert sanitized["openai_api_key"] == "***REDACTED***"
    assert sanitized["database"] == "sqlite://"
    assert sanitized["livekit"] == {"api_secret": "***REDACTED***", "url": "wss://lk.example"}
    # unset secrets are left as they are
    assert sanitized["identity_jwt_secret"] is None
