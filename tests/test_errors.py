from __future__ import annotations

import httpx
import pytest

from listmonk_ops import (
    AuthenticationError,
    ConfigurationError,
    ListmonkError,
    MissingOperationError,
    NotFoundError,
    RateLimitError,
    ServerError,
    ValidationError,
    create_error_from_response,
    is_listmonk_error,
)


def test_base_error_carries_all_fields() -> None:
    cause = RuntimeError("boom")

    error = ListmonkError("Test error", 418, {"detail": "x"}, cause)

    assert str(error) == "Test error"
    assert error.message == "Test error"
    assert error.status_code == 418
    assert error.response_data == {"detail": "x"}
    assert error.original_error is cause
    assert isinstance(error, Exception)


@pytest.mark.parametrize(
    ("error", "message", "status"),
    [
        (AuthenticationError(), "Authentication failed", 401),
        (ValidationError(), "Validation failed", 400),
        (NotFoundError(), "Resource not found", 404),
        (RateLimitError(), "Rate limit exceeded", 429),
        (ServerError(), "Internal server error", 500),
    ],
)
def test_subclass_defaults(error: ListmonkError, message: str, status: int) -> None:
    assert error.message == message
    assert error.status_code == status
    assert isinstance(error, ListmonkError)


def test_server_error_keeps_custom_status() -> None:
    assert ServerError("Bad gateway", 502).status_code == 502


def test_validation_error_keeps_field_errors() -> None:
    error = ValidationError("Invalid input", {"email": ["Invalid email format"]})

    assert error.errors == {"email": ["Invalid email format"]}


def test_configuration_and_missing_operation_errors() -> None:
    config_error = ConfigurationError("base_url is required", field="base_url")
    missing = MissingOperationError("create_list")

    assert config_error.field == "base_url"
    assert missing.operation == "create_list"
    assert str(missing) == "create_list method not found"
    assert is_listmonk_error(config_error) and is_listmonk_error(missing)


@pytest.mark.parametrize(
    ("status", "expected"),
    [
        (401, AuthenticationError),
        (400, ValidationError),
        (404, NotFoundError),
        (429, RateLimitError),
        (500, ServerError),
        (502, ServerError),
        (503, ServerError),
    ],
)
def test_create_error_from_response_maps_status(status: int, expected: type) -> None:
    error = create_error_from_response(httpx.Response(status))

    assert type(error) is expected
    assert error.status_code == status


def test_unmapped_status_gives_base_error() -> None:
    error = create_error_from_response(httpx.Response(418))

    assert type(error) is ListmonkError
    assert error.status_code == 418
    assert error.message == "HTTP 418: I'm a teapot"


def test_default_message_uses_status_and_reason() -> None:
    error = create_error_from_response(httpx.Response(404))

    assert error.message == "HTTP 404: Not Found"


def test_custom_message_and_response_data() -> None:
    payload = {"message": "list not found"}

    error = create_error_from_response(httpx.Response(404), "list not found", payload)

    assert error.message == "list not found"
    assert error.response_data == payload


def test_validation_errors_are_extracted_from_payload() -> None:
    payload = {"message": "invalid", "errors": {"email": "bad address", "name": ["too short"]}}

    error = create_error_from_response(httpx.Response(400), None, payload)

    assert isinstance(error, ValidationError)
    assert error.errors == {"email": ["bad address"], "name": ["too short"]}


@pytest.mark.parametrize("value", [ValueError("x"), "string", None, {"message": "m"}])
def test_is_listmonk_error_rejects_other_values(value: object) -> None:
    assert not is_listmonk_error(value)
