"""Error hierarchy for the Listmonk façade."""

from __future__ import annotations

from typing import Any, Mapping, Optional


class ListmonkError(Exception):
    """Base class for every error raised by the Listmonk façade."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_data: Any = None,
        original_error: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response_data = response_data
        self.original_error = original_error


class AuthenticationError(ListmonkError):
    """Raised when Listmonk rejects the configured credentials (HTTP 401)."""

    def __init__(self, message: str = "Authentication failed", response_data: Any = None) -> None:
        super().__init__(message, 401, response_data)


class ValidationError(ListmonkError):
    """Raised when Listmonk rejects a request payload (HTTP 400)."""

    def __init__(
        self,
        message: str = "Validation failed",
        errors: Optional[dict[str, list[str]]] = None,
        response_data: Any = None,
    ) -> None:
        super().__init__(message, 400, response_data)
        self.errors = errors


class NotFoundError(ListmonkError):
    """Raised when the requested resource does not exist (HTTP 404)."""

    def __init__(self, message: str = "Resource not found", response_data: Any = None) -> None:
        super().__init__(message, 404, response_data)


class RateLimitError(ListmonkError):
    """Raised when Listmonk throttles the caller (HTTP 429)."""

    def __init__(self, message: str = "Rate limit exceeded", response_data: Any = None) -> None:
        super().__init__(message, 429, response_data)


class ServerError(ListmonkError):
    """Raised for 5xx responses; keeps the exact status code."""

    def __init__(
        self,
        message: str = "Internal server error",
        status_code: int = 500,
        response_data: Any = None,
    ) -> None:
        super().__init__(message, status_code, response_data)


class ConfigurationError(ListmonkError):
    """Raised when the resolved configuration is unusable."""

    def __init__(self, message: str, field: str) -> None:
        super().__init__(message)
        self.field = field


class MissingOperationError(ListmonkError):
    """Raised when an endpoint function expected by name is absent from the table."""

    def __init__(self, operation: str) -> None:
        super().__init__(f"{operation} method not found")
        self.operation = operation


class UnsupportedOperationError(ListmonkError):
    """Raised when calling a verb the resource explicitly does not offer."""


def _field_errors(response_data: Any) -> Optional[dict[str, list[str]]]:
    if not isinstance(response_data, Mapping):
        return None
    errors = response_data.get("errors")
    if not isinstance(errors, Mapping):
        return None
    result: dict[str, list[str]] = {}
    for field, messages in errors.items():
        if isinstance(messages, (list, tuple)):
            result[str(field)] = [str(item) for item in messages]
        else:
            result[str(field)] = [str(messages)]
    return result


def create_error_from_response(
    response: Any,
    message: Optional[str] = None,
    response_data: Any = None,
) -> ListmonkError:
    """Build the error matching ``response.status_code``.

    ``response`` only needs ``status_code`` and ``reason_phrase`` (an
    ``httpx.Response`` fits). The message defaults to ``"HTTP {status}:
    {reason}"`` and the decoded payload is always attached as
    ``response_data``.
    """
    status = int(response.status_code)
    reason = getattr(response, "reason_phrase", "") or ""
    text = message or f"HTTP {status}: {reason}"

    if status == 401:
        return AuthenticationError(text, response_data)
    if status == 400:
        return ValidationError(text, _field_errors(response_data), response_data)
    if status == 404:
        return NotFoundError(text, response_data)
    if status == 429:
        return RateLimitError(text, response_data)
    if status >= 500:
        return ServerError(text, status, response_data)
    return ListmonkError(text, status, response_data)


def is_listmonk_error(error: object) -> bool:
    """Return True when ``error`` belongs to the Listmonk error family."""
    return isinstance(error, ListmonkError)
