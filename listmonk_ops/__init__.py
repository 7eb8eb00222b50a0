"""Resource-oriented async client for the Listmonk API."""

from listmonk_ops.config import ListmonkConfig, config_to_headers, resolve_config, validate_config
from listmonk_ops.errors import (
    AuthenticationError,
    ConfigurationError,
    ListmonkError,
    MissingOperationError,
    NotFoundError,
    RateLimitError,
    ServerError,
    UnsupportedOperationError,
    ValidationError,
    create_error_from_response,
    is_listmonk_error,
)
from listmonk_ops.facade import ListmonkClient, create_listmonk_client
from listmonk_ops.models import CrudResult, Envelope, ErrorResult, Page, is_error_result
from listmonk_ops.transform import flatten, transform_response

__all__ = [
    "AuthenticationError",
    "ConfigurationError",
    "CrudResult",
    "Envelope",
    "ErrorResult",
    "ListmonkClient",
    "ListmonkConfig",
    "ListmonkError",
    "MissingOperationError",
    "NotFoundError",
    "Page",
    "RateLimitError",
    "ServerError",
    "UnsupportedOperationError",
    "ValidationError",
    "config_to_headers",
    "create_error_from_response",
    "create_listmonk_client",
    "flatten",
    "is_error_result",
    "is_listmonk_error",
    "resolve_config",
    "transform_response",
    "validate_config",
]
