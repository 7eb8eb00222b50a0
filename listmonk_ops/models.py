from __future__ import annotations

from typing import Any, Mapping, TypedDict, TypeGuard, Union

import httpx
from pydantic import BaseModel, Field


class Envelope(TypedDict, total=False):
    """Successful façade result. ``message`` and other siblings may be hoisted."""

    data: Any
    request: httpx.Request
    response: httpx.Response
    message: Any


class ErrorResult(TypedDict):
    """Structured upstream failure returned as data by fetch/update operations."""

    error: Any
    request: httpx.Request
    response: httpx.Response


CrudResult = Union[Envelope, ErrorResult]


def is_error_result(result: Mapping[str, Any]) -> TypeGuard[ErrorResult]:
    return "error" in result


class Page(BaseModel):
    """Payload of a paginated listing (``envelope["data"]`` of a list call)."""

    results: list[Any] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    per_page: int = 0
