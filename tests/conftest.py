"""Shared fixtures for the listmonk_ops test suite."""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from listmonk_ops import ListmonkClient, create_listmonk_client

LISTMONK_ENV_VARS = (
    "LISTMONK_API_URL",
    "LISTMONK_URL",
    "LISTMONK_USERNAME",
    "LISTMONK_API_TOKEN",
    "LISTMONK_TOKEN",
    "LISTMONK_TIMEOUT",
    "LISTMONK_RETRIES",
)

BASE_URL = "http://listmonk.test/api"


@pytest.fixture(autouse=True)
def _clear_listmonk_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's shell configuration out of the tests."""
    for name in LISTMONK_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class RecordingHandler:
    """MockTransport handler that records requests and replays canned answers.

    ``routes`` maps ``"METHOD /path"`` (path relative to the API root) to a
    ``httpx.Response`` or a callable building one. Unrouted requests get
    ``{"data": true}``.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.routes: dict[str, Any] = {}

    def route(self, method: str, path: str, response: Any) -> None:
        self.routes[f"{method} {path}"] = response

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api")
        answer = self.routes.get(f"{request.method} {path}")
        if answer is None:
            return httpx.Response(200, json={"data": True})
        if callable(answer):
            return answer(request)
        return answer

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


@pytest.fixture
def handler() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def make_client(handler: RecordingHandler) -> Callable[..., ListmonkClient]:
    def factory(**overrides: Any) -> ListmonkClient:
        config = {
            "base_url": BASE_URL,
            "auth": {"username": "api-admin", "token": "secret"},
            **overrides,
        }
        return create_listmonk_client(config, transport=httpx.MockTransport(handler))

    return factory
