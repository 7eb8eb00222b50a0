from __future__ import annotations

# Async HTTP transport shared by every endpoint function in listmonk_ops.sdk.

import logging
from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote

import httpx

from listmonk_ops.config import ListmonkConfig, config_to_headers
from listmonk_ops.errors import ListmonkError

logger = logging.getLogger(__name__)


class ListmonkHTTPClient:
    """Thin async wrapper around ``httpx.AsyncClient`` for the Listmonk API.

    ``request`` never raises for HTTP status codes. It returns
    ``{"data", "request", "response"}`` for 2xx answers and
    ``{"error", "request", "response"}`` otherwise, leaving the choice of
    raising to the caller. Both slots hold the decoded body as received:
    parsed JSON, text, or ``None`` when empty. Network failures are raised
    as ``ListmonkError``.
    """

    def __init__(
        self,
        base_url: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        default_headers = httpx.Headers(dict(headers or {}))
        # Form and multipart requests need httpx to pick the Content-Type.
        self._content_type = default_headers.pop("Content-Type", None)
        default_headers.setdefault("Accept", "application/json")

        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=default_headers,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_config(
        cls,
        config: ListmonkConfig,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "ListmonkHTTPClient":
        return cls(
            config.base_url,
            headers=config_to_headers(config),
            # Zero means no timeout.
            timeout=config.timeout / 1000 if config.timeout else None,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _serialize_param_value(value: Any) -> Any:
        if isinstance(value, bool):
            return str(value).lower()
        if isinstance(value, (list, tuple, set)):
            return [ListmonkHTTPClient._serialize_param_value(item) for item in value]
        return value

    def _prepare_query(self, query: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        for key, value in (query or {}).items():
            if value is None or value == "":
                continue
            params[str(key)] = self._serialize_param_value(value)
        return params

    @staticmethod
    def _expand_path(url: str, path: Optional[Mapping[str, Any]]) -> str:
        values = {key: quote(str(value), safe="") for key, value in (path or {}).items()}
        try:
            return url.format(**values)
        except KeyError as exc:
            raise ListmonkError(f"Missing path parameter {exc.args[0]!r} for {url}") from exc

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return None
        if response.headers.get("Content-Type", "").startswith("application/json"):
            try:
                return response.json()
            except ValueError:
                return response.text
        return response.text

    async def request(
        self,
        method: str,
        url: str,
        *,
        path: Optional[Mapping[str, Any]] = None,
        query: Optional[Mapping[str, Any]] = None,
        body: Any = None,
        files: Optional[Mapping[str, Any]] = None,
        data: Optional[Mapping[str, Any]] = None,
    ) -> dict[str, Any]:
        """Execute one exchange and return the raw result mapping."""
        target = self._expand_path(url, path)
        headers: Dict[str, str] = {}
        if files is None and data is None and self._content_type:
            headers["Content-Type"] = self._content_type

        request = self._client.build_request(
            method,
            target,
            params=self._prepare_query(query),
            json=body if files is None and data is None else None,
            files=files,
            data=data,
            headers=headers,
        )
        logger.debug("Listmonk request %s %s", method, request.url)
        try:
            response = await self._client.send(request)
        except httpx.HTTPError as exc:
            logger.warning("Listmonk request %s %s failed: %s", method, request.url, exc)
            raise ListmonkError(
                f"Request to {request.url} failed: {exc}", original_error=exc
            ) from exc

        payload = self._decode(response)
        if response.is_success:
            return {"data": payload, "request": request, "response": response}

        logger.warning(
            "Listmonk request %s %s returned HTTP %s", method, request.url, response.status_code
        )
        return {"error": payload, "request": request, "response": response}
