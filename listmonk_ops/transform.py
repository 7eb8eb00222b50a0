"""Response flattening for Listmonk envelopes.

Several Listmonk endpoints answer ``{"data": {...}}`` which the transport
wraps again into ``{"data": ..., "request": ..., "response": ...}``. Some
answers nest further. ``flatten`` collapses every ``data.data`` level into a
single envelope.
"""

from __future__ import annotations

from typing import Any, Mapping


def flatten(obj: Any) -> Any:
    """Collapse nested ``data.data`` envelopes into one.

    Non-mappings (including lists and ``None``) are returned as-is. The input
    is never mutated. On key conflicts the inner envelope wins, since it is
    the final payload.
    """
    while isinstance(obj, Mapping):
        inner = obj.get("data")
        if not isinstance(inner, Mapping) or "data" not in inner:
            break

        result = dict(obj)
        result["data"] = inner["data"]
        if "message" in inner:
            result["message"] = inner["message"]
        for key, value in inner.items():
            if key not in ("data", "message"):
                result[key] = value
        obj = result
    return obj


def transform_response(response: Any) -> Any:
    """Normalize a raw endpoint result into the canonical envelope."""
    return flatten(response)
