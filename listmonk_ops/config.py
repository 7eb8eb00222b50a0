"""Configuration resolution for the Listmonk client.

Values come from three sources, highest precedence first: explicit
overrides, environment variables, built-in defaults. The environment is read
in ``environment_overrides`` only.
"""

from __future__ import annotations

import os
from types import MappingProxyType
from typing import Any, Mapping, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator

from listmonk_ops.errors import ConfigurationError

DEFAULT_BASE_URL = "http://localhost:9000/api"
DEFAULT_USERNAME = "api-admin"
DEFAULT_TIMEOUT_MS = 30000
DEFAULT_RETRIES = 3

# Preferred name first, legacy name second.
ENV_BASE_URL = ("LISTMONK_API_URL", "LISTMONK_URL")
ENV_USERNAME = ("LISTMONK_USERNAME",)
ENV_TOKEN = ("LISTMONK_API_TOKEN", "LISTMONK_TOKEN")
ENV_TIMEOUT = ("LISTMONK_TIMEOUT",)
ENV_RETRIES = ("LISTMONK_RETRIES",)


class AuthConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    username: str
    token: str


class ListmonkConfig(BaseModel):
    """Resolved, immutable client configuration.

    ``timeout`` is expressed in milliseconds. ``retries`` is carried for
    callers but no retry loop consumes it.
    """

    model_config = ConfigDict(frozen=True)

    base_url: str
    auth: AuthConfig
    timeout: int = DEFAULT_TIMEOUT_MS
    retries: int = DEFAULT_RETRIES
    headers: Mapping[str, str] = Field(default_factory=dict, validate_default=True)

    @field_validator("headers", mode="after")
    @classmethod
    def _freeze_headers(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(value))


def _is_empty(value: Any) -> bool:
    return value is None or value == ""


def _first(*candidates: Any) -> Any:
    for candidate in candidates:
        if not _is_empty(candidate):
            return candidate
    return None


def _read_env(environ: Mapping[str, str], names: tuple[str, ...]) -> Optional[str]:
    return _first(*(environ.get(name) for name in names))


def _read_env_int(environ: Mapping[str, str], names: tuple[str, ...]) -> Optional[int]:
    raw = _read_env(environ, names)
    if raw is None:
        return None
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise ConfigurationError(
            f"{names[0]} must be an integer, got {raw!r}", field=names[0]
        ) from exc


def environment_overrides(environ: Optional[Mapping[str, str]] = None) -> dict[str, Any]:
    """Return the configuration values present in the environment."""
    env = os.environ if environ is None else environ
    return {
        "base_url": _read_env(env, ENV_BASE_URL),
        "auth": {
            "username": _read_env(env, ENV_USERNAME),
            "token": _read_env(env, ENV_TOKEN),
        },
        "timeout": _read_env_int(env, ENV_TIMEOUT),
        "retries": _read_env_int(env, ENV_RETRIES),
        "headers": {},
    }


def resolve_config(
    overrides: Optional[Mapping[str, Any]] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
) -> ListmonkConfig:
    """Merge overrides, environment and defaults into a ``ListmonkConfig``.

    Scalars take the first non-empty value in precedence order. Header maps
    are merged key by key with overrides winning.
    """
    overrides = dict(overrides or {})
    override_auth = overrides.get("auth") or {}
    env = environment_overrides(environ)

    return ListmonkConfig(
        base_url=_first(overrides.get("base_url"), env["base_url"], DEFAULT_BASE_URL),
        auth=AuthConfig(
            username=_first(
                override_auth.get("username"), env["auth"]["username"], DEFAULT_USERNAME
            ),
            token=_first(override_auth.get("token"), env["auth"]["token"]) or "",
        ),
        timeout=_first(overrides.get("timeout"), env["timeout"], DEFAULT_TIMEOUT_MS),
        retries=_first(overrides.get("retries"), env["retries"], DEFAULT_RETRIES),
        headers={**env["headers"], **(overrides.get("headers") or {})},
    )


def validate_config(config: ListmonkConfig) -> None:
    """Raise ``ConfigurationError`` for the first unusable field."""
    if not config.base_url:
        raise ConfigurationError(
            "base_url is required in Listmonk configuration", field="base_url"
        )
    if not config.auth.username:
        raise ConfigurationError(
            "auth.username is required in Listmonk configuration", field="auth.username"
        )
    if not config.auth.token:
        raise ConfigurationError(
            "auth.token is required in Listmonk configuration. "
            "Set LISTMONK_API_TOKEN environment variable or pass it in config.",
            field="auth.token",
        )

    try:
        url = httpx.URL(config.base_url)
    except httpx.InvalidURL as exc:
        raise ConfigurationError(f"Invalid base_url: {config.base_url}", field="base_url") from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise ConfigurationError(f"Invalid base_url: {config.base_url}", field="base_url")


def config_to_headers(config: ListmonkConfig) -> dict[str, str]:
    """Derive request headers; custom headers override the generated ones."""
    return {
        "Content-Type": "application/json",
        "Authorization": f"token {config.auth.username}:{config.auth.token}",
        **config.headers,
    }
