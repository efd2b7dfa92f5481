"""Connection configuration for the cloud API.

This module centralizes creation of the HTTP client used by the catalog
adapter and applies small but important normalization rules (such as
sanitizing the base URL) to avoid malformed API URLs.

Configuration is read from the JSON file written by the platform login
flow, `<config dir>/<environment>.json`, and can be overridden with
environment variables:

- `CLOUDLINK_CONFIG_DIR`: directory holding the connection files
- `CLOUDLINK_URL`: base URL of the cloud API
- `CLOUDLINK_TOKEN`: bearer token
- `CLOUDLINK_TIMEOUT`: request timeout in seconds (default 30)
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

import httpx

from cloudlink.core.adapters.cloud import CloudCatalogAdapter
from cloudlink.core.errors import AuthError

DEFAULT_ENVIRONMENT = "config"
_CONFIG_DIR_ENV = "CLOUDLINK_CONFIG_DIR"
_URL_ENV = "CLOUDLINK_URL"
_TOKEN_ENV = "CLOUDLINK_TOKEN"
_TIMEOUT_ENV = "CLOUDLINK_TIMEOUT"
_DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class ConnectionConfig:
    """Resolved cloud connection settings."""

    url: str
    token: str
    timeout: float = _DEFAULT_TIMEOUT_SECONDS


def config_dir() -> Path:
    """Return the directory holding saved connection files."""
    override = os.getenv(_CONFIG_DIR_ENV)
    if override:
        return Path(override)
    xdg = os.getenv("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / "fermyon"


def _login_hint(environment: str | None) -> str:
    cmd = "spin cloud login"
    if environment and environment != DEFAULT_ENVIRONMENT:
        cmd = f"{cmd} --environment-name {environment}"
    return f"Run `{cmd}` to log in."


def _sanitize_url(url: str | None) -> str | None:
    """
    Normalize the API base URL.

    - Removes query strings
    - Removes trailing slashes
    """
    if not url:
        return url
    url = url.split("?", 1)[0]
    return url.rstrip("/")


def _timeout_seconds() -> float:
    """Return request timeout, honoring env override."""
    raw = os.getenv(_TIMEOUT_ENV)
    if raw is None:
        return _DEFAULT_TIMEOUT_SECONDS
    try:
        value = float(raw)
    except ValueError:
        return _DEFAULT_TIMEOUT_SECONDS
    return value if value > 0 else _DEFAULT_TIMEOUT_SECONDS


def _read_saved_config(environment: str) -> dict:
    path = config_dir() / f"{environment}.json"
    if not path.exists():
        return {}
    try:
        payload = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as exc:
        raise AuthError(
            f"Could not read connection config {path}: {exc}. {_login_hint(environment)}"
        ) from exc
    return payload if isinstance(payload, dict) else {}


def load_config(environment: str | None = None) -> ConnectionConfig:
    """
    Resolve connection settings for an environment.

    Environment variables take precedence over the saved login file.

    Raises:
        AuthError: If no URL or token can be found.
    """
    env_name = environment or DEFAULT_ENVIRONMENT
    saved = _read_saved_config(env_name)
    token_info = saved.get("token_info") or {}

    url = _sanitize_url(os.getenv(_URL_ENV) or saved.get("url"))
    token = os.getenv(_TOKEN_ENV) or token_info.get("token")
    if not url or not token:
        raise AuthError(f"Not logged in. {_login_hint(environment)}")
    return ConnectionConfig(url=url, token=token, timeout=_timeout_seconds())


def get_adapter(environment: str | None = None) -> CloudCatalogAdapter:
    """Create a catalog adapter for the configured cloud environment."""
    cfg = load_config(environment)
    client = httpx.Client(
        base_url=cfg.url,
        headers={"Authorization": f"Bearer {cfg.token}"},
        timeout=cfg.timeout,
        follow_redirects=True,
    )
    return CloudCatalogAdapter(client)
