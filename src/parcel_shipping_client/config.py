from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

DEFAULT_BASE_URL = "https://api-sandbox.dhl.com/dpi"
DEFAULT_TIMEOUT = 30
DEFAULT_USER_AGENT = "parcel-shipping-client/0.1.0"
DEFAULT_LABEL_PATH = "label.pdf"


class ConfigError(ValueError):
    """Raised when required configuration is missing or invalid."""


@dataclass(frozen=True)
class ShippingAPIConfig:
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT
    verify_ssl: bool = True
    ca_bundle_path: Optional[str] = None
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self) -> None:
        if self.timeout_seconds <= 0:
            raise ConfigError(f"timeout_seconds must be positive, got {self.timeout_seconds}")


@dataclass(frozen=True)
class ClientCredentials:
    client_id: str
    client_secret: str

    def __repr__(self) -> str:
        return f"ClientCredentials(client_id={self.client_id!r}, client_secret='***')"


@dataclass(frozen=True)
class AppConfig:
    credentials: ClientCredentials
    api: ShippingAPIConfig
    label_path: str = DEFAULT_LABEL_PATH


def load_config(
    env_file: Optional[str] = ".env",
    *,
    client_id: Optional[str] = None,
    client_secret: Optional[str] = None,
) -> AppConfig:
    """Load client settings from environment variables (and an optional .env file).

    Explicit ``client_id``/``client_secret`` take precedence over the environment.
    """
    if env_file:
        load_dotenv(dotenv_path=env_file, override=False)

    credentials = ClientCredentials(
        client_id=client_id or _require_env("SHIPPING_CLIENT_ID"),
        client_secret=client_secret or _require_env("SHIPPING_CLIENT_SECRET"),
    )
    api = ShippingAPIConfig(
        base_url=_env_with_default("SHIPPING_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
        timeout_seconds=_env_int("SHIPPING_HTTP_TIMEOUT", DEFAULT_TIMEOUT),
        verify_ssl=_env_bool("SHIPPING_VERIFY_SSL", default=True),
        ca_bundle_path=os.environ.get("SHIPPING_CA_BUNDLE_PATH") or None,
        user_agent=_env_with_default("SHIPPING_USER_AGENT", DEFAULT_USER_AGENT),
    )
    return AppConfig(
        credentials=credentials,
        api=api,
        label_path=_env_with_default("SHIPPING_LABEL_PATH", DEFAULT_LABEL_PATH),
    )


def _require_env(key: str) -> str:
    value = os.environ.get(key)
    if not value:
        raise ConfigError(f"Missing required environment variable: {key}")
    return value


def _env_bool(key: str, default: bool = True) -> bool:
    value = os.environ.get(key)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"0", "false", "no", "off", ""}:
        return False
    if normalized in {"1", "true", "yes", "on"}:
        return True
    return default


def _env_int(key: str, default: int) -> int:
    value = os.environ.get(key)
    if value is None or not value.strip():
        return default
    try:
        parsed = int(value)
    except ValueError as exc:
        raise ConfigError(f"{key} must be an integer, got {value!r}") from exc
    if parsed <= 0:
        raise ConfigError(f"{key} must be positive, got {parsed}")
    return parsed


def _env_with_default(key: str, default: str) -> str:
    value = os.environ.get(key)
    if value is None:
        return default
    stripped = value.strip()
    return stripped or default
