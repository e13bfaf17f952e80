from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from remote_protocol.constants import DEFAULT_HOST, MAX_RETRIES, RETRY_DELAY

ENV_PREFIX = "BAS_"

DEFAULT_CONFIG: Dict[str, Any] = {
    "host": DEFAULT_HOST,
    "port": 0,
    "max_retries": MAX_RETRIES,
    "retry_delay": RETRY_DELAY,
    "open_timeout": 10.0,
    "log_level": "INFO",
    "script_name": "",
    "password": "",
    "login": "",
}

CLIENT_CONFIG: Dict[str, Any] = DEFAULT_CONFIG.copy()


class ConfigError(Exception):
    """Raised when configuration values are invalid."""

    pass


@dataclass(frozen=True)
class Options:
    """Credentials sent in the handshake on every new connection."""

    script_name: str
    password: str = ""
    login: str = ""

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]] = None) -> "Options":
        config = config or CLIENT_CONFIG
        return cls(
            script_name=str(config.get("script_name", "")),
            password=str(config.get("password", "")),
            login=str(config.get("login", "")),
        )


def load_config(env_path: str = ".env") -> Dict[str, Any]:
    """Load client configuration from env file/environment variables."""
    if os.path.exists(env_path):
        load_dotenv(env_path)

    for key, default_value in DEFAULT_CONFIG.items():
        env_key = f"{ENV_PREFIX}{key.upper()}"
        value = os.getenv(env_key, default_value)
        CLIENT_CONFIG[key] = _coerce_type(value, type(default_value))

    _validate_config(CLIENT_CONFIG)
    logging.getLogger().setLevel(CLIENT_CONFIG["log_level"])
    return CLIENT_CONFIG


def _coerce_type(value: Any, target_type: type) -> Any:
    if isinstance(value, target_type):
        return value
    try:
        if target_type is bool:
            return str(value).lower() in ("1", "true", "yes", "on")
        return target_type(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Cannot convert {value} to {target_type}") from exc


def _validate_config(config: Dict[str, Any]) -> None:
    if not (0 <= int(config["port"]) <= 65535):
        raise ConfigError("port must be between 0 and 65535")
    if config["max_retries"] < 1:
        raise ConfigError("max_retries must be at least 1")
    if config["retry_delay"] < 0:
        raise ConfigError("retry_delay must not be negative")
    if config["open_timeout"] <= 0:
        raise ConfigError("open_timeout must be positive")


def get(key: str, default: Any = None) -> Any:
    return CLIENT_CONFIG.get(key, default)


__all__ = ["CLIENT_CONFIG", "DEFAULT_CONFIG", "ConfigError", "Options", "get", "load_config"]
