# ── src/blob_logger/config.py ─────────────────────────────────────────
"""
Runtime configuration for the log-persistence service.

Every knob is read from the environment once, by `load_config()`, into a
frozen `LoggerConfig`. Callers pass that object to the store / service
explicitly; nothing here is held in module globals.

Environment (all optional):
- LOG_BASE_NAME:                 log family name (default "log")
- LOG_MAX_LENGTH:                rotation threshold in characters (default 1,000,000)
- LOGGER_ENABLED:                "0" suppresses writes to durable storage (default "1")
- LOG_STORAGE_CONNECTION_STRING: storage connection string (wins over the account)
- LOG_STORAGE_URL:               full blob endpoint, e.g. https://acct.blob.core.windows.net
- LOG_STORAGE_ACCOUNT:           account name; expanded to the blob endpoint
- LOG_CONTAINER:                 container holding the log blobs (default "logs")
- LOG_TIMEZONE:                  IANA zone for human-readable stamps (default: host zone)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Optional

MAX_LOG_LENGTH = 1_000_000
DEFAULT_BASE_NAME = "log"
DEFAULT_CONTAINER = "logs"


# ───────────────────────── env helpers ─────────────────────────

def _env_bool(name: str, default: bool = True) -> bool:
    v = (os.getenv(name) or "").strip().lower()
    if v in ("1", "true", "yes", "on"):
        return True
    if v in ("0", "false", "no", "off"):
        return False
    return default


def _env_str(name: str, default: str = "") -> str:
    return (os.getenv(name) or default).strip()


def _env_int(name: str, default: int) -> int:
    raw = _env_str(name)
    if not raw:
        return default
    try:
        value = int(raw.replace("_", ""))
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{name} must be > 0, got {value}")
    return value


# ───────────────────────── value object ─────────────────────────

@dataclass(frozen=True)
class LoggerConfig:
    base_name: str = DEFAULT_BASE_NAME
    max_length: int = MAX_LOG_LENGTH
    enabled: bool = True
    account_url: Optional[str] = None
    connection_string: Optional[str] = None
    container: str = DEFAULT_CONTAINER
    timezone: Optional[str] = None

    @property
    def uses_blob_storage(self) -> bool:
        return bool(self.connection_string or self.account_url)

    def with_overrides(self, **changes) -> "LoggerConfig":
        return replace(self, **changes)


def _account_url() -> Optional[str]:
    if (url := _env_str("LOG_STORAGE_URL")):
        return url.rstrip("/")
    if (account := _env_str("LOG_STORAGE_ACCOUNT")):
        return f"https://{account}.blob.core.windows.net"
    return None


def load_config() -> LoggerConfig:
    """Build LoggerConfig from environment variables with the defaults above."""
    return LoggerConfig(
        base_name=_env_str("LOG_BASE_NAME", DEFAULT_BASE_NAME) or DEFAULT_BASE_NAME,
        max_length=_env_int("LOG_MAX_LENGTH", MAX_LOG_LENGTH),
        enabled=_env_bool("LOGGER_ENABLED", True),
        account_url=_account_url(),
        connection_string=_env_str("LOG_STORAGE_CONNECTION_STRING") or None,
        container=_env_str("LOG_CONTAINER", DEFAULT_CONTAINER) or DEFAULT_CONTAINER,
        timezone=_env_str("LOG_TIMEZONE") or None,
    )
