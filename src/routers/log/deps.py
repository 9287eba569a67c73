# ── src/routers/log/deps.py ───────────────────────────────────────────
"""
FastAPI dependencies for the log routes.

The store (and its Azure client) is a lazily created process-wide
singleton; a LoggerService is built fresh for every request so each
request owns its own buffer.
"""
from __future__ import annotations

from typing import Optional

from fastapi import Depends

from blob_logger import LoggerConfig, LoggerService, LogStore, build_service, build_store, load_config

_CONFIG: Optional[LoggerConfig] = None
_STORE: Optional[LogStore] = None


def get_config() -> LoggerConfig:
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = load_config()
    return _CONFIG


def get_store(config: LoggerConfig = Depends(get_config)) -> LogStore:
    global _STORE
    if _STORE is None:
        _STORE = build_store(config)
    return _STORE


def get_logger_service(
    store: LogStore = Depends(get_store),
    config: LoggerConfig = Depends(get_config),
) -> LoggerService:
    return build_service(store, config)
