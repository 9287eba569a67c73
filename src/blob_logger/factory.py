# ── src/blob_logger/factory.py ────────────────────────────────────────
from __future__ import annotations

import logging

from .config import LoggerConfig
from .naming import RecordNamer, resolve_tz
from .service import LoggerService
from .store import InMemoryLogStore, LogStore

_logger = logging.getLogger(__name__)


def build_store(config: LoggerConfig) -> LogStore:
    """Blob storage when an account / connection string is set, else in-memory."""
    if config.uses_blob_storage:
        from .blob_store import BlobLogStore
        return BlobLogStore.from_config(config)

    _logger.warning("Log storage unresolved – falling back to in-memory store")
    return InMemoryLogStore(
        namer=RecordNamer(tz=resolve_tz(config.timezone)),
        enabled=config.enabled,
    )


def build_service(store: LogStore, config: LoggerConfig) -> LoggerService:
    return LoggerService.from_config(store, config)
