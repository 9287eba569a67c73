# ── src/blob_logger/service.py ────────────────────────────────────────
"""
LoggerService – buffer + rotation + store, wired together.

One instance per unit of work (an HTTP request, a job run, …). No locking:
two instances racing through `flush()` against the same log family can
both rotate; the last write wins.

flush() in short
────────────────
1. latest record for `base_name`, or a freshly created one
2. pending = buffer.drain()
3. rotation decision → on ROTATE create another fresh record
4. body = pending (+ old body on APPEND) → store.update
5. any failure in 1-4 → create + body = pending + update, once;
   a second failure propagates
6. buffer cleared no matter what

`last_record` holds whatever step 4 or 5 wrote (None if both failed).
"""

from __future__ import annotations

import enum
import logging
from datetime import tzinfo
from typing import List, Optional

from .buffer import MessageBuffer
from .config import DEFAULT_BASE_NAME, MAX_LOG_LENGTH, LoggerConfig
from .models import ErrorContext, LogRecord
from .naming import Clock, resolve_tz
from .rotation import Decision, RotationPolicy
from .store import DEFAULT_RECENT_LIMIT, LogStore

_logger = logging.getLogger(__name__)


class State(str, enum.Enum):
    IDLE = "idle"
    ACCUMULATING = "accumulating"
    FLUSHING = "flushing"


class LoggerService:
    def __init__(
        self,
        store: LogStore,
        base_name: str = DEFAULT_BASE_NAME,
        max_length: int = MAX_LOG_LENGTH,
        tz: Optional[tzinfo] = None,
        clock: Optional[Clock] = None,
    ):
        self._store = store
        self.base_name = base_name
        self._policy = RotationPolicy(max_length)
        self._buffer = MessageBuffer(tz=tz or store.namer.tz, clock=clock)
        self._flushing = False
        self.last_record: Optional[LogRecord] = None

    @classmethod
    def from_config(cls, store: LogStore, config: LoggerConfig,
                    clock: Optional[Clock] = None) -> "LoggerService":
        return cls(
            store,
            base_name=config.base_name,
            max_length=config.max_length,
            tz=resolve_tz(config.timezone),
            clock=clock,
        )

    # ── state ────────────────────────────────────────────────────────
    @property
    def state(self) -> State:
        if self._flushing:
            return State.FLUSHING
        return State.IDLE if self._buffer.is_empty else State.ACCUMULATING

    @property
    def buffer(self) -> MessageBuffer:
        return self._buffer

    @property
    def store(self) -> LogStore:
        return self._store

    @property
    def max_length(self) -> int:
        return self._policy.max_length

    def set_base_name(self, base_name: str) -> "LoggerService":
        if not base_name:
            raise ValueError("base_name must be non-empty")
        self.base_name = base_name
        return self

    # ── buffering ────────────────────────────────────────────────────
    def append(self, text: str) -> "LoggerService":
        self._buffer.append(text)
        return self

    def append_error(self, ctx: ErrorContext) -> "LoggerService":
        self._buffer.append_error(ctx)
        return self

    def append_exception(self, label: str, exc: BaseException) -> "LoggerService":
        return self.append_error(ErrorContext.from_exception(label, exc))

    def append_separator(self) -> "LoggerService":
        self._buffer.append_separator()
        return self

    def append_section(self) -> "LoggerService":
        self._buffer.append_section()
        return self

    # ── persistence ──────────────────────────────────────────────────
    def _write_primary(self, pending: str) -> LogRecord:
        record = self._store.fetch_latest(self.base_name)
        if record is None:
            record = self._store.create(self.base_name)

        decision = self._policy.decide(record.body_length, len(pending))
        if decision is Decision.ROTATE:
            _logger.info(
                "Rotating %s: %d + %d chars exceeds %d",
                record.id, record.body_length, len(pending), self.max_length,
            )
            existing = ""
            record = self._store.create(self.base_name)
        else:
            existing = record.body

        record.body = self._policy.merge(decision, existing, pending)
        return self._store.update(record)

    def _write_fallback(self, pending: str) -> LogRecord:
        record = self._store.create(self.base_name)
        record.body = pending
        return self._store.update(record)

    def flush(self) -> "LoggerService":
        pending = self._buffer.drain()
        self._flushing = True
        self.last_record = None
        try:
            try:
                self.last_record = self._write_primary(pending)
            except Exception as exc:  # noqa: BLE001
                _logger.warning(
                    "Log flush for '%s' failed (%s: %s) – retrying on a new record",
                    self.base_name, exc.__class__.__name__, exc,
                )
                try:
                    self.last_record = self._write_fallback(pending)
                except Exception:
                    _logger.exception("Log flush fallback for '%s' failed", self.base_name)
                    raise
        finally:
            # buffered messages count as delivered even when both attempts failed
            self._buffer.clear()
            self._flushing = False
        return self

    # ── read-only queries ────────────────────────────────────────────
    def current_log(self) -> Optional[LogRecord]:
        return self._store.fetch_latest(self.base_name)

    def log_list(self, limit: int = DEFAULT_RECENT_LIMIT) -> List[LogRecord]:
        return self._store.fetch_recent(self.base_name, min(limit, DEFAULT_RECENT_LIMIT))


__all__ = ["LoggerService", "State"]
