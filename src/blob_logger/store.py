# ── src/blob_logger/store.py ──────────────────────────────────────────
"""
LogStore – the interface the service persists through – and the
dict-backed adapter used for local runs and tests.

Contract (every adapter):
- fetch_latest(prefix)        → highest sort key for the family, or None
- fetch_recent(prefix, limit) → metadata, newest first, ≤ limit
- create(base_name)           → new empty record; NamespaceNotFound if the
                                namespace is missing (nothing is created)
- update(record)              → persist record.body; a no-op that still
                                returns normally while `enabled` is False
"""

from __future__ import annotations

import abc
import copy
import logging
from collections import defaultdict, deque
from typing import Deque, Dict, List, Optional

from .errors import NamespaceNotFound, PersistenceFailure
from .models import LogRecord
from .naming import RecordNamer, in_family

DEFAULT_RECENT_LIMIT = 10

_logger = logging.getLogger(__name__)


class LogStore(abc.ABC):
    def __init__(self, namer: Optional[RecordNamer] = None, enabled: bool = True):
        self.namer = namer or RecordNamer()
        self.enabled = enabled

    @abc.abstractmethod
    def fetch_latest(self, name_prefix: str) -> Optional[LogRecord]:
        ...

    @abc.abstractmethod
    def fetch_recent(self, name_prefix: str,
                     limit: int = DEFAULT_RECENT_LIMIT) -> List[LogRecord]:
        ...

    @abc.abstractmethod
    def create(self, base_name: str) -> LogRecord:
        ...

    @abc.abstractmethod
    def get(self, record_id: str) -> Optional[LogRecord]:
        """Single record (with body) by id, or None."""

    @abc.abstractmethod
    def _write(self, record: LogRecord) -> LogRecord:
        ...

    def update(self, record: LogRecord) -> LogRecord:
        # Flag is re-read on every call so it can be flipped at runtime.
        if not self.enabled:
            _logger.debug("Logging disabled – skipped write of %s", record.id)
            return record
        return self._write(record)


def newest_first(records: List[LogRecord]) -> List[LogRecord]:
    return sorted(
        records,
        key=lambda r: (r.created_at.timestamp() if r.created_at else 0.0, r.sort_key),
        reverse=True,
    )


class InMemoryLogStore(LogStore):
    """Dict-backed store. Records are copied in and out, like a real backend."""

    def __init__(self, namer: Optional[RecordNamer] = None, enabled: bool = True,
                 namespace: str = "memory", namespace_exists: bool = True):
        super().__init__(namer, enabled)
        self.namespace = namespace
        self.namespace_exists = namespace_exists
        self._records: Dict[str, LogRecord] = {}
        self._failures: Dict[str, Deque[Exception]] = defaultdict(deque)

    # ── test hooks ───────────────────────────────────────────────────
    def inject_failure(self, operation: str, exc: Exception, times: int = 1) -> None:
        """Make the next *times* calls of *operation* raise *exc*."""
        for _ in range(times):
            self._failures[operation].append(exc)

    def _maybe_fail(self, operation: str) -> None:
        pending = self._failures.get(operation)
        if pending:
            raise pending.popleft()

    @property
    def records(self) -> List[LogRecord]:
        return [copy.copy(r) for r in sorted(self._records.values(), key=lambda r: r.sort_key)]

    # ── LogStore ─────────────────────────────────────────────────────
    def get(self, record_id: str) -> Optional[LogRecord]:
        rec = self._records.get(record_id)
        return copy.copy(rec) if rec else None

    def _family(self, name_prefix: str) -> List[LogRecord]:
        return [r for r in self._records.values() if in_family(r.sort_key, name_prefix)]

    def fetch_latest(self, name_prefix: str) -> Optional[LogRecord]:
        self._maybe_fail("fetch_latest")
        family = self._family(name_prefix)
        if not family:
            return None
        return copy.copy(max(family, key=lambda r: r.sort_key))

    def fetch_recent(self, name_prefix: str,
                     limit: int = DEFAULT_RECENT_LIMIT) -> List[LogRecord]:
        self._maybe_fail("fetch_recent")
        if limit <= 0:
            return []
        out = []
        for rec in newest_first(self._family(name_prefix))[:limit]:
            meta = copy.copy(rec)
            meta.size, meta.body = rec.body_length, ""
            out.append(meta)
        return out

    def create(self, base_name: str) -> LogRecord:
        self._maybe_fail("create")
        if not self.namespace_exists:
            raise NamespaceNotFound(self.namespace)
        display, key, created = self.namer.names(base_name)
        rec = LogRecord(id=key, display_name=display, sort_key=key,
                        created_at=created, modified_at=created)
        self._records[rec.id] = rec
        return copy.copy(rec)

    def _write(self, record: LogRecord) -> LogRecord:
        self._maybe_fail("update")
        stored = self._records.get(record.id)
        if stored is None:
            raise PersistenceFailure("update", f"record '{record.id}' does not exist")
        stored.body = record.body
        stored.modified_at = self.namer.now()
        record.modified_at = stored.modified_at
        return record


__all__ = ["LogStore", "InMemoryLogStore", "DEFAULT_RECENT_LIMIT"]
