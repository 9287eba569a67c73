# ── src/blob_logger/blob_store.py ─────────────────────────────────────
"""
Azure Blob Storage adapter for LogStore.

Layout:
- one container = the namespace new records are placed in
  (provisioned outside this service; we never create it here)
- one blob per record, named by its sort key  →  "<base>_<yyyyMMddHHmmssSS>"
- display name / creation stamp kept as blob metadata
- body stored as UTF-8 text/plain

Credentials follow the app's usual order: connection string if configured,
otherwise DefaultAzureCredential (Managed Identity / Azure CLI / …).
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, List, Optional

from azure.core.exceptions import AzureError, ResourceNotFoundError
from azure.identity import DefaultAzureCredential
from azure.storage.blob import BlobServiceClient, ContainerClient, ContentSettings

from .config import LoggerConfig
from .errors import NamespaceNotFound, PersistenceFailure
from .models import LogRecord
from .naming import RecordNamer, in_family, resolve_tz, sort_prefix
from .store import DEFAULT_RECENT_LIMIT, LogStore, newest_first

_logger = logging.getLogger(__name__)

_CONTENT_TYPE = "text/plain; charset=utf-8"
_META_DISPLAY = "display_name"
_META_CREATED = "created_at"


def _content_settings() -> ContentSettings:
    return ContentSettings(content_type=_CONTENT_TYPE)


def _parse_created(props: Any) -> Optional[datetime]:
    raw = (props.metadata or {}).get(_META_CREATED)
    if raw:
        try:
            return datetime.fromisoformat(raw)
        except ValueError:
            pass
    return getattr(props, "creation_time", None)


class BlobLogStore(LogStore):
    def __init__(self, container: ContainerClient,
                 namer: Optional[RecordNamer] = None, enabled: bool = True):
        super().__init__(namer, enabled)
        self._container = container

    @classmethod
    def from_config(cls, config: LoggerConfig) -> "BlobLogStore":
        if config.connection_string:
            svc = BlobServiceClient.from_connection_string(config.connection_string)
        elif config.account_url:
            svc = BlobServiceClient(account_url=config.account_url,
                                    credential=DefaultAzureCredential())
        else:
            raise ValueError(
                "Blob storage is not configured. "
                "Set LOG_STORAGE_CONNECTION_STRING or LOG_STORAGE_ACCOUNT / LOG_STORAGE_URL."
            )
        return cls(
            svc.get_container_client(config.container),
            namer=RecordNamer(tz=resolve_tz(config.timezone)),
            enabled=config.enabled,
        )

    @property
    def namespace(self) -> str:
        return self._container.container_name

    # ── helpers ──────────────────────────────────────────────────────
    def _to_record(self, props: Any, body: str = "") -> LogRecord:
        meta = props.metadata or {}
        return LogRecord(
            id=props.name,
            display_name=meta.get(_META_DISPLAY, props.name),
            sort_key=props.name,
            body=body,
            created_at=_parse_created(props),
            modified_at=getattr(props, "last_modified", None),
            size=getattr(props, "size", None),
        )

    def _list(self, name_prefix: str) -> List[Any]:
        # the server-side prefix also matches longer families (log_error_…)
        blobs = self._container.list_blobs(
            name_starts_with=sort_prefix(name_prefix),
            include=["metadata"],
        )
        return [b for b in blobs if in_family(b.name, name_prefix)]

    def _read_body(self, name: str) -> str:
        return self._container.download_blob(name).readall().decode("utf-8")

    # ── LogStore ─────────────────────────────────────────────────────
    def fetch_latest(self, name_prefix: str) -> Optional[LogRecord]:
        try:
            blobs = self._list(name_prefix)
            if not blobs:
                return None
            latest = max(blobs, key=lambda b: b.name)
            body = self._read_body(latest.name)
        except ResourceNotFoundError:
            # container gone, or the blob vanished between list and read
            return None
        except AzureError as exc:
            _logger.warning("fetch_latest(%s) failed: %s", name_prefix, exc)
            raise PersistenceFailure("fetch_latest", str(exc)) from exc
        self.namer.observe(latest.name)
        return self._to_record(latest, body)

    def fetch_recent(self, name_prefix: str,
                     limit: int = DEFAULT_RECENT_LIMIT) -> List[LogRecord]:
        if limit <= 0:
            return []
        try:
            blobs = self._list(name_prefix)
        except ResourceNotFoundError:
            return []
        except AzureError as exc:
            _logger.warning("fetch_recent(%s) failed: %s", name_prefix, exc)
            raise PersistenceFailure("fetch_recent", str(exc)) from exc
        return newest_first([self._to_record(b) for b in blobs])[:limit]

    def create(self, base_name: str) -> LogRecord:
        try:
            if not self._container.exists():
                raise NamespaceNotFound(self.namespace)
        except AzureError as exc:
            _logger.warning("Container lookup for %s failed: %s", self.namespace, exc)
            raise PersistenceFailure("create", str(exc)) from exc

        display, key, created = self.namer.names(base_name)
        metadata = {_META_DISPLAY: display, _META_CREATED: created.isoformat()}
        try:
            self._container.upload_blob(
                name=key,
                data=b"",
                overwrite=False,
                metadata=metadata,
                content_settings=_content_settings(),
            )
        except ResourceNotFoundError as exc:
            raise NamespaceNotFound(self.namespace) from exc
        except AzureError as exc:
            _logger.warning("create(%s) failed: %s", key, exc)
            raise PersistenceFailure("create", str(exc)) from exc

        _logger.info("Created log record %s (%s)", key, display)
        return LogRecord(id=key, display_name=display, sort_key=key,
                         created_at=created, modified_at=created, size=0)

    def get(self, record_id: str) -> Optional[LogRecord]:
        blob = self._container.get_blob_client(record_id)
        try:
            props = blob.get_blob_properties()
            body = blob.download_blob().readall().decode("utf-8")
        except ResourceNotFoundError:
            return None
        except AzureError as exc:
            _logger.warning("get(%s) failed: %s", record_id, exc)
            raise PersistenceFailure("get", str(exc)) from exc
        return self._to_record(props, body)

    def _write(self, record: LogRecord) -> LogRecord:
        metadata = {_META_DISPLAY: record.display_name}
        if record.created_at:
            metadata[_META_CREATED] = record.created_at.isoformat()
        try:
            self._container.upload_blob(
                name=record.id,
                data=record.body.encode("utf-8"),
                overwrite=True,
                metadata=metadata,
                content_settings=_content_settings(),
            )
        except AzureError as exc:
            _logger.warning("update(%s) failed: %s", record.id, exc)
            raise PersistenceFailure("update", str(exc)) from exc
        record.size = record.body_length
        return record


__all__ = ["BlobLogStore"]
