"""
blob_logger – buffered, size-rotating log persistence.

Callers append timestamped lines to a LoggerService and flush them into
the newest log record of a family, rotating to a fresh record once the
size threshold would be exceeded.
"""
from .buffer import MessageBuffer
from .config import LoggerConfig, MAX_LOG_LENGTH, load_config
from .errors import LogStoreError, NamespaceNotFound, PersistenceFailure
from .factory import build_service, build_store
from .models import ErrorContext, LogRecord
from .rotation import Decision, RotationPolicy
from .service import LoggerService, State
from .store import InMemoryLogStore, LogStore

__all__ = [
    "MessageBuffer",
    "LoggerConfig",
    "MAX_LOG_LENGTH",
    "load_config",
    "LogStoreError",
    "NamespaceNotFound",
    "PersistenceFailure",
    "build_service",
    "build_store",
    "ErrorContext",
    "LogRecord",
    "Decision",
    "RotationPolicy",
    "LoggerService",
    "State",
    "InMemoryLogStore",
    "LogStore",
]
