# ── src/blob_logger/errors.py ─────────────────────────────────────────
"""Failure taxonomy shared by every LogStore adapter and the service."""


class LogStoreError(Exception):
    """Base class for anything the persistence backend reports."""


class NamespaceNotFound(LogStoreError):
    """The container (folder) new log records are placed in does not exist."""

    def __init__(self, namespace: str):
        super().__init__(f"Log namespace '{namespace}' not found")
        self.namespace = namespace


class PersistenceFailure(LogStoreError):
    """Any other backend error during fetch / create / update.

    The original backend exception is kept as ``__cause__``.
    """

    def __init__(self, operation: str, detail: str = ""):
        msg = f"Log store {operation} failed"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)
        self.operation = operation


__all__ = ["LogStoreError", "NamespaceNotFound", "PersistenceFailure"]
