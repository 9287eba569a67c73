# ── src/blob_logger/models.py ─────────────────────────────────────────
from __future__ import annotations

import traceback
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass
class LogRecord:
    """One persisted log blob. Owned by the store; the service only edits `body`."""

    id:           str
    display_name: str
    sort_key:     str
    body:         str = ""
    created_at:   Optional[datetime] = None
    modified_at:  Optional[datetime] = None
    size:         Optional[int] = None   # backend-reported size when body is not loaded

    @property
    def body_length(self) -> int:
        return len(self.body)

    def summary(self) -> Dict[str, Any]:
        """Metadata view used by listings (no body)."""
        return {
            "id":           self.id,
            "display_name": self.display_name,
            "sort_key":     self.sort_key,
            "created_at":   self.created_at.isoformat() if self.created_at else None,
            "modified_at":  self.modified_at.isoformat() if self.modified_at else None,
            "size":         self.size if self.size is not None else self.body_length,
        }


@dataclass(frozen=True)
class ErrorContext:
    """What `append_error` writes: a label plus the error's message, origin and trace."""

    label:    str
    message:  str
    location: Optional[str] = None
    trace:    Optional[str] = None

    @classmethod
    def from_exception(cls, label: str, exc: BaseException) -> "ErrorContext":
        location = None
        tb = traceback.extract_tb(exc.__traceback__) if exc.__traceback__ else []
        if tb:
            frame = tb[-1]
            location = f"{frame.filename}:{frame.lineno}"
        trace = "".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        ).rstrip("\n")
        return cls(
            label=label,
            message=str(exc) or exc.__class__.__name__,
            location=location,
            trace=trace or None,
        )


__all__ = ["LogRecord", "ErrorContext"]
