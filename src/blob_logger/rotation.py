# ── src/blob_logger/rotation.py ───────────────────────────────────────
"""Size-based rotation: append to the current record or start a new one."""

from __future__ import annotations

import enum

from .config import MAX_LOG_LENGTH


class Decision(str, enum.Enum):
    APPEND = "append"
    ROTATE = "rotate"


def decide(existing_length: int, pending_length: int,
           max_length: int = MAX_LOG_LENGTH) -> Decision:
    """ROTATE when the pending content no longer fits in the remaining room."""
    if max_length - existing_length < pending_length:
        return Decision.ROTATE
    return Decision.APPEND


def merge(decision: Decision, existing_body: str, pending: str) -> str:
    """
    New record body for *decision*.

    ROTATE drops the old body entirely; APPEND puts the pending batch in
    front of it so the persisted log reads newest-first.
    """
    if decision is Decision.ROTATE:
        return pending
    return pending + existing_body


class RotationPolicy:
    def __init__(self, max_length: int = MAX_LOG_LENGTH):
        if max_length <= 0:
            raise ValueError("max_length must be > 0")
        self.max_length = max_length

    def decide(self, existing_length: int, pending_length: int) -> Decision:
        return decide(existing_length, pending_length, self.max_length)

    merge = staticmethod(merge)


__all__ = ["Decision", "decide", "merge", "RotationPolicy"]
