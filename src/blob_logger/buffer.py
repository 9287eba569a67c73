# ── src/blob_logger/buffer.py ─────────────────────────────────────────
"""
In-memory message buffer for one flush cycle.

Entries are kept oldest-first. Only the append* methods add to it; the
service's flush is the only caller of `clear()`.
"""

from __future__ import annotations

from datetime import tzinfo
from typing import List, Optional

from .models import ErrorContext
from .naming import Clock, local_stamp, resolve_tz, utc_now

SEPARATOR = "-" * 80
SECTION = "\n\n"
LINE_END = "\n"
NOT_AVAILABLE = "n/a"


class MessageBuffer:
    def __init__(self, tz: Optional[tzinfo] = None, clock: Optional[Clock] = None):
        self._tz = tz or resolve_tz(None)
        self._clock = clock or utc_now
        self._entries: List[str] = []

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def is_empty(self) -> bool:
        return not self._entries

    @property
    def entries(self) -> List[str]:
        return list(self._entries)

    # ── appenders ────────────────────────────────────────────────────
    def append(self, text: str) -> "MessageBuffer":
        stamp = local_stamp(self._clock(), self._tz)
        self._entries.append(f"{stamp} | {text}")
        return self

    def append_error(self, ctx: ErrorContext) -> "MessageBuffer":
        # label, message, location, trace, separator – always all five
        self.append(ctx.label)
        self.append(f"Message: {ctx.message}")
        self.append(f"Line: {ctx.location or NOT_AVAILABLE}")
        self.append(f"Trace: {ctx.trace or NOT_AVAILABLE}")
        self._entries.append(SEPARATOR)
        return self

    def append_separator(self) -> "MessageBuffer":
        self._entries.append(SEPARATOR)
        return self

    def append_section(self) -> "MessageBuffer":
        self._entries.append(SECTION)
        return self

    # ── output ───────────────────────────────────────────────────────
    def drain(self) -> str:
        """Concatenate every entry, each line-terminated. Does not clear."""
        return "".join(entry + LINE_END for entry in self._entries)

    def clear(self) -> None:
        self._entries.clear()
