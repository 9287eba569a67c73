# ── src/blob_logger/naming.py ─────────────────────────────────────────
"""
Timestamp formats and record naming.

Two stamps are produced for every new record:

* display name → ``"<base name with '_' as spaces> yyyy-MM-dd HH:mm:ss:SSSS Z"``
  in the configured local zone (human-readable, not unique).
* sort key     → ``"<base name>_yyyyMMddHHmmssSS"`` in UTC, where ``SS`` is
  hundredths of a second. Fixed width, so plain string order == creation order.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Callable, Dict, Optional, Tuple

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

_logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

_KEY_STEP = timedelta(milliseconds=10)   # resolution of the sort-key stamp
WORD_SEPARATOR = "_"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def resolve_tz(name: Optional[str]) -> tzinfo:
    """IANA name → tzinfo; empty / unknown names fall back to the host zone."""
    if name:
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            _logger.warning("tzdata '%s' missing – falling back to host zone", name)
    return datetime.now().astimezone().tzinfo


# ── stamps ───────────────────────────────────────────────────────────
def local_stamp(moment: datetime, tz: tzinfo) -> str:
    """``yyyy-MM-dd HH:mm:ss:SSSS Z`` (milliseconds zero-padded to 4 digits)."""
    local = moment.astimezone(tz)
    millis = local.microsecond // 1000
    return f"{local:%Y-%m-%d %H:%M:%S}:{millis:04d} {local:%z}"


def utc_stamp(moment: datetime) -> str:
    """``yyyyMMddHHmmssSS`` in UTC (SS = hundredths of a second)."""
    utc = moment.astimezone(timezone.utc)
    return f"{utc:%Y%m%d%H%M%S}{utc.microsecond // 10000:02d}"


def display_base(base_name: str) -> str:
    return base_name.replace(WORD_SEPARATOR, " ")


def sort_prefix(base_name: str) -> str:
    """Blob-name prefix shared by every record of one log family."""
    return f"{base_name}_"


def in_family(sort_key: str, base_name: str) -> bool:
    """True only for ``<base_name>_<16-digit stamp>``; ``log`` does not own ``log_error_…``."""
    prefix = sort_prefix(base_name)
    if not sort_key.startswith(prefix):
        return False
    stamp = sort_key[len(prefix):]
    return stamp.isdigit() and _stamp_moment(sort_key) is not None


def _stamp_moment(sort_key: str) -> Optional[datetime]:
    """Inverse of the sort-key stamp; None for keys this service did not mint."""
    stamp = sort_key.rpartition("_")[2]
    if len(stamp) != 16 or not stamp.isdigit():
        return None
    try:
        base = datetime.strptime(stamp[:14], "%Y%m%d%H%M%S")
    except ValueError:
        return None
    return base.replace(tzinfo=timezone.utc) + timedelta(milliseconds=10 * int(stamp[14:]))


# ── namer ────────────────────────────────────────────────────────────
class RecordNamer:
    """
    Mints ``(display_name, sort_key, created_at)`` triples.

    Two records created inside the same hundredth of a second (e.g. the
    initial create and an immediate rotation) would share a sort key; the
    later one is moved to one step after the last key issued (or observed)
    for that base name.
    """

    def __init__(self, tz: Optional[tzinfo] = None, clock: Optional[Clock] = None):
        self.tz = tz or resolve_tz(None)
        self._clock = clock or utc_now
        self._last: Dict[str, str] = {}

    def now(self) -> datetime:
        return self._clock()

    def names(self, base_name: str) -> Tuple[str, str, datetime]:
        moment = self._clock()
        last = self._last.get(base_name)
        if last is not None and f"{base_name}_{utc_stamp(moment)}" <= last:
            moment = _stamp_moment(last) + _KEY_STEP
        key = f"{base_name}_{utc_stamp(moment)}"
        self._last[base_name] = key
        display = f"{display_base(base_name)} {local_stamp(moment, self.tz)}"
        return display, key, moment

    def observe(self, sort_key: str) -> None:
        """Remember a key seen in the backend so new keys sort after it."""
        base, sep, _ = sort_key.rpartition("_")
        if not sep or _stamp_moment(sort_key) is None:
            return
        if sort_key > self._last.get(base, ""):
            self._last[base] = sort_key
