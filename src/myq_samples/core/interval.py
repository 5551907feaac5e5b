"""Interval throttling based on the embedded Uptime counter.

Converts user-friendly duration selectors into timedeltas and decides which
records arrive too soon after the last admitted one.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from datetime import timedelta

_DURATION_PART_RE = re.compile(r"(?P<num>\d+(?:\.\d+)?)(?P<unit>ms|h|m|s)")
_UNIT_SECONDS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}

UPTIME_LABEL = b"Uptime"
# Label at the start of a line (after an optional table border) followed by a column break.
_UPTIME_RE = re.compile(rb"^\|?[ ]*" + re.escape(UPTIME_LABEL) + rb"(?=[\t |])", re.MULTILINE)
_BORDER_CHARS = b"| \t\r"

# Throttling below this resolution is treated as "not requested".
MIN_INTERVAL = timedelta(seconds=1)


def _interval_from_seconds(seconds: float) -> timedelta:
    # rejects nan, inf and anything past timedelta.max
    try:
        finite = math.isfinite(seconds)
        if finite and seconds >= 0:
            return timedelta(seconds=seconds)
    except OverflowError as exc:
        raise ValueError("interval is too large") from exc
    if not finite:
        raise ValueError("interval must be a finite duration")
    raise ValueError("interval must be >= 0")


def parse_interval(value: str | float | int | timedelta | None) -> timedelta:
    """Parse an interval: timedelta, seconds, or a duration like "1m30s"."""
    if value is None:
        return timedelta(0)
    if isinstance(value, timedelta):
        return value
    if isinstance(value, (int, float)):
        return _interval_from_seconds(value)

    s = value.strip().lower()
    if not s:
        return timedelta(0)
    try:
        seconds = float(s)
    except ValueError:
        pass
    else:
        return _interval_from_seconds(seconds)

    pos = 0
    total = 0.0
    for m in _DURATION_PART_RE.finditer(s):
        if m.start() != pos:
            break
        total += float(m.group("num")) * _UNIT_SECONDS[m.group("unit")]
        pos = m.end()
    if pos == 0 or pos != len(s):
        raise ValueError(f"invalid interval '{value}' (e.g., 5s, 1m30s, 250ms, 2h)")
    return _interval_from_seconds(total)


def extract_uptime(preamble: bytes) -> float | None:
    """Return the Uptime value (seconds) found in a record preamble, if any."""
    m = _UPTIME_RE.search(preamble)
    if m is None:
        return None
    nl = preamble.find(b"\n", m.end())
    raw = preamble[m.end() : nl if nl >= 0 else len(preamble)]
    try:
        return float(raw.strip(_BORDER_CHARS))
    except ValueError:
        return None


@dataclass(slots=True)
class IntervalFilter:
    """Drop records whose uptime delta from the last admitted one is too small.

    Fail-open: a record without a readable uptime, or whose uptime went
    backwards, is always admitted.
    """

    interval: timedelta = timedelta(0)
    baseline: float | None = field(default=None, init=False)

    @property
    def enabled(self) -> bool:
        return self.interval >= MIN_INTERVAL

    def skippable(self, preamble: bytes) -> bool:
        """Return True if the record should be discarded."""
        if not self.enabled:
            return False

        current = extract_uptime(preamble)
        if current is None:
            return False

        if self.baseline is not None:
            delta = current - self.baseline
            if 0 <= delta < self.interval.total_seconds():
                return True

        self.baseline = current
        return False
