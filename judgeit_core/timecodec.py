"""Clock-time codec.

Time logs carry wall-clock strings ("HH:MM:SS[.mmm]"); durations are integer
milliseconds. Nothing here raises on bad input: a malformed clock string
parses to NaN and every derived value stays NaN, so callers can keep feeding
live, half-entered competition data through the pipeline.
"""
from __future__ import annotations

import logging
import math
import re
from datetime import datetime

logger = logging.getLogger(__name__)

_CLOCK_RE = re.compile(r"^\s*(\d+):(\d+):(\d+)(?:\.(\d+))?\s*$", re.ASCII)

INVALID_DURATION_LABEL = "--:--:---"


def parse_clock_time(value: str | None) -> int | float:
    """Parse "HH:MM:SS[.mmm]" into milliseconds since midnight.

    Only the first three fractional digits are read, as an integer.
    Returns NaN when the string does not have that shape.

    Examples:
        - "00:00:10.500" -> 10500
        - "01:02:03" -> 3723000
        - "garbage" -> nan
    """
    if not isinstance(value, str):
        return math.nan
    match = _CLOCK_RE.match(value)
    if match is None:
        logger.debug(f"Unparseable clock time: {value!r}")
        return math.nan
    hours, minutes, seconds, fraction = match.groups()
    millis = int(fraction[:3]) if fraction else 0
    return ((int(hours) * 60 + int(minutes)) * 60 + int(seconds)) * 1000 + millis


def format_duration(ms: float) -> str:
    """Render milliseconds as "MM:SS:mmm" (minutes are not folded into hours)."""
    if not isinstance(ms, (int, float)) or not math.isfinite(ms):
        return INVALID_DURATION_LABEL
    total = math.floor(ms)
    if total < 0:
        return "-" + format_duration(-total)
    minutes = total // 60_000
    seconds = (total // 1000) % 60
    millis = total % 1000
    return f"{minutes:02d}:{seconds:02d}:{millis:03d}"


def clock_time_of(moment: datetime) -> tuple[str, float]:
    """Clock string and seconds-since-midnight recorded for a judge action."""
    millis = moment.microsecond // 1000
    clock = f"{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}.{millis:03d}"
    seconds = moment.hour * 3600 + moment.minute * 60 + moment.second + millis / 1000
    return clock, seconds


def duration_between(start: str | None, end: str | None) -> int | float:
    # No day rollover: an end before the start gives a negative duration.
    return parse_clock_time(end) - parse_clock_time(start)


def millis_to_seconds(ms: float, precision: int | None = None) -> float | str:
    """Convert milliseconds to seconds.

    precision None returns the float; a non-negative precision returns a string
    with that many decimals; a negative precision returns the floored integer
    as a string.
    """
    seconds = ms / 1000
    if precision is None:
        return seconds
    if precision < 0:
        if not math.isfinite(seconds):
            return str(seconds)
        return str(math.floor(seconds))
    return f"{seconds:.{precision}f}"


def rpm_from_duration(duration_ms: float, revolutions: int) -> float:
    if not math.isfinite(duration_ms) or duration_ms <= 0:
        return math.nan
    return (revolutions / (duration_ms / 1000)) * 60


def is_valid_duration(ms: float) -> bool:
    return isinstance(ms, (int, float)) and math.isfinite(ms) and ms >= 0


def duration_sort_key(ms: float) -> float:
    # Malformed (NaN) and negative durations sink below every real attempt.
    return float(ms) if is_valid_duration(ms) else math.inf


__all__ = [
    "INVALID_DURATION_LABEL",
    "parse_clock_time",
    "clock_time_of",
    "format_duration",
    "duration_between",
    "millis_to_seconds",
    "rpm_from_duration",
    "is_valid_duration",
    "duration_sort_key",
]
