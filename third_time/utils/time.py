"""
Time helpers for durations, deadlines and user-entered clock times.

The state machine never reads the wall clock directly; it asks its Clock.
These helpers convert between the minutes users type, the seconds the
bank is kept in and the datetimes deadlines are expressed as.
"""

import math
import re
from datetime import datetime, timedelta, timezone
from numbers import Real
from typing import Any, Optional

_CLOCK_TIME_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")


def utc_now() -> datetime:
    """Current wall-clock time as a UTC datetime."""
    return datetime.now(timezone.utc)


def is_real_number(value: Any) -> bool:
    """True for finite ints and floats; bools and NaN are rejected."""
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    return math.isfinite(value)


def minutes_to_seconds(minutes: float) -> float:
    """Convert minutes to seconds."""
    return float(minutes) * 60.0


def seconds_between(start: datetime, end: datetime) -> float:
    """Signed number of seconds from start to end."""
    return (end - start).total_seconds()


def deadline_after(start: datetime, seconds: float) -> datetime:
    """Timestamp `seconds` after start."""
    return start + timedelta(seconds=seconds)


def format_duration(seconds: Optional[float]) -> str:
    """
    Format a duration for log output, e.g. 500 -> '8m20s', -120 -> '-2m00s'.

    Args:
        seconds: Duration in seconds, may be negative

    Returns:
        Human-readable duration, or '-' when no duration is known
    """
    if seconds is None:
        return "-"

    sign = "-" if seconds < 0 else ""
    total = int(round(abs(seconds)))
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)

    if hours:
        return f"{sign}{hours}h{minutes:02d}m{secs:02d}s"
    return f"{sign}{minutes}m{secs:02d}s"


def parse_clock_time(value: str, reference: datetime) -> Optional[datetime]:
    """
    Resolve an 'HH:MM' string to the next such time at or after reference.

    A time earlier than the reference time of day rolls over to the next day,
    so '08:00' entered at 23:30 means tomorrow morning.

    Args:
        value: Clock time as typed by the user
        reference: Moment the user was prompted, in the timezone to use

    Returns:
        Resolved datetime, or None when value is not a valid clock time
    """
    match = _CLOCK_TIME_RE.match(value)
    if not match:
        return None

    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        return None

    candidate = reference.replace(hour=hour, minute=minute, second=0, microsecond=0)
    if candidate < reference:
        candidate += timedelta(days=1)
    return candidate
