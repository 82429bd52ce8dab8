"""Clock and TTL policy helpers.

All instants are integer seconds since the epoch, as carried by the
``iat``/``exp``/``nbf`` claims. Durations may be given as seconds, a
``timedelta`` or a short timespan string such as ``"90s"``, ``"15 min"`` or
``"2 days"``.
"""

from __future__ import annotations

import math
import re
import time
from datetime import timedelta
from typing import Callable, Optional, Union

DurationLike = Union[int, float, str, timedelta]
Clock = Callable[[], float]

_UNITS = {
    "ms": 0.001, "msec": 0.001, "msecs": 0.001, "millisecond": 0.001, "milliseconds": 0.001,
    "s": 1, "sec": 1, "secs": 1, "second": 1, "seconds": 1,
    "m": 60, "min": 60, "mins": 60, "minute": 60, "minutes": 60,
    "h": 3600, "hr": 3600, "hrs": 3600, "hour": 3600, "hours": 3600,
    "d": 86400, "day": 86400, "days": 86400,
    "w": 604800, "week": 604800, "weeks": 604800,
    "y": 31557600, "yr": 31557600, "yrs": 31557600, "year": 31557600, "years": 31557600,
}

_TIMESPAN = re.compile(r"^(?P<value>-?\d*\.?\d+)\s*(?P<unit>[a-z]+)?$", re.IGNORECASE)


def now(clock: Clock = time.time) -> int:
    """Current instant in whole seconds."""
    return int(math.floor(clock()))


def to_seconds(duration: DurationLike) -> int:
    """Convert a duration to whole seconds.

    A string without a unit is read as seconds.

    Raises:
        ValueError: if the duration cannot be interpreted.
    """
    if isinstance(duration, bool):
        raise ValueError(f"Invalid duration: {duration!r}")
    if isinstance(duration, timedelta):
        return int(math.floor(duration.total_seconds()))
    if isinstance(duration, (int, float)):
        return int(math.floor(duration))
    if isinstance(duration, str):
        match = _TIMESPAN.match(duration.strip())
        if not match:
            raise ValueError(f"Invalid timespan: {duration!r}")
        unit = (match.group("unit") or "s").lower()
        if unit not in _UNITS:
            raise ValueError(f"Unknown time unit {unit!r} in {duration!r}")
        return int(math.floor(float(match.group("value")) * _UNITS[unit]))
    raise ValueError(f"Invalid duration: {duration!r}")


def expires_at(issued_at: int, duration: DurationLike) -> int:
    return issued_at + to_seconds(duration)


def retention_elapsed(expires: Optional[int], tolerance: int, current: int) -> bool:
    """True once ``expires`` plus the clock tolerance lies in the past.

    A record without an expiration never elapses. This mirrors the codec,
    which keeps accepting a token until ``exp + leeway``.
    """
    if expires is None:
        return False
    return expires + tolerance <= current


__all__ = [
    "DurationLike",
    "Clock",
    "now",
    "to_seconds",
    "expires_at",
    "retention_elapsed",
]
