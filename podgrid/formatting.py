"""Text rendering of timestamps and measurement values."""

from __future__ import annotations

import math
from datetime import datetime, tzinfo
from typing import Optional

from dateutil import tz

DEFAULT_TIME_FORMAT = "%x %X"


def resolve_zone(name: Optional[str]) -> tzinfo:
    """Return a tzinfo for ``name``; ``None`` means the machine's local zone."""
    if not name:
        return tz.tzlocal()
    zone = tz.gettz(name)
    if zone is None:
        raise ValueError(f"Unknown timezone '{name}'")
    return zone


def format_timestamp(
    seconds: int,
    time_format: str = DEFAULT_TIME_FORMAT,
    zone: Optional[tzinfo] = None,
) -> str:
    """Render epoch ``seconds``; times outside the datetime range fall back to the bare number."""
    try:
        when = datetime.fromtimestamp(seconds, tz=zone or tz.tzlocal())
    except (OverflowError, OSError, ValueError):
        return str(seconds)
    return when.strftime(time_format)


def format_number(value: Optional[float]) -> str:
    """Render a measurement the way a grid shows it: ``3.0`` -> ``"3"``, ``None`` -> ``""``."""
    if value is None:
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)
