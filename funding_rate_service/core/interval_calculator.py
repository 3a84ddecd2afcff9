"""
Funding interval arithmetic

Pure helpers shared by every interval inference method.
"""

import math
import re
from datetime import datetime, timezone
from typing import Optional, Union

MS_PER_HOUR = 3_600_000
MAX_INTERVAL_HOURS = 24

TimestampLike = Union[int, float, datetime]


def normalize_timestamp_ms(value: Optional[TimestampLike]) -> Optional[int]:
    """
    Convert an epoch value or datetime to epoch milliseconds.

    Bare numbers are classified by magnitude: above 1e16 nanoseconds, above
    1e12 milliseconds, otherwise seconds. Missing values (None or 0) return
    None.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        dt = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
        return int(dt.timestamp() * 1000)

    if isinstance(value, bool) or not value:
        return None

    numeric = float(value)
    if not math.isfinite(numeric):
        return None
    if abs(numeric) > 10**16:
        return int(numeric / 1_000_000)
    if abs(numeric) > 10**12:
        return int(numeric)
    return int(numeric * 1000)


def calculate_funding_interval(
    current: Optional[TimestampLike],
    next_: Optional[TimestampLike]
) -> Optional[int]:
    """
    Whole hours between two settlement instants.

    Args:
        current: Current (or earlier) settlement instant
        next_: Next (or later) settlement instant

    Returns:
        round((next - current) / 1h), or None if either instant is missing.
        Halves round up.
    """
    current_ms = normalize_timestamp_ms(current)
    next_ms = normalize_timestamp_ms(next_)
    if current_ms is None or next_ms is None:
        return None

    return math.floor((next_ms - current_ms) / MS_PER_HOUR + 0.5)


def parse_datetime_string(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp, returning None instead of raising.

    A trailing ``Z`` is accepted; naive values are taken as UTC.
    """
    if not value or not isinstance(value, str):
        return None

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    try:
        dt = datetime.fromisoformat(text)
    except ValueError:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def is_valid_interval(hours: Optional[int]) -> bool:
    """An interval is usable only within (0, 24] hours."""
    return hours is not None and 0 < hours <= MAX_INTERVAL_HOURS


_INTERVAL_LABEL = re.compile(r"^\s*(\d+)\s*h?\s*$", re.IGNORECASE)


def parse_interval_label(value: Optional[Union[str, int]]) -> Optional[int]:
    """
    Hours from an exchange-reported interval such as ``"8h"`` or ``4``.

    Returns None for anything that is not a whole number of hours.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value

    match = _INTERVAL_LABEL.match(str(value))
    if not match:
        return None
    return int(match.group(1))
