"""
Numeric helpers shared by the analyzers.

All percentages and hour durations leave the service rounded to one decimal
with round-half-up (Python's round() is banker's rounding, so it is not used).
"""

from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400


def round_half_up(value: float, digits: int = 1) -> float:
    """Round with the half-up convention (2.25 -> 2.3, -2.25 -> -2.3)."""
    if value is None:
        return 0.0
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def round_int(value: float) -> int:
    """Half-up rounding to an integer score."""
    return int(round_half_up(value, 0))


def percentage(part: int, whole: int) -> float:
    """part/whole as a rounded percentage, 0 when whole is 0."""
    if not whole:
        return 0.0
    return round_half_up(part / whole * 100)


def clamp(value: float, low: float = 0, high: float = 100) -> float:
    return max(low, min(high, value))


def mean(values: Iterable[float]) -> float:
    """Arithmetic mean, 0 for an empty sequence."""
    values = list(values)
    if not values:
        return 0.0
    return sum(values) / len(values)


def hours_between(start: Optional[datetime], end: Optional[datetime]) -> Optional[float]:
    """Elapsed hours from start to end, None if either is missing."""
    if start is None or end is None:
        return None
    return (end - start).total_seconds() / SECONDS_PER_HOUR


def days_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / SECONDS_PER_DAY


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
