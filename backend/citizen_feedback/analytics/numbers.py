# backend/citizen_feedback/analytics/numbers.py
import math
from datetime import date, datetime, timezone, tzinfo
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional


def coerce_rating(value: Any) -> Optional[float]:
    """
    Numeric rating or None. Accepts ints, floats and numeric strings;
    bools, blanks and NaN/inf are not ratings.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def round1(value: float) -> float:
    """One decimal, half-up (2.25 -> 2.3)."""
    return float(Decimal(repr(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def percent(part: int, whole: int) -> int:
    """Whole-number percentage, half-up; 0 when whole is 0."""
    if not whole:
        return 0
    return int(Decimal(part * 100) / Decimal(whole) + Decimal("0.5"))


def ensure_aware_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Naive datetimes coming out of the store are UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def local_date(dt: Optional[datetime], tz: tzinfo) -> Optional[date]:
    """Calendar day of `dt` as seen by a viewer in `tz`."""
    aware = ensure_aware_utc(dt)
    if aware is None:
        return None
    return aware.astimezone(tz).date()
