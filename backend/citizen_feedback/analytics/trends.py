# backend/citizen_feedback/analytics/trends.py

from datetime import date, datetime, timedelta, tzinfo
from typing import Dict, List, Sequence

from citizen_feedback.analytics.catalog import MONTH_NAMES
from citizen_feedback.analytics.numbers import local_date
from citizen_feedback.schemas.analytics import DailyTrendPoint, MonthlyTrendPoint
from citizen_feedback.schemas.feedback import FeedbackRecord


def day_label(day: date) -> str:
    """Short day/month label, e.g. 07/03."""
    return f"{day.day:02d}/{day.month:02d}"


def daily_trend(
    records: Sequence[FeedbackRecord],
    now: datetime,
    tz: tzinfo,
    window_days: int = 10,
) -> List[DailyTrendPoint]:
    """
    Feedback count per calendar day for today and the `window_days` days
    before it (window_days + 1 points, oldest first). Days without feedback
    are present with a zero count; records outside the window or without a
    timestamp are ignored.
    """
    today = now.astimezone(tz).date()
    buckets: Dict[date, int] = {
        today - timedelta(days=offset): 0 for offset in range(window_days, -1, -1)
    }

    for record in records:
        day = local_date(record.created_at, tz)
        if day in buckets:
            buckets[day] += 1

    return [
        DailyTrendPoint(date=day, label=day_label(day), feedback_count=count)
        for day, count in sorted(buckets.items())
    ]


def monthly_trend(records: Sequence[FeedbackRecord], now: datetime, tz: tzinfo) -> List[MonthlyTrendPoint]:
    """Feedback count for each of the 12 months of the viewer's current year."""
    year = now.astimezone(tz).year
    counts = [0] * 12

    for record in records:
        day = local_date(record.created_at, tz)
        if day is not None and day.year == year:
            counts[day.month - 1] += 1

    return [MonthlyTrendPoint(month=MONTH_NAMES[i], feedback_count=counts[i]) for i in range(12)]
