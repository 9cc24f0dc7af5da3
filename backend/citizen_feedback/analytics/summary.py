# backend/citizen_feedback/analytics/summary.py

from datetime import datetime, tzinfo
from typing import Sequence

from citizen_feedback.analytics.numbers import coerce_rating, local_date, round1
from citizen_feedback.schemas.analytics import Summary
from citizen_feedback.schemas.feedback import FeedbackRecord


def summarize(records: Sequence[FeedbackRecord], now: datetime, tz: tzinfo) -> Summary:
    today = now.astimezone(tz).date()
    today_count = sum(1 for r in records if local_date(r.created_at, tz) == today)

    ratings = [coerce_rating(r.overall_rating) for r in records]
    ratings = [r for r in ratings if r is not None]
    average = f"{round1(sum(ratings) / len(ratings)):.1f}" if ratings else "0.0"

    return Summary(
        today_feedback=today_count,
        total_feedback=len(records),
        average_rating=average,
    )
