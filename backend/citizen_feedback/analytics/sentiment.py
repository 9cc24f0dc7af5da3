# backend/citizen_feedback/analytics/sentiment.py
"""
Sentiment buckets derived from numeric ratings (never stored).

With the default ranges: 1-4 negative, 5-6 neutral, 7-10 positive.
Missing, non-numeric or out-of-range ratings all land in the configured
fallback bucket (neutral by default), at every call site.
"""
from datetime import datetime, tzinfo
from typing import Any, Dict, List, Sequence

from citizen_feedback.analytics.catalog import CANONICAL_DEPARTMENTS, MONTH_NAMES
from citizen_feedback.analytics.config import DEFAULT_CONFIG, AnalyticsConfig
from citizen_feedback.analytics.departments import iter_canonical_ratings
from citizen_feedback.analytics.numbers import coerce_rating, local_date, percent
from citizen_feedback.schemas.analytics import (
    DepartmentSentiment,
    MonthlySentimentPoint,
    Sentiment,
    SentimentCounts,
    SentimentDistribution,
    SentimentView,
)
from citizen_feedback.schemas.feedback import FeedbackRecord


def classify_sentiment(rating: Any, config: AnalyticsConfig = DEFAULT_CONFIG) -> Sentiment:
    value = coerce_rating(rating)
    if value is None or value < config.rating_min or value > config.rating_max:
        return config.sentiment_fallback
    if value <= config.negative_max:
        return Sentiment.NEGATIVE
    if value <= config.neutral_max:
        return Sentiment.NEUTRAL
    return Sentiment.POSITIVE


def _empty_counts() -> Dict[Sentiment, int]:
    return {s: 0 for s in Sentiment}


def _as_percentages(counts: Dict[Sentiment, int], total: int) -> SentimentCounts:
    return SentimentCounts(
        positive=percent(counts[Sentiment.POSITIVE], total),
        neutral=percent(counts[Sentiment.NEUTRAL], total),
        negative=percent(counts[Sentiment.NEGATIVE], total),
    )


def sentiment_distribution(
    records: Sequence[FeedbackRecord],
    config: AnalyticsConfig = DEFAULT_CONFIG,
) -> SentimentDistribution:
    counts = _empty_counts()
    for record in records:
        counts[classify_sentiment(record.overall_rating, config)] += 1

    total = len(records)
    return SentimentDistribution(
        total=total,
        counts=SentimentCounts(
            positive=counts[Sentiment.POSITIVE],
            neutral=counts[Sentiment.NEUTRAL],
            negative=counts[Sentiment.NEGATIVE],
        ),
        percentages=_as_percentages(counts, total),
    )


def sentiment_by_department(
    records: Sequence[FeedbackRecord],
    config: AnalyticsConfig = DEFAULT_CONFIG,
) -> List[DepartmentSentiment]:
    """Department ratings bucketed per canonical department, as percentages."""
    per_department = {d: _empty_counts() for d in CANONICAL_DEPARTMENTS}
    for department, rating in iter_canonical_ratings(records, config):
        per_department[department][classify_sentiment(rating, config)] += 1

    result = []
    for department in CANONICAL_DEPARTMENTS:
        counts = per_department[department]
        total = sum(counts.values())
        pct = _as_percentages(counts, total)
        result.append(
            DepartmentSentiment(
                department=department,
                total=total,
                positive=pct.positive,
                neutral=pct.neutral,
                negative=pct.negative,
            )
        )
    return result


def monthly_sentiment_trend(
    records: Sequence[FeedbackRecord],
    now: datetime,
    tz: tzinfo,
    config: AnalyticsConfig = DEFAULT_CONFIG,
) -> List[MonthlySentimentPoint]:
    """Sentiment mix (percentages) per month of the viewer's current year."""
    year = now.astimezone(tz).year
    months = [_empty_counts() for _ in range(12)]

    for record in records:
        day = local_date(record.created_at, tz)
        if day is None or day.year != year:
            continue
        months[day.month - 1][classify_sentiment(record.overall_rating, config)] += 1

    points = []
    for index, counts in enumerate(months):
        total = sum(counts.values())
        pct = _as_percentages(counts, total)
        points.append(
            MonthlySentimentPoint(
                month=MONTH_NAMES[index],
                total=total,
                positive=pct.positive,
                neutral=pct.neutral,
                negative=pct.negative,
            )
        )
    return points


def sentiment_view(
    records: Sequence[FeedbackRecord],
    now: datetime,
    tz: tzinfo,
    config: AnalyticsConfig = DEFAULT_CONFIG,
) -> SentimentView:
    return SentimentView(
        distribution=sentiment_distribution(records, config),
        by_department=sentiment_by_department(records, config),
        monthly_trend=monthly_sentiment_trend(records, now, tz, config),
    )
