# backend/citizen_feedback/analytics/filters.py

from dataclasses import dataclass
from datetime import date, tzinfo
from typing import List, Optional, Sequence

from citizen_feedback.analytics.config import DEFAULT_CONFIG, AnalyticsConfig
from citizen_feedback.analytics.numbers import local_date
from citizen_feedback.analytics.sentiment import classify_sentiment
from citizen_feedback.models.feedback import FeedbackStatus
from citizen_feedback.schemas.analytics import Sentiment
from citizen_feedback.schemas.feedback import FeedbackRecord


@dataclass(frozen=True)
class FeedbackFilter:
    """
    Narrowing applied to a fetched snapshot before aggregation.
    Dates are inclusive calendar days in the viewer's timezone; a record
    without createdAt never passes a date bound.
    """
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    station: Optional[str] = None
    sentiment: Optional[Sentiment] = None
    status: Optional[FeedbackStatus] = None

    def __post_init__(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")

    @property
    def is_empty(self) -> bool:
        return not any((self.start_date, self.end_date, self.station, self.sentiment, self.status))

    def matches(self, record: FeedbackRecord, tz: tzinfo, config: AnalyticsConfig = DEFAULT_CONFIG) -> bool:
        if self.station and record.police_station != self.station:
            return False
        if self.status and record.status != self.status:
            return False
        if self.sentiment and classify_sentiment(record.overall_rating, config) != self.sentiment:
            return False
        if self.start_date or self.end_date:
            day = local_date(record.created_at, tz)
            if day is None:
                return False
            if self.start_date and day < self.start_date:
                return False
            if self.end_date and day > self.end_date:
                return False
        return True

    def apply(
        self,
        records: Sequence[FeedbackRecord],
        tz: tzinfo,
        config: AnalyticsConfig = DEFAULT_CONFIG,
    ) -> List[FeedbackRecord]:
        if self.is_empty:
            return list(records)
        return [r for r in records if self.matches(r, tz, config)]
