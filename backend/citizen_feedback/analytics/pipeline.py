# backend/citizen_feedback/analytics/pipeline.py
"""
One entry point for every dashboard: raw feedback snapshot in, chart-ready
AnalyticsView out.

The pipeline is stateless and does no I/O. Every call recomputes all views
from the snapshot it is given; nothing is cached between calls. It is total
over an empty snapshot: every aggregate degrades to its zero/empty state.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone, tzinfo
from typing import Optional, Sequence

from citizen_feedback.analytics.config import DEFAULT_CONFIG, AnalyticsConfig
from citizen_feedback.analytics.departments import aggregate_departments, corrective_measures
from citizen_feedback.analytics.filters import FeedbackFilter
from citizen_feedback.analytics.sentiment import sentiment_view
from citizen_feedback.analytics.stations import rank_stations
from citizen_feedback.analytics.summary import summarize
from citizen_feedback.analytics.trends import daily_trend, monthly_trend
from citizen_feedback.schemas.analytics import AnalyticsView
from citizen_feedback.schemas.feedback import FeedbackRecord


@dataclass(frozen=True)
class PipelineParams:
    # None means "now" at call time
    now: Optional[datetime] = None
    tz: tzinfo = timezone.utc
    config: AnalyticsConfig = DEFAULT_CONFIG
    filters: FeedbackFilter = field(default_factory=FeedbackFilter)
    include_station_catalog: bool = False

    def resolved_now(self) -> datetime:
        if self.now is None:
            return datetime.now(timezone.utc)
        if self.now.tzinfo is None:
            return self.now.replace(tzinfo=timezone.utc)
        return self.now


def build_view(records: Optional[Sequence[FeedbackRecord]], params: PipelineParams = PipelineParams()) -> AnalyticsView:
    now = params.resolved_now()
    config = params.config
    selected = params.filters.apply(records or [], params.tz, config)

    departments = aggregate_departments(selected, config)

    return AnalyticsView(
        generated_at=now,
        summary=summarize(selected, now, params.tz),
        daily_trend=daily_trend(selected, now, params.tz, config.window_days),
        monthly_trend=monthly_trend(selected, now, params.tz),
        departments=departments,
        stations=rank_stations(selected, config, include_catalog=params.include_station_catalog),
        sentiment=sentiment_view(selected, now, params.tz, config),
        corrective_measures=corrective_measures(departments, config),
    )
