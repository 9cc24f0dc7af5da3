# backend/citizen_feedback/api/endpoints/dashboard.py
"""
Dashboard views. Each route fetches a fresh snapshot of the feedback
collection and runs the aggregation pipeline over it; nothing is cached.
"""
from dataclasses import dataclass
from datetime import date
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from citizen_feedback.analytics.config import AnalyticsConfig
from citizen_feedback.analytics.filters import FeedbackFilter
from citizen_feedback.analytics.pipeline import PipelineParams, build_view
from citizen_feedback.analytics.sentiment import classify_sentiment
from citizen_feedback.api import deps
from citizen_feedback.core.config import settings
from citizen_feedback.crud import feedback as feedback_crud
from citizen_feedback.models.feedback import FeedbackStatus
from citizen_feedback.schemas.analytics import (
    AnalyticsView,
    CorrectiveMeasuresView,
    DepartmentStat,
    FeedbackWithSentiment,
    OverviewView,
    Sentiment,
    SentimentView,
    StationRankings,
)


def no_store(response: Response):
    response.headers["Cache-Control"] = "no-store"


router = APIRouter(
    prefix="/api/dashboard",
    tags=["Dashboard"],
    dependencies=[Depends(deps.get_current_admin), Depends(no_store)],
)


@dataclass(frozen=True)
class DashboardQuery:
    filters: FeedbackFilter
    tz: ZoneInfo
    config: AnalyticsConfig

    def params(self, include_station_catalog: bool = False) -> PipelineParams:
        return PipelineParams(
            tz=self.tz,
            config=self.config,
            filters=self.filters,
            include_station_catalog=include_station_catalog,
        )


def _resolve_timezone(name: Optional[str]) -> ZoneInfo:
    name = (name or settings.DASHBOARD_TIMEZONE).strip()
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise HTTPException(status_code=400, detail=f"Unknown timezone: {name}")


def dashboard_query(
    start_date: Optional[date] = Query(None, description="YYYY-MM-DD, inclusive"),
    end_date: Optional[date] = Query(None, description="YYYY-MM-DD, inclusive"),
    station: Optional[str] = Query(None),
    sentiment: Optional[Sentiment] = Query(None),
    status: Optional[FeedbackStatus] = Query(None),
    tz: Optional[str] = Query(None, description="IANA timezone of the viewer"),
) -> DashboardQuery:
    try:
        filters = FeedbackFilter(
            start_date=start_date,
            end_date=end_date,
            station=(station or "").strip() or None,
            sentiment=sentiment,
            status=status,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return DashboardQuery(
        filters=filters,
        tz=_resolve_timezone(tz),
        config=AnalyticsConfig.from_settings(settings),
    )


async def _view(query: DashboardQuery, include_station_catalog: bool = False) -> AnalyticsView:
    records = await feedback_crud.get_all_feedback()
    return build_view(records, query.params(include_station_catalog))


@router.get("", response_model=AnalyticsView)
async def full_view(query: DashboardQuery = Depends(dashboard_query)):
    """Every view at once, for a single-request dashboard refresh."""
    return await _view(query)


@router.get("/overview", response_model=OverviewView)
async def overview(query: DashboardQuery = Depends(dashboard_query)):
    view = await _view(query)
    return OverviewView(summary=view.summary, daily_trend=view.daily_trend, monthly_trend=view.monthly_trend)


@router.get("/departments", response_model=List[DepartmentStat])
async def departments(query: DashboardQuery = Depends(dashboard_query)):
    return (await _view(query)).departments


@router.get("/stations", response_model=StationRankings)
async def stations(query: DashboardQuery = Depends(dashboard_query)):
    # zero-filled so every catalogued station shows up on the chart
    return (await _view(query, include_station_catalog=True)).stations


@router.get("/sentiment", response_model=SentimentView)
async def sentiment(query: DashboardQuery = Depends(dashboard_query)):
    return (await _view(query)).sentiment


@router.get("/corrective-measures", response_model=CorrectiveMeasuresView)
async def corrective_measures(query: DashboardQuery = Depends(dashboard_query)):
    return (await _view(query)).corrective_measures


@router.get("/feedback", response_model=List[FeedbackWithSentiment])
async def filtered_feedback(query: DashboardQuery = Depends(dashboard_query)):
    """
    The filtered snapshot itself, newest first, with the derived sentiment bucket.
    """
    records = await feedback_crud.get_all_feedback()
    selected = query.filters.apply(records, query.tz, query.config)
    return [
        FeedbackWithSentiment(
            **record.model_dump(),
            sentiment=classify_sentiment(record.overall_rating, query.config),
        )
        for record in selected
    ]
