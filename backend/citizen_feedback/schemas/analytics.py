# backend/citizen_feedback/schemas/analytics.py
"""
Derived, never-persisted views produced by the aggregation pipeline.
"""
import datetime as dt
from enum import Enum
from typing import List

from citizen_feedback.schemas.feedback import CamelModel, FeedbackRecord


class Sentiment(str, Enum):
    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    POSITIVE = "positive"


# --- Summary / trends ---

class Summary(CamelModel):
    today_feedback: int = 0
    total_feedback: int = 0
    # one decimal, formatted; "0.0" when nothing is rated
    average_rating: str = "0.0"


class DailyTrendPoint(CamelModel):
    date: dt.date
    label: str
    feedback_count: int = 0


class MonthlyTrendPoint(CamelModel):
    month: str
    feedback_count: int = 0


# --- Departments ---

class DepartmentStat(CamelModel):
    department: str
    average_rating: float
    feedback_count: int
    needs_improvement: bool


class CorrectiveMeasure(CamelModel):
    department: str
    average_rating: float
    feedback_count: int
    measures: List[str] = []


class CorrectiveMeasuresView(CamelModel):
    threshold: float
    needs_improvement: List[CorrectiveMeasure] = []
    good_standing: List[DepartmentStat] = []


# --- Stations ---

class StationStat(CamelModel):
    station: str
    feedback_count: int = 0
    average_rating: float = 0.0
    ratings: List[float] = []


class StationRankings(CamelModel):
    stations: List[StationStat] = []
    top_by_rating: List[StationStat] = []
    top_by_count: List[StationStat] = []


# --- Sentiment ---

class SentimentCounts(CamelModel):
    positive: int = 0
    neutral: int = 0
    negative: int = 0


class SentimentDistribution(CamelModel):
    total: int = 0
    counts: SentimentCounts = SentimentCounts()
    percentages: SentimentCounts = SentimentCounts()


class DepartmentSentiment(CamelModel):
    department: str
    total: int = 0
    # percentages
    positive: int = 0
    neutral: int = 0
    negative: int = 0


class MonthlySentimentPoint(CamelModel):
    month: str
    total: int = 0
    positive: int = 0
    neutral: int = 0
    negative: int = 0


class SentimentView(CamelModel):
    distribution: SentimentDistribution = SentimentDistribution()
    by_department: List[DepartmentSentiment] = []
    monthly_trend: List[MonthlySentimentPoint] = []


# --- Everything at once ---

class AnalyticsView(CamelModel):
    generated_at: dt.datetime
    summary: Summary = Summary()
    daily_trend: List[DailyTrendPoint] = []
    monthly_trend: List[MonthlyTrendPoint] = []
    departments: List[DepartmentStat] = []
    stations: StationRankings = StationRankings()
    sentiment: SentimentView = SentimentView()
    corrective_measures: CorrectiveMeasuresView


class OverviewView(CamelModel):
    summary: Summary
    daily_trend: List[DailyTrendPoint]
    monthly_trend: List[MonthlyTrendPoint]


class FeedbackWithSentiment(FeedbackRecord):
    sentiment: Sentiment
