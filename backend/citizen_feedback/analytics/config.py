# backend/citizen_feedback/analytics/config.py

from dataclasses import dataclass
from typing import Tuple

from citizen_feedback.schemas.analytics import Sentiment

MATCH_TIERS = ("exact", "substring", "token")


@dataclass(frozen=True)
class AnalyticsConfig:
    """
    Tunables of the aggregation pipeline. The pipeline never reads settings
    itself; callers pass one of these in.
    """
    improvement_threshold: float = 5.0
    window_days: int = 10
    min_token_length: int = 3
    match_tiers: Tuple[str, ...] = MATCH_TIERS
    rating_min: float = 1
    rating_max: float = 10
    negative_max: float = 4
    neutral_max: float = 6
    sentiment_fallback: Sentiment = Sentiment.NEUTRAL
    top_n: int = 3

    def __post_init__(self):
        unknown = [t for t in self.match_tiers if t not in MATCH_TIERS]
        if unknown:
            raise ValueError(f"Unknown name-match tier(s): {', '.join(unknown)}")
        if not self.rating_min <= self.negative_max <= self.neutral_max <= self.rating_max:
            raise ValueError("Sentiment ranges must satisfy rating_min <= negative_max <= neutral_max <= rating_max")
        if self.window_days < 0:
            raise ValueError("window_days must be >= 0")

    @classmethod
    def from_settings(cls, settings) -> "AnalyticsConfig":
        tiers = tuple(t.strip().lower() for t in settings.NAME_MATCH_TIERS.split(",") if t.strip())
        return cls(
            improvement_threshold=settings.IMPROVEMENT_THRESHOLD,
            window_days=settings.TREND_WINDOW_DAYS,
            min_token_length=settings.NAME_MATCH_MIN_TOKEN_LENGTH,
            match_tiers=tiers,
            rating_min=settings.RATING_MIN,
            rating_max=settings.RATING_MAX,
            negative_max=settings.SENTIMENT_NEGATIVE_MAX,
            neutral_max=settings.SENTIMENT_NEUTRAL_MAX,
            sentiment_fallback=Sentiment(settings.SENTIMENT_FALLBACK.strip().lower()),
        )


DEFAULT_CONFIG = AnalyticsConfig()
