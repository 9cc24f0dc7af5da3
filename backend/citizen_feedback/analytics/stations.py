# backend/citizen_feedback/analytics/stations.py

from typing import Dict, List, Sequence

from citizen_feedback.analytics.catalog import STATION_NAMES
from citizen_feedback.analytics.config import DEFAULT_CONFIG, AnalyticsConfig
from citizen_feedback.analytics.numbers import coerce_rating, round1
from citizen_feedback.schemas.analytics import StationRankings, StationStat
from citizen_feedback.schemas.feedback import FeedbackRecord


def aggregate_stations(records: Sequence[FeedbackRecord], include_catalog: bool = False) -> List[StationStat]:
    """
    Group by the raw policeStation value (station names come from a fixed
    list, so no normalization). Records without a station are skipped.

    Order is first encounter; with include_catalog, every catalogued
    station is listed first (zero-filled) and unknown stations follow.
    """
    counts: Dict[str, int] = {}
    ratings: Dict[str, List[float]] = {}

    if include_catalog:
        for name in STATION_NAMES:
            counts[name] = 0
            ratings[name] = []

    for record in records:
        station = record.police_station
        if not station:
            continue
        counts.setdefault(station, 0)
        ratings.setdefault(station, [])
        counts[station] += 1
        rating = coerce_rating(record.overall_rating)
        if rating is not None:
            ratings[station].append(rating)

    stats = []
    for station, count in counts.items():
        station_ratings = ratings[station]
        average = round1(sum(station_ratings) / len(station_ratings)) if station_ratings else 0.0
        stats.append(
            StationStat(
                station=station,
                feedback_count=count,
                average_rating=average,
                ratings=station_ratings,
            )
        )
    return stats


def top_stations_by_rating(stats: Sequence[StationStat], n: int = 3) -> List[StationStat]:
    # sorted() is stable: ties keep encounter order
    active = [s for s in stats if s.feedback_count > 0]
    return sorted(active, key=lambda s: s.average_rating, reverse=True)[:n]


def top_stations_by_count(stats: Sequence[StationStat], n: int = 3) -> List[StationStat]:
    active = [s for s in stats if s.feedback_count > 0]
    return sorted(active, key=lambda s: s.feedback_count, reverse=True)[:n]


def rank_stations(
    records: Sequence[FeedbackRecord],
    config: AnalyticsConfig = DEFAULT_CONFIG,
    include_catalog: bool = False,
) -> StationRankings:
    stats = aggregate_stations(records, include_catalog=include_catalog)
    return StationRankings(
        stations=stats,
        top_by_rating=top_stations_by_rating(stats, config.top_n),
        top_by_count=top_stations_by_count(stats, config.top_n),
    )
