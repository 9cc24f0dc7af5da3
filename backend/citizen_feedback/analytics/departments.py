# backend/citizen_feedback/analytics/departments.py
"""
Department-name normalization and per-department aggregation.

Normalization is a best-effort fuzzy classifier, not a bijection: it maps
free-text or localized labels onto the four canonical departments in three
tiers (exact, substring, token), first match wins. Labels that match no tier
come back as UNMATCHED and are left out of every department aggregate.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from citizen_feedback.analytics.catalog import CANONICAL_DEPARTMENTS, CORRECTIVE_MEASURES, DEPARTMENT_VARIANTS
from citizen_feedback.analytics.config import DEFAULT_CONFIG, AnalyticsConfig
from citizen_feedback.analytics.numbers import coerce_rating, round1
from citizen_feedback.schemas.analytics import CorrectiveMeasure, CorrectiveMeasuresView, DepartmentStat
from citizen_feedback.schemas.feedback import FeedbackRecord


class MatchTier(str, Enum):
    EXACT = "exact"
    SUBSTRING = "substring"
    TOKEN = "token"
    UNMATCHED = "unmatched"


@dataclass(frozen=True)
class DepartmentMatch:
    original: str
    canonical: Optional[str]
    tier: MatchTier

    @property
    def matched(self) -> bool:
        return self.canonical is not None


def _normalize_text(text: str) -> str:
    return " ".join(text.split()).lower()


# (canonical, normalized variant) in canonical order
_VARIANTS: List[Tuple[str, str]] = [
    (canonical, _normalize_text(variant))
    for canonical in CANONICAL_DEPARTMENTS
    for variant in DEPARTMENT_VARIANTS[canonical]
]


def _match_exact(text: str, config: AnalyticsConfig) -> Optional[str]:
    for canonical, variant in _VARIANTS:
        if text == variant:
            return canonical
    return None


def _match_substring(text: str, config: AnalyticsConfig) -> Optional[str]:
    for canonical, variant in _VARIANTS:
        if text in variant or variant in text:
            return canonical
    return None


def _match_token(text: str, config: AnalyticsConfig) -> Optional[str]:
    tokens = [t for t in text.split(" ") if len(t) >= config.min_token_length]
    for token in tokens:
        for canonical, variant in _VARIANTS:
            if token in variant or variant in token:
                return canonical
    return None


_TIER_MATCHERS = {
    MatchTier.EXACT.value: (MatchTier.EXACT, _match_exact),
    MatchTier.SUBSTRING.value: (MatchTier.SUBSTRING, _match_substring),
    MatchTier.TOKEN.value: (MatchTier.TOKEN, _match_token),
}


def normalize_department(name: Optional[str], config: AnalyticsConfig = DEFAULT_CONFIG) -> DepartmentMatch:
    """
    Map a department label onto a canonical department.

    >>> normalize_department("वाहतूक").canonical
    'Traffic'
    """
    original = name if isinstance(name, str) else ""
    text = _normalize_text(original)
    if not text:
        return DepartmentMatch(original, None, MatchTier.UNMATCHED)

    for tier_name in config.match_tiers:
        tier, matcher = _TIER_MATCHERS[tier_name]
        canonical = matcher(text, config)
        if canonical is not None:
            return DepartmentMatch(original, canonical, tier)

    return DepartmentMatch(original, None, MatchTier.UNMATCHED)


def iter_canonical_ratings(
    records: Iterable[FeedbackRecord],
    config: AnalyticsConfig = DEFAULT_CONFIG,
) -> Iterable[Tuple[str, float]]:
    """
    (canonical department, numeric rating) for every department rating that
    normalizes to a canonical department and carries a numeric rating.
    """
    for record in records:
        for entry in record.department_ratings:
            match = normalize_department(entry.department, config)
            if not match.matched:
                continue
            rating = coerce_rating(entry.rating)
            if rating is None:
                continue
            yield match.canonical, rating


def aggregate_departments(
    records: Sequence[FeedbackRecord],
    config: AnalyticsConfig = DEFAULT_CONFIG,
) -> List[DepartmentStat]:
    """
    Average rating per canonical department, in canonical order.
    Departments without a single matched rating are left out.
    """
    sums: Dict[str, float] = {d: 0.0 for d in CANONICAL_DEPARTMENTS}
    counts: Dict[str, int] = {d: 0 for d in CANONICAL_DEPARTMENTS}

    for department, rating in iter_canonical_ratings(records, config):
        sums[department] += rating
        counts[department] += 1

    stats = []
    for department in CANONICAL_DEPARTMENTS:
        if counts[department] == 0:
            continue
        average = round1(sums[department] / counts[department])
        stats.append(
            DepartmentStat(
                department=department,
                average_rating=average,
                feedback_count=counts[department],
                needs_improvement=average < config.improvement_threshold,
            )
        )
    return stats


def corrective_measures(
    stats: Sequence[DepartmentStat],
    config: AnalyticsConfig = DEFAULT_CONFIG,
) -> CorrectiveMeasuresView:
    """
    Worst-rated departments first; those under the threshold come with the
    suggested measures for that department.
    """
    ordered = sorted(stats, key=lambda s: s.average_rating)
    return CorrectiveMeasuresView(
        threshold=config.improvement_threshold,
        needs_improvement=[
            CorrectiveMeasure(
                department=s.department,
                average_rating=s.average_rating,
                feedback_count=s.feedback_count,
                measures=list(CORRECTIVE_MEASURES.get(s.department, [])),
            )
            for s in ordered
            if s.needs_improvement
        ],
        good_standing=[s for s in ordered if not s.needs_improvement],
    )
