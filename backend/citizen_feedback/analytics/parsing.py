# backend/citizen_feedback/analytics/parsing.py
"""
Lenient decoding of the `departmentRatings` field.

The public form sends department ratings either as a JSON-encoded string
(multipart submissions) or as an already decoded list (JSON submissions).
A malformed value must never fail a submission, so instead of raising,
parsing returns a result object that says whether the input was clean.
"""
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class DepartmentRatingsParse:
    ratings: List[Dict[str, Any]] = field(default_factory=list)
    ok: bool = True
    error: Optional[str] = None


def parse_department_ratings(raw: Any) -> DepartmentRatingsParse:
    if raw is None:
        return DepartmentRatingsParse()

    value = raw
    if isinstance(raw, (bytes, bytearray)):
        value = raw.decode("utf-8", errors="replace")

    if isinstance(value, str):
        if not value.strip():
            return DepartmentRatingsParse()
        try:
            value = json.loads(value)
        except ValueError as e:
            return DepartmentRatingsParse(ok=False, error=f"malformed JSON: {e}")

    if not isinstance(value, list):
        return DepartmentRatingsParse(ok=False, error=f"expected a list, got {type(value).__name__}")

    entries = [item for item in value if isinstance(item, dict)]
    dropped = len(value) - len(entries)
    if dropped:
        return DepartmentRatingsParse(
            ratings=entries,
            ok=False,
            error=f"dropped {dropped} non-object entr{'y' if dropped == 1 else 'ies'}",
        )
    return DepartmentRatingsParse(ratings=entries)
