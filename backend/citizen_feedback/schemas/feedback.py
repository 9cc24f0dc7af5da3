# backend/citizen_feedback/schemas/feedback.py

from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from citizen_feedback.analytics.parsing import parse_department_ratings
from citizen_feedback.models.feedback import FeedbackStatus


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# -------------------------
# Blank-string guard
# -------------------------
def _strip_and_reject_blank(v, field_name: str):
    if v is None or not isinstance(v, str):
        return v
    stripped = v.strip()
    if stripped == "":
        raise ValueError(f"{field_name} is required")
    return stripped


class DepartmentRating(CamelModel):
    department: Optional[str] = None
    # legacy rows may carry numeric strings; coercion happens in the pipeline
    rating: Optional[Union[int, float, str]] = None


class FeedbackSubmission(CamelModel):
    """
    [Request] POST /api/feedback
    Text fields of the public form. overallRating and the image are
    checked by the endpoint itself.
    """
    # JSON clients may send the phone as a number
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True)

    name: str
    phone: str
    description: str
    police_station: Optional[str] = None

    @field_validator("name", "phone", "description")
    @classmethod
    def validate_required_text(cls, v, info):
        return _strip_and_reject_blank(v, info.field_name)

    @field_validator("police_station")
    @classmethod
    def blank_station_to_none(cls, v):
        if isinstance(v, str):
            return v.strip() or None
        return v


class FeedbackRecord(CamelModel):
    """
    [Response] GET /api/feedback, GET /api/feedback/{id}
    Also the input type of the aggregation pipeline, so every field other
    than the id tolerates being absent.
    """
    id: str
    name: Optional[str] = None
    phone: Optional[str] = None
    police_station: Optional[str] = None
    description: Optional[str] = None
    overall_rating: Optional[Union[int, float]] = None
    department_ratings: List[DepartmentRating] = []
    image_url: Optional[str] = None
    status: FeedbackStatus = FeedbackStatus.NEW
    created_at: Optional[datetime] = None

    @field_validator("department_ratings", mode="before")
    @classmethod
    def decode_department_ratings(cls, v):
        if v is None or isinstance(v, (str, bytes)):
            return parse_department_ratings(v).ratings
        return v


class MessageResponse(BaseModel):
    message: str
