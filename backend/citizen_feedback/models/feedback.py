# backend/citizen_feedback/models/feedback.py

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field


class FeedbackStatus(str, Enum):
    NEW = "new"
    READ = "read"


class FeedbackInDB(BaseModel):
    """
    Shape of a document in the 'feedbacks' collection.
    Keys are camelCase so the stored document matches the REST payloads.
    """
    id: ObjectId = Field(default_factory=ObjectId, alias="_id")
    name: str
    phone: str
    description: str
    policeStation: Optional[str] = None
    overallRating: int
    # stored as submitted; canonicalisation happens at read time
    departmentRatings: List[Dict[str, Any]] = Field(default_factory=list)
    imageUrl: Optional[str] = None
    status: FeedbackStatus = FeedbackStatus.NEW
    createdAt: datetime

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    def to_document(self) -> Dict[str, Any]:
        doc = self.model_dump(by_alias=True)
        doc["status"] = self.status.value
        return doc
