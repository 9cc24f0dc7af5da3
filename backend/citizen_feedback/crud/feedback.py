# backend/citizen_feedback/crud/feedback.py

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING

from citizen_feedback.analytics.numbers import ensure_aware_utc
from citizen_feedback.db.mongo import get_db
from citizen_feedback.models.feedback import FeedbackInDB, FeedbackStatus
from citizen_feedback.schemas.feedback import FeedbackRecord, FeedbackSubmission

logger = logging.getLogger(__name__)


def get_feedback_collection():
    """
    'feedbacks' collection from the Motor DB handle.
    """
    return get_db()["feedbacks"]


def _safe_object_id(feedback_id: str) -> Optional[ObjectId]:
    # malformed ids can never exist, so callers treat them as not found
    try:
        return ObjectId(str(feedback_id).strip())
    except (InvalidId, TypeError):
        return None


def serialize_feedback(doc: Dict[str, Any]) -> FeedbackRecord:
    """
    Mongo document -> FeedbackRecord (id as str, createdAt as aware UTC).
    """
    return FeedbackRecord(
        id=str(doc["_id"]),
        name=doc.get("name"),
        phone=doc.get("phone"),
        police_station=doc.get("policeStation"),
        description=doc.get("description"),
        overall_rating=doc.get("overallRating"),
        department_ratings=doc.get("departmentRatings") or [],
        image_url=doc.get("imageUrl"),
        status=doc.get("status") or FeedbackStatus.NEW,
        created_at=ensure_aware_utc(doc.get("createdAt")),
    )


# CREATE
async def create_feedback(
    data: FeedbackSubmission,
    overall_rating: int,
    department_ratings: List[Dict[str, Any]],
    image_url: Optional[str] = None,
) -> str:
    feedback = FeedbackInDB(
        name=data.name,
        phone=data.phone,
        description=data.description,
        policeStation=data.police_station,
        overallRating=overall_rating,
        departmentRatings=department_ratings,
        imageUrl=image_url,
        status=FeedbackStatus.NEW,
        createdAt=datetime.now(timezone.utc),
    )
    res = await get_feedback_collection().insert_one(feedback.to_document())
    logger.info("Feedback %s stored (station=%s)", res.inserted_id, data.police_station)
    return str(res.inserted_id)


# READ ALL (newest first, no paging)
async def get_all_feedback() -> List[FeedbackRecord]:
    # _id breaks ties between submissions in the same millisecond
    cursor = get_feedback_collection().find({}).sort([("createdAt", DESCENDING), ("_id", DESCENDING)])
    return [serialize_feedback(doc) async for doc in cursor]


# READ ONE
async def get_feedback(feedback_id: str) -> Optional[FeedbackRecord]:
    oid = _safe_object_id(feedback_id)
    if oid is None:
        return None

    doc = await get_feedback_collection().find_one({"_id": oid})
    return serialize_feedback(doc) if doc else None


# UPDATE (new -> read, once)
async def mark_feedback_read(feedback_id: str) -> bool:
    """
    Returns False when the feedback does not exist. Marking an already read
    feedback is a no-op.
    """
    oid = _safe_object_id(feedback_id)
    if oid is None:
        return False

    col = get_feedback_collection()
    res = await col.update_one(
        {"_id": oid, "status": {"$ne": FeedbackStatus.READ.value}},
        {"$set": {"status": FeedbackStatus.READ.value}},
    )
    if res.matched_count == 1:
        logger.info("Feedback %s marked as read", feedback_id)
        return True

    return await col.find_one({"_id": oid}, {"_id": 1}) is not None


# DELETE
async def delete_feedback(feedback_id: str) -> bool:
    oid = _safe_object_id(feedback_id)
    if oid is None:
        return False

    res = await get_feedback_collection().delete_one({"_id": oid})
    return res.deleted_count == 1


async def delete_all_feedback() -> int:
    res = await get_feedback_collection().delete_many({})
    logger.warning("Deleted all feedback (%d documents)", res.deleted_count)
    return res.deleted_count
