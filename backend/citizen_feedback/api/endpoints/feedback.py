# backend/citizen_feedback/api/endpoints/feedback.py

import logging
import os
import re
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from citizen_feedback.analytics.parsing import parse_department_ratings
from citizen_feedback.api import deps
from citizen_feedback.core.config import settings
from citizen_feedback.crud import feedback as feedback_crud
from citizen_feedback.schemas.feedback import FeedbackRecord, FeedbackSubmission, MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/feedback", tags=["Feedback"])

NO_STORE = "no-store"
_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


# --- request parsing helpers ---

async def _read_payload(request: Request) -> Dict[str, Any]:
    """
    Multipart form (public portal, with optional image) or a JSON body.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            raise HTTPException(status_code=400, detail="Request body is not valid JSON.")
        if not isinstance(body, dict):
            raise HTTPException(status_code=400, detail="Request body must be a JSON object.")
        return body

    form = await request.form()
    return {key: form.get(key) for key in form.keys()}


# BSON integers are signed 64-bit
_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1


def _parse_overall_rating(raw: Any) -> int:
    if raw is None or raw == "" or raw == 0 or isinstance(raw, bool):
        raise HTTPException(status_code=400, detail="Overall rating is required.")
    if isinstance(raw, int):
        rating = raw
    elif isinstance(raw, float) and raw.is_integer():
        rating = int(raw)
    else:
        try:
            rating = int(str(raw).strip())
        except ValueError:
            raise HTTPException(status_code=400, detail="Overall rating must be a whole number.")
    if rating == 0:
        raise HTTPException(status_code=400, detail="Overall rating is required.")
    if not _INT64_MIN <= rating <= _INT64_MAX:
        raise HTTPException(status_code=400, detail="Overall rating is out of range.")
    return rating


def _parse_department_ratings(raw: Any) -> List[Dict[str, Any]]:
    # JSON bodies may already carry a decoded array
    if isinstance(raw, list):
        ratings = [item for item in raw if isinstance(item, dict)]
        if len(ratings) != len(raw):
            logger.warning("Dropped %d non-object departmentRatings entries", len(raw) - len(ratings))
        return ratings

    result = parse_department_ratings(raw)
    if not result.ok:
        # the feedback is still stored, without department ratings
        logger.warning("Malformed departmentRatings ignored: %s", result.error)
    return result.ratings


def _validation_message(e: ValidationError) -> str:
    first = e.errors()[0]
    field = ".".join(str(p) for p in first.get("loc", ()))
    msg = first.get("msg", "Invalid value")
    return f"{field}: {msg}" if field else msg


def _safe_filename(filename: str) -> str:
    base = os.path.basename(filename or "").strip()
    cleaned = _UNSAFE_FILENAME_CHARS.sub("_", base).strip("._")
    return cleaned or "image"


def _write_file(path: Path, content: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)


def _remove_file(path: Path) -> None:
    path.unlink(missing_ok=True)


async def _store_image(image: UploadFile) -> Tuple[Path, str]:
    """
    Saves the upload under UPLOAD_DIR/feedbacks.
    Returns the file path and its public relative URL.
    """
    if not (image.content_type or "").startswith("image/"):
        raise HTTPException(status_code=400, detail="Only image files are allowed.")

    content = await image.read()
    if len(content) > settings.MAX_UPLOAD_BYTES:
        limit_mb = settings.MAX_UPLOAD_BYTES / (1024 * 1024)
        raise HTTPException(status_code=400, detail=f"Image must be smaller than {limit_mb:g}MB.")

    stored_name = f"{int(time.time() * 1000)}-{_safe_filename(image.filename)}"
    path = Path(settings.UPLOAD_DIR) / "feedbacks" / stored_name
    await run_in_threadpool(_write_file, path, content)

    prefix = settings.UPLOAD_URL_PREFIX.rstrip("/")
    return path, f"{prefix}/feedbacks/{stored_name}"


# CREATE (public)
@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def submit_feedback(request: Request):
    """
    [Request] multipart/form-data or JSON
      name, phone, description, policeStation, overallRating,
      departmentRatings (JSON string or array), image (file, optional)
    [Response] 201 {"message": "..."}
    """
    payload = await _read_payload(request)

    overall_rating = _parse_overall_rating(payload.get("overallRating"))

    try:
        submission = FeedbackSubmission.model_validate(
            {k: v for k, v in payload.items() if k != "overallRating" and not isinstance(v, UploadFile)}
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=_validation_message(e))

    department_ratings = _parse_department_ratings(payload.get("departmentRatings"))

    image_path: Optional[Path] = None
    image_url: Optional[str] = None
    image = payload.get("image")
    if isinstance(image, UploadFile) and image.filename:
        image_path, image_url = await _store_image(image)

    try:
        await feedback_crud.create_feedback(submission, overall_rating, department_ratings, image_url)
    except Exception:
        # no record points at the image, so drop it
        if image_path is not None:
            await run_in_threadpool(_remove_file, image_path)
        raise
    return {"message": "Feedback submitted successfully."}


# READ ALL
@router.get("", response_model=List[FeedbackRecord])
async def read_all_feedback(response: Response, _admin: deps.CurrentAdmin = Depends(deps.get_current_admin)):
    response.headers["Cache-Control"] = NO_STORE
    return await feedback_crud.get_all_feedback()


# READ ONE
@router.get("/{feedback_id}", response_model=FeedbackRecord)
async def read_feedback(
    feedback_id: str,
    response: Response,
    _admin: deps.CurrentAdmin = Depends(deps.get_current_admin),
):
    feedback = await feedback_crud.get_feedback(feedback_id)
    if not feedback:
        raise HTTPException(status_code=404, detail="Feedback not found")
    response.headers["Cache-Control"] = NO_STORE
    return feedback


# UPDATE (status -> read)
@router.put("/{feedback_id}/read", response_model=MessageResponse)
async def mark_feedback_read(feedback_id: str, _admin: deps.CurrentAdmin = Depends(deps.get_current_admin)):
    found = await feedback_crud.mark_feedback_read(feedback_id)
    if not found:
        raise HTTPException(status_code=404, detail="Feedback not found")
    return {"message": "Feedback marked as read."}


# DELETE ALL
@router.delete("", response_model=MessageResponse)
async def delete_all_feedback(admin: deps.CurrentAdmin = Depends(deps.get_current_admin)):
    deleted = await feedback_crud.delete_all_feedback()
    logger.info("Admin %s deleted all feedback (%d)", admin.email, deleted)
    return {"message": "All feedback deleted."}


# DELETE ONE
@router.delete("/{feedback_id}", response_model=MessageResponse)
async def delete_feedback(feedback_id: str, admin: deps.CurrentAdmin = Depends(deps.get_current_admin)):
    deleted = await feedback_crud.delete_feedback(feedback_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Feedback not found")
    logger.info("Admin %s deleted feedback %s", admin.email, feedback_id)
    return {"message": "Feedback deleted."}
