# backend/citizen_feedback/api/endpoints/health.py

import logging

from fastapi import APIRouter

from citizen_feedback.db.mongo import get_db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check():
    """
    Liveness plus a MongoDB ping, for load balancers and monitoring.
    """
    mongo_ok = False
    mongo_error = None

    try:
        await get_db().command("ping")
        mongo_ok = True
    except Exception as e:
        # any failure means the probe reports degraded, never 500
        logger.warning("Health check: MongoDB unavailable: %s", e)
        mongo_error = str(e)

    return {
        "status": "ok" if mongo_ok else "degraded",
        "mongo": mongo_ok,
        "mongo_error": mongo_error,
    }
