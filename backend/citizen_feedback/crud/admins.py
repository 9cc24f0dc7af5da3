# backend/citizen_feedback/crud/admins.py

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pymongo import ReturnDocument

from citizen_feedback.core.security import hash_secret
from citizen_feedback.db.mongo import get_db
from citizen_feedback.models.admin import AdminInDB


class AdminAlreadyExistsError(Exception):
    pass


def get_admins_collection():
    return get_db()["admins"]


def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def _to_admin(doc: Optional[Dict[str, Any]]) -> Optional[AdminInDB]:
    if not doc:
        return None
    doc = dict(doc)
    doc["_id"] = str(doc["_id"])
    return AdminInDB(**doc)


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ---------- READ ----------

async def get_admin_by_email(email: str) -> Optional[AdminInDB]:
    doc = await get_admins_collection().find_one({"email": _normalize_email(email)})
    return _to_admin(doc)


# ---------- CREATE ----------

async def create_admin(email: str, password: str) -> AdminInDB:
    email = _normalize_email(email)
    col = get_admins_collection()
    if await col.find_one({"email": email}):
        raise AdminAlreadyExistsError(email)

    doc = {
        "email": email,
        "password": hash_secret(password),
        "otpHash": None,
        "otpExpiration": None,
        "otpVerified": False,
        "otpAttempts": 0,
        "createdAt": _now(),
    }
    result = await col.insert_one(doc)
    doc["_id"] = result.inserted_id
    return _to_admin(doc)


# ---------- UPDATE ----------

async def set_otp(email: str, otp_hash: str, expires_at: datetime) -> bool:
    result = await get_admins_collection().update_one(
        {"email": _normalize_email(email)},
        {"$set": {"otpHash": otp_hash, "otpExpiration": expires_at, "otpVerified": False, "otpAttempts": 0}},
    )
    return result.matched_count == 1


async def clear_otp(email: str, verified: bool = False) -> bool:
    result = await get_admins_collection().update_one(
        {"email": _normalize_email(email)},
        {"$set": {"otpHash": None, "otpExpiration": None, "otpVerified": verified, "otpAttempts": 0}},
    )
    return result.matched_count == 1


async def update_password(email: str, new_password: str) -> bool:
    result = await get_admins_collection().update_one(
        {"email": _normalize_email(email)},
        {"$set": {
            "password": hash_secret(new_password),
            "otpHash": None,
            "otpExpiration": None,
            "otpVerified": False,
            "otpAttempts": 0,
        }},
    )
    return result.matched_count == 1


async def record_failed_otp(email: str) -> int:
    """
    Counts a wrong OTP guess and returns the number of misses so far.
    """
    doc = await get_admins_collection().find_one_and_update(
        {"email": _normalize_email(email)},
        {"$inc": {"otpAttempts": 1}},
        return_document=ReturnDocument.AFTER,
    )
    return (doc or {}).get("otpAttempts", 0)
