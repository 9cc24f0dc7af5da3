# backend/citizen_feedback/models/admin.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class AdminInDB(BaseModel):
    """
    An admin account in the 'admins' collection.
    otpHash/otpExpiration only hold values while a password reset is in progress.
    """
    id: str = Field(..., alias="_id")
    email: EmailStr
    password: str  # passlib hash
    otpHash: Optional[str] = None
    otpExpiration: Optional[datetime] = None
    # set by verify-otp, consumed by reset-password
    otpVerified: bool = False
    # wrong guesses against the current OTP
    otpAttempts: int = 0
    createdAt: Optional[datetime] = None

    model_config = ConfigDict(
        populate_by_name=True,
        from_attributes=True,
    )
