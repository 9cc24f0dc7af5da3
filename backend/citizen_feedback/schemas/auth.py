# backend/citizen_feedback/schemas/auth.py

from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator
from pydantic.alias_generators import to_camel


class _AuthRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, alias_generator=to_camel, populate_by_name=True)

    @field_validator("email", mode="before", check_fields=False)
    @classmethod
    def normalize_email(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v


class LoginRequest(_AuthRequest):
    email: EmailStr
    password: str


class ForgotPasswordRequest(_AuthRequest):
    email: EmailStr


class VerifyOtpRequest(_AuthRequest):
    email: EmailStr
    otp: str


class ResetPasswordRequest(_AuthRequest):
    """[Request] POST /api/auth/reset-password  ({email, newPassword, confirmPassword})"""
    email: EmailStr
    new_password: str
    confirm_password: str


class AdminPublic(BaseModel):
    id: str
    email: str


class LoginResponse(BaseModel):
    message: str
    token: str
    user: Optional[AdminPublic] = None
