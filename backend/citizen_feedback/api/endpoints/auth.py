# backend/citizen_feedback/api/endpoints/auth.py

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException

from citizen_feedback.analytics.numbers import ensure_aware_utc
from citizen_feedback.api import deps
from citizen_feedback.core import mailer
from citizen_feedback.core.config import settings
from citizen_feedback.core.security import (
    create_access_token,
    generate_otp,
    hash_secret,
    otp_expiration,
    verify_secret,
)
from citizen_feedback.crud import admins as admin_crud
from citizen_feedback.schemas.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    ResetPasswordRequest,
    VerifyOtpRequest,
)
from citizen_feedback.schemas.feedback import MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])

ADMIN_NOT_FOUND = "Admin not found"


@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest):
    """
    [Request] {email, password}
    [Response] {message, token, user: {id, email}}
    """
    if not body.password:
        raise HTTPException(status_code=400, detail="Email and password are required")

    admin = await admin_crud.get_admin_by_email(body.email)
    if not admin:
        logger.info("Login failed: unknown email %s", body.email)
        raise HTTPException(status_code=404, detail=ADMIN_NOT_FOUND)

    if not verify_secret(body.password, admin.password):
        logger.info("Login failed: wrong password for %s", body.email)
        raise HTTPException(status_code=400, detail="Invalid password")

    token = create_access_token(subject=admin.id, email=admin.email)
    logger.info("Admin %s logged in", admin.email)
    return {"message": "Login successful", "token": token, "user": {"id": admin.id, "email": admin.email}}


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(body: ForgotPasswordRequest):
    """
    Issues an OTP by email. Only its hash is stored.
    """
    admin = await admin_crud.get_admin_by_email(body.email)
    if not admin:
        raise HTTPException(status_code=404, detail=ADMIN_NOT_FOUND)

    otp = generate_otp()
    await admin_crud.set_otp(admin.email, hash_secret(otp), otp_expiration())

    try:
        await mailer.send_mail(admin.email, mailer.render_otp_email(otp))
    except mailer.MailDeliveryError:
        # an OTP the admin never received must not stay valid
        await admin_crud.clear_otp(admin.email)
        raise HTTPException(status_code=500, detail="Failed to send OTP email")

    logger.info("OTP issued for %s", admin.email)
    return {"message": "OTP sent to your email"}


@router.post("/verify-otp", response_model=MessageResponse)
async def verify_otp(body: VerifyOtpRequest):
    if not body.otp:
        raise HTTPException(status_code=400, detail="Email and OTP are required")

    admin = await admin_crud.get_admin_by_email(body.email)
    if not admin:
        raise HTTPException(status_code=404, detail=ADMIN_NOT_FOUND)

    if not admin.otpHash or not admin.otpExpiration:
        raise HTTPException(status_code=400, detail="No OTP requested")

    if ensure_aware_utc(admin.otpExpiration) < datetime.now(timezone.utc):
        await admin_crud.clear_otp(admin.email)
        raise HTTPException(status_code=400, detail="OTP expired")

    if not verify_secret(body.otp, admin.otpHash):
        misses = await admin_crud.record_failed_otp(admin.email)
        if misses >= settings.OTP_MAX_ATTEMPTS:
            await admin_crud.clear_otp(admin.email)
            logger.warning("OTP for %s cleared after %d wrong attempts", admin.email, misses)
            raise HTTPException(status_code=400, detail="Too many invalid attempts. Please request a new OTP.")
        raise HTTPException(status_code=400, detail="Invalid OTP")

    await admin_crud.clear_otp(admin.email, verified=True)
    logger.info("OTP verified for %s", admin.email)
    return {"message": "OTP verified successfully"}


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(body: ResetPasswordRequest):
    if not body.new_password or not body.confirm_password:
        raise HTTPException(status_code=400, detail="All fields are required")

    if body.new_password != body.confirm_password:
        raise HTTPException(status_code=400, detail="Passwords do not match")

    if len(body.new_password) < settings.MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters long",
        )

    admin = await admin_crud.get_admin_by_email(body.email)
    if not admin:
        raise HTTPException(status_code=404, detail=ADMIN_NOT_FOUND)

    if not admin.otpVerified:
        raise HTTPException(status_code=400, detail="Please verify OTP first")

    await admin_crud.update_password(admin.email, body.new_password)
    logger.info("Password reset for %s", admin.email)

    try:
        await mailer.send_mail(admin.email, mailer.render_password_changed_email())
    except mailer.MailDeliveryError:
        logger.warning("Password changed for %s but the confirmation mail was not sent", admin.email)

    return {"message": "Password reset successfully"}


@router.post("/logout", response_model=MessageResponse)
async def logout(admin: deps.CurrentAdmin = Depends(deps.get_current_admin)):
    # tokens are stateless; the client discards its copy
    logger.info("Admin %s logged out", admin.email)
    return {"message": "Logout successful"}
