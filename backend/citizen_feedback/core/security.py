# backend/citizen_feedback/core/security.py

import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Union

from jose import JWTError, jwt
from passlib.context import CryptContext

from citizen_feedback.core.config import settings

# pbkdf2 keeps hashing pure-python (no bcrypt backend quirks)
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class InvalidTokenError(Exception):
    """Raised when a bearer token cannot be decoded or is not an access token."""


def hash_secret(secret: str) -> str:
    """Hash a password or OTP for storage."""
    return pwd_context.hash(secret)


def verify_secret(plain: str, hashed: Optional[str]) -> bool:
    if not plain or not hashed:
        return False
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        # malformed hash in the store
        return False


def generate_otp(length: Optional[int] = None) -> str:
    """
    Numeric one-time password, e.g. "483920".
    The first digit is never 0 so the code always has the full length.
    """
    length = length or settings.OTP_LENGTH
    first = str(secrets.randbelow(9) + 1)
    rest = "".join(str(secrets.randbelow(10)) for _ in range(length - 1))
    return first + rest


def otp_expiration(now: Optional[datetime] = None) -> datetime:
    now = now or datetime.now(timezone.utc)
    return now + timedelta(minutes=settings.OTP_EXPIRE_MINUTES)


def create_access_token(subject: Union[str, Any], email: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Admin session token (7 days by default).
    """
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS))
    to_encode = {"exp": expire, "sub": str(subject), "email": email, "type": "access"}
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        raise InvalidTokenError(str(e)) from e

    if payload.get("type") != "access" or not payload.get("sub"):
        raise InvalidTokenError("Not an access token")
    return payload
