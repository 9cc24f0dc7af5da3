# backend/citizen_feedback/api/deps.py

from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from citizen_feedback.core.security import InvalidTokenError, decode_access_token

# Swagger shows a token box pointing at the login route
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


@dataclass(frozen=True)
class CurrentAdmin:
    id: str
    email: str


async def get_current_admin(token: str = Depends(oauth2_scheme)) -> CurrentAdmin:
    """
    Validates the bearer token and returns the admin it was issued to.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = decode_access_token(token)
    except InvalidTokenError:
        raise credentials_exception

    return CurrentAdmin(id=payload["sub"], email=payload.get("email", ""))
