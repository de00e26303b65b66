"""Phone OTP login and the bearer tokens that guard every other route."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from app.core.config import settings

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
# OTP delivery is mocked: every phone receives this code.
MOCK_OTP = "123456"

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/verify-otp")


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def create_access_token(
    user_id: str, language: str, expires_delta: Optional[timedelta] = None
) -> str:
    issued_at = datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    claims = {
        "sub": user_id,
        "language": language,
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }
    return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=ALGORITHM)


async def verify_jwt(token: str = Depends(oauth2_scheme)) -> dict:
    """Decodes the bearer token; the claims are handed to the route."""
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[ALGORITHM],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise _unauthorized("Token has expired")
    except jwt.PyJWTError:
        raise _unauthorized("Could not validate credentials")


async def send_otp(phone: str) -> None:
    logger.info("Sending login code to %s", phone)


async def check_otp(phone: str, otp: str) -> bool:
    valid = otp == MOCK_OTP
    if not valid:
        logger.warning("Rejected login code for %s", phone)
    return valid
