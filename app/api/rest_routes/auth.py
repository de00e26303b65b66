import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from app.collections.chat_session import delete_chat_sessions_from_user_id
from app.collections.profile import create_profile, delete_profile
from app.collections.user import delete_user, get_user_from_id, get_user_from_phone, save_user
from app.core.security import check_otp, create_access_token, send_otp, verify_jwt
from app.models.chat_session import Language
from app.models.profile import Profile
from app.models.user import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


class LoginRequest(BaseModel):
    """Phone login. ``name`` and ``language`` are only sent when signing up."""

    phone: str = Field(min_length=1)
    name: Optional[str] = None
    language: Optional[Language] = None

    @property
    def is_signup(self) -> bool:
        return bool(self.name and self.language)


class LoginResponse(BaseModel):
    message: str
    phone: str


class OTPVerifyRequest(BaseModel):
    phone: str
    otp: str


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: User


async def _sign_up(request: LoginRequest) -> User:
    """Creates the account and the profile row the profile page edits."""
    user = await save_user(
        User(phone=request.phone, name=request.name, language=request.language)
    )
    try:
        await create_profile(
            Profile(id=user.id, full_name=user.name, phone_number=user.phone)
        )
    except Exception:
        # A user never exists without its profile row.
        logger.exception("Profile creation failed, removing user %s", user.id)
        await delete_user(user.id)
        raise
    return user


def _user_or_404(user: Optional[User]) -> User:
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")
    return user


@router.post("/send-otp", response_model=LoginResponse)
async def request_login_code(request: LoginRequest):
    """
    Sends a login code to the phone. Unknown phones must sign up with a
    name and language.
    """
    user = await get_user_from_phone(request.phone)

    if user is None:
        if not request.is_signup:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Name and language are required for new users.",
            )
        await _sign_up(request)
        message = "User created. OTP sent successfully."
    elif request.is_signup:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User already exists.")
    else:
        message = "OTP sent successfully."

    await send_otp(request.phone)
    return LoginResponse(message=message, phone=request.phone)


@router.post("/verify-otp", response_model=Token)
async def verify_login_code(request: OTPVerifyRequest):
    """
    Exchanges a valid login code for a bearer token.
    """
    user = _user_or_404(await get_user_from_phone(request.phone))
    if not await check_otp(request.phone, request.otp):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid OTP")

    if not user.is_verified:
        user.is_verified = True
        user = await save_user(user)

    return Token(
        access_token=create_access_token(user.id, user.language.value),
        user=user,
    )


@router.get("/user", response_model=User)
async def get_current_user(user_payload: dict = Depends(verify_jwt)):
    return _user_or_404(await get_user_from_id(user_payload["sub"]))


@router.delete("/delete", status_code=status.HTTP_204_NO_CONTENT)
async def delete_account(user_payload: dict = Depends(verify_jwt)):
    """
    Deletes the account with its profile and chat history.
    """
    user_id = user_payload["sub"]
    await delete_chat_sessions_from_user_id(user_id)
    await delete_profile(user_id)
    await delete_user(user_id)
