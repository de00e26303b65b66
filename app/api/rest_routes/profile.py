from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.collections.profile import get_profile_from_user_id, update_profile
from app.core.security import verify_jwt
from app.models.profile import Profile, ProfileUpdate
from app.services.pdf_reports import generate_profile_pdf

router = APIRouter(prefix="/profile", tags=["Profile"])


async def _get_own_profile(user_id: str) -> Profile:
    profile = await get_profile_from_user_id(user_id)
    if not profile:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found."
        )
    return profile


@router.get("/", response_model=Profile, summary="Get the caller's profile")
async def get_profile(user_payload: dict = Depends(verify_jwt)):
    return await _get_own_profile(user_payload["sub"])


@router.put("/", response_model=Profile, summary="Update the caller's profile")
async def save_profile(update: ProfileUpdate, user_payload: dict = Depends(verify_jwt)):
    """
    Updates the editable profile fields. The row must already exist; it is
    created when the user signs up.
    """
    profile = await update_profile(user_payload["sub"], update)
    if not profile:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found."
        )
    return profile


@router.get(
    "/pdf",
    response_class=Response,
    responses={200: {"content": {"application/pdf": {}}}},
    summary="Download the caller's profile as a PDF",
)
async def download_profile_pdf(user_payload: dict = Depends(verify_jwt)):
    profile = await _get_own_profile(user_payload["sub"])
    return Response(
        content=generate_profile_pdf(profile),
        media_type="application/pdf",
        headers={"Content-Disposition": 'attachment; filename="profile_report.pdf"'},
    )
