from fastapi import APIRouter, Depends

from app.core.security import verify_jwt
from app.models.crop_recommendation import (
    CropRecommendationForm,
    CropRecommendationResponse,
)
from app.services.crop_recommendation_service import recommend_crops

router = APIRouter(
    prefix="/api",
    tags=["Crop Recommendation"],
    dependencies=[Depends(verify_jwt)],
)


@router.post(
    "/crop-recommendation",
    response_model=CropRecommendationResponse,
    responses={500: {"description": '{"error": "..."} when the AI service fails'}},
)
async def create_crop_recommendation(
    form: CropRecommendationForm,
) -> CropRecommendationResponse:
    """
    Recommends the top crops for the submitted farm details.
    """
    result = await recommend_crops(form)
    return CropRecommendationResponse(recommendation=result)
