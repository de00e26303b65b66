from typing import Optional

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field

from app.core.security import verify_jwt
from app.models.crop_recommendation import CropRecommendationForm, CropRecommendationResult
from app.models.yield_prediction import YieldPrediction, YieldPredictionForm
from app.services.pdf_reports import (
    generate_crop_recommendation_pdf,
    generate_yield_prediction_pdf,
)

router = APIRouter(
    prefix="/api/reports",
    tags=["Reports"],
    dependencies=[Depends(verify_jwt)],
)

PDF_RESPONSES = {200: {"content": {"application/pdf": {}}}}


class ReportOptions(BaseModel):
    landscape: bool = False
    logo_data_url: Optional[str] = Field(
        default=None, description="Optional 'data:image/png;base64,...' logo."
    )


class CropRecommendationReportRequest(ReportOptions):
    form: CropRecommendationForm
    result: CropRecommendationResult


class YieldPredictionReportRequest(ReportOptions):
    form: YieldPredictionForm
    result: YieldPrediction


def _pdf_attachment(content: bytes, filename: str) -> Response:
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/crop-recommendation", response_class=Response, responses=PDF_RESPONSES)
async def crop_recommendation_report(request: CropRecommendationReportRequest):
    return _pdf_attachment(
        generate_crop_recommendation_pdf(
            request.form,
            request.result,
            logo_data_url=request.logo_data_url,
            landscape=request.landscape,
        ),
        "crop_recommendation_report.pdf",
    )


@router.post("/yield-prediction", response_class=Response, responses=PDF_RESPONSES)
async def yield_prediction_report(request: YieldPredictionReportRequest):
    return _pdf_attachment(
        generate_yield_prediction_pdf(
            request.form,
            request.result,
            logo_data_url=request.logo_data_url,
            landscape=request.landscape,
        ),
        "yield_prediction_report.pdf",
    )
