from fastapi import APIRouter, Depends

from app.core.security import verify_jwt
from app.models.yield_prediction import YieldPredictionForm, YieldPredictionResponse
from app.services.yield_prediction_service import predict_yield

router = APIRouter(
    prefix="/api",
    tags=["Yield Prediction"],
    dependencies=[Depends(verify_jwt)],
)


@router.post(
    "/yield-predict",
    response_model=YieldPredictionResponse,
    responses={500: {"description": '{"error": "..."} when the AI service fails'}},
)
async def create_yield_prediction(form: YieldPredictionForm) -> YieldPredictionResponse:
    """
    Predicts yield, revenue and profit for the submitted crop and plot.
    """
    prediction = await predict_yield(form)
    return YieldPredictionResponse(prediction=prediction)
