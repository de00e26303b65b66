import logging

from pydantic import ValidationError

from app.core.errors import AIServiceError
from app.models.yield_prediction import YieldPrediction, YieldPredictionForm
from app.prompts.yield_prediction_system_prompt import (
    YIELD_PREDICTION_PROMPT,
    YIELD_PREDICTION_SYSTEM_PROMPT,
)
from app.services.crop_recommendation_service import (
    INVALID_AI_RESPONSE,
    language_instruction,
)
from app.services.llm_gateway import (
    build_prompt_messages,
    chat_completion,
    parse_embedded_json,
)

logger = logging.getLogger(__name__)


def build_yield_prediction_prompt(form: YieldPredictionForm) -> str:
    return YIELD_PREDICTION_PROMPT.format(
        seed_type=form.seed_type,
        plot_size=form.plot_size,
        season=form.season,
        location=form.location,
        soil_type=form.soil_type,
        fertilizer_plan=form.fertilizer_plan or "Standard NPK",
        irrigation_plan=form.irrigation_plan or "Moderate irrigation",
        previous_yield=(
            f"{form.previous_yield} quintals/acre" if form.previous_yield else "Not provided"
        ),
        planting_date=form.planting_date or "Not specified",
        language_instruction=language_instruction(form.lang),
    )


async def predict_yield(form: YieldPredictionForm) -> YieldPrediction:
    logger.info("Calling AI gateway for yield prediction of %s", form.seed_type)

    messages = build_prompt_messages(
        system_prompt=YIELD_PREDICTION_SYSTEM_PROMPT,
        prompt=build_yield_prediction_prompt(form),
    )
    ai_content = await chat_completion(messages)
    logger.debug("AI response: %s", ai_content)

    try:
        parsed = parse_embedded_json(ai_content)
    except ValueError as e:
        logger.error("Failed to parse AI response: %s", ai_content)
        raise AIServiceError("Failed to parse AI response as JSON") from e

    try:
        return YieldPrediction.model_validate(parsed)
    except ValidationError as e:
        logger.error("AI prediction did not match the expected shape: %s", e)
        raise AIServiceError(INVALID_AI_RESPONSE) from e
