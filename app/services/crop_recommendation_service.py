import logging
from typing import Optional

from pydantic import ValidationError

from app.core.errors import AIServiceError
from app.models.chat_session import LANGUAGE_NAMES, Language
from app.models.crop_recommendation import (
    CropRecommendationForm,
    CropRecommendationResult,
)
from app.prompts.crop_recommendation_system_prompt import (
    CROP_RECOMMENDATION_PROMPT,
    CROP_RECOMMENDATION_SYSTEM_PROMPT,
)
from app.services.llm_gateway import (
    build_prompt_messages,
    chat_completion,
    parse_fenced_json,
)

logger = logging.getLogger(__name__)

INVALID_AI_RESPONSE = "Received an invalid response from the AI service."


def language_instruction(lang: Optional[str]) -> str:
    """Asks for free-text fields in the farmer's language; JSON keys stay English."""
    if not lang or lang == Language.ENGLISH.value:
        return ""
    try:
        language = LANGUAGE_NAMES[Language(lang)]
    except ValueError:
        language = lang
    return (
        f"\n\nWrite all descriptive text values in {language}. "
        "Keep every JSON key in English."
    )


def build_crop_recommendation_prompt(form: CropRecommendationForm) -> str:
    details = [f"- Soil Type: {form.soil_type}"]
    if form.soil_ph:
        details.append(f"- Soil pH: {form.soil_ph}")
    details += [
        f"- Farm Area: {form.area} acres",
        f"- Water Access: {form.water_access}",
        f"- Season: {form.season}",
        f"- Budget: ₹{form.budget}",
        f"- Market Preference: {form.market_preference}",
        f"- Location: {form.location}",
    ]
    if form.previous_crops:
        details.append(f"- Previous Crops: {form.previous_crops}")

    return CROP_RECOMMENDATION_PROMPT.format(
        farm_details="\n".join(details),
        language_instruction=language_instruction(form.lang),
    )


async def recommend_crops(form: CropRecommendationForm) -> CropRecommendationResult:
    logger.info(
        "Received crop recommendation request: soil_type=%s area=%s water_access=%s season=%s location=%s",
        form.soil_type,
        form.area,
        form.water_access,
        form.season,
        form.location,
    )

    messages = build_prompt_messages(
        system_prompt=CROP_RECOMMENDATION_SYSTEM_PROMPT,
        prompt=build_crop_recommendation_prompt(form),
    )
    ai_content = await chat_completion(messages)

    try:
        parsed = parse_fenced_json(ai_content)
    except ValueError as e:
        logger.error("Failed to parse AI response: %s", ai_content)
        raise AIServiceError("Failed to parse AI recommendations") from e

    try:
        result = CropRecommendationResult.model_validate(parsed)
    except ValidationError as e:
        logger.error("AI recommendations did not match the expected shape: %s", e)
        raise AIServiceError(INVALID_AI_RESPONSE) from e

    logger.info(
        "Successfully generated %d recommendations", len(result.recommendations)
    )
    return result
