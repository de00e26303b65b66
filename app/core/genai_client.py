from functools import lru_cache

from google import genai

from app.core.config import settings
from app.core.errors import AIServiceError


@lru_cache(maxsize=1)
def get_transcription_client() -> genai.Client:
    """Gemini client used to transcribe voice questions."""
    if not settings.GEMINI_API_KEY:
        raise AIServiceError("GEMINI_API_KEY is not configured")
    return genai.Client(api_key=settings.GEMINI_API_KEY)
