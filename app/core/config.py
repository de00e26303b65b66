import os
from typing import List

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

load_dotenv()


class Settings(BaseSettings):
    LLM_GATEWAY_URL: str = os.environ.get(
        "LLM_GATEWAY_URL", "https://ai.gateway.lovable.dev/v1/chat/completions"
    )
    LLM_GATEWAY_API_KEY: str = os.environ.get("LLM_GATEWAY_API_KEY", "")
    LLM_MODEL: str = "google/gemini-2.5-flash"
    LLM_TIMEOUT_SECONDS: float = 60.0
    GEMINI_API_KEY: str = os.environ.get("GEMINI_API_KEY", "")
    TRANSCRIPTION_MODEL: str = "gemini-2.5-flash"
    JWT_SECRET_KEY: str = os.environ.get("JWT_SECRET_KEY", "")
    JWT_EXPIRE_MINUTES: int = 60 * 24 * 7
    MONGO_URI: str = os.environ.get("MONGO_URI", "mongodb://localhost:27017")
    MONGO_DIRECT_URI: str = os.environ.get("MONGO_DIRECT_URI", "")
    MONGO_DB_NAME: str = "agritrust"
    PDF_FONT_DIR: str = os.environ.get("PDF_FONT_DIR", "/usr/share/fonts/truetype/noto")
    CORS_ALLOW_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"


settings = Settings()
