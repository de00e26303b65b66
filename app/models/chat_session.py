from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import AliasChoices, BaseModel, Field, field_validator


class Language(str, Enum):
    ENGLISH = "en"
    KANNADA = "kn"
    HINDI = "hi"


LANGUAGE_NAMES = {
    Language.ENGLISH: "English",
    Language.KANNADA: "Kannada",
    Language.HINDI: "Hindi",
}

SPEECH_LOCALES = {
    Language.KANNADA: "kn-IN",
    Language.HINDI: "hi-IN",
}
DEFAULT_SPEECH_LOCALE = "en-US"


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class ChatSession(BaseModel):
    id: str = Field(
        default_factory=lambda: uuid4().hex,
        validation_alias=AliasChoices("id", "_id"),
        serialization_alias="_id",
    )
    user_id: str = Field(...)
    language: Language = Field(default=Language.ENGLISH)
    ts: float = Field(default_factory=lambda: datetime.now().timestamp())


class Message(BaseModel):
    id: str = Field(
        default_factory=lambda: uuid4().hex,
        validation_alias=AliasChoices("id", "_id"),
        serialization_alias="_id",
    )
    chat_id: str = Field(...)
    role: Role = Field(...)
    content: str = Field(...)
    ts: float = Field(default_factory=lambda: datetime.now().timestamp())


class AssistantRequest(BaseModel):
    message: str = Field(min_length=1)
    lang: Language = Field(default=Language.ENGLISH)
    chat_id: Optional[str] = Field(
        default=None, description="Existing chat session to continue and record."
    )

    @field_validator("message")
    @classmethod
    def _reject_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("message must not be blank")
        return value


class AssistantReply(BaseModel):
    reply: str
    speech_lang: str = Field(description="BCP-47 locale for speaking the reply.")
    chat_id: Optional[str] = None


class TranscriptionResponse(BaseModel):
    transcription: str
