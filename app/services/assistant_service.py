import logging
from typing import Optional

from fastapi import status
from google.genai import types
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage

from app.collections.chat_session import (
    get_messages_from_chat_session_id,
    get_owned_chat_session,
    save_message,
)
from app.core.config import settings
from app.core.errors import AIServiceError
from app.core.genai_client import get_transcription_client
from app.models.chat_session import (
    DEFAULT_SPEECH_LOCALE,
    LANGUAGE_NAMES,
    SPEECH_LOCALES,
    AssistantReply,
    Language,
    Message,
    Role,
)
from app.prompts.assistant_system_prompt import (
    ASSISTANT_SYSTEM_PROMPT,
    TRANSCRIPTION_PROMPT,
)
from app.services.llm_gateway import build_prompt_messages, chat_completion

logger = logging.getLogger(__name__)


def speech_locale(lang: Language) -> str:
    return SPEECH_LOCALES.get(lang, DEFAULT_SPEECH_LOCALE)


def _history_to_langchain(messages: list[Message]) -> list[BaseMessage]:
    history: list[BaseMessage] = []
    for message in messages:
        if message.role == Role.ASSISTANT:
            history.append(AIMessage(content=message.content))
        elif message.role == Role.USER:
            history.append(HumanMessage(content=message.content))
    return history


async def transcribe_audio(
    data: bytes, mime_type: Optional[str], lang: Language = Language.ENGLISH
) -> str:
    if not data:
        raise AIServiceError("Empty audio upload", status.HTTP_400_BAD_REQUEST)

    prompt = TRANSCRIPTION_PROMPT.format(language=LANGUAGE_NAMES[lang])
    client = get_transcription_client()
    try:
        response = await client.aio.models.generate_content(
            model=settings.TRANSCRIPTION_MODEL,
            contents=[
                types.Part.from_bytes(data=data, mime_type=mime_type or "audio/webm"),
                prompt,
            ],
        )
    except Exception as e:
        logger.exception("Audio transcription failed")
        raise AIServiceError("Voice processing failed.") from e

    transcription = (response.text or "").strip()
    if not transcription:
        logger.warning("Transcription returned no text (%d bytes of audio)", len(data))
        raise AIServiceError("Voice processing failed.")
    return transcription


async def assistant_reply(
    user_id: str,
    message: str,
    lang: Language = Language.ENGLISH,
    chat_id: Optional[str] = None,
) -> AssistantReply:
    history: list[Message] = []
    if chat_id:
        await get_owned_chat_session(chat_id, user_id)
        history = await get_messages_from_chat_session_id(chat_id)

    messages = build_prompt_messages(
        system_prompt=(
            f"{ASSISTANT_SYSTEM_PROMPT}\nUser specified language: {LANGUAGE_NAMES[lang]}"
        ),
        prompt=message,
        history=_history_to_langchain(history),
    )
    reply = (await chat_completion(messages)).strip()

    if chat_id:
        await save_message(Message(chat_id=chat_id, role=Role.USER, content=message))
        await save_message(Message(chat_id=chat_id, role=Role.ASSISTANT, content=reply))

    return AssistantReply(reply=reply, speech_lang=speech_locale(lang), chat_id=chat_id)
