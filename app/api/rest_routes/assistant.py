from fastapi import APIRouter, Depends, File, Form, UploadFile

from app.core.security import verify_jwt
from app.models.chat_session import (
    AssistantReply,
    AssistantRequest,
    Language,
    TranscriptionResponse,
)
from app.services.assistant_service import assistant_reply, transcribe_audio

router = APIRouter(prefix="/api", tags=["AI Assistant"])


@router.post("/voice-assistant", response_model=TranscriptionResponse)
async def voice_assistant(
    audio: UploadFile = File(...),
    lang: Language = Form(Language.ENGLISH),
    user_payload: dict = Depends(verify_jwt),
) -> TranscriptionResponse:
    """
    Transcribes a recorded question. The client sends the transcription on
    to /api/ai-assistant.
    """
    data = await audio.read()
    transcription = await transcribe_audio(data, audio.content_type, lang)
    return TranscriptionResponse(transcription=transcription)


@router.post("/ai-assistant", response_model=AssistantReply)
async def ai_assistant(
    request: AssistantRequest,
    user_payload: dict = Depends(verify_jwt),
) -> AssistantReply:
    """
    Answers a farming question. When chat_id is given the conversation is
    continued and recorded in that chat session.
    """
    return await assistant_reply(
        user_id=user_payload["sub"],
        message=request.message,
        lang=request.lang,
        chat_id=request.chat_id,
    )
