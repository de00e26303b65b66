from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from app.collections.chat_session import (
    delete_chat_session,
    get_chat_sessions_from_user_id,
    get_messages_from_chat_session_id,
    get_owned_chat_session,
    save_chat_session,
)
from app.core.security import verify_jwt
from app.models.chat_session import ChatSession, Language, Message

router = APIRouter(prefix="/chats", tags=["Chat"])


class CreateChatRequest(BaseModel):
    language: Language = Language.ENGLISH


@router.post("/", response_model=ChatSession, status_code=status.HTTP_201_CREATED)
async def create_chat_session(
    request: CreateChatRequest,
    user_payload: dict = Depends(verify_jwt),
):
    """
    Creates a new assistant chat session and returns its permanent ID.
    """
    chat = ChatSession(user_id=user_payload["sub"], language=request.language)
    return await save_chat_session(chat)


@router.get("/", response_model=List[ChatSession])
async def get_user_chat_sessions(user_payload: dict = Depends(verify_jwt)):
    """
    Get all chat sessions of the authenticated user, newest first.
    """
    return await get_chat_sessions_from_user_id(user_payload["sub"])


@router.get("/{chat_id}/messages", response_model=List[Message])
async def get_chat_messages(
    chat_id: str,
    limit: Optional[int] = Query(
        default=None, description="Limit the number of messages returned", ge=1, le=100
    ),
    user_payload: dict = Depends(verify_jwt),
):
    """
    Get the messages of one of the user's chat sessions, oldest first.
    """
    await get_owned_chat_session(chat_id, user_payload["sub"])
    return await get_messages_from_chat_session_id(chat_id, limit=limit)


@router.delete("/{chat_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user_chat_session(chat_id: str, user_payload: dict = Depends(verify_jwt)):
    """
    Deletes a chat session and all its messages.
    """
    await delete_chat_session(chat_id=chat_id, user_id=user_payload["sub"])
    return
