from typing import List, Optional

from fastapi import HTTPException, status
from motor.motor_asyncio import AsyncIOMotorCollection

from app.core.mongodb import get_chat_session_collection, get_message_collection
from app.models.chat_session import ChatSession, Message


async def get_chat_sessions_from_user_id(user_id: str) -> List[ChatSession]:
    chat_collection: AsyncIOMotorCollection = get_chat_session_collection()
    chats = chat_collection.find({"user_id": user_id}).sort("ts", -1)
    return [ChatSession.model_validate(chat) async for chat in chats]


async def get_chat_session_from_id(chat_id: str) -> ChatSession:
    chat_collection: AsyncIOMotorCollection = get_chat_session_collection()
    response = await chat_collection.find_one({"_id": chat_id})
    if not response:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"ChatSession {chat_id} not found.",
        )
    return ChatSession.model_validate(response)


async def get_owned_chat_session(chat_id: str, user_id: str) -> ChatSession:
    chat_session = await get_chat_session_from_id(chat_id)
    if chat_session.user_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User does not have access to this chat session",
        )
    return chat_session


async def save_chat_session(chat: ChatSession) -> ChatSession:
    chat_collection: AsyncIOMotorCollection = get_chat_session_collection()
    payload = chat.model_dump(mode="json", exclude_none=True, by_alias=True)
    await chat_collection.replace_one({"_id": chat.id}, payload, upsert=True)
    response = await chat_collection.find_one({"_id": chat.id})
    return ChatSession.model_validate(response)


async def get_messages_from_chat_session_id(
    chat_id: str, limit: Optional[int] = None
) -> List[Message]:
    message_collection: AsyncIOMotorCollection = get_message_collection()
    messages = message_collection.find({"chat_id": chat_id}).sort("ts", 1)
    if limit:
        messages = messages.limit(limit)
    return [Message.model_validate(message) async for message in messages]


async def save_message(message: Message) -> Message:
    message_collection: AsyncIOMotorCollection = get_message_collection()
    payload = message.model_dump(mode="json", exclude_none=True, by_alias=True)
    await message_collection.replace_one({"_id": message.id}, payload, upsert=True)
    return message


async def delete_chat_session(chat_id: str, user_id: str) -> bool:
    await get_owned_chat_session(chat_id, user_id)
    await get_message_collection().delete_many({"chat_id": chat_id})
    await get_chat_session_collection().delete_one({"_id": chat_id})
    return True


async def delete_chat_sessions_from_user_id(user_id: str) -> int:
    chat_collection: AsyncIOMotorCollection = get_chat_session_collection()
    chat_ids = [chat["_id"] async for chat in chat_collection.find({"user_id": user_id})]
    if chat_ids:
        await get_message_collection().delete_many({"chat_id": {"$in": chat_ids}})
        await chat_collection.delete_many({"_id": {"$in": chat_ids}})
    return len(chat_ids)
