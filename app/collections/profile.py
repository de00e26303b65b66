from typing import Optional

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument

from app.core.mongodb import get_profile_collection
from app.models.profile import Profile, ProfileUpdate


async def get_profile_from_user_id(user_id: str) -> Optional[Profile]:
    profile_collection: AsyncIOMotorCollection = get_profile_collection()
    response = await profile_collection.find_one({"_id": user_id})
    return Profile.model_validate(response) if response else None


async def create_profile(profile: Profile) -> Profile:
    profile_collection: AsyncIOMotorCollection = get_profile_collection()
    payload = profile.model_dump(mode="json", by_alias=True)
    await profile_collection.replace_one({"_id": profile.id}, payload, upsert=True)
    response = await profile_collection.find_one({"_id": profile.id})
    return Profile.model_validate(response)


async def update_profile(user_id: str, update: ProfileUpdate) -> Optional[Profile]:
    """Updates the editable fields of an existing row; never creates one."""
    profile_collection: AsyncIOMotorCollection = get_profile_collection()
    response = await profile_collection.find_one_and_update(
        {"_id": user_id},
        {"$set": update.model_dump(mode="json")},
        return_document=ReturnDocument.AFTER,
    )
    return Profile.model_validate(response) if response else None


async def delete_profile(user_id: str) -> bool:
    profile_collection: AsyncIOMotorCollection = get_profile_collection()
    result = await profile_collection.delete_one({"_id": user_id})
    return result.deleted_count > 0
