from datetime import datetime
from uuid import uuid4

from pydantic import AliasChoices, BaseModel, Field

from app.models.chat_session import Language


class User(BaseModel):
    """A farmer account, identified by phone number."""

    id: str = Field(
        default_factory=lambda: uuid4().hex,
        validation_alias=AliasChoices("id", "_id"),
        serialization_alias="_id",
    )
    phone: str = Field(min_length=1)
    name: str = Field(min_length=1)
    language: Language = Field(default=Language.ENGLISH, description="Preferred UI language.")
    is_verified: bool = False
    created_at: float = Field(default_factory=lambda: datetime.now().timestamp())
