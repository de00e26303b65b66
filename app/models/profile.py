from typing import Optional

from pydantic import AliasChoices, BaseModel, Field


class ProfileUpdate(BaseModel):
    """Editable profile fields, as submitted by the profile form."""

    full_name: str = Field(min_length=1, description="Farmer's full name.")
    phone_number: Optional[str] = Field(default=None, description="e.g. '+91 98765 43210'")
    farm_location: Optional[str] = Field(default=None, description="City, State")
    farm_size_acres: Optional[float] = Field(
        default=None, ge=0, description="Farm size in acres, e.g. 5.5"
    )
    primary_crops: Optional[str] = Field(
        default=None, description="e.g. 'Rice, Wheat, Cotton'"
    )


class Profile(ProfileUpdate):
    """A profile row. The row id is the owning user's id."""

    id: str = Field(
        validation_alias=AliasChoices("id", "_id"),
        serialization_alias="_id",
    )
