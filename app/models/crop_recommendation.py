from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CropRecommendationForm(BaseModel):
    """Farm details collected by the crop recommendation form."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True
    )

    soil_type: str = Field(min_length=1)
    soil_ph: Optional[str] = Field(default=None, alias="soilPH")
    area: str = Field(min_length=1, description="Farm area in acres.")
    water_access: str = Field(min_length=1)
    previous_crops: Optional[str] = None
    season: str = Field(min_length=1)
    budget: str = Field(min_length=1, description="Budget in rupees.")
    market_preference: str = Field(min_length=1)
    location: str = Field(min_length=1)
    lang: Optional[str] = Field(default=None, description="UI language code, e.g. 'kn'.")


class RecommendedCrop(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True
    )

    crop_name: str
    confidence: Union[int, float] = Field(ge=0, le=100)
    reasoning: str
    expected_yield: str
    market_demand: str
    risk_level: str = Field(description="Low/Medium/High")


class CropRecommendationResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    recommendations: List[RecommendedCrop]
    summary: str = ""


class CropRecommendationResponse(BaseModel):
    recommendation: CropRecommendationResult
