from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class YieldPredictionForm(BaseModel):
    """Crop and plot details collected by the yield prediction form."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True
    )

    seed_type: str = Field(min_length=1, description="Crop being planted.")
    plot_size: str = Field(min_length=1, description="Plot size in acres.")
    season: str = Field(min_length=1)
    location: str = Field(min_length=1)
    soil_type: str = Field(min_length=1)
    fertilizer_plan: Optional[str] = None
    irrigation_plan: Optional[str] = None
    previous_yield: Optional[str] = Field(
        default=None, description="Previous yield in quintals/acre."
    )
    planting_date: Optional[str] = None
    lang: Optional[str] = None


class CostBreakdown(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    seeds: str = ""
    fertilizer: str = ""
    irrigation: str = ""
    labor: str = ""
    total: str = ""


class YieldPrediction(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True
    )

    predicted_yield: str = Field(description="e.g. '18-22 quintals per acre'")
    estimated_revenue: str = Field(description="e.g. '₹1,80,000 - ₹2,20,000'")
    profit_estimate: str = Field(description="e.g. '₹80,000 - ₹1,20,000'")
    cost_breakdown: CostBreakdown = Field(default_factory=CostBreakdown)
    confidence: Union[int, float] = Field(ge=0, le=100)
    reasoning: str = ""
    market_price: str = ""


class YieldPredictionResponse(BaseModel):
    prediction: YieldPrediction
