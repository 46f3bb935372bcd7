from datetime import datetime
from enum import Enum
from typing import List, Optional
from uuid import uuid4

from pydantic import AliasChoices, BaseModel, Field

from .crop import Season
from .environment import EnvironmentalSnapshot, SoilTexture


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class CropRecommendation(BaseModel):
    """Describes a single scored crop."""

    crop: str
    variety: str
    suitability: int = Field(ge=0, le=100, description="0-100 soil & weather fit")
    expected_yield: float = Field(description="Tonnes per hectare")
    profitability: int = Field(description="Net ₹ for the whole farm, may be negative")
    risk_level: RiskLevel
    reasons: List[str]
    best_practices: List[str]


class CropRecommendationRequest(BaseModel):
    latitude: float = Field(description="Latitude of the farm.")
    longitude: float = Field(description="Longitude of the farm.")
    season: Season
    farm_size_hectares: float = Field(description="Farm size in hectares, must be positive.")
    soil_type: Optional[SoilTexture] = Field(
        default=None, description="Overrides the soil texture derived from SoilGrids."
    )
    farmer_id: Optional[str] = Field(
        default=None, description="Used to load the farmer's crop history."
    )
    farm_id: Optional[str] = None


class CropRecommendationResponse(BaseModel):
    """Scored recommendations together with the inputs they were computed from."""

    id: str = Field(
        default_factory=lambda: uuid4().hex,
        description="UUID of the recommendation. Generated by program.",
        validation_alias=AliasChoices("id", "_id"),
        serialization_alias="_id",
    )
    farmer_id: Optional[str] = None
    farm_id: Optional[str] = None
    timestamp: datetime = Field(
        description="Timestamp of recommendation generation",
        default_factory=datetime.now,
    )
    season: Season
    farm_size_hectares: float
    snapshot: EnvironmentalSnapshot
    recommendations: List[CropRecommendation]
