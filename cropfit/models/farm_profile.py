from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import AliasChoices, BaseModel, Field

from .environment import Coordinate, SoilTexture


class IrrigationType(str, Enum):
    """Enumeration for types of irrigation systems."""

    DRIP = "drip"
    SPRINKLER = "sprinkler"
    FLOOD = "flood"
    FURROW = "furrow"
    NONE = "none"


class FarmProfile(BaseModel):
    """Physical details of a farm used to drive seasonal recommendations."""

    id: str = Field(
        description="UUID of the farm profile",
        default_factory=lambda: uuid4().hex,
        validation_alias=AliasChoices("id", "_id"),
        serialization_alias="_id",
    )
    farmer_id: str = Field(description="UUID of the farmer owning the farm")
    name: str = Field(description="Name of the farm any nick name they have.")
    location: Coordinate = Field(description="Location of the farm")
    size_hectares: float = Field(gt=0, description="Total farm area in hectares.")
    soil_type: Optional[SoilTexture] = Field(
        default=None,
        description="Soil texture reported by the farmer, overrides SoilGrids.",
    )
    irrigation_type: IrrigationType = IrrigationType.NONE
