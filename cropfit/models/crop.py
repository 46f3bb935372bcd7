from enum import Enum
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field

from .environment import SoilTexture


class Season(str, Enum):
    KHARIF = "kharif"
    RABI = "rabi"
    ZAID = "zaid"
    PERENNIAL = "perennial"
    ANNUAL = "annual"


class WaterRequirement(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class CropProfile(BaseModel):
    """Static reference data for one crop in the knowledge base."""

    model_config = ConfigDict(frozen=True)

    name: str
    varieties: Tuple[str, ...] = Field(
        min_length=1, description="Ordered, the first one is the default pick"
    )
    water_requirement: WaterRequirement
    soil_preference: Tuple[SoilTexture, ...]
    temperature_range: Tuple[float, float] = Field(description="Viable [min, max] in °C")
    seasons: Tuple[Season, ...]
    profit_margin: float
    base_yield: float = Field(gt=0, description="Tonnes per hectare")
    market_price: float = Field(ge=0, description="₹ per tonne")
    production_cost: float = Field(ge=0, description="₹ per hectare")

    @property
    def default_variety(self) -> str:
        return self.varieties[0]
