from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import AliasChoices, BaseModel, Field

from .crop import Season


class QualityGrade(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    AVERAGE = "average"
    POOR = "poor"


class HistoricalRecord(BaseModel):
    """One crop grown by a farmer in a given season and year."""

    id: str = Field(
        default_factory=lambda: uuid4().hex,
        description="UUID of the record, generated by backend.",
        validation_alias=AliasChoices("id", "_id"),
        serialization_alias="_id",
    )
    farmer_id: str
    crop_name: str
    season: Season
    year: int = Field(ge=2000)
    yield_per_hectare: Optional[float] = Field(
        default=None, ge=0, description="Realized yield in tonnes per hectare"
    )
    quality: Optional[QualityGrade] = None
    created_at: datetime = Field(default_factory=datetime.now)
