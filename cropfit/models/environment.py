from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import List, Mapping, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializationInfo,
    ValidationError,
    field_serializer,
    field_validator,
)

from cropfit.core.errors import InvalidInput


class Coordinate(BaseModel):
    """WGS84 point in decimal degrees."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90, le=90, allow_inf_nan=False)
    longitude: float = Field(ge=-180, le=180, allow_inf_nan=False)


def make_coordinate(latitude: float, longitude: float) -> Coordinate:
    try:
        return Coordinate(latitude=latitude, longitude=longitude)
    except ValidationError as e:
        raise InvalidInput(f"Invalid coordinate ({latitude}, {longitude})") from e


class SoilTexture(str, Enum):
    CLAY = "clay"
    SANDY = "sandy"
    SILT = "silt"
    LOAMY = "loamy"
    CLAY_LOAM = "clay_loam"
    SANDY_CLAY_LOAM = "sandy_clay_loam"
    SANDY_LOAM = "sandy_loam"
    SILT_LOAM = "silt_loam"


class DataKind(str, Enum):
    WEATHER = "weather"
    SOIL = "soil"
    SATELLITE = "satellite"


class DataSource(str, Enum):
    """Where a reading in a snapshot came from."""

    LIVE = "live"
    CACHE = "cache"
    DEFAULT = "default"


class CurrentConditions(BaseModel):
    temperature: float = Field(description="Air temperature in °C")
    humidity: float = Field(ge=0, le=100, description="Relative humidity in %")
    wind_speed: float = Field(ge=0, description="Wind speed in m/s")
    description: str = ""


class TemperatureRange(BaseModel):
    min: float
    max: float


class ForecastEntry(BaseModel):
    date: str
    temperature: TemperatureRange
    humidity: float
    precipitation: float = Field(default=0, description="Rain volume for 3 hours, mm")
    description: str = ""


class WeatherData(BaseModel):
    current: CurrentConditions
    forecast: List[ForecastEntry] = Field(default_factory=list)
    source: DataSource = DataSource.LIVE


class SoilData(BaseModel):
    ph: float = Field(ge=0, le=14)
    organic_matter: float = Field(ge=0, description="Organic matter in %")
    nitrogen: float = Field(ge=0, description="Total nitrogen in g/kg")
    phosphorus: Optional[float] = Field(default=None, ge=0)
    potassium: Optional[float] = Field(default=None, ge=0)
    sand_percent: Optional[float] = Field(default=None, ge=0, le=100)
    clay_percent: Optional[float] = Field(default=None, ge=0, le=100)
    soil_type: SoilTexture
    source: DataSource = DataSource.LIVE


class SatelliteData(BaseModel):
    ndvi: Optional[float] = Field(default=None, ge=-1, le=1)
    evi: Optional[float] = None
    moisture: Optional[float] = Field(default=None, description="Soil moisture in %")
    temperature: Optional[float] = Field(
        default=None, description="Land surface temperature in °C"
    )
    image_url: Optional[str] = None
    date: Optional[str] = None
    source: DataSource = DataSource.LIVE


class EnvironmentalSnapshot(BaseModel):
    """Readings for one coordinate, built per request and never mutated."""

    model_config = ConfigDict(frozen=True)

    temperature: float
    humidity: float
    wind_speed: float
    soil_ph: float
    organic_matter: float
    nitrogen: Optional[float] = None
    phosphorus: Optional[float] = None
    potassium: Optional[float] = None
    soil_texture: SoilTexture
    ndvi: Optional[float] = None
    soil_moisture: Optional[float] = None
    provenance: Mapping[DataKind, DataSource] = Field(default_factory=dict, validate_default=True)
    captured_at: Optional[datetime] = None

    @field_validator("provenance")
    @classmethod
    def freeze_provenance(cls, v: Mapping[DataKind, DataSource]) -> Mapping[DataKind, DataSource]:
        return MappingProxyType(dict(v))

    @field_serializer("provenance")
    def serialize_provenance(self, provenance: Mapping[DataKind, DataSource], info: SerializationInfo):
        if info.mode_is_json():
            return {kind.value: source.value for kind, source in provenance.items()}
        return dict(provenance)

    @property
    def is_synthetic(self) -> bool:
        return DataSource.DEFAULT in self.provenance.values()

    def with_soil_texture(self, soil_texture: SoilTexture) -> "EnvironmentalSnapshot":
        return self.model_copy(update={"soil_texture": soil_texture})
