from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

# --- OpenWeatherMap 5-day / 3-hour forecast payload ---


class WeatherCondition(BaseModel):
    """Describes the weather condition (e.g., 'Clouds', 'Rain')."""

    id: int
    main: str
    description: str
    icon: Optional[str] = None


class MainWeatherData(BaseModel):
    """Core weather metrics like temperature and humidity."""

    temp: float
    feels_like: Optional[float] = None
    temp_min: float
    temp_max: float
    pressure: Optional[int] = None
    humidity: int


class Wind(BaseModel):
    """Wind speed and direction."""

    speed: float
    deg: Optional[int] = None
    gust: Optional[float] = None


class Rain(BaseModel):
    """Rain volume."""

    one_hour: Optional[float] = Field(None, alias="1h")
    three_hours: Optional[float] = Field(None, alias="3h")


class ForecastListItem(BaseModel):
    """A single forecast entry for a specific timestamp."""

    dt: datetime
    main: MainWeatherData
    weather: List[WeatherCondition]
    wind: Wind
    pop: Optional[float] = Field(default=None, description="Probability of precipitation")
    rain: Optional[Rain] = None
    dt_txt: str


class Coordinates(BaseModel):
    lat: float
    lon: float


class City(BaseModel):
    """Information about the city in the forecast."""

    id: Optional[int] = None
    name: Optional[str] = None
    coord: Optional[Coordinates] = None
    country: Optional[str] = None
    timezone: Optional[int] = None


class ForecastResponse(BaseModel):
    """Model for the 5-day/3-hour Forecast API response."""

    list: List[ForecastListItem]
    city: Optional[City] = None
