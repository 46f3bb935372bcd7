import os
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    OPENWEATHERMAP_API_KEY: str = os.environ.get("OPENWEATHERMAP_API_KEY", "")
    OPENWEATHERMAP_BASE_URL: str = "https://api.openweathermap.org/data/2.5"
    SOILGRIDS_BASE_URL: str = "https://rest.isric.org/soilgrids/v2.0"
    SATELLITE_API_KEY: str = os.environ.get("SATELLITE_API_KEY", "")
    SATELLITE_BASE_URL: str = "https://bhuvan-app1.nrsc.gov.in/api/satellite"

    MONGO_URI: str = os.environ.get("MONGO_URI", "")
    MONGO_DIRECT_URI: str = os.environ.get("MONGO_DIRECT_URI", "")
    MONGO_DB_NAME: str = "main"

    CACHE_BACKEND: str = "memory"
    CACHE_COORDINATE_PRECISION: int = 2
    WEATHER_CACHE_TTL_SECONDS: int = 60 * 60
    SOIL_CACHE_TTL_SECONDS: int = 60 * 60 * 24
    SATELLITE_CACHE_TTL_SECONDS: int = 60 * 60 * 12

    UPSTREAM_TIMEOUT_SECONDS: float = 10.0
    UPSTREAM_MAX_ATTEMPTS: int = 3
    UPSTREAM_BACKOFF_SECONDS: float = 0.5

    MARKET_VOLATILE_CROPS: List[str] = ["cotton", "soybean"]

    LOG_LEVEL: str = "INFO"


settings = Settings()
