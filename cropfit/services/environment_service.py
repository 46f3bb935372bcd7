import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

import httpx

from cropfit.core.errors import UpstreamUnavailable
from cropfit.models.environment import (
    Coordinate,
    CurrentConditions,
    DataKind,
    DataSource,
    EnvironmentalSnapshot,
    SatelliteData,
    SoilData,
    SoilTexture,
    WeatherData,
)

from .cache import ResultCache, get_result_cache
from .http_client import upstream_client
from .satellite_service import get_satellite_data
from .soilgrids_service import get_soil_data
from .weather_service import get_weather_data

logger = logging.getLogger(__name__)

# Fixed mid-range readings used when a provider is down. Always flagged
# DataSource.DEFAULT so callers can tell them apart from measurements.
DEFAULT_WEATHER = WeatherData(
    current=CurrentConditions(
        temperature=25.0, humidity=60.0, wind_speed=2.0, description="unavailable"
    ),
    forecast=[],
    source=DataSource.DEFAULT,
)
DEFAULT_SOIL = SoilData(
    ph=6.5,
    organic_matter=2.0,
    nitrogen=1.0,
    phosphorus=30.0,
    potassium=150.0,
    soil_type=SoilTexture.LOAMY,
    source=DataSource.DEFAULT,
)
DEFAULT_SATELLITE = SatelliteData(source=DataSource.DEFAULT)


def build_snapshot(
    weather: WeatherData,
    soil: SoilData,
    satellite: Optional[SatelliteData] = None,
    captured_at: Optional[datetime] = None,
) -> EnvironmentalSnapshot:
    provenance = {DataKind.WEATHER: weather.source, DataKind.SOIL: soil.source}
    if satellite is not None:
        provenance[DataKind.SATELLITE] = satellite.source

    return EnvironmentalSnapshot(
        temperature=weather.current.temperature,
        humidity=weather.current.humidity,
        wind_speed=weather.current.wind_speed,
        soil_ph=soil.ph,
        organic_matter=soil.organic_matter,
        nitrogen=soil.nitrogen,
        phosphorus=soil.phosphorus,
        potassium=soil.potassium,
        soil_texture=soil.soil_type,
        ndvi=satellite.ndvi if satellite else None,
        soil_moisture=satellite.moisture if satellite else None,
        provenance=provenance,
        captured_at=captured_at,
    )


def default_snapshot() -> EnvironmentalSnapshot:
    """A fully synthetic snapshot, every reading marked as a default."""
    return build_snapshot(DEFAULT_WEATHER, DEFAULT_SOIL)


def _resolve(result, default, kind: DataKind, strict: bool):
    if not isinstance(result, BaseException):
        return result
    if isinstance(result, UpstreamUnavailable) and not strict:
        logger.warning("Using default %s readings: %s", kind.value, result)
        return default
    raise result


async def fetch_environmental_snapshot(
    coordinate: Coordinate,
    *,
    include_satellite: bool = False,
    strict: bool = False,
    client: Optional[httpx.AsyncClient] = None,
    cache: Optional[ResultCache] = None,
) -> EnvironmentalSnapshot:
    """
    Fetches weather, soil and optionally satellite readings concurrently.

    A provider failure only affects its own kind. Unless ``strict`` is set,
    that kind is replaced by its documented default and flagged in the
    snapshot's provenance; with ``strict`` the UpstreamUnavailable is raised.
    """
    cache = cache or get_result_cache()
    lat, lon = coordinate.latitude, coordinate.longitude

    async with upstream_client(client) as http:
        fetches = [
            get_weather_data(lat, lon, client=http, cache=cache),
            get_soil_data(lat, lon, client=http, cache=cache),
        ]
        if include_satellite:
            fetches.append(get_satellite_data(lat, lon, client=http, cache=cache))
        results = await asyncio.gather(*fetches, return_exceptions=True)

    weather = _resolve(results[0], DEFAULT_WEATHER, DataKind.WEATHER, strict)
    soil = _resolve(results[1], DEFAULT_SOIL, DataKind.SOIL, strict)
    satellite = None
    if include_satellite:
        satellite = _resolve(results[2], DEFAULT_SATELLITE, DataKind.SATELLITE, strict)

    return build_snapshot(weather, soil, satellite, captured_at=datetime.now(timezone.utc))
