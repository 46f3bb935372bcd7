import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from cropfit.core.config import settings
from cropfit.core.errors import UpstreamUnavailable
from cropfit.models.environment import (
    CurrentConditions,
    DataKind,
    DataSource,
    ForecastEntry,
    TemperatureRange,
    WeatherData,
)
from cropfit.models.weather import ForecastListItem, ForecastResponse

from .cache import ResultCache, build_cache_key, get_result_cache, read_cached, write_cached
from .http_client import fetch_json, upstream_client

logger = logging.getLogger(__name__)

FORECAST_ENTRIES = 7


def _to_forecast_entry(item: ForecastListItem) -> ForecastEntry:
    return ForecastEntry(
        date=item.dt_txt,
        temperature=TemperatureRange(min=item.main.temp_min, max=item.main.temp_max),
        humidity=item.main.humidity,
        precipitation=(item.rain.three_hours or 0) if item.rain else 0,
        description=item.weather[0].description if item.weather else "",
    )


def normalize_forecast(forecast: ForecastResponse) -> WeatherData:
    """
    Reduces a 5-day / 3-hour forecast to current conditions plus a short
    forecast. The first entry stands in for the current conditions.
    """
    if not forecast.list:
        raise UpstreamUnavailable(DataKind.WEATHER.value, "forecast list is empty")

    first = forecast.list[0]
    current = CurrentConditions(
        temperature=first.main.temp,
        humidity=first.main.humidity,
        wind_speed=first.wind.speed,
        description=first.weather[0].description if first.weather else "",
    )
    return WeatherData(
        current=current,
        forecast=[
            _to_forecast_entry(item) for item in forecast.list[1 : FORECAST_ENTRIES + 1]
        ],
    )


async def get_weather_data(
    lat: float,
    lon: float,
    *,
    client: Optional[httpx.AsyncClient] = None,
    cache: Optional[ResultCache] = None,
) -> WeatherData:
    """
    Fetches current weather and a short forecast for a location.

    Args:
        lat: Latitude.
        lon: Longitude.

    Returns:
        WeatherData, served from the result cache when a fresh entry exists.

    Raises:
        UpstreamUnavailable: the provider failed and nothing was cached.
    """
    cache = cache or get_result_cache()
    cache_key = build_cache_key(DataKind.WEATHER.value, lat, lon)

    cached = await read_cached(cache, cache_key)
    if cached:
        try:
            return WeatherData.model_validate_json(cached).model_copy(
                update={"source": DataSource.CACHE}
            )
        except ValidationError:
            logger.warning("Discarding unreadable weather cache entry '%s'", cache_key)

    params = {
        "lat": lat,
        "lon": lon,
        "appid": settings.OPENWEATHERMAP_API_KEY,
        "units": "metric",
    }
    async with upstream_client(client) as http:
        data = await fetch_json(
            http,
            f"{settings.OPENWEATHERMAP_BASE_URL}/forecast",
            params,
            kind=DataKind.WEATHER.value,
        )

    try:
        weather = normalize_forecast(ForecastResponse.model_validate(data))
    except ValidationError as e:
        logger.warning("Error validating weather data: %s", e)
        raise UpstreamUnavailable(DataKind.WEATHER.value, "unexpected payload") from e

    await write_cached(
        cache, cache_key, weather.model_dump_json(), settings.WEATHER_CACHE_TTL_SECONDS
    )
    return weather
