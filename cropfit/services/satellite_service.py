import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from cropfit.core.config import settings
from cropfit.core.errors import UpstreamUnavailable
from cropfit.models.environment import DataKind, DataSource, SatelliteData

from .cache import ResultCache, build_cache_key, get_result_cache, read_cached, write_cached
from .http_client import fetch_json, upstream_client

logger = logging.getLogger(__name__)


def parse_satellite_payload(payload: Dict[str, Any]) -> SatelliteData:
    if not isinstance(payload, dict):
        raise UpstreamUnavailable(DataKind.SATELLITE.value, "unexpected payload")
    return SatelliteData(
        ndvi=payload.get("ndvi"),
        evi=payload.get("evi"),
        moisture=payload.get("moisture"),
        temperature=payload.get("temperature"),
        image_url=payload.get("imageUrl") or payload.get("image_url"),
        date=payload.get("date"),
    )


async def get_satellite_data(
    lat: float,
    lon: float,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    *,
    client: Optional[httpx.AsyncClient] = None,
    cache: Optional[ResultCache] = None,
) -> SatelliteData:
    """
    Fetches vegetation index and soil moisture readings for a location.

    Fields the provider leaves out stay None.
    """
    cache = cache or get_result_cache()
    cache_key = build_cache_key(DataKind.SATELLITE.value, lat, lon, start_date, end_date)

    cached = await read_cached(cache, cache_key)
    if cached:
        try:
            return SatelliteData.model_validate_json(cached).model_copy(
                update={"source": DataSource.CACHE}
            )
        except ValidationError:
            logger.warning("Discarding unreadable satellite cache entry '%s'", cache_key)

    params = {"lat": lat, "lon": lon, "key": settings.SATELLITE_API_KEY}
    if start_date:
        params["start"] = start_date
    if end_date:
        params["end"] = end_date

    async with upstream_client(client) as http:
        payload = await fetch_json(
            http,
            f"{settings.SATELLITE_BASE_URL}/data",
            params,
            kind=DataKind.SATELLITE.value,
        )

    try:
        satellite = parse_satellite_payload(payload)
    except ValidationError as e:
        logger.warning("Error validating satellite data: %s", e)
        raise UpstreamUnavailable(DataKind.SATELLITE.value, "unexpected payload") from e

    await write_cached(
        cache, cache_key, satellite.model_dump_json(), settings.SATELLITE_CACHE_TTL_SECONDS
    )
    return satellite
