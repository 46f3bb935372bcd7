import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from cropfit.core.config import settings
from cropfit.core.errors import UpstreamUnavailable
from cropfit.models.environment import DataKind, DataSource, SoilData, SoilTexture

from .cache import ResultCache, build_cache_key, get_result_cache, read_cached, write_cached
from .http_client import fetch_json, upstream_client

logger = logging.getLogger(__name__)

SOIL_PROPERTIES = ["phh2o", "soc", "nitrogen", "sand", "clay"]
SOIL_DEPTH = "0-5cm"
# Van Bemmelen factor, organic carbon -> organic matter.
ORGANIC_CARBON_TO_MATTER = 1.724


def classify_soil_texture(sand: float, clay: float) -> SoilTexture:
    """
    Classifies soil texture from sand and clay percentages.

    Silt is the remainder. Rules are checked in a fixed order and the first
    one that matches wins, so boundary values resolve to the earlier class.
    """
    silt = 100 - sand - clay

    if clay >= 40:
        return SoilTexture.CLAY
    if sand >= 85:
        return SoilTexture.SANDY
    if silt >= 80:
        return SoilTexture.SILT
    if 27 <= clay < 40 and sand <= 45:
        return SoilTexture.CLAY_LOAM
    if 20 <= clay < 35 and silt < 28 and sand > 45:
        return SoilTexture.SANDY_CLAY_LOAM
    if clay < 20 and sand > 52:
        return SoilTexture.SANDY_LOAM
    if silt >= 50 and 12 <= clay < 27:
        return SoilTexture.SILT_LOAM
    if silt >= 50 and clay < 12:
        return SoilTexture.SILT
    return SoilTexture.LOAMY


def _layer_means(payload: Dict[str, Any]) -> Dict[str, float]:
    """Maps property name to its top-layer mean, converted with ``d_factor``."""
    means: Dict[str, float] = {}
    for layer in payload.get("properties", {}).get("layers", []):
        d_factor = (layer.get("unit_measure") or {}).get("d_factor") or 1
        for depth in layer.get("depths", []):
            if depth.get("label") != SOIL_DEPTH:
                continue
            mean = (depth.get("values") or {}).get("mean")
            if mean is not None:
                means[layer["name"]] = mean / d_factor
    return means


def parse_soilgrids_payload(payload: Dict[str, Any]) -> SoilData:
    if not isinstance(payload, dict):
        raise UpstreamUnavailable(DataKind.SOIL.value, "unexpected payload")
    means = _layer_means(payload)
    missing = [name for name in SOIL_PROPERTIES if name not in means]
    if missing:
        raise UpstreamUnavailable(
            DataKind.SOIL.value, f"no values for {', '.join(missing)} at this location"
        )

    # SoilGrids reports soc in g/kg, sand/clay in %, nitrogen in g/kg once
    # d_factor is applied.
    organic_carbon_percent = means["soc"] / 10
    return SoilData(
        ph=means["phh2o"],
        organic_matter=round(organic_carbon_percent * ORGANIC_CARBON_TO_MATTER, 2),
        nitrogen=means["nitrogen"],
        sand_percent=means["sand"],
        clay_percent=means["clay"],
        soil_type=classify_soil_texture(means["sand"], means["clay"]),
    )


async def get_soil_data(
    lat: float,
    lon: float,
    *,
    client: Optional[httpx.AsyncClient] = None,
    cache: Optional[ResultCache] = None,
) -> SoilData:
    """
    Fetches topsoil properties from the SoilGrids API for a given location.

    Args:
        lat: Latitude of the location.
        lon: Longitude of the location.

    Returns:
        SoilData with texture classified from the sand and clay fractions.

    Raises:
        UpstreamUnavailable: SoilGrids failed or had no data, and nothing was cached.
    """
    cache = cache or get_result_cache()
    cache_key = build_cache_key(DataKind.SOIL.value, lat, lon)

    cached = await read_cached(cache, cache_key)
    if cached:
        try:
            return SoilData.model_validate_json(cached).model_copy(
                update={"source": DataSource.CACHE}
            )
        except ValidationError:
            logger.warning("Discarding unreadable soil cache entry '%s'", cache_key)

    params = {
        "lat": lat,
        "lon": lon,
        "property": SOIL_PROPERTIES,
        "depth": SOIL_DEPTH,
        "value": "mean",
    }
    logger.info("Fetching SoilGrids data for lat=%s lon=%s", lat, lon)
    async with upstream_client(client) as http:
        payload = await fetch_json(
            http,
            f"{settings.SOILGRIDS_BASE_URL}/properties/query",
            params,
            kind=DataKind.SOIL.value,
        )

    try:
        soil = parse_soilgrids_payload(payload)
    except ValidationError as e:
        logger.warning("Error validating SoilGrids data: %s", e)
        raise UpstreamUnavailable(DataKind.SOIL.value, "unexpected payload") from e

    await write_cached(cache, cache_key, soil.model_dump_json(), settings.SOIL_CACHE_TTL_SECONDS)
    return soil
