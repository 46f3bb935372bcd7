import logging
import math
from typing import List, Optional

import httpx
from fastapi import HTTPException, status
from pymongo.errors import PyMongoError

from cropfit.collections.crop_history import get_recent_crop_history
from cropfit.collections.crop_recommendation import save_crop_recommendation
from cropfit.collections.farm_profile import get_farm_profile_from_id
from cropfit.core.errors import InvalidInput
from cropfit.models.crop import Season
from cropfit.models.crop_history import HistoricalRecord
from cropfit.models.crop_recommendation import (
    CropRecommendationRequest,
    CropRecommendationResponse,
)
from cropfit.models.environment import make_coordinate

from . import scoring_engine
from .cache import ResultCache
from .environment_service import fetch_environmental_snapshot

logger = logging.getLogger(__name__)


def validate_request(request: CropRecommendationRequest) -> None:
    make_coordinate(request.latitude, request.longitude)
    size = request.farm_size_hectares
    if not (math.isfinite(size) and size > 0):
        raise InvalidInput(f"Farm size must be positive, got {size}")


async def _load_history(farmer_id: Optional[str]) -> List[HistoricalRecord]:
    if not farmer_id:
        return []
    try:
        return await get_recent_crop_history(farmer_id)
    except PyMongoError as e:
        logger.warning("Could not load crop history for farmer %s, scoring without it: %s", farmer_id, e)
        return []


async def generate_crop_recommendations(
    request: CropRecommendationRequest,
    *,
    persist: bool = True,
    client: Optional[httpx.AsyncClient] = None,
    cache: Optional[ResultCache] = None,
) -> CropRecommendationResponse:
    """
    Scores crops for a location and season and stores the result.

    Upstream outages never fail the request: missing readings are replaced by
    defaults and flagged in the snapshot provenance. A storage outage only
    drops the farmer history or the saved copy. Only malformed input raises.
    """
    validate_request(request)
    coordinate = make_coordinate(request.latitude, request.longitude)

    history = await _load_history(request.farmer_id)
    snapshot = await fetch_environmental_snapshot(coordinate, client=client, cache=cache)
    if request.soil_type is not None:
        snapshot = snapshot.with_soil_texture(request.soil_type)
    if snapshot.is_synthetic:
        logger.warning(
            "Scoring %s at (%s, %s) with default readings: %s",
            request.season.value,
            coordinate.latitude,
            coordinate.longitude,
            {kind.value: source.value for kind, source in snapshot.provenance.items()},
        )

    recommendations = scoring_engine.score(
        snapshot, request.season, request.farm_size_hectares, history
    )

    response = CropRecommendationResponse(
        farmer_id=request.farmer_id,
        farm_id=request.farm_id,
        season=request.season,
        farm_size_hectares=request.farm_size_hectares,
        snapshot=snapshot,
        recommendations=recommendations,
    )
    if persist:
        try:
            response = await save_crop_recommendation(response)
        except PyMongoError as e:
            logger.error("Failed to save crop recommendation %s: %s", response.id, e)
    return response


async def get_seasonal_recommendations(
    farm_id: str,
    season: Season,
    *,
    client: Optional[httpx.AsyncClient] = None,
    cache: Optional[ResultCache] = None,
) -> CropRecommendationResponse:
    """Runs the recommendation pipeline with a stored farm's location and size."""
    farm_profile = await get_farm_profile_from_id(farm_id)
    if farm_profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Farm profile {farm_id} not found",
        )

    request = CropRecommendationRequest(
        latitude=farm_profile.location.latitude,
        longitude=farm_profile.location.longitude,
        season=season,
        farm_size_hectares=farm_profile.size_hectares,
        soil_type=farm_profile.soil_type,
        farmer_id=farm_profile.farmer_id,
        farm_id=farm_profile.id,
    )
    return await generate_crop_recommendations(request, client=client, cache=cache)
