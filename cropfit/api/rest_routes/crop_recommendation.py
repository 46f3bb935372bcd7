from typing import List

from fastapi import APIRouter, HTTPException, Query, status

from cropfit.collections import crop_recommendation as crop_recommendation_collection
from cropfit.models.crop import Season
from cropfit.models.crop_recommendation import (
    CropRecommendationRequest,
    CropRecommendationResponse,
)
from cropfit.models.environment import make_coordinate
from cropfit.models.market import MarketRecommendation
from cropfit.services.market_service import get_market_based_recommendations
from cropfit.services.recommendation_service import (
    generate_crop_recommendations,
    get_seasonal_recommendations,
)

router = APIRouter(prefix="/crop-recommendations", tags=["Crop Recommendation"])


@router.post(
    "",
    response_model=CropRecommendationResponse,
    response_model_exclude_none=True,
)
async def create_crop_recommendation(
    request: CropRecommendationRequest,
) -> CropRecommendationResponse:
    """
    Scores every crop of the requested season for a location.
    An empty list means no crop in the knowledge base fits the season.
    """
    return await generate_crop_recommendations(request)


@router.get("/market", response_model=List[MarketRecommendation])
async def get_market_recommendations(
    lat: float = Query(..., description="Latitude"),
    lon: float = Query(..., description="Longitude"),
) -> List[MarketRecommendation]:
    """
    Ranks crops by current market outlook alone.
    """
    return get_market_based_recommendations(make_coordinate(lat, lon))


@router.get(
    "/farm/{farm_id}",
    response_model=CropRecommendationResponse,
    response_model_exclude_none=True,
)
async def get_farm_seasonal_recommendations(
    farm_id: str,
    season: Season = Query(..., description="Season to plan for"),
) -> CropRecommendationResponse:
    """
    Computes fresh recommendations for a stored farm profile.
    """
    return await get_seasonal_recommendations(farm_id, season)


@router.get(
    "/farm/{farm_id}/latest",
    response_model=CropRecommendationResponse,
    response_model_exclude_none=True,
)
async def get_latest_farm_recommendation(farm_id: str) -> CropRecommendationResponse:
    """
    Retrieves the most recent stored recommendation for a farm.
    """
    response = await crop_recommendation_collection.get_latest_recommendation_from_farm_id(
        farm_id
    )
    if response is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No crop recommendation found for farm {farm_id}.",
        )
    return response


@router.get(
    "/{recommendation_id}",
    response_model=CropRecommendationResponse,
    response_model_exclude_none=True,
)
async def get_crop_recommendation_by_id(
    recommendation_id: str,
) -> CropRecommendationResponse:
    """
    Retrieves a specific crop recommendation by its ID.
    """
    return await crop_recommendation_collection.get_recommendation_from_id(recommendation_id)
