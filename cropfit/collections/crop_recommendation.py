from typing import Optional

from fastapi import HTTPException, status
from motor.motor_asyncio import AsyncIOMotorCollection

from cropfit.core.mongodb import get_crop_recommendation_collection
from cropfit.models.crop_recommendation import CropRecommendationResponse


async def get_recommendation_from_id(recommendation_id: str) -> CropRecommendationResponse:
    collection: AsyncIOMotorCollection = get_crop_recommendation_collection()
    response = await collection.find_one({"_id": recommendation_id})
    if not response:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Recommendation {recommendation_id} not found",
        )
    return CropRecommendationResponse.model_validate(response)


async def get_latest_recommendation_from_farm_id(
    farm_id: str,
) -> Optional[CropRecommendationResponse]:
    collection: AsyncIOMotorCollection = get_crop_recommendation_collection()
    item = await collection.find_one({"farm_id": farm_id}, sort=[("timestamp", -1)])
    return CropRecommendationResponse.model_validate(item) if item else None


async def save_crop_recommendation(
    crop_recommendation: CropRecommendationResponse,
) -> CropRecommendationResponse:
    collection: AsyncIOMotorCollection = get_crop_recommendation_collection()
    payload = crop_recommendation.model_dump(mode="json", exclude_none=True, by_alias=True)
    await collection.replace_one({"_id": crop_recommendation.id}, payload, upsert=True)
    return crop_recommendation
