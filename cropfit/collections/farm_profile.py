from typing import Optional

from motor.motor_asyncio import AsyncIOMotorCollection

from cropfit.core.mongodb import get_farm_profile_collection
from cropfit.models.farm_profile import FarmProfile


async def get_farm_profile_from_id(farm_id: str) -> Optional[FarmProfile]:
    farm_profile_collection: AsyncIOMotorCollection = get_farm_profile_collection()
    response = await farm_profile_collection.find_one({"_id": farm_id})
    return FarmProfile.model_validate(response) if response else None


async def get_farm_profiles_from_farmer_id(farmer_id: str) -> list[FarmProfile]:
    farm_profile_collection: AsyncIOMotorCollection = get_farm_profile_collection()
    items = farm_profile_collection.find({"farmer_id": farmer_id})
    return [FarmProfile.model_validate(item) async for item in items]


async def save_farm_profile(farm_profile: FarmProfile) -> FarmProfile:
    farm_profile_collection: AsyncIOMotorCollection = get_farm_profile_collection()
    payload = farm_profile.model_dump(mode="json", exclude_none=True, by_alias=True)
    await farm_profile_collection.replace_one({"_id": farm_profile.id}, payload, upsert=True)
    response = await farm_profile_collection.find_one({"_id": farm_profile.id})
    return FarmProfile.model_validate(response)


async def delete_farm_profile(farm_id: str) -> bool:
    farm_profile_collection: AsyncIOMotorCollection = get_farm_profile_collection()
    result = await farm_profile_collection.delete_one({"_id": farm_id})
    return result.deleted_count > 0
