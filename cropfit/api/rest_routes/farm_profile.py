from typing import List

from fastapi import APIRouter, HTTPException, status

from cropfit.collections import farm_profile as farm_profile_collection
from cropfit.models.farm_profile import FarmProfile

router = APIRouter(prefix="/farm-profiles", tags=["Farm Profile"])


@router.put("", response_model=FarmProfile)
async def save_farm_profile(farm_profile: FarmProfile) -> FarmProfile:
    """
    Creates a farm profile or replaces the one with the same id.
    """
    return await farm_profile_collection.save_farm_profile(farm_profile)


@router.get("/farmer/{farmer_id}", response_model=List[FarmProfile])
async def get_farm_profiles_by_farmer(farmer_id: str) -> List[FarmProfile]:
    return await farm_profile_collection.get_farm_profiles_from_farmer_id(farmer_id)


@router.get("/{farm_id}", response_model=FarmProfile)
async def get_farm_profile(farm_id: str) -> FarmProfile:
    farm_profile = await farm_profile_collection.get_farm_profile_from_id(farm_id)
    if farm_profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Farm profile {farm_id} not found",
        )
    return farm_profile


@router.delete("/{farm_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_farm_profile(farm_id: str) -> None:
    deleted = await farm_profile_collection.delete_farm_profile(farm_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Farm profile {farm_id} not found",
        )
