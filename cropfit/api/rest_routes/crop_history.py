from typing import List

from fastapi import APIRouter, status

from cropfit.collections import crop_history as crop_history_collection
from cropfit.models.crop_history import HistoricalRecord

router = APIRouter(prefix="/crop-history", tags=["Crop History"])


@router.post("", response_model=HistoricalRecord, status_code=status.HTTP_201_CREATED)
async def add_crop_history_record(record: HistoricalRecord) -> HistoricalRecord:
    return await crop_history_collection.save_crop_history_record(record)


@router.get("/farmer/{farmer_id}", response_model=List[HistoricalRecord])
async def get_crop_history(farmer_id: str) -> List[HistoricalRecord]:
    return await crop_history_collection.get_crop_history_from_farmer_id(farmer_id)
