from typing import List

from motor.motor_asyncio import AsyncIOMotorCollection

from cropfit.core.mongodb import get_crop_history_collection
from cropfit.models.crop_history import HistoricalRecord

RECENT_HISTORY_LIMIT = 5
MOST_RECENT_FIRST = [("year", -1), ("created_at", -1)]


async def get_recent_crop_history(
    farmer_id: str, limit: int = RECENT_HISTORY_LIMIT
) -> List[HistoricalRecord]:
    """Most recent records first, by year then by when they were recorded."""
    collection: AsyncIOMotorCollection = get_crop_history_collection()
    items = (
        collection.find({"farmer_id": farmer_id})
        .sort(MOST_RECENT_FIRST)
        .limit(limit)
    )
    return [HistoricalRecord.model_validate(item) async for item in items]


async def get_crop_history_from_farmer_id(farmer_id: str) -> List[HistoricalRecord]:
    collection: AsyncIOMotorCollection = get_crop_history_collection()
    items = collection.find({"farmer_id": farmer_id}).sort(MOST_RECENT_FIRST)
    return [HistoricalRecord.model_validate(item) async for item in items]


async def save_crop_history_record(record: HistoricalRecord) -> HistoricalRecord:
    collection: AsyncIOMotorCollection = get_crop_history_collection()
    payload = record.model_dump(mode="json", exclude_none=True, by_alias=True)
    await collection.replace_one({"_id": record.id}, payload, upsert=True)
    response = await collection.find_one({"_id": record.id})
    return HistoricalRecord.model_validate(response)
