from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase

from cropfit.core.config import settings

_client: AsyncIOMotorClient = None
_database: AsyncIOMotorDatabase = None


def _connect() -> AsyncIOMotorDatabase:
    global _client, _database
    if _client is None:
        mongo_uri = settings.MONGO_DIRECT_URI or settings.MONGO_URI
        _client = AsyncIOMotorClient(mongo_uri, uuidRepresentation="standard")
    if _database is None:
        _database = _client[settings.MONGO_DB_NAME]
    return _database


async def init_mongo_client() -> None:
    _connect()


async def close_mongo_client() -> None:
    global _client, _database
    if _client is not None:
        _client.close()
    _client = None
    _database = None


def _get_collection(collection_name: str) -> AsyncIOMotorCollection:
    return _connect()[collection_name]


def get_farm_profile_collection() -> AsyncIOMotorCollection:
    return _get_collection("farm_profile")


def get_crop_history_collection() -> AsyncIOMotorCollection:
    return _get_collection("crop_history")


def get_crop_recommendation_collection() -> AsyncIOMotorCollection:
    return _get_collection("crop_recommendation_response")


def get_result_cache_collection() -> AsyncIOMotorCollection:
    return _get_collection("result_cache")
