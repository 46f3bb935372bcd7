import logging
import time
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional, Tuple

from motor.motor_asyncio import AsyncIOMotorCollection

from cropfit.core.config import settings
from cropfit.core.mongodb import get_result_cache_collection

logger = logging.getLogger(__name__)


def build_cache_key(
    kind: str,
    lat: float,
    lon: float,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> str:
    """
    Builds a deterministic cache key for a data kind and location.

    Coordinates are rounded so that nearby requests share an entry. The date
    range is only part of the key when either bound is given.
    """
    precision = settings.CACHE_COORDINATE_PRECISION
    key = f"{kind}_{round(lat, precision)}_{round(lon, precision)}"
    if start_date or end_date:
        key = f"{key}_{start_date}_{end_date}"
    return key


class ResultCache(ABC):
    """Key-value store with per-key expiry. Failures read as misses."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]: ...

    @abstractmethod
    async def set(self, key: str, value: str, ttl_seconds: int) -> bool: ...

    @abstractmethod
    async def delete(self, key: str) -> bool: ...


class InMemoryResultCache(ResultCache):
    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: Dict[str, Tuple[str, float]] = {}

    async def get(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            self._entries.pop(key, None)
            return None
        return value

    async def set(self, key: str, value: str, ttl_seconds: int) -> bool:
        now = self._clock()
        self._evict_expired(now)
        self._entries[key] = (value, now + ttl_seconds)
        return True

    def _evict_expired(self, now: float) -> None:
        expired = [key for key, (_, expires_at) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]

    async def delete(self, key: str) -> bool:
        self._entries.pop(key, None)
        return True


class MongoResultCache(ResultCache):
    """Cache entries stored as ``{_id: key, value, expires_at}`` documents."""

    def __init__(
        self,
        collection: Optional[AsyncIOMotorCollection] = None,
        now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._collection = collection
        self._now = now

    @property
    def collection(self) -> AsyncIOMotorCollection:
        if self._collection is None:
            self._collection = get_result_cache_collection()
        return self._collection

    async def ensure_indexes(self) -> None:
        try:
            await self.collection.create_index("expires_at", expireAfterSeconds=0)
        except Exception as e:
            logger.warning("Could not create result cache TTL index: %s", e)

    async def get(self, key: str) -> Optional[str]:
        try:
            item = await self.collection.find_one(
                {"_id": key, "expires_at": {"$gt": self._now()}}
            )
        except Exception as e:
            logger.warning("Cache get error for '%s': %s", key, e)
            return None
        return item["value"] if item else None

    async def set(self, key: str, value: str, ttl_seconds: int) -> bool:
        document = {
            "_id": key,
            "value": value,
            "expires_at": self._now() + timedelta(seconds=ttl_seconds),
        }
        try:
            await self.collection.replace_one({"_id": key}, document, upsert=True)
            return True
        except Exception as e:
            logger.warning("Cache set error for '%s': %s", key, e)
            return False

    async def delete(self, key: str) -> bool:
        try:
            await self.collection.delete_one({"_id": key})
            return True
        except Exception as e:
            logger.warning("Cache delete error for '%s': %s", key, e)
            return False


_cache: Optional[ResultCache] = None


def get_result_cache() -> ResultCache:
    global _cache
    if _cache is None:
        if settings.CACHE_BACKEND == "mongo":
            _cache = MongoResultCache()
        else:
            _cache = InMemoryResultCache()
    return _cache


async def read_cached(cache: ResultCache, key: str) -> Optional[str]:
    """``cache.get`` that never raises, for caches outside this module."""
    try:
        return await cache.get(key)
    except Exception as e:
        logger.warning("Cache get error for '%s': %s", key, e)
        return None


async def write_cached(cache: ResultCache, key: str, value: str, ttl_seconds: int) -> bool:
    try:
        return await cache.set(key, value, ttl_seconds)
    except Exception as e:
        logger.warning("Cache set error for '%s': %s", key, e)
        return False
