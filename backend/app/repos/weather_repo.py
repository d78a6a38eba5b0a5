from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError
from datetime import datetime, timedelta, timezone
from typing import Callable

from app.core.exceptions import CacheUnavailable
from app.models.weather_model import WeatherResult
from app.repos.base_repo import BaseCacheRepository


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WeatherRepository(BaseCacheRepository):
    """MongoDB-backed cache: one document per key in the weather_cache collection."""

    def __init__(self, db: AsyncIOMotorDatabase, clock: Callable[[], datetime] = _utcnow):
        self.db = db
        self.collection = db["weather_cache"]
        self.clock = clock

    async def get_valid_cache(self, key: str) -> WeatherResult | None:
        """
        Finds the entry for this key that has not yet expired.
        """
        try:
            doc = await self.collection.find_one({
                "key": key,
                "expires_at": {"$gt": self.clock()}
            })
        except PyMongoError as e:
            raise CacheUnavailable(f"Mongo find failed for {key}: {e}") from e

        if not doc:
            return None
        return await self._load(key, doc["data"])

    async def save_cache(self, key: str, result: WeatherResult, ttl_seconds: int):
        """
        Upserts (Update or Insert) the weather data.
        """
        now = self.clock()
        try:
            await self.collection.update_one(
                {"key": key},
                {
                    "$set": {
                        "data": result.to_dict(),
                        "timestamp": now,
                        "expires_at": now + timedelta(seconds=ttl_seconds)
                    }
                },
                upsert=True
            )
        except PyMongoError as e:
            raise CacheUnavailable(f"Mongo upsert failed for {key}: {e}") from e

    async def invalidate(self, key: str) -> None:
        try:
            await self.collection.delete_one({"key": key})
        except PyMongoError as e:
            raise CacheUnavailable(f"Mongo delete failed for {key}: {e}") from e

    async def ping(self) -> bool:
        try:
            await self.db.command("ping")
            return True
        except PyMongoError:
            return False
