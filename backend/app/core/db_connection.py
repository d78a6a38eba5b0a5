from motor.motor_asyncio import AsyncIOMotorClient
from redis.asyncio import Redis
import logging

from app.core.config import Settings
from app.core.logger import logs
from app.models.base_model import StorageMode
from app.repos.base_repo import BaseCacheRepository
from app.repos.local_repo import LocalRepository
from app.repos.redis_repo import RedisWeatherRepository
from app.repos.weather_repo import WeatherRepository


class CacheConnection:
    """
    Owns the cache backend client for one application instance.
    Opened in the FastAPI lifespan and closed on shutdown.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.mode = StorageMode(settings.STORAGE_MODE)
        self._redis: Redis | None = None
        self._mongo: AsyncIOMotorClient | None = None
        self.repository: BaseCacheRepository | None = None

    async def open(self) -> BaseCacheRepository:
        timeout = self.settings.CACHE_TIMEOUT
        if self.mode == StorageMode.REDIS:
            self._redis = Redis.from_url(
                self.settings.REDIS_URL,
                decode_responses=True,
                socket_connect_timeout=timeout,
                socket_timeout=timeout,
            )
            self.repository = RedisWeatherRepository(self._redis)
        elif self.mode == StorageMode.MONGODB:
            # Motor client is non-blocking; every wait is capped at CACHE_TIMEOUT
            timeout_ms = int(timeout * 1000)
            self._mongo = AsyncIOMotorClient(
                self.settings.MONGO_URI,
                serverSelectionTimeoutMS=timeout_ms,
                connectTimeoutMS=timeout_ms,
                socketTimeoutMS=timeout_ms,
            )
            self.repository = WeatherRepository(self._mongo[self.settings.MONGO_DB_NAME])
        else:
            self.repository = LocalRepository(self.settings.CACHE_DIR)

        # Unreachable backend at startup is logged only
        if await self.repository.ping():
            logs.log(logging.INFO, f"{self.mode.value} cache connection initialized")
        else:
            logs.log(logging.WARNING, f"{self.mode.value} cache not reachable at startup; serving without cache hits")
        return self.repository

    async def close(self):
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None
        if self._mongo is not None:
            self._mongo.close()
            self._mongo = None
        logs.log(logging.INFO, f"{self.mode.value} cache connection closed")
