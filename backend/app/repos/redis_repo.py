import logging
from redis.asyncio import Redis
from redis.exceptions import RedisError

from app.core.exceptions import CacheUnavailable
from app.core.logger import logs
from app.models.weather_model import WeatherResult
from app.repos.base_repo import BaseCacheRepository


class RedisWeatherRepository(BaseCacheRepository):
    """Redis-backed cache. Entries expire through SET ... EX ttl."""

    def __init__(self, redis: Redis):
        self.redis = redis

    async def get_valid_cache(self, key: str) -> WeatherResult | None:
        try:
            raw = await self.redis.get(key)
        except (RedisError, OSError) as e:
            raise CacheUnavailable(f"Redis GET failed for {key}: {e}") from e

        if raw is None:
            return None
        return await self._load(key, raw)

    async def save_cache(self, key: str, result: WeatherResult, ttl_seconds: int) -> None:
        try:
            await self.redis.set(key, result.to_json(), ex=int(ttl_seconds))
        except (RedisError, OSError) as e:
            raise CacheUnavailable(f"Redis SET failed for {key}: {e}") from e
        logs.log(logging.DEBUG, f"Weather cached: key={key} ttl={ttl_seconds}s")

    async def invalidate(self, key: str) -> None:
        try:
            await self.redis.delete(key)
        except (RedisError, OSError) as e:
            raise CacheUnavailable(f"Redis DELETE failed for {key}: {e}") from e

    async def ping(self) -> bool:
        try:
            return bool(await self.redis.ping())
        except (RedisError, OSError):
            return False
