"""
Cache repository interface.
All backends store a WeatherResult under a string key for a bounded time.
"""
from abc import ABC, abstractmethod
import logging

from pydantic import ValidationError

from app.core.logger import logs
from app.models.weather_model import WeatherResult


class BaseCacheRepository(ABC):
    """Key-value cache with TTL semantics. Backend failures raise CacheUnavailable."""

    @abstractmethod
    async def get_valid_cache(self, key: str) -> WeatherResult | None:
        """Return the stored result, or None on a miss or an expired entry."""
        pass

    @abstractmethod
    async def save_cache(self, key: str, result: WeatherResult, ttl_seconds: int) -> None:
        """Store a result for ttl_seconds."""
        pass

    @abstractmethod
    async def invalidate(self, key: str) -> None:
        """Remove a single entry if present."""
        pass

    @abstractmethod
    async def ping(self) -> bool:
        """True when the backend is reachable."""
        pass

    def _decode(self, key: str, raw: str | bytes | dict) -> WeatherResult | None:
        """Parse a stored value; unreadable entries count as a miss."""
        try:
            if isinstance(raw, dict):
                return WeatherResult.model_validate(raw)
            return WeatherResult.model_validate_json(raw)
        except ValidationError as e:
            logs.log(logging.WARNING, f"Discarding unreadable cache entry {key}: {e.error_count()} errors")
            return None

    async def _load(self, key: str, raw: str | bytes | dict) -> WeatherResult | None:
        """Decode a stored value, evicting it when it no longer parses."""
        result = self._decode(key, raw)
        if result is None:
            await self.invalidate(key)
        return result
