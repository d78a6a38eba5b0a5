"""
Local file-based cache repository.
Stores each entry as a JSON file instead of using Redis or MongoDB.
"""
import hashlib
import json
import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable

from app.core.exceptions import CacheUnavailable
from app.core.logger import logs
from app.models.weather_model import WeatherResult
from app.repos.base_repo import BaseCacheRepository


class LocalRepository(BaseCacheRepository):
    """Repository for cached weather results in local JSON files."""

    def __init__(self, cache_dir: str | Path = "data/cache", clock: Callable[[], datetime] = datetime.now):
        """Initialize local storage directory."""
        self.cache_dir = Path(cache_dir)
        self.clock = clock
        self.cache_dir.mkdir(parents=True, exist_ok=True)

        logs.log(logging.INFO, f"Local file cache initialized at {self.cache_dir.absolute()}")

    def _get_cache_file(self, cache_key: str) -> Path:
        """Get the file path for cached data."""
        # Keys may hold ':' and '/', which are not safe in filenames
        safe_key = hashlib.md5(cache_key.encode("utf-8")).hexdigest()
        return self.cache_dir / f"{safe_key}.json"

    async def get_valid_cache(self, key: str) -> WeatherResult | None:
        cache_file = self._get_cache_file(key)
        if not cache_file.exists():
            return None

        try:
            with open(cache_file, 'r', encoding="utf-8") as f:
                cached = json.load(f)
            cached_time = datetime.fromisoformat(cached["cached_at"])
            ttl = timedelta(seconds=cached["ttl"])
            data = cached["data"]
        except OSError as e:
            raise CacheUnavailable(f"Failed to read cache file {cache_file}: {e}") from e
        except (ValueError, KeyError, TypeError):
            logs.log(logging.WARNING, f"Corrupt cache file {cache_file.name}, removing")
            cache_file.unlink(missing_ok=True)
            return None

        if self.clock() - cached_time >= ttl:
            cache_file.unlink(missing_ok=True)  # Delete expired cache
            return None

        return await self._load(key, data)

    async def save_cache(self, key: str, result: WeatherResult, ttl_seconds: int) -> None:
        cache_file = self._get_cache_file(key)
        cached = {
            "key": key,
            "data": result.to_dict(),
            "cached_at": self.clock().isoformat(),
            "ttl": ttl_seconds
        }

        try:
            with open(cache_file, 'w', encoding="utf-8") as f:
                json.dump(cached, f, indent=2)
        except OSError as e:
            raise CacheUnavailable(f"Failed to write cache file {cache_file}: {e}") from e

    async def invalidate(self, key: str) -> None:
        try:
            self._get_cache_file(key).unlink(missing_ok=True)
        except OSError as e:
            raise CacheUnavailable(f"Failed to delete cache entry {key}: {e}") from e

    async def ping(self) -> bool:
        return self.cache_dir.is_dir()
