import logging
import re
from datetime import date, datetime

from app.core.cache_keys import weather_cache_key
from app.core.exceptions import CacheUnavailable, InvalidDateFormat, InvalidDateRange
from app.core.logger import logs
from app.core.weather_connection import WeatherClient
from app.models.weather_model import WeatherLookup, WeatherQuery, WeatherResult
from app.repos.base_repo import BaseCacheRepository

DATE_FORMAT = "%Y-%m-%d"
# strptime alone accepts '2024-1-5'; require zero-padded yyyy-MM-dd
_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def parse_query_date(value: str) -> date:
    """Parse a strict yyyy-MM-dd string, raising InvalidDateFormat otherwise."""
    if value is None or not _DATE_PATTERN.fullmatch(value):
        raise InvalidDateFormat(value)
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError as e:
        raise InvalidDateFormat(value) from e


def format_query_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


class WeatherService:
    def __init__(self, repo: BaseCacheRepository, client: WeatherClient, ttl_seconds: int = 3600):
        self.repo = repo
        self.client = client
        self.ttl_seconds = ttl_seconds

    async def get_weather(self, location: str) -> WeatherLookup:
        """Current conditions and default forecast for a location."""
        return await self._cached_fetch(WeatherQuery(location=location))

    async def get_weather_between_dates(self, location: str, start: str, end: str | None = None) -> WeatherLookup:
        """
        Weather for a location from start onward, or between start and end inclusive.
        Raises InvalidDateFormat for unparseable dates and InvalidDateRange when end precedes start.
        """
        start_date = parse_query_date(start)
        end_date = parse_query_date(end) if end is not None else None
        if end_date is not None and end_date < start_date:
            raise InvalidDateRange(f"{format_query_date(end_date)} precedes {format_query_date(start_date)}")

        query = WeatherQuery(location=location, start_date=start_date, end_date=end_date)
        return await self._cached_fetch(query)

    async def _cached_fetch(self, query: WeatherQuery) -> WeatherLookup:
        # 1. Check Cache
        key = weather_cache_key(query)
        cached = await self._read_cache(key)
        if cached is not None:
            logs.log(logging.INFO, f"✓ Weather cache HIT for {query.location!r} ({key})")
            return WeatherLookup(result=cached, cached=True)

        # 2. Call the weather provider
        logs.log(logging.INFO, f"✗ Weather cache MISS for {query.location!r} ({key}). Calling weather provider...")
        result = await self.client.fetch(query)

        # 3. Save to Cache
        await self._write_cache(key, result)
        return WeatherLookup(result=result, cached=False)

    async def _read_cache(self, key: str) -> WeatherResult | None:
        try:
            return await self.repo.get_valid_cache(key)
        except CacheUnavailable as e:
            logs.log(logging.WARNING, f"Cache read failed, treating as miss: {e}")
            return None

    async def _write_cache(self, key: str, result: WeatherResult):
        try:
            await self.repo.save_cache(key, result, self.ttl_seconds)
        except CacheUnavailable as e:
            logs.log(logging.WARNING, f"Cache write failed, returning fresh result anyway: {e}")
