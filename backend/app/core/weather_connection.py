"""
Upstream weather provider client (Visual Crossing timeline API).

Request shape:
  GET {base_url}/{location}                  current conditions + forecast
  GET {base_url}/{location}/{start}          from start onward
  GET {base_url}/{location}/{start}/{end}    start..end inclusive
with key, unitGroup, include and contentType=json as query parameters.
"""
import logging
import time
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from app.core.config import Settings
from app.core.exceptions import (
    LocationNotFound,
    MalformedResponse,
    UpstreamError,
    UpstreamTimeout,
    UpstreamUnavailable,
)
from app.core.logger import logs
from app.models.weather_model import WeatherQuery, WeatherResult

# Statuses the provider uses for an unknown or unparseable location
_NOT_FOUND_STATUSES = {400, 404}


class WeatherClient:
    def __init__(
        self,
        http: httpx.AsyncClient,
        base_url: str,
        api_key: str,
        unit_group: str = "metric",
        include: str = "days,current,alerts",
        timeout: float = 10.0,
    ):
        self.http = http
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.unit_group = unit_group
        self.include = include
        self.timeout = timeout

    @classmethod
    def from_settings(cls, http: httpx.AsyncClient, settings: Settings) -> "WeatherClient":
        return cls(
            http=http,
            base_url=settings.WEATHER_API_BASE_URL,
            api_key=settings.WEATHER_API_KEY,
            unit_group=settings.WEATHER_UNIT_GROUP,
            include=settings.WEATHER_INCLUDE,
            timeout=settings.WEATHER_API_TIMEOUT,
        )

    def build_url(self, query: WeatherQuery) -> str:
        """Timeline URL for a query; the location is always a single path segment."""
        segments = [quote(query.location, safe="")]
        if query.start_date is not None:
            segments.append(query.start_date.isoformat())
        if query.end_date is not None:
            segments.append(query.end_date.isoformat())
        return f"{self.base_url}/{'/'.join(segments)}"

    def _params(self) -> dict:
        params = {
            "key": self.api_key,
            "unitGroup": self.unit_group,
            "contentType": "json",
        }
        if self.include:
            params["include"] = self.include
        return params

    async def fetch(self, query: WeatherQuery) -> WeatherResult:
        url = self.build_url(query)
        started = time.perf_counter()

        try:
            resp = await self.http.get(url, params=self._params(), timeout=self.timeout)
        except httpx.TimeoutException as e:
            logs.log(logging.ERROR, f"Weather API timed out after {self.timeout}s: {url}")
            raise UpstreamTimeout(f"Timeout calling {url}") from e
        except httpx.TransportError as e:
            logs.log(logging.ERROR, f"Weather API unreachable: {url} ({type(e).__name__}: {e})")
            raise UpstreamUnavailable(f"Transport failure calling {url}: {e}") from e

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        logs.log(logging.INFO, f"Weather API {resp.status_code} in {elapsed_ms}ms: {url}")

        if resp.status_code in _NOT_FOUND_STATUSES:
            logs.log(logging.WARNING, f"Weather API rejected location {query.location!r}: {resp.text[:200]}")
            raise LocationNotFound(f"Provider returned {resp.status_code} for {query.location!r}")

        if not resp.is_success:
            logs.log(logging.ERROR, f"Weather API error {resp.status_code}: {resp.text[:200]}")
            raise UpstreamError(f"Provider returned {resp.status_code}", upstream_status=resp.status_code)

        try:
            return WeatherResult.model_validate_json(resp.content)
        except ValidationError as e:
            logs.log(logging.ERROR, f"Weather API returned an unreadable body: {e.error_count()} errors")
            raise MalformedResponse(f"Unreadable body from {url}") from e
