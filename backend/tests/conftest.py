"""
Shared test fixtures for the weather cache API.

Provides:
- a fake weather provider mounted on httpx.MockTransport (records every request)
- a controllable clock for TTL tests
- a WeatherService wired to the local file cache under tmp_path
- an async FastAPI test client (no Redis, MongoDB or network needed)
"""

import os
import tempfile
from datetime import datetime, timedelta
from typing import Any

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

# Ensure test env vars before any app imports
os.environ.setdefault("STORAGE_MODE", "local")
os.environ.setdefault("WEATHER_API_KEY", "test-key-123")
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "weather-cache-api-test-logs"))

from app.core.config import Settings  # noqa: E402
from app.core.weather_connection import WeatherClient  # noqa: E402
from app.repos.local_repo import LocalRepository  # noqa: E402
from app.services.Weather_service import WeatherService  # noqa: E402

TEST_BASE_URL = "https://weather.test/timeline"
TEST_API_KEY = "test-key-123"
TTL_SECONDS = 3600


def make_timeline_response(**overrides: Any) -> dict:
    """Factory for timeline API response bodies."""
    body = {
        "queryCost": 1,
        "latitude": 47.6036,
        "longitude": -122.3294,
        "resolvedAddress": "Seattle, WA, United States",
        "address": "Seattle",
        "timezone": "America/Los_Angeles",
        "tzoffset": -8.0,
        "days": [
            {
                "datetime": "2024-01-01",
                "tempmax": 9.5,
                "tempmin": 3.1,
                "temp": 6.2,
                "humidity": 88.4,
                "precipprob": 70.0,
                "conditions": "Rain, Overcast",
                "icon": "rain",
            },
        ],
    }
    body.update(overrides)
    return body


class FakeProvider:
    """httpx.MockTransport handler standing in for the upstream weather API."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.payload: Any = make_timeline_response()
        self.raw_body: bytes | None = None
        self.error: Exception | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.raw_body is not None:
            return httpx.Response(self.status_code, content=self.raw_body)
        return httpx.Response(self.status_code, json=self.payload)

    @property
    def calls(self) -> int:
        return len(self.requests)


class FakeClock:
    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 1, 1, 12, 0, 0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float):
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
async def http_client(provider):
    async with httpx.AsyncClient(transport=httpx.MockTransport(provider)) as http:
        yield http


@pytest.fixture
def weather_client(http_client):
    return WeatherClient(
        http=http_client,
        base_url=TEST_BASE_URL,
        api_key=TEST_API_KEY,
        timeout=2.0,
    )


@pytest.fixture
def local_repo(tmp_path, clock):
    return LocalRepository(tmp_path / "cache", clock=clock)


@pytest.fixture
def weather_service(local_repo, weather_client):
    return WeatherService(repo=local_repo, client=weather_client, ttl_seconds=TTL_SECONDS)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        STORAGE_MODE="local",
        CACHE_DIR=str(tmp_path / "cache"),
        CACHE_TTL_SECONDS=TTL_SECONDS,
        WEATHER_API_BASE_URL=TEST_BASE_URL,
        WEATHER_API_KEY=TEST_API_KEY,
    )


@pytest.fixture
def app(settings, local_repo, weather_service):
    """Test app with the service injected directly; the lifespan is not run."""
    from app.main import create_app

    _app = create_app(settings)
    _app.state.cache_repository = local_repo
    _app.state.weather_service = weather_service
    return _app


@pytest.fixture
async def client(app):
    """Async HTTP client bound to the test app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
