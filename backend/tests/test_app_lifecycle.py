"""
Tests for application wiring: settings, the lifespan and cache connections.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic import ValidationError

from app.core.config import Settings
from app.core.db_connection import CacheConnection
from app.repos.local_repo import LocalRepository
from app.repos.redis_repo import RedisWeatherRepository
from app.repos.weather_repo import WeatherRepository
from app.services.Weather_service import WeatherService

pytestmark = pytest.mark.asyncio


class TestSettings:
    def test_defaults(self):
        settings = Settings(_env_file=None, STORAGE_MODE="redis")
        assert settings.CACHE_TTL_SECONDS == 3600
        assert settings.WEATHER_UNIT_GROUP == "metric"
        assert settings.WEATHER_API_BASE_URL.endswith("/timeline")

    def test_api_key_defaults_to_empty(self, monkeypatch):
        monkeypatch.delenv("WEATHER_API_KEY", raising=False)
        assert Settings(_env_file=None).WEATHER_API_KEY == ""

    def test_rejects_unknown_storage_mode(self):
        with pytest.raises(ValidationError):
            Settings(STORAGE_MODE="memcached")

    def test_rejects_non_positive_ttl(self):
        with pytest.raises(ValidationError):
            Settings(CACHE_TTL_SECONDS=0)

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("CACHE_TTL_SECONDS", "120")
        monkeypatch.setenv("WEATHER_API_TIMEOUT", "2.5")
        settings = Settings()
        assert settings.CACHE_TTL_SECONDS == 120
        assert settings.WEATHER_API_TIMEOUT == 2.5


class TestCacheConnection:
    async def test_local_mode(self, settings):
        connection = CacheConnection(settings)
        repo = await connection.open()
        assert isinstance(repo, LocalRepository)
        await connection.close()

    async def test_redis_mode(self, settings, monkeypatch):
        redis = AsyncMock()
        redis.ping = AsyncMock(return_value=True)
        from_url = MagicMock(return_value=redis)
        monkeypatch.setattr("app.core.db_connection.Redis.from_url", from_url)

        connection = CacheConnection(settings.model_copy(update={"STORAGE_MODE": "redis"}))
        repo = await connection.open()

        assert isinstance(repo, RedisWeatherRepository)
        assert from_url.call_args.args[0] == settings.REDIS_URL
        assert from_url.call_args.kwargs["decode_responses"] is True
        assert from_url.call_args.kwargs["socket_timeout"] == settings.CACHE_TIMEOUT
        assert from_url.call_args.kwargs["socket_connect_timeout"] == settings.CACHE_TIMEOUT

        await connection.close()
        redis.aclose.assert_awaited_once()

    async def test_unreachable_redis_does_not_fail_startup(self, settings, monkeypatch):
        redis = AsyncMock()
        redis.ping = AsyncMock(side_effect=ConnectionRefusedError("refused"))
        monkeypatch.setattr("app.core.db_connection.Redis.from_url", MagicMock(return_value=redis))

        connection = CacheConnection(settings.model_copy(update={"STORAGE_MODE": "redis"}))
        repo = await connection.open()
        assert isinstance(repo, RedisWeatherRepository)
        await connection.close()

    async def test_mongodb_mode(self, settings, monkeypatch):
        mongo = MagicMock()
        database = MagicMock()
        database.command = AsyncMock(return_value={"ok": 1.0})
        mongo.__getitem__.return_value = database
        motor_client = MagicMock(return_value=mongo)
        monkeypatch.setattr("app.core.db_connection.AsyncIOMotorClient", motor_client)

        connection = CacheConnection(settings.model_copy(update={"STORAGE_MODE": "mongodb", "CACHE_TIMEOUT": 0.25}))
        repo = await connection.open()

        assert isinstance(repo, WeatherRepository)
        assert motor_client.call_args.args[0] == settings.MONGO_URI
        assert motor_client.call_args.kwargs["serverSelectionTimeoutMS"] == 250
        assert motor_client.call_args.kwargs["socketTimeoutMS"] == 250
        assert motor_client.call_args.kwargs["connectTimeoutMS"] == 250
        mongo.__getitem__.assert_called_with(settings.MONGO_DB_NAME)
        await connection.close()
        mongo.close.assert_called_once()


class TestLifespan:
    async def test_wires_service_and_closes(self, settings):
        from app.main import create_app

        app = create_app(settings)
        async with app.router.lifespan_context(app):
            service = app.state.weather_service
            assert isinstance(service, WeatherService)
            assert isinstance(app.state.cache_repository, LocalRepository)
            assert service.ttl_seconds == settings.CACHE_TTL_SECONDS
            assert service.client.base_url == settings.WEATHER_API_BASE_URL
            http = service.client.http
        assert http.is_closed

    async def test_log_file_follows_explicit_settings(self, settings, tmp_path):
        from app.main import create_app

        log_dir = tmp_path / "service-logs"
        app = create_app(settings.model_copy(update={"LOG_DIR": str(log_dir), "LOG_FILE": "weather.log"}))
        async with app.router.lifespan_context(app):
            pass

        log_file = log_dir / "weather.log"
        assert log_file.exists()
        assert "Weather Cache API started" in log_file.read_text(encoding="utf-8")
