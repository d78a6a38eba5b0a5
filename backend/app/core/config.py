from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

VISUAL_CROSSING_TIMELINE_URL = (
    "https://weather.visualcrossing.com/VisualCrossingWebServices/rest/services/timeline"
)

class Settings(BaseSettings):
    # Cache backend: "redis", "mongodb" or "local"
    STORAGE_MODE: str = Field(default="redis", pattern=r"^(redis|mongodb|local)$")
    CACHE_TTL_SECONDS: int = Field(default=3600, gt=0)
    # Seconds allowed for one cache round trip (connect, select or read)
    CACHE_TIMEOUT: float = Field(default=1.0, gt=0)

    # Redis Configuration (only needed if STORAGE_MODE=redis)
    REDIS_URL: str = "redis://localhost:6379/0"

    # MongoDB Configuration (only needed if STORAGE_MODE=mongodb)
    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DB_NAME: str = "weather_cache_db"

    # Local file cache (only needed if STORAGE_MODE=local)
    CACHE_DIR: str = "data/cache"

    # Upstream weather provider
    WEATHER_API_BASE_URL: str = VISUAL_CROSSING_TIMELINE_URL
    WEATHER_API_KEY: str = ""
    WEATHER_UNIT_GROUP: str = "metric"
    WEATHER_INCLUDE: str = "days,current,alerts"
    WEATHER_API_TIMEOUT: float = Field(default=10.0, gt=0)

    LOGGER: int = 20
    LOG_DIR: str = "logs"
    LOG_FILE: str = "app.log"

    model_config = SettingsConfigDict(
        # Look for .env in the current folder OR the parent folder
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        extra="ignore"
    )

@lru_cache
def get_settings() -> Settings:
    """Settings read once from the environment; create_app() accepts an explicit instance instead."""
    return Settings()
