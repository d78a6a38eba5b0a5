import logging
import uuid
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse

from app.core.config import Settings, get_settings
from app.core.db_connection import CacheConnection
from app.core.exceptions import InvalidDateFormat, WeatherServiceError
from app.core.logger import logs
from app.core.weather_connection import WeatherClient
from app.models.base_model import CacheHealth, HealthResponse, RootResponse, StorageMode
from app.routes.weather_route import router as weather_router
from app.services.Weather_service import WeatherService

SERVICE_NAME = "Weather Cache API"
VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the cache and HTTP connections for this app and close them on shutdown."""
    settings: Settings = app.state.settings
    logs.configure(settings.LOGGER, settings.LOG_DIR, settings.LOG_FILE)
    if not settings.WEATHER_API_KEY:
        logs.log(logging.WARNING, "WEATHER_API_KEY is not set; upstream calls will be rejected")

    cache = CacheConnection(settings)
    repository = await cache.open()
    http = httpx.AsyncClient(timeout=settings.WEATHER_API_TIMEOUT)

    app.state.cache_repository = repository
    app.state.weather_service = WeatherService(
        repo=repository,
        client=WeatherClient.from_settings(http, settings),
        ttl_seconds=settings.CACHE_TTL_SECONDS,
    )
    logs.log(logging.INFO, f"{SERVICE_NAME} started (cache={settings.STORAGE_MODE}, ttl={settings.CACHE_TTL_SECONDS}s)")

    try:
        yield
    finally:
        await http.aclose()
        await cache.close()
        logs.log(logging.INFO, f"{SERVICE_NAME} stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    app = FastAPI(title=SERVICE_NAME, version=VERSION, lifespan=lifespan)
    app.state.settings = settings or get_settings()
    app.include_router(weather_router)

    # --- Request ID ---
    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next) -> Response:
        request_id = request.headers.get("x-request-id", str(uuid.uuid4()))
        request.state.request_id = request_id
        try:
            response = await call_next(request)
        except Exception:
            # Unhandled errors become a generic 500 carrying the request ID
            logs.log(logging.ERROR, f"Unhandled error on {request.url.path} (request {request_id})", exc_info=True)
            response = JSONResponse(status_code=500, content={"detail": "Internal server error"})
        response.headers["X-Request-ID"] = request_id
        return response

    # --- Exception Handlers ---
    @app.exception_handler(WeatherServiceError)
    async def weather_error_handler(request: Request, exc: WeatherServiceError) -> Response:
        if isinstance(exc, InvalidDateFormat):
            logs.log(logging.INFO, f"Rejected request {request.url.path}: {exc}")
            return PlainTextResponse(exc.public_message, status_code=exc.status_code)

        level = logging.ERROR if exc.status_code >= 500 else logging.INFO
        logs.log(level, f"{type(exc).__name__} on {request.url.path}: {exc}")
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.public_message})

    # --- Root Endpoint ---
    @app.get("/", response_model=RootResponse)
    async def root():
        return RootResponse(
            message=f"Welcome to {SERVICE_NAME}",
            status="running",
            endpoints={
                "health": "/health",
                "weather": "/weather/location/{location}[/{start}[/{end}]]",
                "docs": "/docs"
            },
            version=VERSION
        )

    # --- Health Check ---
    @app.get("/health", response_model=HealthResponse)
    async def health_check(request: Request):
        repository = getattr(request.app.state, "cache_repository", None)
        reachable = bool(repository is not None and await repository.ping())
        return HealthResponse(
            status="ok" if reachable else "degraded",
            service=SERVICE_NAME,
            cache=CacheHealth(backend=StorageMode(request.app.state.settings.STORAGE_MODE), reachable=reachable)
        )

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
