import re

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from app.core.exceptions import InvalidDateFormat
from app.models.base_model import CacheStatus, ErrorResponse
from app.models.weather_model import WeatherLookup, WeatherResult
from app.services.Weather_service import WeatherService

router = APIRouter(prefix="/weather/location", tags=["weather"])

# --- Dependency Injection ---
def get_weather_service(request: Request) -> WeatherService:
    return request.app.state.weather_service

def _weather_response(lookup: WeatherLookup) -> Response:
    """Serialize once so a cache hit returns the same bytes as the original miss."""
    return Response(
        content=lookup.result.to_json(),
        media_type="application/json",
        headers={"X-Cache": (CacheStatus.HIT if lookup.cached else CacheStatus.MISS).value},
    )

_date_errors = {
    400: {"description": InvalidDateFormat.public_message, "content": {"text/plain": {}}},
}
_upstream_errors = {
    404: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
    504: {"model": ErrorResponse},
}

@router.get("/{address}", response_model=WeatherResult, responses=_upstream_errors)
async def weather_for_location(
    address: str,
    service: WeatherService = Depends(get_weather_service)
):
    lookup = await service.get_weather(address)
    return _weather_response(lookup)

@router.get("/{location}/{start}", response_model=WeatherResult, responses={**_date_errors, **_upstream_errors})
async def weather_from_start_date(
    location: str,
    start: str,
    service: WeatherService = Depends(get_weather_service)
):
    lookup = await service.get_weather_between_dates(location, start, None)
    return _weather_response(lookup)

@router.get("/{location}/{start}/{end}", response_model=WeatherResult, responses={**_date_errors, **_upstream_errors})
async def weather_between_dates(
    location: str,
    start: str,
    end: str,
    service: WeatherService = Depends(get_weather_service)
):
    lookup = await service.get_weather_between_dates(location, start, end)
    return _weather_response(lookup)

# Digits and dashes only: what a yyyy/MM/dd style date splits into
_DATE_PIECE = re.compile(r"[0-9-]+")

# Registered last: a date written with '/' separators adds path segments,
# e.g. /weather/location/Seattle/2024/01/01
@router.get("/{location}/{start}/{end}/{rest:path}", include_in_schema=False)
async def weather_with_malformed_dates(location: str, start: str, end: str, rest: str):
    segments = [start, end, *rest.split("/")]
    if not all(_DATE_PIECE.fullmatch(segment) for segment in segments):
        raise HTTPException(status_code=404, detail="Not Found")
    raise InvalidDateFormat("/".join(segments))
