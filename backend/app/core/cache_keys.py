import hashlib
import json
import re
from typing import Any

from app.models.weather_model import WeatherQuery

_WHITESPACE = re.compile(r"\s+")


def normalize_location(location: str) -> str:
    """'  New   York ' and 'new york' share one cache entry."""
    return _WHITESPACE.sub(" ", location.strip()).casefold()


def sha1_json(obj: Any) -> str:
    s = json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=True)
    return hashlib.sha1(s.encode("utf-8")).hexdigest()


def cache_key(prefix: str, payload: Any) -> str:
    return f"{prefix}:{sha1_json(payload)}"


def weather_cache_key(query: WeatherQuery) -> str:
    # Dates only enter the payload when present, so an undated query never
    # shares a key with a dated one.
    payload = {"location": normalize_location(query.location)}
    if query.start_date is not None:
        payload["start"] = query.start_date.isoformat()
    if query.end_date is not None:
        payload["end"] = query.end_date.isoformat()
    return cache_key("weather", payload)
