"""
Error taxonomy for the weather service.
Every error carries the HTTP status it maps to and a message that is safe to return to clients.
"""

INVALID_DATE_FORMAT_MESSAGE = "Invalid date format submitted, valid date format: yyyy-MM-dd"


class WeatherServiceError(Exception):
    status_code: int = 500
    public_message: str = "Internal server error"

    def __init__(self, message: str = None):
        super().__init__(message or self.public_message)


class InvalidDateFormat(WeatherServiceError):
    status_code = 400
    public_message = INVALID_DATE_FORMAT_MESSAGE

    def __init__(self, value: str = None):
        self.value = value
        super().__init__(f"Unparseable date: {value!r}")


class InvalidDateRange(WeatherServiceError):
    status_code = 400
    public_message = "Invalid date range submitted, end date must not precede start date"


class LocationNotFound(WeatherServiceError):
    status_code = 404
    public_message = "No weather data found for the requested location"


class UpstreamError(WeatherServiceError):
    """Provider answered with a non-2xx status."""
    status_code = 502
    public_message = "Weather provider returned an error"

    def __init__(self, message: str = None, upstream_status: int = None):
        self.upstream_status = upstream_status
        super().__init__(message)


class MalformedResponse(WeatherServiceError):
    status_code = 502
    public_message = "Weather provider returned an unreadable response"


class UpstreamUnavailable(WeatherServiceError):
    """Provider could not be reached at all."""
    status_code = 503
    public_message = "Weather provider is unavailable"


class UpstreamTimeout(UpstreamUnavailable):
    status_code = 504
    public_message = "Weather provider timed out"


class CacheUnavailable(WeatherServiceError):
    """Cache backend failed. Never surfaced to clients; lookups fall back to the provider."""
    status_code = 503
    public_message = "Cache is unavailable"
