from pydantic import BaseModel, ConfigDict, model_validator
from typing import Optional, List, Any, Union
from datetime import date


class WeatherQuery(BaseModel):
    location: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @model_validator(mode="after")
    def _end_requires_start(self):
        if self.end_date is not None and self.start_date is None:
            raise ValueError("end_date requires start_date")
        return self


# Whole numbers stay ints: 15 must serialize as 15, not 15.0
Number = Union[int, float]


# Provider payloads keep fields the schema does not name, so results stay a
# faithful copy of the upstream body.
class _ProviderModel(BaseModel):
    model_config = ConfigDict(extra="allow")


class CurrentConditions(_ProviderModel):
    datetime: Optional[str] = None
    datetimeEpoch: Optional[int] = None
    temp: Optional[Number] = None
    feelslike: Optional[Number] = None
    humidity: Optional[Number] = None
    dew: Optional[Number] = None
    precip: Optional[Number] = None
    precipprob: Optional[Number] = None
    snow: Optional[Number] = None
    windspeed: Optional[Number] = None
    winddir: Optional[Number] = None
    pressure: Optional[Number] = None
    visibility: Optional[Number] = None
    cloudcover: Optional[Number] = None
    uvindex: Optional[Number] = None
    conditions: Optional[str] = None
    icon: Optional[str] = None
    sunrise: Optional[str] = None
    sunset: Optional[str] = None


class DailyForecast(CurrentConditions):
    tempmax: Optional[Number] = None
    tempmin: Optional[Number] = None
    description: Optional[str] = None
    hours: Optional[List[CurrentConditions]] = None


class WeatherAlert(_ProviderModel):
    event: Optional[str] = None
    headline: Optional[str] = None
    description: Optional[str] = None
    onset: Optional[str] = None
    ends: Optional[str] = None


class WeatherResult(_ProviderModel):
    queryCost: Optional[int] = None
    latitude: Optional[Number] = None
    longitude: Optional[Number] = None
    resolvedAddress: Optional[str] = None
    address: Optional[str] = None
    timezone: Optional[str] = None
    tzoffset: Optional[Number] = None
    description: Optional[str] = None
    days: Optional[List[DailyForecast]] = None
    currentConditions: Optional[CurrentConditions] = None
    alerts: Optional[List[WeatherAlert]] = None

    def to_json(self) -> str:
        """Serialized form used for both the cache and the HTTP body."""
        return self.model_dump_json(exclude_unset=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_unset=True)


class WeatherLookup(BaseModel):
    """A resolved result plus where it came from."""
    result: WeatherResult
    cached: bool = False
