"""Typed views of OpenWeatherMap JSON payloads.

Every field is optional because the API omits whatever it has no data
for. Validation is strict: an integer field rejects fractional numbers and
a number field rejects strings, so ``model_validate`` raises
``pydantic.ValidationError`` on any payload that contradicts the schema.
``model_dump(by_alias=True, exclude_none=True)`` gives the wire shape back.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# ``cod`` arrives as an int from some endpoints and a string from others
Code = Union[int, str]


class OWMModel(BaseModel):
    model_config = ConfigDict(strict=True, populate_by_name=True)


class Coordinates(OWMModel):
    lon: Optional[float] = None
    lat: Optional[float] = None


class Condition(OWMModel):
    """One of OpenWeatherMap's weather condition codes."""

    id: Optional[int] = None
    main: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None


class Main(OWMModel):
    """Temperature, pressure and humidity.

    Temperatures are Kelvin by default, Celsius with metric units and
    Fahrenheit with imperial units. Pressures are hPa.
    """

    temp: Optional[float] = None
    feels_like: Optional[float] = None
    temp_min: Optional[float] = None
    temp_max: Optional[float] = None
    pressure: Optional[int] = None
    humidity: Optional[int] = None
    sea_level: Optional[int] = None
    grnd_level: Optional[int] = None
    temp_kf: Optional[float] = None


class Wind(OWMModel):
    speed: Optional[float] = None
    deg: Optional[int] = None
    gust: Optional[float] = None


class Clouds(OWMModel):
    all: Optional[int] = None


class Precipitation(OWMModel):
    """Rain or snow volume in mm."""

    one_hour: Optional[float] = Field(default=None, alias="1h")
    three_hours: Optional[float] = Field(default=None, alias="3h")


class Sys(OWMModel):
    type_: Optional[int] = Field(default=None, alias="type")
    id: Optional[int] = None
    message: Optional[float] = None
    country: Optional[str] = None
    sunrise: Optional[int] = None
    sunset: Optional[int] = None
    pod: Optional[str] = None


class _Snapshot(OWMModel):
    """Fields and shortcuts shared by current weather and forecast entries."""

    main: Optional[Main] = None
    weather: Optional[List[Condition]] = None
    wind: Optional[Wind] = None
    clouds: Optional[Clouds] = None
    rain: Optional[Precipitation] = None
    snow: Optional[Precipitation] = None
    visibility: Optional[int] = None
    dt: Optional[int] = None
    sys: Optional[Sys] = None

    @property
    def temperature(self) -> Optional[float]:
        return self.main.temp if self.main else None

    @property
    def description(self) -> Optional[str]:
        if not self.weather:
            return None
        return self.weather[0].description


class CurrentWeather(_Snapshot):
    """Snapshot returned by the current weather endpoint."""

    coord: Optional[Coordinates] = None
    base: Optional[str] = None
    timezone: Optional[int] = None
    id: Optional[int] = None
    name: Optional[str] = None
    cod: Optional[Code] = None


class ForecastEntry(_Snapshot):
    """One timestamp of a forecast."""

    pop: Optional[float] = None
    dt_txt: Optional[str] = None


class ForecastCity(OWMModel):
    id: Optional[int] = None
    name: Optional[str] = None
    coord: Optional[Coordinates] = None
    country: Optional[str] = None
    population: Optional[int] = None
    timezone: Optional[int] = None
    sunrise: Optional[int] = None
    sunset: Optional[int] = None


class Forecast(OWMModel):
    """Sequence of predicted snapshots for one city."""

    cod: Optional[Code] = None
    message: Optional[float] = None
    cnt: Optional[int] = None
    entries: List[ForecastEntry] = Field(default_factory=list, alias="list")
    city: Optional[ForecastCity] = None


class WeatherAggregate(OWMModel):
    """Cities found around a point."""

    message: Optional[str] = None
    cod: Optional[Code] = None
    count: Optional[int] = None
    cities: List[CurrentWeather] = Field(default_factory=list, alias="list")


class BoxAggregate(OWMModel):
    """Cities inside a bounding box."""

    cod: Optional[Code] = None
    calctime: Optional[float] = None
    cnt: Optional[int] = None
    cities: List[CurrentWeather] = Field(default_factory=list, alias="list")


class ErrorResponse(OWMModel):
    """Error envelope the API sends with a rejected request."""

    cod: Optional[Code] = None
    message: Optional[str] = None


@dataclass(frozen=True)
class BoundingBox:
    left: float
    bottom: float
    right: float
    top: float


__all__ = [
    "BoundingBox",
    "BoxAggregate",
    "Clouds",
    "Condition",
    "Coordinates",
    "CurrentWeather",
    "ErrorResponse",
    "Forecast",
    "ForecastCity",
    "ForecastEntry",
    "Main",
    "Precipitation",
    "Sys",
    "WeatherAggregate",
    "Wind",
]
