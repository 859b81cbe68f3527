from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Any, Callable, Generic, Mapping, Optional, TypeVar, Union

import requests
from pydantic import ValidationError

from .config import DEFAULT_BASE_URL, Settings, settings as default_settings
from .models import (
    BoundingBox,
    BoxAggregate,
    CurrentWeather,
    ErrorResponse,
    Forecast,
    WeatherAggregate,
)
from .uri import BOX_CITY, CURRENT, FIND, FORECAST, UriBuilder, join_country, redact


logger = logging.getLogger(__name__)

T = TypeVar("T")
Q = TypeVar("Q", bound="_Query")


class WeatherAPIError(Exception):
    """Raised when a weather API call fails."""


class HttpError(WeatherAPIError):
    """The transport could not complete the request."""

    def __init__(self, cause: OSError) -> None:
        super().__init__(f"HTTP request failed: {cause}")
        self.cause = cause


class BadRequest(WeatherAPIError):
    """The server rejected the request with a 4xx status."""

    def __init__(self, status: int, body: str, error: Optional[ErrorResponse] = None) -> None:
        self.status = status
        self.body = body
        self.cod = str(error.cod) if error and error.cod is not None else None
        self.message = error.message if error and error.message is not None else body
        super().__init__(f"Weather API error {status}: {self.message}")


class JsonDecodeError(WeatherAPIError):
    """The body is not JSON or does not match the expected payload."""

    def __init__(self, body: str, error: Exception) -> None:
        self.body = body
        self.error = error
        super().__init__(f"Could not decode weather API response: {error}")

    @property
    def position(self) -> Optional[int]:
        return getattr(self.error, "pos", None)


class Failure(WeatherAPIError):
    """The API reported a failure that is not a rejected request.

    Raised for non-2xx statuses outside 4xx, and for 2xx bodies whose
    ``cod`` field is anything other than 200.
    """

    def __init__(self, message: str, cod: Optional[str] = None, status: Optional[int] = None) -> None:
        self.message = message
        self.cod = cod
        self.status = status
        super().__init__(f"Weather API failure ({cod or status}): {message}")


class Units(str, Enum):
    STANDARD = "standard"
    METRIC = "metric"
    IMPERIAL = "imperial"


UnitsLike = Union[Units, str]


class WeatherHub:
    """Central access point to the OpenWeatherMap API.

    ``session`` performs the requests; anything with a ``requests.Session``
    style ``get(url)`` works. The hub never configures it and never retries.
    """

    def __init__(
        self,
        session: requests.Session,
        api_key: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        units: Optional[UnitsLike] = None,
        lang: Optional[str] = None,
    ) -> None:
        self.session = session
        self._api_key = api_key
        self.base_url = base_url
        self.default_units = units
        self.default_lang = lang

    @property
    def api_key(self) -> str:
        return self._api_key

    @classmethod
    def from_settings(
        cls,
        session: Optional[requests.Session] = None,
        settings: Optional[Settings] = None,
    ) -> "WeatherHub":
        settings = settings or default_settings
        if not settings.openweather_api_key:
            raise RuntimeError("OPENWEATHER_API_KEY is not set.")
        return cls(
            session or requests.Session(),
            settings.openweather_api_key,
            base_url=settings.base_url,
            units=settings.units,
            lang=settings.lang,
        )

    def current(self) -> "CurrentWeatherQuery":
        return CurrentWeatherQuery(self, self._builder(CURRENT))

    def forecast(self) -> "ForecastQuery":
        return ForecastQuery(self, self._builder(FORECAST))

    def _builder(self, method: str) -> UriBuilder:
        builder = UriBuilder(method, self.base_url)
        if self.default_units is not None:
            builder.param("units", _units_value(self.default_units))
        if self.default_lang is not None:
            builder.param("lang", self.default_lang)
        return builder

    def run_query(self, builder: UriBuilder, decode: Callable[[Mapping[str, Any]], T]) -> T:
        """Perform the GET for ``builder`` and decode the body with ``decode``.

        ``builder`` is left untouched; the API key goes on a copy.
        """
        request = builder.copy().param("appid", self._api_key)
        logger.debug("GET %s/%s %s", request.base_url, request.method, redact(request))

        try:
            response = self.session.get(request.build())
        except OSError as exc:
            # requests.RequestException is an OSError too
            raise HttpError(exc) from exc

        status = response.status_code
        content = response.content or b""
        body = content.decode("utf-8", errors="replace")
        logger.debug("OpenWeatherMap responded %s for %s", status, request.method)

        if 400 <= status < 500:
            raise BadRequest(status, body, _error_envelope(body))
        if not 200 <= status < 300:
            envelope = _error_envelope(body)
            message = envelope.message if envelope and envelope.message is not None else body
            cod = envelope.cod if envelope else None
            raise Failure(message, cod=None if cod is None else str(cod), status=status)

        try:
            payload = json.loads(content.decode("utf-8"))
        except ValueError as exc:
            # UnicodeDecodeError is a ValueError
            raise JsonDecodeError(body, exc) from exc
        if not isinstance(payload, dict):
            raise JsonDecodeError(body, TypeError(f"expected a JSON object, got {type(payload).__name__}"))

        cod = payload.get("cod")
        if cod is not None and str(cod) != "200":
            message = payload.get("message")
            raise Failure(
                "" if message is None else str(message),
                cod=str(cod),
                status=status,
            )

        try:
            return decode(payload)
        except ValidationError as exc:
            raise JsonDecodeError(body, exc) from exc


def _units_value(units: UnitsLike) -> str:
    return units.value if isinstance(units, Units) else str(units)


def _error_envelope(body: str) -> Optional[ErrorResponse]:
    try:
        payload = json.loads(body)
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    try:
        return ErrorResponse.model_validate(payload)
    except ValidationError:
        return None


class _Query(Generic[T]):
    """Selectors shared by the current weather and forecast endpoints.

    Modifiers such as ``units`` stay on the query; selectors only apply to
    the call they are passed to, so a query object can be reused.
    """

    decoder: Callable[[Mapping[str, Any]], T]

    def __init__(self, hub: WeatherHub, builder: UriBuilder) -> None:
        self.hub = hub
        self.builder = builder

    def units(self: Q, units: UnitsLike) -> Q:
        self.builder.param("units", _units_value(units))
        return self

    def lang(self: Q, code: str) -> Q:
        self.builder.param("lang", code)
        return self

    def _run(self, **params: Any) -> T:
        builder = self.builder.copy()
        for key, value in params.items():
            builder.param(key, value)
        return self.hub.run_query(builder, self.decoder)

    def by_name(self, city: str, country: Optional[str] = None) -> T:
        """Query by city name, optionally narrowed with an ISO country code."""
        return self._run(q=join_country(city, country))

    def by_id(self, city_id: int) -> T:
        """Query by city ID. The API responds with an exact match."""
        return self._run(id=city_id)

    def by_coords(self, lat: float, lon: float) -> T:
        """Query by geographic coordinates."""
        return self._run(lat=lat, lon=lon)

    def by_zip_code(self, zip_code: Union[int, str], country: Optional[str] = None) -> T:
        """Query by ZIP code; the API assumes the USA when no country is given."""
        return self._run(zip=join_country(zip_code, country))


class CurrentWeatherQuery(_Query[CurrentWeather]):
    """Query builder for the current weather API."""

    decoder = staticmethod(CurrentWeather.model_validate)

    def by_circle(self, lat: float, lon: float, count: int, cluster: bool = False) -> WeatherAggregate:
        """Current weather for ``count`` cities around the given point."""
        builder = self.builder.copy().endpoint(FIND)
        for key, value in (("lat", lat), ("lon", lon), ("cnt", count), ("cluster", _yes_no(cluster))):
            builder.param(key, value)
        return self.hub.run_query(builder, WeatherAggregate.model_validate)

    def by_bounds(self, bbox: BoundingBox, zoom: int, cluster: bool = False) -> BoxAggregate:
        """Current weather for the cities inside ``bbox`` at map ``zoom``."""
        builder = self.builder.copy().endpoint(BOX_CITY)
        builder.param("bbox", f"{bbox.left},{bbox.bottom},{bbox.right},{bbox.top},{zoom}")
        builder.param("cluster", _yes_no(cluster))
        return self.hub.run_query(builder, BoxAggregate.model_validate)


class ForecastQuery(_Query[Forecast]):
    """Query builder for the 5 day / 3 hour forecast API."""

    decoder = staticmethod(Forecast.model_validate)

    def count(self, cnt: int) -> "ForecastQuery":
        """Limit the number of timestamps returned."""
        self.builder.param("cnt", cnt)
        return self


def _yes_no(flag: bool) -> str:
    return "yes" if flag else "no"
