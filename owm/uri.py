from __future__ import annotations

from typing import Any, List, Optional, Tuple

import requests

from .config import DEFAULT_BASE_URL


CURRENT = "weather"
FORECAST = "forecast"
FIND = "find"
BOX_CITY = "box/city"


class UriBuilder:
    """Builds OpenWeatherMap endpoint URLs.

    Parameters keep their insertion order. Setting a key that is already
    present replaces its value in place. Values are passed through as given;
    the API decides whether they are valid.
    """

    def __init__(self, method: str = "", base_url: str = DEFAULT_BASE_URL) -> None:
        self.base_url = base_url.rstrip("/")
        self.method = method
        self.params: List[Tuple[str, str]] = []

    def endpoint(self, method: str) -> "UriBuilder":
        self.method = method
        return self

    def param(self, key: str, value: Any) -> "UriBuilder":
        value = str(value)
        for i, (existing, _) in enumerate(self.params):
            if existing == key:
                self.params[i] = (key, value)
                return self
        self.params.append((key, value))
        return self

    def copy(self) -> "UriBuilder":
        clone = UriBuilder(self.method, self.base_url)
        clone.params = list(self.params)
        return clone

    def build(self) -> str:
        url = f"{self.base_url}/{self.method}" if self.method else self.base_url
        if not self.params:
            return url
        return requests.Request("GET", url, params=self.params).prepare().url


def join_country(value: Any, country: Optional[str]) -> str:
    if country is None:
        return str(value)
    return f"{value},{country}"


def redact(builder: UriBuilder) -> List[Tuple[str, str]]:
    return [(k, "***" if k == "appid" else v) for k, v in builder.params]
