from __future__ import annotations

import os
from dotenv import load_dotenv
from dataclasses import dataclass


DEFAULT_BASE_URL = "http://api.openweathermap.org/data/2.5"


@dataclass
class Settings:
    """Client configuration loaded from environment variables."""

    openweather_api_key: str | None
    base_url: str = DEFAULT_BASE_URL
    units: str | None = None
    lang: str | None = None

    @classmethod
    def load(cls) -> "Settings":
        # Values from a .env file never override variables already set
        load_dotenv()

        return cls(
            openweather_api_key=os.getenv("OPENWEATHER_API_KEY"),
            base_url=os.getenv("OPENWEATHER_BASE_URL") or DEFAULT_BASE_URL,
            units=os.getenv("OPENWEATHER_UNITS") or None,
            lang=os.getenv("OPENWEATHER_LANG") or None,
        )


settings = Settings.load()
