"""
Core data types for the Weather News pipeline.

This module defines the fundamental data structures used throughout the pipeline:
- Coordinates: A resolved device or fallback location
- Settings: User preferences (temperature unit, news categories)
- WeatherSnapshot: Current conditions returned by the weather endpoint
- ForecastEntry: One downsampled forecast point (roughly one per day)
- NewsArticle: A headline returned by the news endpoint
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

CELSIUS = "celsius"
FAHRENHEIT = "fahrenheit"
TEMPERATURE_UNITS = (CELSIUS, FAHRENHEIT)

# Unit system names understood by the weather endpoint
_UNIT_SYSTEMS = {CELSIUS: "metric", FAHRENHEIT: "imperial"}

DEFAULT_CATEGORY = "general"
DEFAULT_CATEGORIES = ["general", "technology", "sports", "entertainment"]
NEWS_CATEGORIES = (
    "general",
    "business",
    "entertainment",
    "health",
    "science",
    "sports",
    "technology",
)


def unit_system(temperature_unit: str) -> str:
    """Map a temperature unit to the weather endpoint's unit system."""
    return _UNIT_SYSTEMS.get(temperature_unit, "metric")


@dataclass(frozen=True)
class Coordinates:
    """A latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float


@dataclass
class Settings:
    """User preferences read by the pipeline.

    Only the first entry of news_categories is used for fetching; the rest
    are kept so the user's selection survives a save/load cycle.

    Attributes:
        temperature_unit: "celsius" or "fahrenheit"
        news_categories: Ordered category identifiers, never empty when persisted
    """

    temperature_unit: str = CELSIUS
    news_categories: list[str] = field(default_factory=lambda: list(DEFAULT_CATEGORIES))

    @property
    def units(self) -> str:
        return unit_system(self.temperature_unit)

    @property
    def primary_category(self) -> str:
        if self.news_categories:
            return self.news_categories[0] or DEFAULT_CATEGORY
        return DEFAULT_CATEGORY

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the persisted JSON shape."""
        return {
            "temperatureUnit": self.temperature_unit,
            "newsCategories": list(self.news_categories),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], base: Settings | None = None) -> Settings:
        """Build settings from the persisted JSON shape, merged over base."""
        base = base or cls()
        unit = data.get("temperatureUnit", base.temperature_unit)
        categories = data.get("newsCategories")
        if not isinstance(categories, list):
            categories = base.news_categories
        return cls(temperature_unit=str(unit), news_categories=[str(c) for c in categories])


@dataclass(frozen=True)
class WeatherSnapshot:
    """Current conditions for one location.

    Temperatures and wind speed are expressed in the unit system that was
    requested (metric or imperial), recorded in the unit attribute.

    Attributes:
        temperature: Current temperature
        feels_like: Apparent temperature
        humidity: Relative humidity in percent
        wind_speed: Wind speed (m/s for metric, mph for imperial)
        visibility: Visibility in metres, None when the endpoint omits it
        description: Human-readable condition, e.g. "scattered clouds"
        location_name: Name of the nearest weather station / city
        unit: Temperature unit the values are expressed in
    """

    temperature: float
    feels_like: float
    humidity: int
    wind_speed: float
    visibility: int | None
    description: str
    location_name: str
    unit: str = CELSIUS


@dataclass(frozen=True)
class ForecastEntry:
    """A single forecast point.

    Attributes:
        timestamp: Unix timestamp (seconds) of the forecast point
        temperature: Forecast temperature in the requested unit system
        description: Human-readable condition
    """

    timestamp: int
    temperature: float
    description: str


@dataclass(frozen=True)
class NewsArticle:
    """A news headline.

    Attributes:
        title: The article headline, None when the endpoint omits it
        description: Optional short description
        source_name: Publication name
        published_at: ISO 8601 publication timestamp
        url: Link to the full article
        image_url: Optional lead image URL
    """

    title: str | None
    description: str | None = None
    source_name: str = ""
    published_at: str = ""
    url: str = ""
    image_url: str | None = None
