"""
Core domain models and business logic.

This package contains data types, the error taxonomy and the headline
classifier, none of which depend on the network or the pipeline.
"""

from .classifier import Tier, classify, select_tier, to_celsius
from .errors import (
    FetchError,
    HttpError,
    LocationError,
    NetworkError,
    ParseError,
    PermissionDenied,
    PositionTimeout,
    PositionUnavailable,
    SettingsError,
    WeatherNewsError,
)
from .types import Coordinates, ForecastEntry, NewsArticle, Settings, WeatherSnapshot

__all__ = [
    "Coordinates",
    "ForecastEntry",
    "NewsArticle",
    "Settings",
    "WeatherSnapshot",
    "Tier",
    "classify",
    "select_tier",
    "to_celsius",
    "WeatherNewsError",
    "LocationError",
    "PermissionDenied",
    "PositionUnavailable",
    "PositionTimeout",
    "FetchError",
    "HttpError",
    "ParseError",
    "NetworkError",
    "SettingsError",
]
