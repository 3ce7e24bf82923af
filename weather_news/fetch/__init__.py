"""
Upstream HTTP clients.

This package handles fetching current weather, the forecast and news
headlines, and decoding their payloads into core types.
"""

from .http import get_json
from .news import NewsClient
from .weather import ForecastClient, WeatherClient, downsample_forecast

__all__ = [
    "get_json",
    "WeatherClient",
    "ForecastClient",
    "NewsClient",
    "downsample_forecast",
]
