"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- WeatherApiConfig: Current weather and forecast endpoint settings
- NewsApiConfig: Headline endpoint settings
- FetchConfig: HTTP timeout, retry and proxy settings
- LocationConfig: Positioning provider, timeouts and fallback coordinates
- SettingsStoreConfig: Where user settings are persisted
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
import os
from typing import Any

import yaml


@dataclass
class WeatherApiConfig:
    """Configuration for the weather endpoints.

    Attributes:
        base_url: Base URL; "/weather" and "/forecast" are appended
        api_key_env: Environment variable name containing the API key
        api_key: Optional inline API key (overrides env var)
    """

    base_url: str = "https://api.openweathermap.org/data/2.5"
    api_key_env: str = "OPENWEATHER_API_KEY"
    api_key: str | None = None


@dataclass
class NewsApiConfig:
    """Configuration for the headline endpoint.

    Attributes:
        base_url: Base URL; "/top-headlines" is appended
        api_key_env: Environment variable name containing the API key
        api_key: Optional inline API key (overrides env var)
        country: Two-letter country code for headlines
        page_size: Number of headlines requested per run
    """

    base_url: str = "https://newsapi.org/v2"
    api_key_env: str = "NEWS_API_KEY"
    api_key: str | None = None
    country: str = "us"
    page_size: int = 50


@dataclass
class FetchConfig:
    """Configuration for HTTP fetching.

    Attributes:
        timeout_seconds: Upper bound for a single HTTP call
        retries: Number of retry attempts for transport errors and 5xx answers
        trust_env: Whether to respect system proxy settings
        user_agent: HTTP User-Agent header string
    """

    timeout_seconds: float = 10.0
    retries: int = 1
    trust_env: bool = True
    user_agent: str = "weather-news/0.1"


@dataclass
class LocationConfig:
    """Configuration for location resolution.

    Attributes:
        provider: "ip" for IP geolocation, "fixed" for configured coordinates
        granted: Whether the user allows location access at all
        latitude: Coordinates used by the "fixed" provider
        longitude: Coordinates used by the "fixed" provider
        timeout_seconds: Maximum wait for a position fix
        maximum_age_seconds: Age under which a cached fix is reused
        high_accuracy: Request the most precise fix the provider can give
        fallback_latitude: Coordinates used when no fix can be obtained
        fallback_longitude: Coordinates used when no fix can be obtained
        lookup_url: IP geolocation endpoint for the "ip" provider
    """

    provider: str = "ip"
    granted: bool = True
    latitude: float | None = None
    longitude: float | None = None
    timeout_seconds: float = 15.0
    maximum_age_seconds: float = 10.0
    high_accuracy: bool = True
    fallback_latitude: float = 40.7128
    fallback_longitude: float = -74.0060
    lookup_url: str = "http://ip-api.com/json/"


@dataclass
class SettingsStoreConfig:
    """Configuration for persisted user settings.

    Attributes:
        path: JSON file holding the key-value store
        key: Key under which the settings object is stored
    """

    path: str = "~/.weather_news/settings.json"
    key: str = "settings"


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Path of the log file
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "weather_news.jsonl"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    weather: WeatherApiConfig = field(default_factory=WeatherApiConfig)
    news: NewsApiConfig = field(default_factory=NewsApiConfig)
    fetch: FetchConfig = field(default_factory=FetchConfig)
    location: LocationConfig = field(default_factory=LocationConfig)
    settings: SettingsStoreConfig = field(default_factory=SettingsStoreConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return _merge_config(AppConfig(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update(value)
        else:
            data[key] = value
    return _fromdict(data)


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    return AppConfig(
        weather=WeatherApiConfig(**data["weather"]),
        news=NewsApiConfig(**data["news"]),
        fetch=FetchConfig(**data["fetch"]),
        location=LocationConfig(**data["location"]),
        settings=SettingsStoreConfig(**data["settings"]),
        logging=LoggingConfig(**data["logging"]),
    )


def get_api_key(cfg: WeatherApiConfig | NewsApiConfig) -> str | None:
    """Get API key from inline config or environment variable."""
    if cfg.api_key:
        return cfg.api_key
    return os.getenv(cfg.api_key_env)
