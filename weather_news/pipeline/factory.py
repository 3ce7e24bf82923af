"""Builds a fully wired PipelineOrchestrator from runtime config."""

from __future__ import annotations

from ..config import AppConfig, get_api_key
from ..core.types import Settings
from ..fetch.news import NewsClient
from ..fetch.weather import ForecastClient, WeatherClient
from ..location import LocationResolver, build_position_provider
from ..settings_store import SettingsStore
from .orchestrator import PipelineOrchestrator


def build_orchestrator(
    cfg: AppConfig,
    settings: Settings | None = None,
    settings_store: SettingsStore | None = None,
) -> PipelineOrchestrator:
    weather_key = get_api_key(cfg.weather)
    provider = build_position_provider(cfg.location, cfg.fetch)
    return PipelineOrchestrator(
        location_resolver=LocationResolver.from_config(cfg.location, provider),
        weather_client=WeatherClient(cfg.weather, cfg.fetch, weather_key),
        forecast_client=ForecastClient(cfg.weather, cfg.fetch, weather_key),
        news_client=NewsClient(cfg.news, cfg.fetch, get_api_key(cfg.news)),
        settings=settings,
        settings_store=settings_store,
    )
