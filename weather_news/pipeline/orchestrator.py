"""
Main pipeline orchestration for Weather News.

This module coordinates one pipeline run:
1. Resolve the location (falls back to fixed coordinates, never fails)
2. Fetch current weather (failure halts the run with an error)
3. Fetch the forecast (failure degrades to an empty forecast)
4. Fetch headlines for the first configured category (failure degrades to none)
5. Classify headlines by temperature and publish the final state

Steps run strictly one after another. All state changes go through
reduce(); listeners receive every new state.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from ..core.classifier import classify, select_tier, to_celsius
from ..core.errors import FetchError
from ..core.types import Coordinates, Settings
from ..fetch.news import NewsClient
from ..fetch.weather import ForecastClient, WeatherClient
from ..location import LocationResolver
from ..logging_utils import log_event
from ..settings_store import SettingsStore, persist_settings
from .state import (
    Action,
    ErrorCleared,
    ForecastLoaded,
    LocationResolved,
    NewsFiltered,
    NewsLoaded,
    PipelineState,
    RunCompleted,
    RunFailed,
    RunStarted,
    WarningRaised,
    WeatherLoaded,
    reduce,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")
StateListener = Callable[[PipelineState], None]


class PipelineOrchestrator:
    """Owns the pipeline state and sequences the fetch/classify steps.

    A run() or refresh() issued while another run is loading is ignored:
    it logs the rejection and returns the current state unchanged.

    Args:
        location_resolver: Resolves coordinates for runs without a known location
        weather_client: Current conditions; its failure ends the run in error
        forecast_client: Daily forecast; its failure leaves the forecast empty
        news_client: Headlines; its failure leaves the news empty
        settings: Initial settings (defaults when omitted)
        settings_store: Where save_settings persists; None keeps settings in memory
    """

    def __init__(
        self,
        location_resolver: LocationResolver,
        weather_client: WeatherClient,
        forecast_client: ForecastClient,
        news_client: NewsClient,
        settings: Settings | None = None,
        settings_store: SettingsStore | None = None,
    ):
        self.location_resolver = location_resolver
        self.weather_client = weather_client
        self.forecast_client = forecast_client
        self.news_client = news_client
        self.settings_store = settings_store
        self._settings = settings or Settings()
        self._state = PipelineState()
        self._listeners: list[StateListener] = []

    # -- read access -------------------------------------------------------

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def settings(self) -> Settings:
        return self._settings

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call listener with every new state. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -- actions -----------------------------------------------------------

    async def run(self) -> PipelineState:
        """Run the full pipeline, starting with location resolution."""
        if self._reject_if_loading("run"):
            return self._state
        return await self._guarded(None)

    async def refresh(self) -> PipelineState:
        """Clear any error and re-run from the last known location, if any."""
        if self._reject_if_loading("refresh"):
            return self._state
        self._dispatch(ErrorCleared())
        return await self._guarded(self._state.location)

    def save_settings(self, settings: Settings) -> Settings:
        """Validate and persist settings; they apply from the next run.

        Raises:
            SettingsError: Settings are invalid; nothing was persisted
        """
        self._settings = persist_settings(self.settings_store, settings)
        return settings

    def reset_settings(self) -> Settings:
        return self.save_settings(Settings())

    # -- internal ----------------------------------------------------------

    def _dispatch(self, action: Action) -> PipelineState:
        self._state = reduce(self._state, action)
        logger.debug("Pipeline action %s -> %s", type(action).__name__, self._state.status.value)
        for listener in list(self._listeners):
            listener(self._state)
        return self._state

    def _reject_if_loading(self, operation: str) -> bool:
        if not self._state.loading:
            return False
        log_event(
            logger,
            f"Ignoring {operation}: a pipeline run is already in progress",
            level=logging.WARNING,
            event="run_ignored",
            operation=operation,
        )
        return True

    async def _guarded(self, location: Coordinates | None) -> PipelineState:
        self._dispatch(RunStarted())
        try:
            return await self._execute(location)
        except asyncio.CancelledError:
            self._dispatch(RunFailed("Pipeline run cancelled"))
            raise
        except Exception as exc:
            logger.exception("Pipeline run failed unexpectedly")
            self._dispatch(RunFailed(f"Unexpected error: {exc}"))
            raise

    async def _execute(self, location: Coordinates | None) -> PipelineState:
        settings = self._settings
        log_event(
            logger,
            "Pipeline start",
            event="pipeline_start",
            known_location=location is not None,
            units=settings.units,
            category=settings.primary_category,
        )

        if location is None:
            warnings: list[str] = []

            def on_warning(message: str) -> None:
                warnings.append(message)
                self._dispatch(WarningRaised(message))

            location = await self.location_resolver.resolve(on_warning=on_warning)
            self._dispatch(LocationResolved(location, warnings[-1] if warnings else None))

        try:
            weather = await self.weather_client.fetch_current(location, settings.units)
        except FetchError as exc:
            log_event(
                logger,
                "Weather fetch failed",
                level=logging.ERROR,
                event="weather_failed",
                error=str(exc),
            )
            return self._dispatch(RunFailed(str(exc)))
        self._dispatch(WeatherLoaded(weather))
        log_event(
            logger,
            "Weather data received",
            event="weather_loaded",
            temperature=weather.temperature,
            unit=weather.unit,
            location_name=weather.location_name,
        )

        forecast = await self._best_effort(
            "forecast", self.forecast_client.fetch_forecast(location, settings.units)
        )
        self._dispatch(ForecastLoaded(tuple(forecast)))

        news = await self._best_effort(
            "news", self.news_client.fetch_headlines(settings.primary_category)
        )
        self._dispatch(NewsLoaded(tuple(news)))

        temperature = to_celsius(weather.temperature, weather.unit)
        filtered = classify(temperature, news)
        self._dispatch(NewsFiltered(tuple(filtered)))
        log_event(
            logger,
            "Filtered news by weather",
            event="news_filtered",
            temperature_celsius=round(temperature, 1),
            tier=select_tier(temperature).value,
            candidates=len(news),
            selected=len(filtered),
        )

        state = self._dispatch(RunCompleted())
        log_event(
            logger,
            "Pipeline complete",
            event="pipeline_complete",
            forecast_points=len(state.forecast),
            headlines=len(state.filtered_news),
        )
        return state

    async def _best_effort(self, step: str, call: Awaitable[list[T]]) -> list[T]:
        try:
            return list(await call)
        except Exception as exc:  # noqa: BLE001
            log_event(
                logger,
                f"{step.capitalize()} step failed, continuing without it",
                level=logging.WARNING,
                event=f"{step}_degraded",
                error=f"{type(exc).__name__}: {exc}",
            )
            return []
