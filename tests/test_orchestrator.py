"""Tests for pipeline sequencing and failure policy."""

from __future__ import annotations

import asyncio

import pytest

from weather_news.core.errors import HttpError, NetworkError, SettingsError
from weather_news.core.types import (
    FAHRENHEIT,
    Coordinates,
    ForecastEntry,
    NewsArticle,
    Settings,
    WeatherSnapshot,
)
from weather_news.location import FixedPositionProvider, LocationResolver
from weather_news.pipeline.orchestrator import PipelineOrchestrator
from weather_news.pipeline.state import PipelineStatus
from weather_news.settings_store import SettingsStore

PARIS = Coordinates(latitude=48.85, longitude=2.35)


def _weather(temperature, unit="celsius"):
    return WeatherSnapshot(
        temperature=temperature,
        feels_like=temperature,
        humidity=50,
        wind_speed=2.0,
        visibility=10000,
        description="overcast clouds",
        location_name="Paris",
        unit=unit,
    )


class _FakeWeather:
    def __init__(self, result=None, error=None, gate=None):
        self.result = result
        self.error = error
        self.gate = gate
        self.calls = []

    async def fetch_current(self, coords, units):
        self.calls.append((coords, units))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.result


class _FakeForecast:
    def __init__(self, result=None, error=None):
        self.result = result or []
        self.error = error
        self.calls = 0

    async def fetch_forecast(self, coords, units):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.result


class _FakeNews:
    def __init__(self, result=None, error=None):
        self.result = result or []
        self.error = error
        self.categories = []

    async def fetch_headlines(self, category, page_size=None):
        self.categories.append(category)
        if self.error is not None:
            raise self.error
        return self.result


class _FakeStore(SettingsStore):
    def __init__(self):
        self.saved = []

    def load(self):
        return Settings()

    def save(self, settings):
        self.saved.append(settings)


def _orchestrator(weather, forecast=None, news=None, granted=True, settings=None, store=None):
    resolver = LocationResolver(FixedPositionProvider(PARIS, granted=granted))
    return PipelineOrchestrator(
        resolver,
        weather,
        forecast or _FakeForecast(),
        news or _FakeNews(),
        settings=settings,
        settings_store=store,
    )


def test_weather_failure_sets_error_and_skips_other_steps():
    forecast = _FakeForecast()
    news = _FakeNews()
    orchestrator = _orchestrator(
        _FakeWeather(error=HttpError(401, "Invalid API key", service="Weather")), forecast, news
    )

    state = asyncio.run(orchestrator.run())

    assert state.status is PipelineStatus.ERROR
    assert state.loading is False
    assert state.error == "Weather API error (401): Invalid API key"
    assert forecast.calls == 0
    assert news.categories == []


def test_forecast_failure_is_not_fatal_and_unmatched_news_falls_back():
    articles = [
        NewsArticle(title="City council meets"),
        NewsArticle(title="New bridge opens"),
        NewsArticle(title="Library extends hours"),
    ]
    orchestrator = _orchestrator(
        _FakeWeather(result=_weather(5.0)),
        _FakeForecast(error=NetworkError("Forecast request timed out")),
        _FakeNews(result=articles),
    )

    state = asyncio.run(orchestrator.run())

    assert state.status is PipelineStatus.READY
    assert state.error is None
    assert state.forecast == ()
    assert list(state.filtered_news) == articles


def test_news_failure_leaves_empty_headlines():
    entry = ForecastEntry(timestamp=1, temperature=20.0, description="sun")
    orchestrator = _orchestrator(
        _FakeWeather(result=_weather(20.0)),
        _FakeForecast(result=[entry]),
        _FakeNews(error=RuntimeError("socket closed")),
    )

    state = asyncio.run(orchestrator.run())

    assert state.status is PipelineStatus.READY
    assert state.forecast == (entry,)
    assert state.news == ()
    assert state.filtered_news == ()


def test_run_uses_units_and_first_category_from_settings():
    weather = _FakeWeather(result=_weather(60.0, unit=FAHRENHEIT))
    news = _FakeNews()
    settings = Settings(temperature_unit=FAHRENHEIT, news_categories=["science", "sports"])

    asyncio.run(_orchestrator(weather, news=news, settings=settings).run())

    assert weather.calls == [(PARIS, "imperial")]
    assert news.categories == ["science"]


def test_fahrenheit_reading_is_classified_in_celsius():
    # 86F is 30C: hot tier, so only the warning headline matches.
    articles = [NewsArticle(title="Storm warning issued"), NewsArticle(title="Great win")]
    orchestrator = _orchestrator(
        _FakeWeather(result=_weather(86.0, unit=FAHRENHEIT)),
        news=_FakeNews(result=articles),
        settings=Settings(temperature_unit=FAHRENHEIT),
    )

    state = asyncio.run(orchestrator.run())

    assert list(state.filtered_news) == [articles[0]]


def test_denied_location_uses_fallback_and_records_warning():
    weather = _FakeWeather(result=_weather(15.0))

    state = asyncio.run(_orchestrator(weather, granted=False).run())

    assert weather.calls[0][0] == Coordinates(40.7128, -74.0060)
    assert state.location == Coordinates(40.7128, -74.0060)
    assert state.warning == "Unable to get location: Location permission denied"
    assert state.status is PipelineStatus.READY


def test_refresh_reuses_location_and_clears_error():
    weather = _FakeWeather(error=NetworkError("Weather request timed out"))
    orchestrator = _orchestrator(weather)

    failed = asyncio.run(orchestrator.run())
    assert failed.status is PipelineStatus.ERROR

    weather.error = None
    weather.result = _weather(18.0)
    orchestrator.location_resolver = None  # refresh must not resolve again
    refreshed = asyncio.run(orchestrator.refresh())

    assert refreshed.status is PipelineStatus.READY
    assert refreshed.error is None
    assert [coords for coords, _ in weather.calls] == [PARIS, PARIS]


def test_run_while_loading_is_ignored():
    async def scenario():
        gate = asyncio.Event()
        weather = _FakeWeather(result=_weather(18.0), gate=gate)
        orchestrator = _orchestrator(weather)

        first = asyncio.create_task(orchestrator.run())
        await asyncio.sleep(0)
        while not weather.calls:
            await asyncio.sleep(0)
        ignored = await orchestrator.run()
        gate.set()
        final = await first
        return weather, ignored, final

    weather, ignored, final = asyncio.run(scenario())

    assert ignored.status is PipelineStatus.LOADING
    assert len(weather.calls) == 1
    assert final.status is PipelineStatus.READY


def test_listeners_see_every_state_until_unsubscribed():
    orchestrator = _orchestrator(_FakeWeather(result=_weather(18.0)))
    seen = []
    unsubscribe = orchestrator.subscribe(seen.append)

    asyncio.run(orchestrator.run())

    assert seen[0].status is PipelineStatus.LOADING
    assert seen[-1].status is PipelineStatus.READY
    count = len(seen)

    unsubscribe()
    asyncio.run(orchestrator.run())
    assert len(seen) == count


def test_unexpected_weather_client_error_ends_in_error_state():
    orchestrator = _orchestrator(_FakeWeather(error=RuntimeError("bug")))

    with pytest.raises(RuntimeError):
        asyncio.run(orchestrator.run())

    assert orchestrator.state.status is PipelineStatus.ERROR
    assert orchestrator.state.error == "Unexpected error: bug"


def test_save_settings_with_no_categories_is_rejected_without_persisting():
    store = _FakeStore()
    orchestrator = _orchestrator(_FakeWeather(result=_weather(18.0)), store=store)

    with pytest.raises(SettingsError, match="No categories selected"):
        orchestrator.save_settings(Settings(news_categories=[]))

    assert store.saved == []
    assert orchestrator.settings == Settings()


def test_saved_settings_apply_to_next_run():
    store = _FakeStore()
    news = _FakeNews()
    orchestrator = _orchestrator(_FakeWeather(result=_weather(18.0)), news=news, store=store)

    orchestrator.save_settings(Settings(news_categories=["health"]))
    asyncio.run(orchestrator.run())

    assert store.saved == [Settings(news_categories=["health"])]
    assert news.categories == ["health"]


def test_reset_settings_persists_defaults():
    store = _FakeStore()
    orchestrator = _orchestrator(
        _FakeWeather(result=_weather(18.0)),
        settings=Settings(temperature_unit=FAHRENHEIT, news_categories=["sports"]),
        store=store,
    )

    assert orchestrator.reset_settings() == Settings()
    assert store.saved == [Settings()]


class _CountingResolver:
    def __init__(self, coords):
        self.coords = coords
        self.calls = 0

    async def resolve(self, on_warning=None):
        self.calls += 1
        return self.coords


def test_refresh_without_known_location_resolves_first():
    resolver = _CountingResolver(PARIS)
    weather = _FakeWeather(result=_weather(18.0))
    orchestrator = PipelineOrchestrator(resolver, weather, _FakeForecast(), _FakeNews())

    state = asyncio.run(orchestrator.refresh())

    assert resolver.calls == 1
    assert state.location == PARIS
    assert weather.calls == [(PARIS, "metric")]
    assert state.status is PipelineStatus.READY

    asyncio.run(orchestrator.refresh())
    assert resolver.calls == 1
