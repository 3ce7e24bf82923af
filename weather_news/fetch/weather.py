"""
Current weather and forecast clients.

Both clients talk to the same OpenWeatherMap-style API. A failing current
weather call raises and stops the pipeline run; a failing forecast call is
logged and yields an empty forecast.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence, TypeVar

import httpx

from ..config import FetchConfig, WeatherApiConfig
from ..core.errors import FetchError, ParseError
from ..core.types import CELSIUS, FAHRENHEIT, Coordinates, ForecastEntry, WeatherSnapshot
from ..logging_utils import log_event
from .http import get_json

logger = logging.getLogger(__name__)

# Raw forecast points are 3 hours apart; every 8th is one per day
FORECAST_STEP = 8
FORECAST_DAYS = 5

T = TypeVar("T")


def downsample_forecast(
    points: Sequence[T],
    step: int = FORECAST_STEP,
    limit: int = FORECAST_DAYS,
) -> list[T]:
    """Keep points at index 0, step, 2*step, ... capped at limit entries."""
    return list(points[::step][:limit])


class WeatherClient:
    """Fetches current conditions for a coordinate pair."""

    def __init__(
        self,
        cfg: WeatherApiConfig,
        fetch_cfg: FetchConfig,
        api_key: str | None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.cfg = cfg
        self.fetch_cfg = fetch_cfg
        self.api_key = api_key or ""
        self.transport = transport

    async def fetch_current(self, coords: Coordinates, units: str) -> WeatherSnapshot:
        """Fetch current weather.

        Args:
            coords: Location to query
            units: "metric" or "imperial"

        Raises:
            HttpError: Non-2xx answer
            ParseError: Payload missing required fields
            NetworkError: No answer within the configured timeout
        """
        url = f"{self.cfg.base_url.rstrip('/')}/weather"
        log_event(
            logger,
            "Fetching current weather",
            event="weather_request",
            latitude=coords.latitude,
            longitude=coords.longitude,
            units=units,
        )
        data = await get_json(
            url,
            _params(coords, units, self.api_key),
            self.fetch_cfg,
            service="Weather",
            transport=self.transport,
        )
        return parse_weather(data, units)


class ForecastClient:
    """Fetches the multi-day forecast and downsamples it to one point per day.

    Never raises for upstream failures: any fetch or decode error is logged
    and an empty list is returned.
    """

    def __init__(
        self,
        cfg: WeatherApiConfig,
        fetch_cfg: FetchConfig,
        api_key: str | None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.cfg = cfg
        self.fetch_cfg = fetch_cfg
        self.api_key = api_key or ""
        self.transport = transport

    async def fetch_forecast(self, coords: Coordinates, units: str) -> list[ForecastEntry]:
        url = f"{self.cfg.base_url.rstrip('/')}/forecast"
        try:
            data = await get_json(
                url,
                _params(coords, units, self.api_key),
                self.fetch_cfg,
                service="Forecast",
                transport=self.transport,
            )
            forecast = parse_forecast(data)
        except FetchError as exc:
            log_event(
                logger,
                "Forecast unavailable, continuing with current weather only",
                level=logging.WARNING,
                event="forecast_degraded",
                error=str(exc),
            )
            return []
        logger.info("Forecast received: kept %d daily points", len(forecast))
        return forecast


def _params(coords: Coordinates, units: str, api_key: str) -> dict[str, Any]:
    return {
        "lat": coords.latitude,
        "lon": coords.longitude,
        "units": units,
        "appid": api_key,
    }


def parse_weather(data: Any, units: str) -> WeatherSnapshot:
    """Decode a current weather payload into a WeatherSnapshot."""
    try:
        main = data["main"]
        visibility = data.get("visibility")
        return WeatherSnapshot(
            temperature=float(main["temp"]),
            feels_like=float(main["feels_like"]),
            humidity=int(main["humidity"]),
            wind_speed=float(data["wind"]["speed"]),
            visibility=int(visibility) if visibility is not None else None,
            description=str(data["weather"][0]["description"]),
            location_name=str(data.get("name") or ""),
            unit=FAHRENHEIT if units == "imperial" else CELSIUS,
        )
    except (KeyError, IndexError, TypeError, ValueError, AttributeError) as exc:
        raise ParseError(f"Unexpected weather payload: {type(exc).__name__}: {exc}") from exc


def parse_forecast(data: Any) -> list[ForecastEntry]:
    """Downsample the raw forecast list and decode the kept points."""
    try:
        points = data.get("list") or []
        return [
            ForecastEntry(
                timestamp=int(item["dt"]),
                temperature=float(item["main"]["temp"]),
                description=str(item["weather"][0]["description"]),
            )
            for item in downsample_forecast(points)
        ]
    except (KeyError, IndexError, TypeError, ValueError, AttributeError) as exc:
        raise ParseError(f"Unexpected forecast payload: {type(exc).__name__}: {exc}") from exc
