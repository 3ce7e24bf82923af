"""
Location resolution with a fixed fallback.

The positioning capability is abstracted behind PositionProvider. The
LocationResolver asks for permission, waits a bounded time for a fix and
turns every expected failure (denied, unavailable, timeout) into the
fallback coordinates plus a human-readable warning. It never raises.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import asyncio
from dataclasses import dataclass
import logging
import math
import time
from typing import Callable

import httpx

from .config import FetchConfig, LocationConfig
from .core.errors import (
    FetchError,
    LocationError,
    PermissionDenied,
    PositionTimeout,
    PositionUnavailable,
)
from .core.types import Coordinates
from .fetch.http import get_json
from .logging_utils import log_event

logger = logging.getLogger(__name__)

FALLBACK_COORDINATES = Coordinates(latitude=40.7128, longitude=-74.0060)

WarningCallback = Callable[[str], None]


@dataclass(frozen=True)
class PositionRequest:
    """Parameters for a single position fix.

    Attributes:
        high_accuracy: Ask for the most precise fix available
        timeout_seconds: Maximum wait before giving up
        maximum_age_seconds: A cached fix younger than this may be returned
    """

    high_accuracy: bool = True
    timeout_seconds: float = 15.0
    maximum_age_seconds: float = 10.0


class PositionProvider(ABC):
    """Permission-and-positioning capability."""

    async def request_permission(self) -> bool:
        """Return True when location access is granted."""
        return True

    @abstractmethod
    async def current_position(self, request: PositionRequest) -> Coordinates:
        """Return the current position.

        Raises:
            PermissionDenied, PositionUnavailable or PositionTimeout
        """
        raise NotImplementedError


class FixedPositionProvider(PositionProvider):
    """Always reports the configured coordinates."""

    def __init__(self, coords: Coordinates, granted: bool = True):
        self.coords = coords
        self.granted = granted

    async def request_permission(self) -> bool:
        return self.granted

    async def current_position(self, request: PositionRequest) -> Coordinates:
        return self.coords


class IpPositionProvider(PositionProvider):
    """Approximate position from an IP geolocation service.

    IP lookups are city-level at best, so high_accuracy has no effect. The
    last fix is reused while it is younger than the request's maximum age.
    """

    def __init__(
        self,
        lookup_url: str,
        fetch_cfg: FetchConfig,
        granted: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.lookup_url = lookup_url
        self.fetch_cfg = fetch_cfg
        self.granted = granted
        self.transport = transport
        self.clock = clock
        self._last_fix: tuple[float, Coordinates] | None = None

    async def request_permission(self) -> bool:
        return self.granted

    async def current_position(self, request: PositionRequest) -> Coordinates:
        if self._last_fix is not None:
            fixed_at, coords = self._last_fix
            if self.clock() - fixed_at <= request.maximum_age_seconds:
                return coords

        try:
            data = await get_json(
                self.lookup_url, {}, self.fetch_cfg, service="Geolocation",
                transport=self.transport,
            )
        except FetchError as exc:
            raise PositionUnavailable(str(exc)) from exc

        if not isinstance(data, dict) or data.get("status", "success") != "success":
            raise PositionUnavailable(f"Geolocation lookup failed: {data!r}")
        try:
            coords = Coordinates(latitude=float(data["lat"]), longitude=float(data["lon"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise PositionUnavailable(f"Geolocation payload incomplete: {exc}") from exc

        self._last_fix = (self.clock(), coords)
        return coords


def build_position_provider(
    cfg: LocationConfig,
    fetch_cfg: FetchConfig,
) -> PositionProvider:
    """Build the configured position provider."""
    name = cfg.provider.lower().strip()
    if name == "fixed":
        if cfg.latitude is None or cfg.longitude is None:
            raise ValueError("Fixed location provider needs latitude and longitude")
        return FixedPositionProvider(
            Coordinates(latitude=cfg.latitude, longitude=cfg.longitude),
            granted=cfg.granted,
        )
    if name == "ip":
        return IpPositionProvider(cfg.lookup_url, fetch_cfg, granted=cfg.granted)
    raise ValueError(f"Unsupported location provider: {cfg.provider}. Supported: fixed, ip")


class LocationResolver:
    """Resolves coordinates for a pipeline run, falling back on failure."""

    def __init__(
        self,
        provider: PositionProvider,
        request: PositionRequest | None = None,
        fallback: Coordinates = FALLBACK_COORDINATES,
    ):
        self.provider = provider
        self.request = request or PositionRequest()
        self.fallback = fallback

    @classmethod
    def from_config(cls, cfg: LocationConfig, provider: PositionProvider) -> LocationResolver:
        return cls(
            provider,
            PositionRequest(
                high_accuracy=cfg.high_accuracy,
                timeout_seconds=cfg.timeout_seconds,
                maximum_age_seconds=cfg.maximum_age_seconds,
            ),
            Coordinates(latitude=cfg.fallback_latitude, longitude=cfg.fallback_longitude),
        )

    async def resolve(self, on_warning: WarningCallback | None = None) -> Coordinates:
        """Return the device coordinates, or the fallback with a warning."""
        try:
            coords = await self._locate()
        except LocationError as exc:
            return self._fall_back(exc, on_warning)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Position provider raised unexpectedly")
            return self._fall_back(PositionUnavailable(str(exc)), on_warning)

        log_event(
            logger,
            "Location received",
            event="location_resolved",
            latitude=coords.latitude,
            longitude=coords.longitude,
        )
        return coords

    async def _locate(self) -> Coordinates:
        if not await self.provider.request_permission():
            raise PermissionDenied("Location access was not granted")
        try:
            coords = await asyncio.wait_for(
                self.provider.current_position(self.request),
                timeout=self.request.timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            raise PositionTimeout(
                f"No position fix within {self.request.timeout_seconds}s"
            ) from exc
        if not (math.isfinite(coords.latitude) and math.isfinite(coords.longitude)):
            raise PositionUnavailable(f"Provider returned invalid coordinates: {coords}")
        return coords

    def _fall_back(self, exc: LocationError, on_warning: WarningCallback | None) -> Coordinates:
        message = f"Unable to get location: {exc.reason}"
        log_event(
            logger,
            message,
            level=logging.WARNING,
            event="location_fallback",
            error=str(exc),
            latitude=self.fallback.latitude,
            longitude=self.fallback.longitude,
        )
        if on_warning is not None:
            on_warning(message)
        return self.fallback
