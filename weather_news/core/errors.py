"""Error taxonomy for the Weather News pipeline.

Location errors are always absorbed by the location resolver. Fetch errors
are fatal in the weather step and degrade to an empty result in the
forecast and news steps.
"""

from __future__ import annotations


class WeatherNewsError(Exception):
    """Base class for all pipeline errors."""


class LocationError(WeatherNewsError):
    """The device position could not be obtained."""

    reason = "Location error"


class PermissionDenied(LocationError):
    reason = "Location permission denied"


class PositionUnavailable(LocationError):
    reason = "Location unavailable"


class PositionTimeout(LocationError):
    reason = "Location request timeout"


class FetchError(WeatherNewsError):
    """An upstream HTTP call failed."""


class HttpError(FetchError):
    """The upstream answered with a non-2xx status."""

    def __init__(self, status: int, body: str = "", service: str = "HTTP"):
        self.status = status
        self.body = body
        self.service = service
        super().__init__(f"{service} API error ({status}): {body}")


class ParseError(FetchError):
    """The upstream payload could not be decoded into the expected shape."""


class NetworkError(FetchError):
    """The request never produced a response (connection failure, timeout)."""


class SettingsError(WeatherNewsError):
    """Settings failed validation and were not persisted."""
