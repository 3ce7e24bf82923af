"""
Pipeline state and its transition function.

PipelineState is immutable; the only way to change it is reduce(state,
action), which returns the next state. Actions form a closed set of small
dataclasses, one per transition.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Union

from ..core.types import Coordinates, ForecastEntry, NewsArticle, WeatherSnapshot


class PipelineStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class PipelineState:
    """Everything the presentation layer shows.

    Attributes:
        weather: Latest current conditions, None before the first success
        forecast: Up to five daily forecast points
        news: Unfiltered headlines of the last run
        filtered_news: Headlines picked by the classifier (at most 10)
        loading: True while a run is in flight
        error: Weather-step error of the last run, if any
        warning: Notice from the last location resolution, e.g. fallback used
        location: Coordinates used by the last run
    """

    weather: WeatherSnapshot | None = None
    forecast: tuple[ForecastEntry, ...] = field(default_factory=tuple)
    news: tuple[NewsArticle, ...] = field(default_factory=tuple)
    filtered_news: tuple[NewsArticle, ...] = field(default_factory=tuple)
    loading: bool = False
    error: str | None = None
    warning: str | None = None
    location: Coordinates | None = None

    @property
    def status(self) -> PipelineStatus:
        if self.loading:
            return PipelineStatus.LOADING
        if self.error is not None:
            return PipelineStatus.ERROR
        if self.weather is not None:
            return PipelineStatus.READY
        return PipelineStatus.IDLE


@dataclass(frozen=True)
class RunStarted:
    pass


@dataclass(frozen=True)
class LocationResolved:
    location: Coordinates
    warning: str | None = None


@dataclass(frozen=True)
class WarningRaised:
    message: str


@dataclass(frozen=True)
class WeatherLoaded:
    weather: WeatherSnapshot


@dataclass(frozen=True)
class ForecastLoaded:
    forecast: tuple[ForecastEntry, ...]


@dataclass(frozen=True)
class NewsLoaded:
    news: tuple[NewsArticle, ...]


@dataclass(frozen=True)
class NewsFiltered:
    filtered_news: tuple[NewsArticle, ...]


@dataclass(frozen=True)
class RunCompleted:
    pass


@dataclass(frozen=True)
class RunFailed:
    message: str


@dataclass(frozen=True)
class ErrorCleared:
    pass


Action = Union[
    RunStarted,
    LocationResolved,
    WarningRaised,
    WeatherLoaded,
    ForecastLoaded,
    NewsLoaded,
    NewsFiltered,
    RunCompleted,
    RunFailed,
    ErrorCleared,
]


def reduce(state: PipelineState, action: Action) -> PipelineState:
    """Return the state that follows ``state`` after ``action``."""
    if isinstance(action, RunStarted):
        return replace(state, loading=True, error=None)
    if isinstance(action, LocationResolved):
        return replace(state, location=action.location, warning=action.warning)
    if isinstance(action, WarningRaised):
        return replace(state, warning=action.message)
    if isinstance(action, WeatherLoaded):
        return replace(state, weather=action.weather, error=None)
    if isinstance(action, ForecastLoaded):
        return replace(state, forecast=tuple(action.forecast))
    if isinstance(action, NewsLoaded):
        return replace(state, news=tuple(action.news))
    if isinstance(action, NewsFiltered):
        return replace(state, filtered_news=tuple(action.filtered_news))
    if isinstance(action, RunCompleted):
        return replace(state, loading=False, error=None)
    if isinstance(action, RunFailed):
        return replace(state, loading=False, error=action.message)
    if isinstance(action, ErrorCleared):
        return replace(state, error=None)
    raise TypeError(f"Unknown pipeline action: {action!r}")
