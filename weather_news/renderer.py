from __future__ import annotations

from datetime import datetime

from rich.console import Console
from rich.markup import escape
from rich.style import Style
from rich.table import Table
from rich.text import Text

from .core.classifier import TIER_LABELS, select_tier, to_celsius
from .core.types import FAHRENHEIT, ForecastEntry, Settings, WeatherSnapshot
from .pipeline.state import PipelineState, PipelineStatus

_CONDITION_SYMBOLS = {
    "clear sky": "☀",
    "few clouds": "☁",
    "scattered clouds": "☁",
    "broken clouds": "☁",
    "overcast clouds": "☁",
    "shower rain": "☂",
    "rain": "☂",
    "light rain": "☂",
    "thunderstorm": "⚡",
    "snow": "❄",
    "mist": "≋",
}


def condition_symbol(description: str | None) -> str:
    return _CONDITION_SYMBOLS.get((description or "").lower(), "☀")


def format_date(timestamp: int) -> str:
    dt = datetime.fromtimestamp(timestamp)
    return f"{dt:%a, %b} {dt.day}"


def render_state(state: PipelineState, settings: Settings, console: Console) -> None:
    """Print the pipeline state to the console."""
    if state.warning:
        console.print(f"[yellow]{escape(state.warning)}[/yellow]")

    if state.status is PipelineStatus.ERROR:
        console.print(f"[bold red]Error[/bold red]: {escape(state.error or '')}")
        return
    if state.weather is None:
        console.print("No weather data yet.")
        return

    _render_weather(state.weather, console)
    if state.forecast:
        _render_forecast(state.forecast, console)

    tier = select_tier(to_celsius(state.weather.temperature, state.weather.unit))
    console.print(f"\n[bold]{TIER_LABELS[tier]}[/bold] ({settings.primary_category})")
    if not state.filtered_news:
        console.print("No news articles available.")
        return
    for index, article in enumerate(state.filtered_news, start=1):
        console.print(f"{index:>2}. [bold]{escape(article.title or '(untitled)')}[/bold]")
        meta = " · ".join(part for part in (article.source_name, article.published_at[:10]) if part)
        if meta:
            console.print(f"    [dim]{escape(meta)}[/dim]")
        if article.url:
            console.print(Text.assemble("    ", (article.url, Style(link=article.url))))


def _render_weather(weather: WeatherSnapshot, console: Console) -> None:
    degree = "°F" if weather.unit == FAHRENHEIT else "°C"
    wind_unit = "mph" if weather.unit == FAHRENHEIT else "m/s"
    console.print(
        f"[bold]{escape(weather.location_name or 'Current location')}[/bold]  "
        f"{condition_symbol(weather.description)} {round(weather.temperature)}{degree}  "
        f"{escape(weather.description.capitalize())}"
    )
    parts = [
        f"Feels like {round(weather.feels_like)}{degree}",
        f"Humidity {weather.humidity}%",
        f"Wind {weather.wind_speed} {wind_unit}",
    ]
    if weather.visibility is not None:
        parts.append(f"Visibility {weather.visibility / 1000:.1f} km")
    console.print("  ".join(parts))


def _render_forecast(forecast: tuple[ForecastEntry, ...], console: Console) -> None:
    table = Table(title="Forecast", show_header=False, box=None)
    for entry in forecast:
        table.add_row(
            format_date(entry.timestamp),
            condition_symbol(entry.description),
            f"{round(entry.temperature)}°",
            escape(entry.description),
        )
    console.print(table)
