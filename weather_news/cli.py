"""
Command-line interface for Weather News.

Uses Typer to provide a CLI for running the pipeline and managing the
persisted settings. Supports loading .env files for API key configuration.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from dotenv import load_dotenv
import typer
from rich.console import Console
from rich.markup import escape

from .config import AppConfig, get_api_key, load_config
from .core.classifier import TIER_DESCRIPTIONS, TIER_LABELS, Tier
from .core.errors import SettingsError
from .core.types import NEWS_CATEGORIES, Settings
from .logging_utils import setup_logging
from .pipeline.factory import build_orchestrator
from .pipeline.state import PipelineStatus
from .renderer import render_state
from .settings_store import JsonSettingsStore, persist_settings, validate_settings

app = typer.Typer(add_completion=False)
settings_app = typer.Typer(add_completion=False, help="Show or change saved settings.")
app.add_typer(settings_app, name="settings")
console = Console()


def _load(config: Path | None, log_level: str | None = None) -> AppConfig:
    load_dotenv()
    cfg = load_config(str(config) if config else None)
    if log_level:
        cfg.logging.level = log_level
    setup_logging(cfg.logging)
    return cfg


@app.command()
def run(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
    unit: str | None = typer.Option(
        None, "--unit", help="Override the saved unit for this run: celsius or fahrenheit."
    ),
    category: str | None = typer.Option(
        None, "--category", help="Override the saved news category for this run."
    ),
    lat: float | None = typer.Option(None, "--lat", help="Use fixed latitude."),
    lon: float | None = typer.Option(None, "--lon", help="Use fixed longitude."),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    log_file: bool | None = typer.Option(
        None, "--log-file/--no-log-file", help="Enable or disable file logging."
    ),
    weather_api_key: str | None = typer.Option(
        None, "--weather-api-key", help="Override OPENWEATHER_API_KEY."
    ),
    news_api_key: str | None = typer.Option(None, "--news-api-key", help="Override NEWS_API_KEY."),
):
    """Fetch weather and news, then show the headlines that fit the weather.

    Args:
        config: Optional path to YAML config file
        unit: Temperature unit for this run only
        category: News category for this run only
        lat: Fixed latitude (requires lon)
        lon: Fixed longitude (requires lat)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Enable/disable file logging
        weather_api_key: Weather API key override
        news_api_key: News API key override
    """
    cfg = _load(config, log_level)

    if log_file is not None:
        cfg.logging.file = log_file
        setup_logging(cfg.logging)
    if weather_api_key:
        cfg.weather.api_key = weather_api_key
    if news_api_key:
        cfg.news.api_key = news_api_key
    if (lat is None) != (lon is None):
        console.print("[red]--lat and --lon must be given together[/red]")
        raise typer.Exit(code=2)
    if lat is not None and lon is not None:
        cfg.location.provider = "fixed"
        cfg.location.latitude = lat
        cfg.location.longitude = lon

    if not get_api_key(cfg.weather):
        console.print(f"[red]Missing weather API key; set {cfg.weather.api_key_env}[/red]")
        raise typer.Exit(code=1)

    store = JsonSettingsStore.from_config(cfg.settings)
    settings = store.load()
    if unit:
        settings.temperature_unit = unit
    if category:
        settings.news_categories = [category] + [
            c for c in settings.news_categories if c != category
        ]
    try:
        validate_settings(settings)
    except SettingsError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=2)

    try:
        orchestrator = build_orchestrator(cfg, settings, store)
    except ValueError as exc:
        console.print(f"[red]Invalid location config: {escape(str(exc))}[/red]")
        raise typer.Exit(code=2)
    state = asyncio.run(orchestrator.run())
    render_state(state, orchestrator.settings, console)
    if state.status is PipelineStatus.ERROR:
        raise typer.Exit(code=1)


@settings_app.command("show")
def settings_show(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
):
    """Print saved settings and how the weather picks headlines."""
    cfg = _load(config)
    settings = JsonSettingsStore.from_config(cfg.settings).load()
    _print_settings(settings)
    console.print("\n[bold]Weather-based news filtering[/bold]")
    for tier in Tier:
        console.print(f"  {TIER_LABELS[tier]}: {TIER_DESCRIPTIONS[tier]}")


@settings_app.command("save")
def settings_save(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
    unit: str | None = typer.Option(None, "--unit", help="celsius or fahrenheit."),
    toggle: list[str] | None = typer.Option(
        None,
        "--toggle",
        "-t",
        help=f"Add or remove a news category ({', '.join(NEWS_CATEGORIES)}). Repeatable.",
    ),
):
    """Change and persist settings."""
    cfg = _load(config)
    store = JsonSettingsStore.from_config(cfg.settings)
    current = store.load()
    categories = list(current.news_categories)
    for name in toggle or []:
        if name in categories:
            categories.remove(name)
        else:
            categories.append(name)
    updated = Settings(
        temperature_unit=unit or current.temperature_unit,
        news_categories=categories,
    )

    try:
        persist_settings(store, updated)
    except SettingsError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=2)
    console.print("Your preferences have been saved successfully.")
    _print_settings(updated)


@settings_app.command("reset")
def settings_reset(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
):
    """Reset settings to defaults."""
    cfg = _load(config)
    if not yes and not typer.confirm("Are you sure you want to reset all settings to default?"):
        raise typer.Exit(code=0)
    store = JsonSettingsStore.from_config(cfg.settings)
    _print_settings(persist_settings(store, Settings()))


def _print_settings(settings: Settings) -> None:
    console.print(f"Temperature unit: {settings.temperature_unit}")
    console.print(f"News categories: {', '.join(settings.news_categories)}")


if __name__ == "__main__":
    app()
