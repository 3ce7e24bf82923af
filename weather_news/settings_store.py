"""
Persisted user settings.

Settings live as a single JSON object under a fixed key of a key-value
store. The default store keeps that key-value map in a JSON file.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import json
import logging
from pathlib import Path

from .config import SettingsStoreConfig
from .core.errors import SettingsError
from .core.types import NEWS_CATEGORIES, TEMPERATURE_UNITS, Settings
from .logging_utils import log_event

logger = logging.getLogger(__name__)


def validate_settings(settings: Settings) -> None:
    """Raise SettingsError unless settings may be persisted."""
    if not settings.news_categories:
        raise SettingsError("No categories selected. Please select at least one news category.")
    if settings.temperature_unit not in TEMPERATURE_UNITS:
        raise SettingsError(
            f"Unknown temperature unit: {settings.temperature_unit}. "
            f"Expected one of: {', '.join(TEMPERATURE_UNITS)}"
        )
    unknown = [c for c in settings.news_categories if c not in NEWS_CATEGORIES]
    if unknown:
        raise SettingsError(
            f"Unknown news categories: {', '.join(unknown)}. "
            f"Expected any of: {', '.join(NEWS_CATEGORIES)}"
        )


class SettingsStore(ABC):
    """Key-value persistence for the Settings record."""

    @abstractmethod
    def load(self) -> Settings:
        """Return saved settings, or defaults when nothing was saved."""
        raise NotImplementedError

    @abstractmethod
    def save(self, settings: Settings) -> None:
        raise NotImplementedError


class JsonSettingsStore(SettingsStore):
    """Stores settings in a JSON file holding a key-value object.

    Attributes:
        path: Location of the JSON file
        key: Key under which the settings object is stored
    """

    def __init__(self, path: Path, key: str = "settings"):
        self.path = path
        self.key = key

    @classmethod
    def from_config(cls, cfg: SettingsStoreConfig) -> JsonSettingsStore:
        return cls(Path(cfg.path).expanduser(), cfg.key)

    def load(self) -> Settings:
        data = self._read_all()
        saved = data.get(self.key)
        if not isinstance(saved, dict):
            return Settings()
        try:
            settings = Settings.from_dict(saved)
        except (TypeError, ValueError) as exc:
            logger.error("Error loading settings from %s: %s", self.path, exc)
            return Settings()
        logger.debug("Settings loaded: %s", settings)
        return settings

    def save(self, settings: Settings) -> None:
        data = self._read_all()
        data[self.key] = settings.to_dict()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def _read_all(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.error("Error reading settings store %s: %s", self.path, exc)
            return {}
        return data if isinstance(data, dict) else {}


def persist_settings(store: SettingsStore | None, settings: Settings) -> Settings:
    """Validate settings, then save them to store (when one is given).

    Raises:
        SettingsError: Settings are invalid; store.save was not called
    """
    try:
        validate_settings(settings)
    except SettingsError as exc:
        log_event(
            logger,
            "Settings rejected",
            level=logging.WARNING,
            event="settings_rejected",
            error=str(exc),
        )
        raise
    if store is not None:
        store.save(settings)
    log_event(logger, "Settings saved", event="settings_saved", settings=settings.to_dict())
    return settings
