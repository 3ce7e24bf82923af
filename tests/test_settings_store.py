"""Tests for settings persistence and validation."""

from __future__ import annotations

import json

import pytest

from weather_news.config import SettingsStoreConfig
from weather_news.core.errors import SettingsError
from weather_news.core.types import FAHRENHEIT, Settings
from weather_news.settings_store import JsonSettingsStore, persist_settings, validate_settings


def test_load_returns_defaults_when_file_is_missing(tmp_path):
    store = JsonSettingsStore(tmp_path / "missing.json")

    settings = store.load()

    assert settings.temperature_unit == "celsius"
    assert settings.news_categories == ["general", "technology", "sports", "entertainment"]


def test_save_then_load_round_trips_json_shape(tmp_path):
    path = tmp_path / "store.json"
    store = JsonSettingsStore(path)

    store.save(Settings(temperature_unit=FAHRENHEIT, news_categories=["science", "health"]))

    assert json.loads(path.read_text(encoding="utf-8")) == {
        "settings": {"temperatureUnit": "fahrenheit", "newsCategories": ["science", "health"]}
    }
    assert store.load() == Settings(temperature_unit=FAHRENHEIT, news_categories=["science", "health"])


def test_save_keeps_other_keys(tmp_path):
    path = tmp_path / "store.json"
    path.write_text(json.dumps({"other": {"keep": True}}), encoding="utf-8")

    JsonSettingsStore(path).save(Settings())

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["other"] == {"keep": True}
    assert "settings" in data


def test_partial_record_is_merged_over_defaults(tmp_path):
    path = tmp_path / "store.json"
    path.write_text(json.dumps({"settings": {"temperatureUnit": "fahrenheit"}}), encoding="utf-8")

    settings = JsonSettingsStore(path).load()

    assert settings.temperature_unit == FAHRENHEIT
    assert settings.news_categories == Settings().news_categories


@pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]", '{"settings": "oops"}'])
def test_corrupt_store_falls_back_to_defaults(tmp_path, content):
    path = tmp_path / "store.json"
    path.write_text(content, encoding="utf-8")

    assert JsonSettingsStore(path).load() == Settings()


def test_from_config_expands_user_and_uses_key(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))

    store = JsonSettingsStore.from_config(SettingsStoreConfig(path="~/prefs.json", key="prefs"))

    assert store.path == tmp_path / "prefs.json"
    assert store.key == "prefs"


def test_validate_settings_accepts_defaults():
    validate_settings(Settings())


def test_validate_settings_rejects_empty_categories():
    with pytest.raises(SettingsError) as excinfo:
        validate_settings(Settings(news_categories=[]))

    assert str(excinfo.value) == "No categories selected. Please select at least one news category."


def test_validate_settings_rejects_unknown_unit_and_category():
    with pytest.raises(SettingsError, match="temperature unit"):
        validate_settings(Settings(temperature_unit="kelvin"))
    with pytest.raises(SettingsError, match="weather"):
        validate_settings(Settings(news_categories=["general", "weather"]))


def test_non_list_categories_fall_back_to_defaults(tmp_path):
    path = tmp_path / "store.json"
    path.write_text(
        json.dumps({"settings": {"temperatureUnit": "fahrenheit", "newsCategories": "sports"}}),
        encoding="utf-8",
    )

    settings = JsonSettingsStore(path).load()

    assert settings.temperature_unit == FAHRENHEIT
    assert settings.news_categories == Settings().news_categories
    validate_settings(settings)


def test_persist_settings_validates_before_saving(tmp_path):
    path = tmp_path / "store.json"
    store = JsonSettingsStore(path)

    with pytest.raises(SettingsError):
        persist_settings(store, Settings(news_categories=[]))
    assert not path.exists()

    assert persist_settings(store, Settings(news_categories=["science"])) == Settings(
        news_categories=["science"]
    )
    assert store.load().news_categories == ["science"]
