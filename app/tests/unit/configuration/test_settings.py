"""Unit tests for intl_runtime.configuration.

Tests cover:
- I18nSettings defaults and environment overrides
- Settings aggregation and production detection
- get_settings caching
"""

from pathlib import Path

import pytest

from intl_runtime.configuration import I18nSettings, Settings, get_settings

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove intl variables that could leak in from the environment."""
    for name in (
        "I18N_DEFAULT_LOCALE",
        "I18N_TRANSLATIONS_DIR",
        "I18N_FORMATS_FILE",
        "I18N_PRELOAD",
        "PREFIX",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


class TestI18nSettings:
    """Test suite for I18nSettings configuration."""

    def test_defaults(self):
        settings = I18nSettings()

        assert settings.DEFAULT_LOCALE == "en-us"
        assert settings.TRANSLATIONS_DIR is None
        assert settings.FORMATS_FILE is None
        assert settings.PRELOAD is True
        assert settings.default_locales == ["en-us"]

    def test_custom_values(self, monkeypatch, tmp_path):
        monkeypatch.setenv("I18N_DEFAULT_LOCALE", "fr-FR, en-US")
        monkeypatch.setenv("I18N_TRANSLATIONS_DIR", str(tmp_path))
        monkeypatch.setenv("I18N_FORMATS_FILE", str(tmp_path / "formats.yml"))
        monkeypatch.setenv("I18N_PRELOAD", "false")

        settings = I18nSettings()

        assert settings.default_locales == ["fr-FR", "en-US"]
        assert settings.TRANSLATIONS_DIR == Path(tmp_path)
        assert settings.FORMATS_FILE == tmp_path / "formats.yml"
        assert settings.PRELOAD is False

    def test_blank_locale_falls_back(self, monkeypatch):
        monkeypatch.setenv("I18N_DEFAULT_LOCALE", "   ")
        assert I18nSettings().DEFAULT_LOCALE == "en-us"

    def test_invalid_boolean_rejected(self, monkeypatch):
        monkeypatch.setenv("I18N_PRELOAD", "sometimes")
        with pytest.raises(ValueError):
            I18nSettings()


class TestSettings:
    """Test suite for the Settings aggregator."""

    def test_subsettings_instantiated(self):
        settings = Settings()
        assert isinstance(settings.i18n, I18nSettings)
        assert settings.LOG_LEVEL == "INFO"

    def test_explicit_subsettings_kept(self):
        i18n = I18nSettings(I18N_DEFAULT_LOCALE="de")
        assert Settings(i18n=i18n).i18n is i18n

    def test_is_production_without_prefix(self):
        assert Settings().is_production is True

    def test_is_not_production_with_prefix(self, monkeypatch):
        monkeypatch.setenv("PREFIX", "dev-")
        assert Settings().is_production is False


class TestGetSettings:
    def test_cached(self, reset_settings):
        assert get_settings() is get_settings()

    def test_cache_clear_rereads_env(self, monkeypatch, reset_settings):
        assert get_settings().i18n.DEFAULT_LOCALE == "en-us"

        monkeypatch.setenv("I18N_DEFAULT_LOCALE", "de")
        get_settings.cache_clear()

        assert get_settings().i18n.DEFAULT_LOCALE == "de"
