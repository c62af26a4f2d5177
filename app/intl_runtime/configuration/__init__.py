"""Configuration module - public API.

Centralized configuration using Pydantic BaseSettings.

Exports:
    Settings: Main settings class (for testing/overrides)
    I18nSettings: Locale and translation settings
    get_settings: Cached Settings singleton
"""

from intl_runtime.configuration.i18n import I18nSettings
from intl_runtime.configuration.settings import Settings, get_settings

__all__ = ["Settings", "I18nSettings", "get_settings"]
