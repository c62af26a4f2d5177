"""Internationalization runtime settings."""

from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator

from intl_runtime.configuration.base import InfrastructureSettings


class I18nSettings(InfrastructureSettings):
    """Locale and translation configuration for the intl service.

    Environment Variables:
        I18N_DEFAULT_LOCALE: Initial active locale chain, comma-separated
            (default: en-us)
        I18N_TRANSLATIONS_DIR: Directory of YAML translation files to ingest
            at startup (default: unset)
        I18N_FORMATS_FILE: YAML file with named format presets (default: unset)
        I18N_PRELOAD: Ingest I18N_TRANSLATIONS_DIR when the service is created
            (default: True)

    Example:
        ```python
        from intl_runtime.configuration import get_settings

        settings = get_settings()
        locales = settings.i18n.default_locales
        ```
    """

    DEFAULT_LOCALE: str = Field(
        default="en-us",
        alias="I18N_DEFAULT_LOCALE",
        description="Initial active locale chain (comma-separated)",
    )
    TRANSLATIONS_DIR: Optional[Path] = Field(
        default=None,
        alias="I18N_TRANSLATIONS_DIR",
        description="Directory containing <locale>.yml translation files",
    )
    FORMATS_FILE: Optional[Path] = Field(
        default=None,
        alias="I18N_FORMATS_FILE",
        description="YAML file with named date/time/number/relative presets",
    )
    PRELOAD: bool = Field(
        default=True,
        alias="I18N_PRELOAD",
        description="Load translations from TRANSLATIONS_DIR on startup",
    )

    @field_validator("DEFAULT_LOCALE", mode="before")
    @classmethod
    def _blank_to_default(cls, value):
        if isinstance(value, str) and not value.strip():
            return "en-us"
        return value

    @property
    def default_locales(self) -> List[str]:
        """Split DEFAULT_LOCALE into its ordered parts."""
        return [part.strip() for part in self.DEFAULT_LOCALE.split(",") if part.strip()]
