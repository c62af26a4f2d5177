"""Factory functions for creating the intl service.

Builds an IntlService from application settings: the initial locale chain,
optional named format presets and an optional translations directory.
"""

from typing import Any, Mapping, Optional

from intl_runtime.configuration import Settings, get_settings
from intl_runtime.i18n.loader import load_formats
from intl_runtime.i18n.resolvers import LocaleArgument
from intl_runtime.i18n.service import IntlService
from intl_runtime.logging import get_module_logger

logger = get_module_logger()


def create_intl_service(
    settings: Optional[Settings] = None,
    locale: LocaleArgument = None,
    formats: Optional[Mapping[str, Any]] = None,
    **kwargs: Any,
) -> IntlService:
    """Create and configure an IntlService instance.

    Explicit arguments win over settings. The formats file is read once, at
    creation; translations are ingested only when preloading is enabled.

    Args:
        settings: Application settings (default: ``get_settings()``).
        locale: Initial active locale(s) (default: I18N_DEFAULT_LOCALE).
        formats: Named format presets (default: contents of I18N_FORMATS_FILE).
        **kwargs: Passed through to IntlService (scheduler, language_sink,
            engine_factory).

    Returns:
        IntlService: Configured service.

    Raises:
        FileNotFoundError: If I18N_FORMATS_FILE does not exist.
        ValueError: If I18N_TRANSLATIONS_DIR does not exist or a YAML file
            is malformed.

    Usage:
        # From environment
        intl = create_intl_service()

        # Explicit chain, no file access
        intl = create_intl_service(locale="fr-fr, en-us")
    """
    settings = settings or get_settings()
    i18n = settings.i18n

    if formats is None and i18n.FORMATS_FILE is not None:
        formats = load_formats(i18n.FORMATS_FILE)

    service = IntlService(locale=locale or i18n.default_locales, formats=formats, **kwargs)

    if i18n.TRANSLATIONS_DIR is not None and i18n.PRELOAD:
        loaded = service.load_translations(i18n.TRANSLATIONS_DIR)
        logger.info(
            "intl_service_created_with_preload",
            translations_dir=str(i18n.TRANSLATIONS_DIR),
            locale_count=len(loaded),
        )
    else:
        logger.info("intl_service_created", locales=list(service.locale))

    return service
