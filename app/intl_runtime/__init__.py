"""intl-runtime - runtime internationalization facade.

Resolves message, date, time, number and relative-time formatting requests
against an ordered list of active locales, falling back across the locale
preference chain and caching one formatting engine per locale/format pair.

Example:
    from intl_runtime import create_intl_service

    intl = create_intl_service(locale=["fr-FR", "en-US"])
    intl.add_translations("fr-fr", {"greeting": "Bonjour {name}"})
    intl.t("greeting", name="Ada")
"""

from intl_runtime.i18n import IntlService, create_intl_service

__all__ = ["IntlService", "create_intl_service"]
