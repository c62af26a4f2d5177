"""Intl service: the public formatting and translation facade.

Ties together the translation store, locale resolution, the engine cache,
the formatter table and the active-locale controller.

Usage:
    intl = IntlService(locale=["de", "en"])
    intl.add_translations("en", {"farewell": "Bye"})
    intl.t("farewell")                     # "Bye" (de has no translation)
    intl.format_number(1234.5)             # "1.234,5"
    intl.format_date(date(2024, 1, 15), format="short", locale="en-US")
"""

from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from intl_runtime.events import LOCALE_CHANGED, EventDispatcher, EventHandler
from intl_runtime.i18n.cache import EngineFactory, FormatterEngineCache
from intl_runtime.i18n.controller import ActiveLocaleController, LanguageSink
from intl_runtime.i18n.engine import IntlEngine, create_intl
from intl_runtime.i18n.errors import (
    ConfigurationError,
    IntlError,
    IntlErrorCode,
    InvalidArgumentError,
    describe_type,
)
from intl_runtime.i18n.formatters import create_formatters
from intl_runtime.i18n.loader import YAMLTranslationLoader
from intl_runtime.i18n.models import FormatConfig, FormatterKind
from intl_runtime.i18n.resolvers import (
    LanguageNegotiator,
    LocaleArgument,
    parse_accept_language,
    resolve_candidates,
)
from intl_runtime.i18n.scheduler import Scheduler, create_scheduler
from intl_runtime.i18n.store import TranslationStore
from intl_runtime.logging import get_module_logger

logger = get_module_logger()

DEFAULT_LOCALE = "en-us"


class IntlService:
    """Runtime i18n facade.

    Construction order: translations, events and the active-locale
    controller first, then the engine cache and formatters, then the initial
    locale. ``dispose()`` cancels the pending notification before releasing
    anything else.

    Args:
        locale: Initial active locale(s). Defaults to ``en-us``.
        formats: Named format presets shared by every call.
        scheduler: Runs deferred locale-change notifications. Defaults to
            an AdaptiveScheduler (event loop when one is running).
        language_sink: Called with the new primary locale after a change.
        engine_factory: Builds formatting engines (defaults to Babel-backed
            ``create_intl``).
    """

    def __init__(
        self,
        locale: LocaleArgument = None,
        formats: Union[None, FormatConfig, Mapping[str, Any]] = None,
        *,
        scheduler: Optional[Scheduler] = None,
        language_sink: Optional[LanguageSink] = None,
        engine_factory: EngineFactory = create_intl,
    ):
        self.formats = formats if isinstance(formats, FormatConfig) else FormatConfig(formats)
        self._store = TranslationStore()
        self._dispatcher = EventDispatcher()
        self._controller = ActiveLocaleController(
            scheduler or create_scheduler(),
            self._dispatcher,
            language_sink=language_sink,
        )
        self._engines = FormatterEngineCache(
            self._store, on_error=self.on_intl_error, factory=engine_factory
        )
        self._formatters = create_formatters(self.get_intl, self._store.lookup)

        self.set_locale(locale or [DEFAULT_LOCALE])
        logger.info("intl_service_initialized", locales=list(self.locale))

    # -- locales -----------------------------------------------------------

    @property
    def locales(self) -> List[str]:
        """Locales that have translations registered."""
        return self._store.locales

    @property
    def locale(self) -> Tuple[str, ...]:
        """The active locales, most preferred first."""
        return self._controller.locales

    @locale.setter
    def locale(self, value: LocaleArgument) -> None:
        self.set_locale(value)

    @property
    def primary_locale(self) -> Optional[str]:
        return self._controller.primary_locale

    def set_locale(self, locale: LocaleArgument) -> None:
        """Replace the active locales.

        Raises:
            ConfigurationError: If ``locale`` is empty.
            InvalidArgumentError: If ``locale`` has an unsupported shape.
        """
        self._controller.set_locales(locale)

    def negotiate(self, accept_language: Optional[str]) -> List[str]:
        """Registered locales matching an Accept-Language header, best first."""
        return LanguageNegotiator.negotiate(parse_accept_language(accept_language), self.locales)

    @property
    def scheduler(self) -> Scheduler:
        return self._controller.scheduler

    @property
    def notification_pending(self) -> bool:
        return self._controller.pending

    # -- events ------------------------------------------------------------

    def on_locale_changed(self, handler: EventHandler) -> EventHandler:
        """Subscribe ``handler`` to the deferred locale-changed event."""
        return self._dispatcher.register(LOCALE_CHANGED, handler)

    def off_locale_changed(self, handler: EventHandler) -> bool:
        return self._dispatcher.unregister(LOCALE_CHANGED, handler)

    # -- translations ------------------------------------------------------

    def add_translations(self, locale: str, payload: Mapping[str, Any]) -> None:
        """Replace the translations of ``locale`` (never merged)."""
        self._store.add_translations(locale, payload)

    def translations_for(self, locale: str) -> Optional[Mapping[str, str]]:
        return self._store.translations_for(locale)

    def load_translations(self, translations_dir: Path) -> List[str]:
        """Ingest every locale found in a directory of YAML files.

        Returns:
            The normalized locales that were added.
        """
        loader = YAMLTranslationLoader(translations_dir, use_cache=False)
        payloads = loader.load_all()
        for locale, payload in payloads.items():
            self.add_translations(locale, payload)
        return list(payloads)

    def lookup(self, key: str, locale: LocaleArgument = None) -> Optional[str]:
        """Return the raw translation of ``key`` along the candidate chain."""
        return self._store.lookup(key, resolve_candidates(locale, self.locale))

    def exists(self, key: str, locale: LocaleArgument = None) -> bool:
        """Check for a non-empty translation of ``key`` along the candidate chain.

        Raises:
            ConfigurationError: If no candidate locale resolves.
        """
        return self._store.exists(key, resolve_candidates(locale, self.locale))

    def validate_keys(self, keys: Iterable[Any]) -> None:
        """Raise InvalidArgumentError for the first key that is not a string."""
        for key in keys:
            if not isinstance(key, str):
                raise InvalidArgumentError(
                    f'expected translation key "{key}" to be of type str but received: '
                    f'"{describe_type(key)}"'
                )

    # -- formatting --------------------------------------------------------

    def get_intl(self, locale: Union[str, Sequence[str]]) -> IntlEngine:
        """Return the cached engine for ``locale`` (first element if a sequence).

        Raises:
            ConfigurationError: If ``locale`` is empty.
        """
        if not locale:
            raise ConfigurationError("no locale configured, cannot create a formatting engine")
        primary = locale if isinstance(locale, str) else locale[0]
        return self._engines.get(primary, self.formats)

    def on_intl_error(self, error: Exception) -> None:
        """Error sink for engines: swallow missing translations, raise the rest."""
        if isinstance(error, IntlError) and error.code == IntlErrorCode.MISSING_TRANSLATION:
            logger.debug("missing_translation", locale=error.locale, key=error.descriptor)
            return
        raise error

    def _format(self, kind: FormatterKind, value: Any, options: Mapping[str, Any]) -> str:
        options = dict(options)
        candidates = resolve_candidates(options.pop("locale", None), self.locale)
        if not candidates:
            raise ConfigurationError(f"no locale configured, cannot format {kind.value}")
        return self._formatters[kind].format(candidates, value, options)

    def format_message(self, descriptor: Any, **options: Any) -> str:
        """Format a message descriptor (``{"id": ...}``) with interpolation values."""
        return self._format(FormatterKind.MESSAGE, descriptor, options)

    def format_date(self, value: Any, **options: Any) -> str:
        return self._format(FormatterKind.DATE, value, options)

    def format_time(self, value: Any, **options: Any) -> str:
        return self._format(FormatterKind.TIME, value, options)

    def format_number(self, value: Any, **options: Any) -> str:
        return self._format(FormatterKind.NUMBER, value, options)

    def format_relative(self, value: Any, **options: Any) -> str:
        return self._format(FormatterKind.RELATIVE, value, options)

    def t(self, key: str, **options: Any) -> str:
        """Shorthand for ``format_message({"id": key}, **options)``."""
        return self.format_message({"id": key}, **options)

    # -- lifecycle ---------------------------------------------------------

    def dispose(self) -> None:
        """Cancel the pending notification, then drop engines and listeners."""
        self._controller.dispose()
        self._engines.clear()
        self._dispatcher.clear()
        logger.info("intl_service_disposed")

    def __enter__(self) -> "IntlService":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()
