"""Active-locale state and change notification.

The active locales update synchronously on every effective change; the
"locale changed" broadcast and the language-sink write are deferred to
the next scheduler turn and coalesced, so a burst of changes produces one
notification carrying the final value.
"""

from typing import Any, Callable, Optional, Tuple

from intl_runtime.events import EventDispatcher, locale_changed_event
from intl_runtime.i18n.errors import ConfigurationError, InvalidArgumentError, describe_type
from intl_runtime.i18n.locale import normalize_locale
from intl_runtime.i18n.resolvers import split_locales
from intl_runtime.i18n.scheduler import ScheduledCall, Scheduler
from intl_runtime.logging import get_module_logger

logger = get_module_logger()

LanguageSink = Callable[[str], Any]


def normalize_locales(raw: Any) -> Tuple[str, ...]:
    """Normalize a locale string or sequence into a tuple.

    A string is split on commas/whitespace, so a bare scalar becomes a
    one-element tuple.

    Raises:
        InvalidArgumentError: If ``raw`` is not a string or a list/tuple of
            strings.
    """
    if isinstance(raw, str):
        return split_locales(raw)
    if isinstance(raw, (list, tuple)):
        for name in raw:
            if not isinstance(name, str):
                raise InvalidArgumentError(
                    f"expected locale to be of type str but received: {name!r} ({describe_type(name)})"
                )
        return tuple(normalize_locale(name) for name in raw)
    raise InvalidArgumentError(
        f"expected locale to be a string or a list of strings but received: "
        f"{raw!r} ({describe_type(raw)})"
    )


class ActiveLocaleController:
    """Owns the active-locale tuple and its deferred change notification.

    States:
        idle: no notification outstanding.
        pending: one notification scheduled; a new change cancels and
            replaces it.

    Attributes:
        scheduler: Runs the deferred notification.
        dispatcher: Receives the ``intl.locale_changed`` event.
        language_sink: Optional callable receiving the new primary locale
            (e.g. writes the document ``lang`` attribute). Best effort.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        dispatcher: EventDispatcher,
        language_sink: Optional[LanguageSink] = None,
    ):
        self.scheduler = scheduler
        self.dispatcher = dispatcher
        self.language_sink = language_sink
        self._locales: Tuple[str, ...] = ()
        self._pending: Optional[ScheduledCall] = None
        self._disposed = False

    @property
    def locales(self) -> Tuple[str, ...]:
        return self._locales

    @property
    def primary_locale(self) -> Optional[str]:
        return self._locales[0] if self._locales else None

    @property
    def pending(self) -> bool:
        """True while a change notification is scheduled and not yet run."""
        return self._pending is not None and not self._pending.cancelled

    def set_locales(self, raw: Any) -> Tuple[str, ...]:
        """Replace the active locales.

        Setting a value equal (after normalization) to the current one does
        nothing.

        Args:
            raw: Locale string or sequence of locale strings.

        Returns:
            The active locales after the call.

        Raises:
            ConfigurationError: If ``raw`` is empty.
            InvalidArgumentError: If ``raw`` has an unsupported shape.
            Exception: Whatever the scheduler raises; the active locales
                are left unchanged.
        """
        if not raw:
            raise ConfigurationError("no locale has been set")

        proposed = normalize_locales(raw)
        if not proposed:
            raise ConfigurationError(f"no locale has been set (received {raw!r})")
        if proposed == self._locales:
            return self._locales

        # Schedule first: if the scheduler raises, the active locales stay untouched
        scheduled = None if self._disposed else self.scheduler.schedule(self._notify)

        previous = self._locales
        self._locales = proposed
        logger.info("active_locales_updated", locales=list(proposed), previous=list(previous))

        self._cancel_pending()
        if scheduled is None:
            logger.warning("locale_change_after_dispose", locales=list(proposed))
        self._pending = scheduled
        return self._locales

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _notify(self) -> None:
        self._pending = None
        locales = self._locales
        logger.info("locale_changed", locales=list(locales))
        self.dispatcher.dispatch(locale_changed_event(locales))
        self._update_document_language(locales)

    def _update_document_language(self, locales: Tuple[str, ...]) -> None:
        if self.language_sink is None or not locales:
            return
        try:
            self.language_sink(locales[0])
        except Exception as e:
            logger.warning("language_sink_failed", locale=locales[0], error=str(e))

    def dispose(self) -> None:
        """Cancel any pending notification. Idempotent."""
        self._cancel_pending()
        self._disposed = True
