"""Translation storage keyed by normalized locale.

Each locale maps to a flat dictionary of dot-joined keys. Adding
translations for a locale REPLACES that locale's dictionary; entries are
never deep-merged.
"""

from collections.abc import Mapping as MappingABC
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence

from intl_runtime.i18n.errors import ConfigurationError, InvalidArgumentError, describe_type
from intl_runtime.i18n.locale import normalize_locale
from intl_runtime.logging import get_module_logger

logger = get_module_logger()


def flatten(payload: Mapping[str, Any], prefix: str = "") -> Dict[str, str]:
    """Flatten a nested translation tree into dot-joined keys.

    Keys are visited in sorted order so the result does not depend on the
    insertion order of ``payload``.

    >>> flatten({"a": {"c": "y", "b": "x"}})
    {'a.b': 'x', 'a.c': 'y'}

    Raises:
        InvalidArgumentError: If a leaf is not a string.
    """
    result: Dict[str, str] = {}
    for key in sorted(payload, key=str):
        value = payload[key]
        path = f"{prefix}{key}"
        if isinstance(value, MappingABC):
            result.update(flatten(value, prefix=f"{path}."))
        elif isinstance(value, str):
            result[path] = value
        else:
            raise InvalidArgumentError(
                f"expected translation '{path}' to be of type str but received: "
                f"{value!r} ({describe_type(value)})"
            )
    return result


class LocaleMessagesView(MappingABC):
    """Live read-only view of one locale's messages.

    Reflects later ``add_translations`` calls for the same locale, so
    long-lived engines never format from a replaced dictionary.
    """

    def __init__(self, store: "TranslationStore", locale: str):
        self._store = store
        self.locale = normalize_locale(locale)

    def _current(self) -> Mapping[str, str]:
        return self._store.translations_for(self.locale) or {}

    def __getitem__(self, key: str) -> str:
        return self._current()[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._current())

    def __len__(self) -> int:
        return len(self._current())

    def __repr__(self) -> str:
        return f"LocaleMessagesView({self.locale!r}, {len(self)} messages)"


class TranslationStore:
    """Owns the normalized-locale → flattened messages mapping."""

    def __init__(self) -> None:
        self._messages: Dict[str, Dict[str, str]] = {}

    @property
    def locales(self) -> List[str]:
        """Locales that have been ingested, in ingestion order."""
        return list(self._messages.keys())

    def add_translations(self, locale: str, payload: Mapping[str, Any]) -> None:
        """Replace the translations of ``locale`` with flattened ``payload``.

        Args:
            locale: Locale identifier, normalized before storage.
            payload: Nested mapping of keys to message patterns.

        Raises:
            InvalidArgumentError: If ``payload`` is not a mapping or has
                non-string leaves.
        """
        if not isinstance(payload, MappingABC):
            raise InvalidArgumentError(
                f"expected translations for '{locale}' to be a mapping but received: "
                f"{payload!r} ({describe_type(payload)})"
            )
        normalized = normalize_locale(locale)
        messages = flatten(payload)
        replaced = normalized in self._messages
        self._messages[normalized] = messages
        logger.info(
            "translations_added",
            locale=normalized,
            message_count=len(messages),
            replaced=replaced,
        )

    def translations_for(self, locale: str) -> Optional[Dict[str, str]]:
        """Return the flat messages of ``locale``, or None if never ingested."""
        return self._messages.get(normalize_locale(locale))

    def view(self, locale: str) -> LocaleMessagesView:
        return LocaleMessagesView(self, locale)

    def lookup(self, key: str, candidate_locales: Sequence[str]) -> Optional[str]:
        """Return the first translation of ``key`` along ``candidate_locales``.

        A present translation wins even when it is the empty string; a
        missing one lets the next candidate be tried.

        Args:
            key: Flattened translation key.
            candidate_locales: Normalized locales in preference order.

        Returns:
            The translation, or None if no candidate defines ``key``.
        """
        for locale in candidate_locales:
            messages = self._messages.get(locale, {})
            translation = messages.get(key)
            if translation is not None:
                return translation
        return None

    def exists(self, key: str, candidate_locales: Sequence[str]) -> bool:
        """Check whether any candidate has a non-empty translation of ``key``.

        Unlike :meth:`lookup`, an empty-string translation does not count.

        Raises:
            ConfigurationError: If ``candidate_locales`` is empty.
        """
        if not candidate_locales:
            raise ConfigurationError(f"locale is unset, cannot lookup '{key}'")
        return any(self._messages.get(locale, {}).get(key) for locale in candidate_locales)

    def clear(self) -> None:
        self._messages.clear()
