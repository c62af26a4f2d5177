"""Locale resolution: which locales to try, in which order.

Provides candidate-list resolution for formatting and lookup calls, plus
Accept-Language parsing and language negotiation for choosing an initial
active-locale chain.
"""

import re
from typing import List, Optional, Sequence, Tuple, Union

from intl_runtime.i18n.errors import InvalidArgumentError, describe_type
from intl_runtime.i18n.locale import normalize_locale
from intl_runtime.logging import get_module_logger

logger = get_module_logger()

LocaleArgument = Union[None, str, Sequence[str]]

_LOCALE_SEPARATORS = re.compile(r"[\s,]+")


def split_locales(locale_names: str) -> Tuple[str, ...]:
    """Split a comma/space-delimited locale string into normalized parts.

    >>> split_locales("fr-FR, en_US")
    ('fr-fr', 'en-us')
    """
    return tuple(
        normalize_locale(part) for part in _LOCALE_SEPARATORS.split(locale_names) if part
    )


def resolve_candidates(
    explicit_locale: LocaleArgument,
    active_locales: Sequence[str],
) -> Tuple[str, ...]:
    """Produce the ordered locales to search for one call.

    Resolution order:
    1. No explicit locale (None or ""): the active locales, unchanged.
    2. A string: its comma/space-delimited parts, normalized.
    3. A list or tuple of strings: each element normalized, order preserved.

    Never consults translations; it only decides which locales to try.

    Args:
        explicit_locale: Per-call override.
        active_locales: The service's active locales (already normalized).

    Returns:
        Tuple of normalized locale identifiers.

    Raises:
        InvalidArgumentError: If ``explicit_locale`` has any other shape.
    """
    if explicit_locale is None or explicit_locale == "":
        return tuple(active_locales)

    if isinstance(explicit_locale, str):
        return split_locales(explicit_locale)

    if isinstance(explicit_locale, (list, tuple)):
        for name in explicit_locale:
            if not isinstance(name, str):
                raise InvalidArgumentError(
                    f"expected locale to be of type str but received: {name!r} ({describe_type(name)})"
                )
        return tuple(normalize_locale(name) for name in explicit_locale)

    raise InvalidArgumentError(
        f"expected locale to be a string or a list of strings but received: "
        f"{explicit_locale!r} ({describe_type(explicit_locale)})"
    )


def parse_accept_language(accept_language: Optional[str]) -> List[str]:
    """Parse an HTTP Accept-Language header into normalized locales.

    Orders by quality (descending); entries of equal quality keep header
    order. Wildcards and zero-quality entries are dropped, invalid quality
    values count as 1.0.

    >>> parse_accept_language("en-US,en;q=0.9,fr-FR;q=0.8")
    ['en-us', 'en', 'fr-fr']
    """
    if not accept_language:
        return []

    preferences = []
    for part in accept_language.split(","):
        lang_range = part.split(";")[0].strip()
        if not lang_range or lang_range == "*":
            continue

        quality = 1.0
        if ";" in part and "q=" in part:
            try:
                quality = float(part.split("q=")[1])
            except ValueError:
                quality = 1.0

        if quality <= 0:
            continue
        preferences.append((normalize_locale(lang_range), quality))

    # sorted() is stable, so equal qualities keep header order
    ordered = [lang for lang, _ in sorted(preferences, key=lambda x: x[1], reverse=True)]
    return list(dict.fromkeys(ordered))


class LanguageNegotiator:
    """Matches requested language tags against available ones.

    Supports the common case where "pt-BR" is requested but only "pt" is
    available (and the reverse).
    """

    @staticmethod
    def matches_language(requested: str, available: str, strict: bool = False) -> bool:
        """Check if available language matches requested language.

        Args:
            requested: Requested language tag (e.g., "en-US").
            available: Available language tag (e.g., "en").
            strict: If True, requires exact match. If False, allows
                language-only match.
        """
        requested = normalize_locale(requested)
        available = normalize_locale(available)
        if requested == available:
            return True

        if strict:
            return False

        return requested.split("-")[0] == available.split("-")[0]

    @staticmethod
    def find_best_match(
        requested: Sequence[str],
        available: Sequence[str],
        default: Optional[str] = None,
    ) -> Optional[str]:
        """Find best matching language from available options.

        Args:
            requested: Requested language tags in preference order.
            available: Available language tags.
            default: Returned when nothing matches.
        """
        for req_lang in requested:
            for avail_lang in available:
                if LanguageNegotiator.matches_language(req_lang, avail_lang, strict=True):
                    return avail_lang

            for avail_lang in available:
                if LanguageNegotiator.matches_language(req_lang, avail_lang, strict=False):
                    return avail_lang

        return default

    @staticmethod
    def negotiate(requested: Sequence[str], available: Sequence[str]) -> List[str]:
        """Order every matching available locale by request preference.

        Each requested tag contributes its exact match first, then its
        language-only matches. Duplicates are dropped.
        """
        matches: List[str] = []
        for req_lang in requested:
            exact = [
                a for a in available if LanguageNegotiator.matches_language(req_lang, a, strict=True)
            ]
            loose = [
                a for a in available if LanguageNegotiator.matches_language(req_lang, a, strict=False)
            ]
            for avail_lang in exact + loose:
                if avail_lang not in matches:
                    matches.append(avail_lang)

        logger.debug("negotiated_locales", requested=list(requested), matches=matches)
        return matches
