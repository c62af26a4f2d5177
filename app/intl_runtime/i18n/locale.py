"""Locale identifier normalization."""


def normalize_locale(locale_name: str) -> str:
    """Canonicalize a locale identifier.

    Lower-cases the tag and uses ``-`` as the only separator, so ``fr_FR``,
    ``FR-fr`` and ``fr-FR`` all map to ``fr-fr``.

    Args:
        locale_name: Raw locale identifier.

    Returns:
        The normalized identifier.
    """
    return locale_name.strip().replace("_", "-").lower()


def to_babel_identifier(locale_name: str) -> str:
    """Convert a normalized identifier to the POSIX form Babel parses.

    >>> to_babel_identifier("fr-fr")
    'fr_fr'
    """
    return normalize_locale(locale_name).replace("-", "_")
