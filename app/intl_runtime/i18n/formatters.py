"""Formatter implementations, one per FormatterKind.

Each formatter receives the resolved candidate locales, takes the engine
of the primary one and delegates the value formatting to it. Caller
options are passed through unchanged.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

from intl_runtime.i18n.engine import IntlEngine
from intl_runtime.i18n.models import FormatterKind, MessageDescriptor

GetIntl = Callable[[str], IntlEngine]
Lookup = Callable[[str, Sequence[str]], Optional[str]]


class Formatter(ABC):
    """Formats one kind of value for a candidate locale sequence."""

    kind: FormatterKind

    def __init__(self, get_intl: GetIntl):
        self.get_intl = get_intl

    @abstractmethod
    def format(self, locales: Sequence[str], value: Any, options: Mapping[str, Any]) -> str:
        """Format ``value`` for the first of ``locales``."""
        pass


class FormatMessage(Formatter):
    """Formats translation messages with fallback along the candidate chain.

    The pattern is looked up across every candidate locale and handed to the
    primary engine as the default message, so a miss on the primary locale
    still renders the next locale's translation.
    """

    kind = FormatterKind.MESSAGE

    def __init__(self, get_intl: GetIntl, lookup: Lookup):
        super().__init__(get_intl)
        self.lookup = lookup

    def format(self, locales: Sequence[str], value: Any, options: Mapping[str, Any]) -> str:
        descriptor = MessageDescriptor.from_value(value)
        translation = self.lookup(descriptor.id, locales)
        if translation is not None:
            descriptor = MessageDescriptor(
                id=descriptor.id,
                default_message=translation,
                description=descriptor.description,
            )
        return self.get_intl(locales[0]).format_message(descriptor, options)


class FormatDate(Formatter):
    kind = FormatterKind.DATE

    def format(self, locales: Sequence[str], value: Any, options: Mapping[str, Any]) -> str:
        return self.get_intl(locales[0]).format_date(value, options)


class FormatTime(Formatter):
    kind = FormatterKind.TIME

    def format(self, locales: Sequence[str], value: Any, options: Mapping[str, Any]) -> str:
        return self.get_intl(locales[0]).format_time(value, options)


class FormatNumber(Formatter):
    kind = FormatterKind.NUMBER

    def format(self, locales: Sequence[str], value: Any, options: Mapping[str, Any]) -> str:
        return self.get_intl(locales[0]).format_number(value, options)


class FormatRelative(Formatter):
    kind = FormatterKind.RELATIVE

    def format(self, locales: Sequence[str], value: Any, options: Mapping[str, Any]) -> str:
        return self.get_intl(locales[0]).format_relative(value, options)


def create_formatters(get_intl: GetIntl, lookup: Lookup) -> Dict[FormatterKind, Formatter]:
    """Build the kind → formatter table for one service."""
    formatters = [
        FormatMessage(get_intl, lookup),
        FormatDate(get_intl),
        FormatTime(get_intl),
        FormatNumber(get_intl),
        FormatRelative(get_intl),
    ]
    return {formatter.kind: formatter for formatter in formatters}
