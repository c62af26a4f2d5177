"""Locale-bound formatting engine backed by Babel.

An IntlEngine is created for one (locale, formats) pair and formats
messages, dates, times, numbers and relative times with CLDR data. Engines
never raise for recoverable problems themselves: they report an IntlError
to ``config.on_error`` and, if the sink returns, fall back to a plain
rendering of the value.
"""

from datetime import date, datetime, time, timedelta, timezone
from decimal import InvalidOperation
from typing import Any, Dict, Mapping, Optional

from babel import Locale
from babel import dates as babel_dates
from babel import numbers as babel_numbers

from intl_runtime.i18n.errors import IntlError, IntlErrorCode
from intl_runtime.i18n.locale import to_babel_identifier
from intl_runtime.i18n.messageformat import MessageFormatError, format_pattern
from intl_runtime.i18n.models import FormatterKind, IntlConfig, MessageDescriptor
from intl_runtime.logging import get_module_logger

logger = get_module_logger()

# Same unit lengths Babel uses when picking a relative-time unit
RELATIVE_UNIT_SECONDS = {
    "second": 1,
    "minute": 60,
    "hour": 3600,
    "day": 86400,
    "week": 7 * 86400,
    "month": 30 * 86400,
    "quarter": 91 * 86400,
    "year": 365 * 86400,
}

_FORMAT_FAILURES = (ValueError, TypeError, LookupError, AttributeError, OverflowError, InvalidOperation)


def _to_datetime(value: Any) -> Any:
    """Accept date/time objects, ISO 8601 strings and POSIX timestamps."""
    if isinstance(value, (datetime, date, time)):
        return value
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    raise TypeError(f"cannot format {value!r} ({type(value).__name__}) as a date")


class IntlEngine:
    """Formats values for a single locale.

    Attributes:
        config: The IntlConfig the engine was created with.
        locale: Normalized locale identifier.
        babel_locale: Parsed Babel Locale used for CLDR data.
    """

    def __init__(self, config: IntlConfig):
        """Initialize the engine.

        Raises:
            babel.UnknownLocaleError: If Babel has no data for the locale.
            ValueError: If the locale identifier cannot be parsed.
        """
        self.config = config
        self.locale = config.locale
        self.babel_locale = Locale.parse(to_babel_identifier(config.locale))

    def __repr__(self) -> str:
        return f"IntlEngine(locale={self.locale!r})"

    def _report(self, error: IntlError) -> None:
        if self.config.on_error is not None:
            self.config.on_error(error)
        else:
            raise error

    def _failed(self, kind: FormatterKind, value: Any, exc: Exception) -> str:
        self._report(
            IntlError(
                IntlErrorCode.FORMAT_ERROR,
                f"{kind.value} formatting failed for {value!r}: {exc}",
                locale=self.locale,
                descriptor=value,
            )
        )
        return str(value)

    def _resolve_options(self, kind: FormatterKind, options: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        """Expand a named ``format`` preset into its option bag.

        Explicit options win over preset options. A ``format`` that names no
        preset is kept as-is (a Babel style name or pattern).
        """
        resolved = dict(options or {})
        name = resolved.get("format")
        if isinstance(name, str):
            preset = self.config.formats.preset(kind, name)
            if preset is None:
                preset = self.config.default_formats.preset(kind, name)
            if preset is not None:
                del resolved["format"]
                resolved = {**preset, **resolved}
        return resolved

    def format_message(
        self,
        descriptor: MessageDescriptor,
        values: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """Format the message ``descriptor.id`` with ``values``.

        Missing messages are reported as MISSING_TRANSLATION and rendered from
        ``descriptor.default_message``, or as the id itself.
        """
        pattern = self.config.messages.get(descriptor.id)
        if pattern is None:
            self._report(
                IntlError(
                    IntlErrorCode.MISSING_TRANSLATION,
                    f'Missing message "{descriptor.id}" for locale "{self.locale}"',
                    locale=self.locale,
                    descriptor=descriptor.id,
                )
            )
            pattern = descriptor.default_message
            if pattern is None:
                return descriptor.id

        try:
            return format_pattern(pattern, values, self)
        except MessageFormatError as e:
            self._report(
                IntlError(
                    IntlErrorCode.FORMAT_ERROR,
                    f'Error formatting message "{descriptor.id}": {e}',
                    locale=self.locale,
                    descriptor=descriptor.id,
                )
            )
            return pattern

    def format_date(self, value: Any, options: Optional[Mapping[str, Any]] = None) -> str:
        """Format the date part of ``value``.

        Options:
            format: "short" | "medium" | "long" | "full", a preset name or a
                CLDR pattern (default "medium").
            time_zone: Zone name; aware datetimes are converted first.
        """
        opts = self._resolve_options(FormatterKind.DATE, options)
        try:
            moment = _to_datetime(value)
            zone = opts.get("time_zone")
            if zone and isinstance(moment, datetime) and moment.tzinfo is not None:
                moment = moment.astimezone(babel_dates.get_timezone(zone))
            return babel_dates.format_date(
                moment, format=opts.get("format", "medium"), locale=self.babel_locale
            )
        except _FORMAT_FAILURES as e:
            return self._failed(FormatterKind.DATE, value, e)

    def format_time(self, value: Any, options: Optional[Mapping[str, Any]] = None) -> str:
        """Format the time part of ``value``.

        Options:
            format: "short" | "medium" | "long" | "full", a preset name or a
                CLDR pattern (default "medium").
            time_zone: Zone name to render datetimes in.
        """
        opts = self._resolve_options(FormatterKind.TIME, options)
        try:
            moment = _to_datetime(value)
            zone = opts.get("time_zone")
            return babel_dates.format_time(
                moment,
                format=opts.get("format", "medium"),
                tzinfo=babel_dates.get_timezone(zone) if zone else None,
                locale=self.babel_locale,
            )
        except _FORMAT_FAILURES as e:
            return self._failed(FormatterKind.TIME, value, e)

    def format_number(self, value: Any, options: Optional[Mapping[str, Any]] = None) -> str:
        """Format a number.

        Options:
            style: "decimal" (default) | "percent" | "currency" | "scientific"
                | "compact".
            currency: ISO 4217 code, required for the currency style.
            format: Preset name or CLDR number pattern.
            minimum_fraction_digits / maximum_fraction_digits / use_grouping:
                Build a decimal pattern when no ``format`` is given.
            format_type: "short" | "long" for the compact style.
        """
        opts = self._resolve_options(FormatterKind.NUMBER, options)
        style = opts.get("style", "decimal")
        pattern = opts.get("format")
        try:
            if style == "currency":
                currency = opts.get("currency")
                if not currency:
                    self._report(
                        IntlError(
                            IntlErrorCode.INVALID_CONFIG,
                            "currency style requires a 'currency' option",
                            locale=self.locale,
                            descriptor=value,
                        )
                    )
                    return str(value)
                return babel_numbers.format_currency(
                    value, currency, format=pattern, locale=self.babel_locale
                )
            if style == "percent":
                return babel_numbers.format_percent(value, format=pattern, locale=self.babel_locale)
            if style == "scientific":
                return babel_numbers.format_scientific(value, format=pattern, locale=self.babel_locale)
            if style == "compact":
                return babel_numbers.format_compact_decimal(
                    value,
                    format_type=opts.get("format_type", "short"),
                    fraction_digits=opts.get("maximum_fraction_digits", 0),
                    locale=self.babel_locale,
                )
            if pattern is None and any(
                key in opts
                for key in ("minimum_fraction_digits", "maximum_fraction_digits", "use_grouping")
            ):
                pattern = _decimal_pattern(opts)
            return babel_numbers.format_decimal(value, format=pattern, locale=self.babel_locale)
        except _FORMAT_FAILURES as e:
            return self._failed(FormatterKind.NUMBER, value, e)

    def format_relative(self, value: Any, options: Optional[Mapping[str, Any]] = None) -> str:
        """Format a signed distance in time ("in 3 days", "2 hours ago").

        ``value`` is a timedelta or a number of ``unit``s (default "second").
        Babel picks the largest unit that fits, so 90 minutes renders in hours.

        Options:
            unit: One of RELATIVE_UNIT_SECONDS.
            format: "long" (default) | "short" | "narrow".
            threshold: Babel unit-switching threshold (default 0.85).
        """
        opts = self._resolve_options(FormatterKind.RELATIVE, options)
        try:
            if isinstance(value, timedelta):
                delta = value
            else:
                unit = opts.get("unit", "second")
                if unit not in RELATIVE_UNIT_SECONDS:
                    raise ValueError(f"unsupported relative time unit '{unit}'")
                delta = timedelta(seconds=float(value) * RELATIVE_UNIT_SECONDS[unit])
            return babel_dates.format_timedelta(
                delta,
                threshold=opts.get("threshold", 0.85),
                add_direction=True,
                format=opts.get("format", "long"),
                locale=self.babel_locale,
            )
        except _FORMAT_FAILURES as e:
            return self._failed(FormatterKind.RELATIVE, value, e)


def _decimal_pattern(opts: Mapping[str, Any]) -> str:
    minimum = int(opts.get("minimum_fraction_digits", 0))
    maximum = int(opts.get("maximum_fraction_digits", max(minimum, 3)))
    if maximum < minimum:
        raise ValueError("maximum_fraction_digits is smaller than minimum_fraction_digits")
    integer_part = "#,##0" if opts.get("use_grouping", True) else "0"
    if maximum == 0:
        return integer_part
    return f"{integer_part}.{'0' * minimum}{'#' * (maximum - minimum)}"


def create_intl(config: IntlConfig) -> IntlEngine:
    """Engine constructor used by the engine cache."""
    engine = IntlEngine(config)
    logger.debug("intl_engine_constructed", locale=config.locale)
    return engine
