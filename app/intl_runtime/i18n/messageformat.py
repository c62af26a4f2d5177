"""ICU-style message patterns: parsing and formatting.

Supports the subset of ICU MessageFormat used by application messages:

- simple arguments: ``Hello {name}``
- formatted arguments: ``{total, number}``, ``{due, date, short}``,
  ``{at, time, HH:mm}``
- ``plural`` and ``selectordinal`` with ``=N`` exact matches, CLDR keywords,
  ``offset:N`` and ``#``
- ``select``
- apostrophe quoting: ``''`` is a literal apostrophe, ``'{'`` a literal brace

Plural categories come from Babel's CLDR plural rules for the engine locale.
Parsed patterns are cached by pattern text.
"""

from dataclasses import dataclass
from decimal import Decimal
from functools import lru_cache
from typing import TYPE_CHECKING, Any, Mapping, Optional, Tuple, Union

if TYPE_CHECKING:
    from intl_runtime.i18n.engine import IntlEngine


class MessageFormatError(ValueError):
    """Raised for malformed patterns and missing or invalid argument values."""

    pass


@dataclass(frozen=True)
class Argument:
    name: str


@dataclass(frozen=True)
class FormattedArgument:
    name: str
    kind: str
    style: Optional[str] = None


@dataclass(frozen=True)
class PluralArgument:
    name: str
    options: Tuple[Tuple[str, "Nodes"], ...]
    offset: Union[int, Decimal] = 0
    ordinal: bool = False


@dataclass(frozen=True)
class SelectArgument:
    name: str
    options: Tuple[Tuple[str, "Nodes"], ...]


class _Pound:
    def __repr__(self) -> str:
        return "POUND"


POUND = _Pound()

Node = Union[str, Argument, FormattedArgument, PluralArgument, SelectArgument, _Pound]
Nodes = Tuple[Node, ...]

_FORMATTED_TYPES = ("number", "date", "time")
_BRANCHING_TYPES = ("plural", "selectordinal", "select")


class _Parser:
    def __init__(self, pattern: str):
        self.pattern = pattern
        self.pos = 0

    def parse(self) -> Nodes:
        nodes = self._message(in_plural=False)
        if self.pos < len(self.pattern):
            raise self._error("unmatched '}'")
        return nodes

    def _error(self, reason: str) -> MessageFormatError:
        return MessageFormatError(f"{reason} at position {self.pos} in pattern {self.pattern!r}")

    def _peek(self) -> str:
        return self.pattern[self.pos] if self.pos < len(self.pattern) else ""

    def _skip_ws(self) -> None:
        while self.pos < len(self.pattern) and self.pattern[self.pos].isspace():
            self.pos += 1

    def _expect(self, char: str) -> None:
        self._skip_ws()
        if self._peek() != char:
            raise self._error(f"expected '{char}'")
        self.pos += 1

    def _message(self, in_plural: bool) -> Nodes:
        nodes = []
        text = []

        def flush():
            if text:
                nodes.append("".join(text))
                text.clear()

        while self.pos < len(self.pattern):
            char = self.pattern[self.pos]
            if char == "{":
                flush()
                self.pos += 1
                nodes.append(self._argument(in_plural))
            elif char == "}":
                break
            elif char == "#" and in_plural:
                flush()
                nodes.append(POUND)
                self.pos += 1
            elif char == "'":
                text.append(self._quoted(in_plural))
            else:
                text.append(char)
                self.pos += 1

        flush()
        return tuple(nodes)

    def _quoted(self, in_plural: bool) -> str:
        following = self.pattern[self.pos + 1 : self.pos + 2]
        if following == "'":
            self.pos += 2
            return "'"
        if following and (following in "{}" or (following == "#" and in_plural)):
            end = self.pattern.find("'", self.pos + 1)
            if end == -1:
                literal = self.pattern[self.pos + 1 :]
                self.pos = len(self.pattern)
                return literal
            literal = self.pattern[self.pos + 1 : end]
            self.pos = end + 1
            return literal
        self.pos += 1
        return "'"

    def _token(self) -> str:
        start = self.pos
        while self.pos < len(self.pattern) and self.pattern[self.pos] not in ",{}":
            self.pos += 1
        return self.pattern[start : self.pos].strip()

    def _selector(self) -> str:
        start = self.pos
        while self.pos < len(self.pattern):
            char = self.pattern[self.pos]
            if char.isspace() or char in "{}":
                break
            self.pos += 1
        return self.pattern[start : self.pos]

    def _argument(self, in_plural: bool) -> Node:
        name = self._token()
        if not name:
            raise self._error("empty argument")
        self._skip_ws()

        if self._peek() == "}":
            self.pos += 1
            return Argument(name)
        if self._peek() != ",":
            raise self._error(f"malformed argument '{name}'")
        self.pos += 1

        kind = self._token()
        if kind in _FORMATTED_TYPES:
            style = None
            self._skip_ws()
            if self._peek() == ",":
                self.pos += 1
                style = self._token() or None
            self._expect("}")
            return FormattedArgument(name, kind, style)

        if kind in _BRANCHING_TYPES:
            self._expect(",")
            return self._branches(name, kind, in_plural)

        raise self._error(f"unsupported argument type '{kind}'")

    def _branches(self, name: str, kind: str, in_plural: bool) -> Node:
        is_select = kind == "select"
        offset: Union[int, Decimal] = 0
        options = []

        while True:
            self._skip_ws()
            char = self._peek()
            if char == "}":
                self.pos += 1
                break
            if not char:
                raise self._error(f"unterminated '{kind}' argument '{name}'")

            selector = self._selector()
            if not selector:
                raise self._error(f"missing selector in '{kind}' argument '{name}'")
            if selector.startswith("offset:") and not is_select:
                try:
                    offset = _to_number(selector[len("offset:") :])
                except MessageFormatError:
                    raise self._error(f"invalid offset '{selector}'") from None
                continue

            self._expect("{")
            body = self._message(in_plural=in_plural or not is_select)
            self._expect("}")
            options.append((selector, body))

        if not any(selector == "other" for selector, _ in options):
            raise self._error(f"'{kind}' argument '{name}' requires an 'other' option")

        if is_select:
            return SelectArgument(name, tuple(options))
        return PluralArgument(name, tuple(options), offset=offset, ordinal=kind == "selectordinal")


@lru_cache(maxsize=1024)
def parse_message(pattern: str) -> Nodes:
    """Parse ``pattern`` into nodes.

    Raises:
        MessageFormatError: If the pattern is malformed.
    """
    return _Parser(pattern).parse()


def _to_number(value: Any) -> Union[int, Decimal]:
    """Coerce a plural or offset value; only finite numbers are accepted."""
    if isinstance(value, bool):
        raise MessageFormatError(f"expected a number but received: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, (Decimal, float)):
        number = value if isinstance(value, Decimal) else Decimal(str(value))
    elif isinstance(value, str):
        try:
            number = Decimal(value.strip())
        except ArithmeticError:
            raise MessageFormatError(f"expected a number but received: {value!r}") from None
    else:
        raise MessageFormatError(
            f"expected a number but received: {value!r} ({type(value).__name__})"
        )

    if not number.is_finite():
        raise MessageFormatError(f"expected a finite number but received: {value!r}")
    if isinstance(value, str) and number == number.to_integral_value():
        return int(number)
    return number


def _value(values: Mapping[str, Any], name: str, pattern: str) -> Any:
    if name not in values:
        raise MessageFormatError(
            f"The intl string context variable '{name}' was not provided to the string {pattern!r}"
        )
    return values[name]


def _format_styled(engine: "IntlEngine", node: FormattedArgument, value: Any) -> str:
    style = node.style
    if node.kind == "number":
        if style is None:
            options = {}
        elif style == "integer":
            options = {"maximum_fraction_digits": 0}
        elif style in ("percent", "scientific", "compact"):
            options = {"style": style}
        else:
            options = {"format": style}
        return engine.format_number(value, options)

    options = {"format": style} if style else {}
    if node.kind == "date":
        return engine.format_date(value, options)
    return engine.format_time(value, options)


def _select_plural(engine: "IntlEngine", node: PluralArgument, number) -> "Nodes":
    options = dict(node.options)
    exact = options.get(f"={number}")
    if exact is None:
        for selector, body in node.options:
            if selector.startswith("=") and _to_number(selector[1:]) == number:
                exact = body
                break
    if exact is not None:
        return exact

    rule = engine.babel_locale.ordinal_form if node.ordinal else engine.babel_locale.plural_form
    category = rule(number - node.offset)
    return options.get(category, options["other"])


def render(
    nodes: Nodes,
    values: Mapping[str, Any],
    engine: "IntlEngine",
    pattern: str,
    pound: Optional[Union[int, Decimal]] = None,
) -> str:
    """Format parsed ``nodes`` with ``values`` for ``engine``'s locale."""
    parts = []
    for node in nodes:
        if isinstance(node, str):
            parts.append(node)
        elif node is POUND:
            parts.append(engine.format_number(pound, {}) if pound is not None else "#")
        elif isinstance(node, Argument):
            value = _value(values, node.name, pattern)
            parts.append("" if value is None else str(value))
        elif isinstance(node, FormattedArgument):
            parts.append(_format_styled(engine, node, _value(values, node.name, pattern)))
        elif isinstance(node, PluralArgument):
            number = _to_number(_value(values, node.name, pattern))
            branch = _select_plural(engine, node, number)
            parts.append(render(branch, values, engine, pattern, pound=number - node.offset))
        elif isinstance(node, SelectArgument):
            options = dict(node.options)
            selected = str(_value(values, node.name, pattern))
            branch = options.get(selected, options["other"])
            parts.append(render(branch, values, engine, pattern, pound=pound))
    return "".join(parts)


def format_pattern(pattern: str, values: Optional[Mapping[str, Any]], engine: "IntlEngine") -> str:
    """Parse (cached) and render ``pattern``.

    Raises:
        MessageFormatError: If the pattern is malformed or a value is missing.
    """
    return render(parse_message(pattern), values or {}, engine, pattern)
