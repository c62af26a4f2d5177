"""Core data structures for the intl runtime.

Defines message descriptors, formatter kinds, the hashable format-config
value shared by every formatting call, and the engine construction config.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional

from intl_runtime.i18n.errors import InvalidArgumentError, describe_type


class FormatterKind(str, Enum):
    """The fixed set of formatting operations the service routes."""

    MESSAGE = "message"
    DATE = "date"
    TIME = "time"
    NUMBER = "number"
    RELATIVE = "relative"


@dataclass(frozen=True)
class MessageDescriptor:
    """Identifies a message to format.

    Attributes:
        id: Flattened translation key (e.g., "nav.home").
        default_message: Pattern used when no candidate locale has ``id``.
        description: Free-form context for translators; never rendered.
    """

    id: str
    default_message: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def from_value(cls, value: Any) -> "MessageDescriptor":
        """Coerce a descriptor, a mapping with an ``id`` or a bare key.

        Raises:
            InvalidArgumentError: If ``value`` has none of those shapes.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls(id=value)
        if isinstance(value, Mapping) and isinstance(value.get("id"), str):
            return cls(
                id=value["id"],
                default_message=value.get("default_message", value.get("defaultMessage")),
                description=value.get("description"),
            )
        raise InvalidArgumentError(
            f"expected a message descriptor with a string 'id' but received: "
            f"{value!r} ({describe_type(value)})"
        )


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return tuple(sorted((str(k), _freeze(v)) for k, v in value.items()))
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


class FormatConfig:
    """Read-only named format presets, keyed by formatter kind.

    Example::

        FormatConfig({
            "date": {"iso": {"format": "yyyy-MM-dd"}},
            "number": {"money": {"style": "currency", "currency": "EUR"}},
        })

    Instances compare and hash by value so they can be part of a cache key.
    """

    __slots__ = ("_data", "_key")

    def __init__(self, data: Optional[Mapping[str, Mapping[str, Mapping[str, Any]]]] = None):
        data = data or {}
        if not isinstance(data, Mapping):
            raise InvalidArgumentError(
                f"expected formats to be a mapping but received: {data!r} ({describe_type(data)})"
            )
        frozen: Dict[str, Mapping[str, Mapping[str, Any]]] = {}
        for kind, presets in data.items():
            if not isinstance(presets, Mapping):
                raise InvalidArgumentError(
                    f"expected presets for '{kind}' to be a mapping but received: "
                    f"{presets!r} ({describe_type(presets)})"
                )
            frozen[str(kind)] = MappingProxyType(
                {str(name): MappingProxyType(dict(options)) for name, options in presets.items()}
            )
        self._data = MappingProxyType(frozen)
        self._key = _freeze(data)

    def preset(self, kind: FormatterKind, name: str) -> Optional[Mapping[str, Any]]:
        """Return the option bag named ``name`` for ``kind``, if defined."""
        return self._data.get(kind.value, {}).get(name)

    def presets(self, kind: FormatterKind) -> Mapping[str, Mapping[str, Any]]:
        return self._data.get(kind.value, MappingProxyType({}))

    def to_dict(self) -> Dict[str, Dict[str, Dict[str, Any]]]:
        return {
            kind: {name: dict(options) for name, options in presets.items()}
            for kind, presets in self._data.items()
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FormatConfig):
            return NotImplemented
        return self._key == other._key

    def __hash__(self) -> int:
        return hash(self._key)

    def __bool__(self) -> bool:
        return bool(self._data)

    def __repr__(self) -> str:
        return f"FormatConfig({self.to_dict()!r})"


@dataclass(frozen=True)
class IntlConfig:
    """Everything a formatting engine needs at construction.

    Attributes:
        locale: Normalized locale the engine formats for.
        default_locale: Locale assumed for default messages.
        formats: Named presets shared by the service.
        default_formats: Presets used when ``formats`` lacks a name.
        on_error: Error sink the engine reports recoverable issues to.
        messages: Flattened messages for ``locale``.
    """

    locale: str
    default_locale: str
    formats: FormatConfig = field(default_factory=FormatConfig)
    default_formats: FormatConfig = field(default_factory=FormatConfig)
    on_error: Optional[Callable[[Exception], None]] = None
    messages: Mapping[str, str] = field(default_factory=dict)
