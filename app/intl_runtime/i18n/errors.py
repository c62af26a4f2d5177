"""Custom exceptions for the intl runtime.

All exceptions inherit from IntlServiceError for easier handling in
application code.
"""

from enum import Enum
from typing import Any, Optional


class IntlServiceError(Exception):
    """Base exception for all intl runtime errors."""

    pass


class ConfigurationError(IntlServiceError):
    """Raised when an operation needs an active locale and none is configured.

    Example:
        >>> intl.exists("greeting", [])
        Traceback (most recent call last):
        ...
        ConfigurationError: locale is unset, cannot lookup 'greeting'
    """

    pass


class InvalidArgumentError(IntlServiceError, ValueError):
    """Raised when an argument has an unsupported shape or type.

    The message always names the offending value and its type.
    """

    pass


class IntlErrorCode(str, Enum):
    """Error kinds reported by a formatting engine to its error sink."""

    MISSING_TRANSLATION = "MISSING_TRANSLATION"
    FORMAT_ERROR = "FORMAT_ERROR"
    INVALID_CONFIG = "INVALID_CONFIG"
    UNSUPPORTED_FORMATTER = "UNSUPPORTED_FORMATTER"


class IntlError(IntlServiceError):
    """Error reported by a formatting engine.

    Attributes:
        code: The IntlErrorCode describing the failure.
        locale: Locale of the engine that reported it.
        descriptor: Message id or value being formatted, when known.
    """

    def __init__(
        self,
        code: IntlErrorCode,
        message: str,
        locale: Optional[str] = None,
        descriptor: Any = None,
    ):
        super().__init__(f"[{code.value}] {message}")
        self.code = code
        self.locale = locale
        self.descriptor = descriptor


def describe_type(value: Any) -> str:
    """Return the type name used in InvalidArgumentError messages."""
    return type(value).__name__
