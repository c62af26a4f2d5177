"""i18n runtime - translation lookup and locale-aware formatting.

Main components:
- store: TranslationStore holding flattened messages per locale
- resolvers: candidate-locale resolution and Accept-Language negotiation
- cache: FormatterEngineCache memoizing one engine per locale/format config
- engine: Babel-backed IntlEngine and the message pattern renderer
- controller: ActiveLocaleController with deferred change notification
- service: IntlService facade tying the above together
"""

from intl_runtime.i18n.cache import FormatterEngineCache
from intl_runtime.i18n.controller import ActiveLocaleController
from intl_runtime.i18n.engine import IntlEngine, create_intl
from intl_runtime.i18n.errors import (
    ConfigurationError,
    IntlError,
    IntlErrorCode,
    IntlServiceError,
    InvalidArgumentError,
)
from intl_runtime.i18n.factory import create_intl_service
from intl_runtime.i18n.loader import YAMLTranslationLoader, load_formats
from intl_runtime.i18n.locale import normalize_locale
from intl_runtime.i18n.models import FormatConfig, FormatterKind, IntlConfig, MessageDescriptor
from intl_runtime.i18n.resolvers import LanguageNegotiator, parse_accept_language, resolve_candidates
from intl_runtime.i18n.scheduler import (
    AdaptiveScheduler,
    EventLoopScheduler,
    ManualScheduler,
    Scheduler,
)
from intl_runtime.i18n.service import IntlService
from intl_runtime.i18n.store import TranslationStore

__all__ = [
    "ActiveLocaleController",
    "AdaptiveScheduler",
    "ConfigurationError",
    "EventLoopScheduler",
    "FormatConfig",
    "FormatterEngineCache",
    "FormatterKind",
    "IntlConfig",
    "IntlEngine",
    "IntlError",
    "IntlErrorCode",
    "IntlService",
    "IntlServiceError",
    "InvalidArgumentError",
    "LanguageNegotiator",
    "ManualScheduler",
    "MessageDescriptor",
    "Scheduler",
    "TranslationStore",
    "YAMLTranslationLoader",
    "create_intl",
    "create_intl_service",
    "load_formats",
    "normalize_locale",
    "parse_accept_language",
    "resolve_candidates",
]
