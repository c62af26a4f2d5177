"""Memoized formatting-engine cache.

Holds one engine per (primary locale, format config) pair. Entries are
created lazily, never evicted and dropped only by ``clear()``.
"""

from threading import Lock
from typing import Callable, Dict, Optional, Tuple

from intl_runtime.i18n.engine import IntlEngine, create_intl
from intl_runtime.i18n.locale import normalize_locale
from intl_runtime.i18n.models import FormatConfig, IntlConfig
from intl_runtime.i18n.store import TranslationStore
from intl_runtime.logging import get_module_logger

logger = get_module_logger()

CacheKey = Tuple[str, FormatConfig]
EngineFactory = Callable[[IntlConfig], IntlEngine]
ErrorSink = Callable[[Exception], None]


class FormatterEngineCache:
    """Builds each engine at most once, even under concurrent first use.

    A short global lock guards the entry and per-key lock tables; the
    expensive construction happens under the key's own lock, so building
    one locale never blocks lookups for another.

    Attributes:
        store: TranslationStore supplying each engine's messages.
        on_error: Error sink handed to every engine.
        factory: Engine constructor (defaults to create_intl).
    """

    def __init__(
        self,
        store: TranslationStore,
        on_error: Optional[ErrorSink] = None,
        factory: EngineFactory = create_intl,
    ):
        self.store = store
        self.on_error = on_error
        self.factory = factory
        self._entries: Dict[CacheKey, IntlEngine] = {}
        self._key_locks: Dict[CacheKey, Lock] = {}
        self._lock = Lock()

    @property
    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, primary_locale: str, format_config: FormatConfig) -> IntlEngine:
        """Return the engine for ``(primary_locale, format_config)``.

        Args:
            primary_locale: Locale the engine formats for.
            format_config: Shared named format presets.

        Returns:
            The cached engine; the same object on every call with an equal key.

        Raises:
            Exception: Whatever the engine factory raises; nothing is cached then.
        """
        key = (normalize_locale(primary_locale), format_config)

        with self._lock:
            engine = self._entries.get(key)
            if engine is not None:
                return engine
            key_lock = self._key_locks.setdefault(key, Lock())

        with key_lock:
            # Another thread may have built it while we waited
            with self._lock:
                engine = self._entries.get(key)
            if engine is not None:
                return engine

            try:
                engine = self._build(*key)
                with self._lock:
                    self._entries[key] = engine
            finally:
                with self._lock:
                    if self._key_locks.get(key) is key_lock:
                        del self._key_locks[key]
            return engine

    def _build(self, locale: str, format_config: FormatConfig) -> IntlEngine:
        config = IntlConfig(
            locale=locale,
            default_locale=locale,
            formats=format_config,
            default_formats=format_config,
            on_error=self.on_error,
            messages=self.store.view(locale),
        )
        engine = self.factory(config)
        logger.info("engine_created", locale=locale, cache_size=len(self._entries) + 1)
        return engine

    def clear(self) -> None:
        """Drop every cached engine."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            self._key_locks.clear()
        logger.debug("engine_cache_cleared", dropped=count)
