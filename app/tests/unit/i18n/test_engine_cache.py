"""Tests for intl_runtime.i18n.cache module."""

import threading
import time
from unittest.mock import MagicMock

import pytest

from intl_runtime.i18n import FormatConfig, FormatterEngineCache, create_intl


class TestFormatterEngineCache:
    """Tests for FormatterEngineCache."""

    @pytest.fixture
    def cache(self, store, error_sink):
        return FormatterEngineCache(store, on_error=error_sink)

    def test_same_key_returns_same_engine(self, cache):
        config = FormatConfig()
        assert cache.get("en-us", config) is cache.get("en-us", config)
        assert cache.size == 1

    def test_key_is_normalized(self, cache):
        config = FormatConfig()
        assert cache.get("en_US", config) is cache.get("EN-us", config)

    def test_equal_configs_share_engine(self, cache):
        first = FormatConfig({"date": {"iso": {"format": "yyyy-MM-dd"}}})
        second = FormatConfig({"date": {"iso": {"format": "yyyy-MM-dd"}}})
        assert cache.get("de", first) is cache.get("de", second)

    def test_distinct_locales_distinct_engines(self, cache):
        config = FormatConfig()
        assert cache.get("de", config) is not cache.get("fr-fr", config)
        assert cache.size == 2

    def test_distinct_configs_distinct_engines(self, cache):
        first = FormatConfig()
        second = FormatConfig({"number": {"money": {"style": "currency", "currency": "EUR"}}})
        assert cache.get("de", first) is not cache.get("de", second)

    def test_engine_config(self, cache, error_sink):
        """Engines are built with the locale, shared formats and error sink."""
        config = FormatConfig({"date": {"iso": {"format": "yyyy-MM-dd"}}})
        engine = cache.get("fr-FR", config)

        assert engine.config.locale == "fr-fr"
        assert engine.config.default_locale == "fr-fr"
        assert engine.config.formats is config
        assert engine.config.default_formats is config
        assert engine.config.on_error is error_sink
        assert engine.config.messages["greeting"] == "Bonjour {name}"

    def test_engine_sees_replaced_translations(self, cache, store):
        engine = cache.get("de", FormatConfig())
        store.add_translations("de", {"greeting": "Servus {name}"})
        assert engine.config.messages["greeting"] == "Servus {name}"

    def test_factory_failure_leaves_no_entry(self, store):
        factory = MagicMock(side_effect=[ValueError("boom"), "engine"])
        cache = FormatterEngineCache(store, factory=factory)

        with pytest.raises(ValueError, match="boom"):
            cache.get("de", FormatConfig())
        assert cache.size == 0

        assert cache.get("de", FormatConfig()) == "engine"
        assert factory.call_count == 2

    def test_concurrent_first_use_builds_once(self, store):
        """Threads racing on an empty key construct exactly one engine."""
        calls = []

        def slow_factory(config):
            calls.append(config.locale)
            time.sleep(0.05)
            return create_intl(config)

        cache = FormatterEngineCache(store, factory=slow_factory)
        config = FormatConfig()
        barrier = threading.Barrier(8)
        results = []

        def worker():
            barrier.wait()
            results.append(cache.get("de", config))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert calls == ["de"]
        assert len(results) == 8
        assert all(engine is results[0] for engine in results)

    def test_clear(self, cache):
        config = FormatConfig()
        engine = cache.get("de", config)
        cache.clear()
        assert cache.size == 0
        assert cache.get("de", config) is not engine

    def test_failed_construction_releases_key_lock(self, store):
        # pylint: disable=protected-access
        cache = FormatterEngineCache(store, factory=MagicMock(side_effect=ValueError("boom")))

        with pytest.raises(ValueError):
            cache.get("de", FormatConfig())

        assert cache._key_locks == {}

    def test_successful_construction_releases_key_lock(self, cache):
        # pylint: disable=protected-access
        cache.get("de", FormatConfig())
        assert cache._key_locks == {}
