"""Tests for intl_runtime.i18n.controller module."""

from unittest.mock import MagicMock

import pytest

from intl_runtime.events import LOCALE_CHANGED, EventDispatcher
from intl_runtime.i18n import ActiveLocaleController, ConfigurationError, InvalidArgumentError
from intl_runtime.i18n.controller import normalize_locales


class TestNormalizeLocales:
    def test_scalar_wrapped(self):
        assert normalize_locales("en_US") == ("en-us",)

    def test_sequence(self):
        assert normalize_locales(["de", "EN"]) == ("de", "en")

    def test_invalid_shape(self):
        with pytest.raises(InvalidArgumentError, match="int"):
            normalize_locales(7)


class TestActiveLocaleController:
    """Tests for ActiveLocaleController."""

    @pytest.fixture
    def dispatcher(self):
        return EventDispatcher()

    @pytest.fixture
    def handler(self, dispatcher):
        handler = MagicMock()
        dispatcher.register(LOCALE_CHANGED, handler)
        return handler

    @pytest.fixture
    def controller(self, scheduler, dispatcher, language_sink):
        return ActiveLocaleController(scheduler, dispatcher, language_sink=language_sink)

    def test_set_locales_is_immediate(self, controller):
        controller.set_locales(["fr-FR", "en-US"])
        assert controller.locales == ("fr-fr", "en-us")
        assert controller.primary_locale == "fr-fr"

    def test_notification_deferred(self, controller, scheduler, handler, language_sink):
        controller.set_locales("de")

        handler.assert_not_called()
        assert controller.pending is True

        scheduler.run_pending()

        event = handler.call_args[0][0]
        assert event.event_type == LOCALE_CHANGED
        assert event.metadata == {"locales": ["de"], "primary": "de"}
        language_sink.assert_called_once_with("de")
        assert controller.pending is False

    def test_burst_coalesced_into_one_notification(self, controller, scheduler, handler, language_sink):
        """Two changes in one turn notify once, with the final value."""
        controller.set_locales("de")
        controller.set_locales(["fr", "en"])

        assert scheduler.run_pending() == 1
        handler.assert_called_once()
        assert handler.call_args[0][0].metadata["locales"] == ["fr", "en"]
        language_sink.assert_called_once_with("fr")

    def test_equal_value_is_noop(self, controller, scheduler, handler):
        controller.set_locales(["en-us"])
        scheduler.run_pending()
        handler.reset_mock()

        controller.set_locales(["EN_us"])

        assert controller.pending is False
        assert scheduler.run_pending() == 0
        handler.assert_not_called()

    @pytest.mark.parametrize("raw", [None, "", [], ()])
    def test_empty_raises(self, controller, raw):
        with pytest.raises(ConfigurationError, match="no locale has been set"):
            controller.set_locales(raw)

    def test_blank_string_raises(self, controller):
        with pytest.raises(ConfigurationError):
            controller.set_locales(" , ")

    def test_language_sink_failure_is_logged(self, controller, scheduler, language_sink, handler):
        language_sink.side_effect = RuntimeError("document gone")
        controller.set_locales("de")

        scheduler.run_pending()

        handler.assert_called_once()
        language_sink.assert_called_once_with("de")

    def test_without_language_sink(self, scheduler, dispatcher, handler):
        controller = ActiveLocaleController(scheduler, dispatcher)
        controller.set_locales("de")
        scheduler.run_pending()
        handler.assert_called_once()

    def test_dispose_cancels_pending(self, controller, scheduler, handler, language_sink):
        controller.set_locales("de")
        controller.dispose()
        controller.dispose()

        assert scheduler.run_pending() == 0
        handler.assert_not_called()
        language_sink.assert_not_called()

    def test_change_after_dispose_not_scheduled(self, controller, scheduler):
        controller.dispose()
        controller.set_locales("de")

        assert controller.locales == ("de",)
        assert scheduler.pending == 0

    def test_scheduler_failure_leaves_locales_unchanged(self, controller):
        controller.set_locales("en-us")
        previous_call_pending = controller.pending
        failing = MagicMock()
        failing.schedule.side_effect = RuntimeError("Event loop is closed")
        controller.scheduler = failing

        with pytest.raises(RuntimeError):
            controller.set_locales("de")

        assert controller.locales == ("en-us",)
        assert controller.pending is previous_call_pending
