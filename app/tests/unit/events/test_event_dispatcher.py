"""Unit tests for the instance-scoped event dispatcher."""

from unittest.mock import MagicMock, patch

import pytest

from intl_runtime.events import EventDispatcher

pytestmark = pytest.mark.unit


class TestEventRegistration:
    """Test event handler registration."""

    def test_register_single_handler(self, dispatcher, mock_event_handler):
        """register() returns the handler and records it for the event type."""
        registered = dispatcher.register("test.event", mock_event_handler)

        assert registered is mock_event_handler
        assert "test.event" in dispatcher.get_registered_events()
        assert mock_event_handler in dispatcher.get_handlers("test.event")

    def test_register_handler_decorator(self, dispatcher):
        """Decorator returns original function."""

        @dispatcher.register_handler("test.decorated")
        def original_handler(event):
            return event

        assert dispatcher.get_handlers("test.decorated") == [original_handler]

    def test_register_multiple_handlers_same_event(self, dispatcher):
        handler1 = MagicMock()
        handler2 = MagicMock()

        dispatcher.register("test.multi", handler1)
        dispatcher.register("test.multi", handler2)

        assert dispatcher.get_handlers("test.multi") == [handler1, handler2]

    def test_get_handlers_returns_copy(self, dispatcher, mock_event_handler):
        dispatcher.register("test.event", mock_event_handler)
        dispatcher.get_handlers("test.event").clear()
        assert dispatcher.get_handlers("test.event") == [mock_event_handler]

    def test_registries_are_per_instance(self, dispatcher, mock_event_handler):
        """Two dispatchers never share listeners."""
        dispatcher.register("test.event", mock_event_handler)
        assert EventDispatcher().get_registered_events() == []

    def test_unregister(self, dispatcher, mock_event_handler):
        dispatcher.register("test.event", mock_event_handler)

        assert dispatcher.unregister("test.event", mock_event_handler) is True
        assert dispatcher.get_registered_events() == []
        assert dispatcher.unregister("test.event", mock_event_handler) is False

    def test_clear(self, dispatcher, mock_event_handler):
        dispatcher.register("event.one", mock_event_handler)
        dispatcher.register("event.two", mock_event_handler)

        dispatcher.clear()

        assert dispatcher.get_registered_events() == []


class TestEventDispatch:
    """Test event dispatching."""

    def test_dispatch_calls_handlers_in_order(self, dispatcher, event_factory):
        calls = []
        dispatcher.register("test.event", lambda e: calls.append("first") or 1)
        dispatcher.register("test.event", lambda e: calls.append("second") or 2)

        results = dispatcher.dispatch(event_factory())

        assert calls == ["first", "second"]
        assert results == [1, 2]

    def test_dispatch_passes_event(self, dispatcher, event_factory, mock_event_handler):
        event = event_factory(metadata={"locales": ["de"]})
        dispatcher.register("test.event", mock_event_handler)

        dispatcher.dispatch(event)

        mock_event_handler.assert_called_once_with(event)

    def test_dispatch_no_handlers(self, dispatcher, event_factory):
        assert dispatcher.dispatch(event_factory(event_type="nobody.listens")) == []

    def test_failing_handler_does_not_stop_others(self, dispatcher, event_factory):
        """A raising handler is logged; the remaining handlers still run."""
        failing = MagicMock(side_effect=RuntimeError("boom"))
        succeeding = MagicMock(return_value="ok")
        dispatcher.register("test.event", failing)
        dispatcher.register("test.event", succeeding)

        results = dispatcher.dispatch(event_factory())

        failing.assert_called_once()
        succeeding.assert_called_once()
        assert results == ["ok"]

    def test_handler_may_unregister_itself(self, dispatcher, event_factory):
        def once(event):
            dispatcher.unregister("test.event", once)

        other = MagicMock()
        dispatcher.register("test.event", once)
        dispatcher.register("test.event", other)

        dispatcher.dispatch(event_factory())

        other.assert_called_once()
        assert dispatcher.get_handlers("test.event") == [other]

    @patch("intl_runtime.events.dispatcher.logger")
    def test_failure_log_carries_event_context(self, mock_logger, dispatcher, event_factory):
        event = event_factory(metadata={"primary": "de"})
        dispatcher.register("test.event", MagicMock(side_effect=RuntimeError("boom")))

        dispatcher.dispatch(event)

        kwargs = mock_logger.error.call_args.kwargs
        assert mock_logger.error.call_args.args == ("event_handler_failed",)
        assert kwargs["correlation_id"] == str(event.correlation_id)
        assert kwargs["event_primary"] == "de"
        assert kwargs["error"] == "boom"
