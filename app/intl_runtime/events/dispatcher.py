"""Event dispatcher with an instance-scoped handler registry.

Handlers are registered per event type and called synchronously, in
registration order, when an event is dispatched.
"""

from typing import Any, Callable, Dict, List

from intl_runtime.events.models import Event
from intl_runtime.logging import get_module_logger

logger = get_module_logger()

EventHandler = Callable[[Event], Any]


class EventDispatcher:
    """In-process event dispatcher.

    Each dispatcher owns its own registry, so two services never see each
    other's listeners.

    Usage:
        dispatcher = EventDispatcher()

        @dispatcher.register_handler("intl.locale_changed")
        def handle_locale_changed(event: Event) -> None:
            ...

        dispatcher.dispatch(Event(event_type="intl.locale_changed"))
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, List[EventHandler]] = {}

    def register(self, event_type: str, handler: EventHandler) -> EventHandler:
        """Register ``handler`` for ``event_type``.

        Args:
            event_type: The type of event to handle.
            handler: Callable receiving the Event.

        Returns:
            The handler, unchanged.
        """
        self._handlers.setdefault(event_type, []).append(handler)
        logger.debug(
            "registered_event_handler",
            handler=getattr(handler, "__name__", "unknown"),
            event_type=event_type,
            total_handlers=len(self._handlers[event_type]),
        )
        return handler

    def register_handler(self, event_type: str) -> Callable[[EventHandler], EventHandler]:
        """Decorator form of :meth:`register`."""

        def decorator(handler_func: EventHandler) -> EventHandler:
            return self.register(event_type, handler_func)

        return decorator

    def unregister(self, event_type: str, handler: EventHandler) -> bool:
        """Remove ``handler`` from ``event_type``.

        Returns:
            True if the handler was registered, False otherwise.
        """
        handlers = self._handlers.get(event_type, [])
        if handler not in handlers:
            return False
        handlers.remove(handler)
        if not handlers:
            del self._handlers[event_type]
        return True

    def dispatch(self, event: Event) -> List[Any]:
        """Dispatch event synchronously to all registered handlers.

        If a handler raises, the error is logged and the remaining handlers
        still run.

        Args:
            event: The event to dispatch.

        Returns:
            List of return values from the handlers that succeeded.
        """
        results = []
        handlers = list(self._handlers.get(event.event_type, []))
        context = event.log_context()

        logger.info("dispatching_event", handler_count=len(handlers), **context)

        for handler in handlers:
            try:
                results.append(handler(event))
            except Exception as e:
                logger.error(
                    "event_handler_failed",
                    handler=getattr(handler, "__name__", "unknown"),
                    error=str(e),
                    **context,
                )

        return results

    def get_registered_events(self) -> List[str]:
        """Get list of all event types with at least one handler."""
        return list(self._handlers.keys())

    def get_handlers(self, event_type: str) -> List[EventHandler]:
        """Get a copy of the handlers registered for ``event_type``."""
        return list(self._handlers.get(event_type, []))

    def clear(self) -> None:
        """Remove every registered handler."""
        self._handlers.clear()
        logger.debug("cleared_all_event_handlers")
