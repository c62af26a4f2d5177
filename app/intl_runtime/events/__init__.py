"""Event system - instance-scoped, in-process event dispatcher.

Usage:

    from intl_runtime.events import Event, EventDispatcher

    dispatcher = EventDispatcher()
    dispatcher.register("intl.locale_changed", handle_locale_changed)
    dispatcher.dispatch(Event(event_type="intl.locale_changed"))
"""

from intl_runtime.events.dispatcher import EventDispatcher, EventHandler
from intl_runtime.events.models import LOCALE_CHANGED, Event, locale_changed_event

__all__ = [
    "Event",
    "EventDispatcher",
    "EventHandler",
    "LOCALE_CHANGED",
    "locale_changed_event",
]
