"""Event records broadcast by the intl runtime."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Sequence
from uuid import UUID, uuid4

LOCALE_CHANGED = "intl.locale_changed"


@dataclass(frozen=True)
class Event:
    """Something that happened, delivered to registered handlers.

    Attributes:
        event_type: Dotted event name (e.g. ``intl.locale_changed``).
        metadata: Event-specific payload.
        correlation_id: Ties the dispatch log lines of one event together.
        timestamp: UTC time the event was created.
    """

    event_type: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    correlation_id: UUID = field(default_factory=uuid4)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def log_context(self) -> Dict[str, Any]:
        """Key/value context for structured log lines about this event."""
        return {
            "event_type": self.event_type,
            "correlation_id": str(self.correlation_id),
            "occurred_at": self.timestamp.isoformat(),
            **{f"event_{key}": value for key, value in self.metadata.items()},
        }

    @property
    def locales(self) -> Sequence[str]:
        """Active locales carried by a locale-changed event (empty otherwise)."""
        return self.metadata.get("locales", [])

    @property
    def primary_locale(self) -> Optional[str]:
        return self.metadata.get("primary")


def locale_changed_event(locales: Sequence[str]) -> Event:
    """Build the event broadcast after the active locales change."""
    locales = list(locales)
    return Event(
        event_type=LOCALE_CHANGED,
        metadata={"locales": locales, "primary": locales[0] if locales else None},
    )
