from __future__ import annotations
from typing import Protocol, Dict, Any


class CalendarProvider(Protocol):
    """Abstracts external calendar operations for testability."""

    def insert_event(self, calendar_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        """Create an event and return the provider's created-event record."""
        ...
