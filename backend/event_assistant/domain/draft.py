from __future__ import annotations
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Optional, List


REQUIRED_FIELDS = ("title", "start", "end")


@dataclass
class EventDraft:
    """Editable, not-yet-submitted event. Lives only in form state."""

    title: str = ""
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    location: str = ""
    description: str = ""

    def missing_fields(self) -> List[str]:
        missing = []
        for name in REQUIRED_FIELDS:
            value = getattr(self, name)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(name)
        return missing

    def is_complete(self) -> bool:
        return not self.missing_fields()

    def copy(self) -> "EventDraft":
        return EventDraft(**asdict(self))

