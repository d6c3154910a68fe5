from __future__ import annotations
from typing import Protocol, Dict, Any

from ..domain.draft import EventDraft


class AssistantApi(Protocol):
    """Backend calls the event form sequences."""

    def login(self, password: str) -> str:
        """Exchange the access password for a bearer token."""
        ...

    def analyze(self, token: str, input_text: str) -> Dict[str, Any]:
        """Return extracted fields (wire keys) for ``input_text``."""
        ...

    def create_event(self, token: str, draft: EventDraft) -> Dict[str, Any]:
        """Submit ``draft`` and return ``{message, event}``."""
        ...
