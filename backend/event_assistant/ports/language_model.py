from __future__ import annotations
from typing import Protocol, Dict, Any


class LanguageModel(Protocol):
    """Generative-language service asked for schema-shaped JSON."""

    def generate_json(self, system_instruction: str, text: str, schema: Dict[str, Any]) -> str:
        """Return the raw JSON text produced for ``text``."""
        ...
