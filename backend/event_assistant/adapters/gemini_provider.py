from __future__ import annotations
import logging
from typing import Dict, Any, Optional

from google import genai
from google.genai import types as genai_types

from ..ports.language_model import LanguageModel

logger = logging.getLogger(__name__)


class GeminiLanguageModel(LanguageModel):
    """Gemini ``generate_content`` with a JSON response schema."""

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        timeout: float = 30.0,
        client: Optional[genai.Client] = None,
    ):
        self.model = model
        self.timeout = timeout
        if client is None:
            # HttpOptions.timeout is in milliseconds
            client = genai.Client(
                api_key=api_key,
                http_options=genai_types.HttpOptions(timeout=int(timeout * 1000)),
            )
        self._client = client

    def generate_json(self, system_instruction: str, text: str, schema: Dict[str, Any]) -> str:
        config = genai_types.GenerateContentConfig(
            system_instruction=system_instruction,
            response_mime_type="application/json",
            response_schema=schema,
        )
        response = self._client.models.generate_content(model=self.model, contents=text, config=config)
        out = (response.text or "").strip()
        if not out:
            raise ValueError(f"empty response text (feedback={getattr(response, 'prompt_feedback', None)})")
        logger.debug("gemini %s returned %d chars", self.model, len(out))
        return out
