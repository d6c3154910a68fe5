"""Field extraction from free-form Vietnamese event text.

The language model is asked for a fixed JSON shape (see ``EXTRACTION_SCHEMA``).
Its answer is re-validated here: required keys must be present and the start
date/time must combine into a real timestamp, since schema enforcement on the
service side is not fully reliable.
"""
from __future__ import annotations
import json
import logging
from datetime import date, datetime
from typing import Callable, Optional

import httpx
from google.genai import errors as genai_errors
from pydantic import ValidationError

from ..domain.extraction import ExtractedFields, EXTRACTION_SCHEMA
from ..errors import ValidationAppError, UpstreamResponseError, UpstreamTransportError
from ..ports.language_model import LanguageModel
from .normalizer import EVENT_ZONE, combine_start, InvalidDateTime

logger = logging.getLogger(__name__)

WEEKDAYS_VI = ["Thứ Hai", "Thứ Ba", "Thứ Tư", "Thứ Năm", "Thứ Sáu", "Thứ Bảy", "Chủ Nhật"]


def today_in_event_zone() -> date:
    return datetime.now(EVENT_ZONE).date()


def build_system_instruction(today: date) -> str:
    today_str = f"{WEEKDAYS_VI[today.weekday()]}, {today.strftime('%d/%m/%Y')} ({today.isoformat()})"
    return (
        "Bạn là một trợ lý thông minh chuyên trích xuất thông tin sự kiện từ văn bản tiếng Việt. "
        f"Hôm nay là {today_str}. "
        "Dựa vào văn bản được cung cấp, hãy trích xuất các thông tin. "
        "Ngày phải ở định dạng YYYY-MM-DD và giờ ở định dạng HH:mm (24 giờ). "
        "Mặc định một sự kiện kéo dài 1 giờ nếu không có thời gian kết thúc. "
        "Luôn trả về kết quả dưới dạng JSON theo schema đã cho."
    )


class ExtractionService:
    def __init__(self, model: LanguageModel, today_provider: Optional[Callable[[], date]] = None):
        self.model = model
        self.today_provider = today_provider or today_in_event_zone

    def extract(self, input_text: str) -> ExtractedFields:
        text = (input_text or "").strip()
        if not text:
            raise ValidationAppError("INPUT_REQUIRED", "Input text is required.")

        instruction = build_system_instruction(self.today_provider())
        try:
            raw = self.model.generate_json(instruction, text, EXTRACTION_SCHEMA)
        except (genai_errors.APIError, httpx.HTTPError) as e:
            logger.error("extraction request failed: %s", e)
            raise UpstreamTransportError("EXTRACTION_FAILED", "Failed to analyze text.", str(e))
        except ValueError as e:
            logger.error("extraction response unusable: %s", e)
            raise UpstreamResponseError("EXTRACTION_INVALID", "Failed to analyze text.", str(e))

        return self.parse_response(raw)

    @staticmethod
    def parse_response(raw: str) -> ExtractedFields:
        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.error("extraction returned non-JSON output")
            raise UpstreamResponseError("EXTRACTION_INVALID", "Failed to analyze text.", f"invalid JSON: {e}")
        if not isinstance(data, dict):
            raise UpstreamResponseError("EXTRACTION_INVALID", "Failed to analyze text.", "expected a JSON object")
        try:
            fields = ExtractedFields.model_validate(data)
        except ValidationError as e:
            logger.warning("extraction missing required fields: %s", e.errors())
            raise UpstreamResponseError("EXTRACTION_INVALID", "Failed to analyze text.", "missing required fields")
        try:
            combine_start(fields.start_date, fields.start_time)
        except InvalidDateTime as e:
            logger.warning("extraction returned invalid date/time: %s", e)
            raise UpstreamResponseError(
                "EXTRACTION_INVALID", "Invalid date or time returned by the extraction service.", str(e)
            )
        return fields
