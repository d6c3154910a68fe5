"""Contract with the language-understanding service.

Wire keys are Vietnamese (``tieu_de`` ...) because that is what the
extraction instruction asks the model to return.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ExtractedFields(BaseModel):
    title: str = Field(..., alias="tieu_de")
    start_date: str = Field(..., alias="ngay_bat_dau")
    start_time: str = Field(..., alias="gio_bat_dau")
    location: Optional[str] = Field(None, alias="dia_diem")
    notes: Optional[str] = Field(None, alias="ghi_chu")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("title", "start_date", "start_time")
    @classmethod
    def _required_not_blank(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


# Gemini responseSchema (OpenAPI subset)
EXTRACTION_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "tieu_de": {"type": "STRING", "description": "Tiêu đề ngắn gọn, súc tích cho sự kiện."},
        "ngay_bat_dau": {"type": "STRING", "description": "Ngày bắt đầu sự kiện (YYYY-MM-DD). Hiểu các từ như 'ngày mai'."},
        "gio_bat_dau": {"type": "STRING", "description": "Giờ bắt đầu sự kiện (HH:mm)."},
        "dia_diem": {"type": "STRING", "description": "Địa điểm diễn ra sự kiện."},
        "ghi_chu": {"type": "STRING", "description": "Các chi tiết hoặc ghi chú liên quan khác."},
    },
    "required": ["tieu_de", "ngay_bat_dau", "gio_bat_dau"],
}
