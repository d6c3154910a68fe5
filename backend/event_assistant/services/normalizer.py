"""Date/time normalization for event drafts.

All timestamps are placed in one fixed zone; no conversion between zones
and no DST guarantees.
"""
from __future__ import annotations
from datetime import datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

from ..domain.draft import EventDraft
from ..domain.extraction import ExtractedFields

EVENT_TIMEZONE = "Asia/Ho_Chi_Minh"
EVENT_ZONE = ZoneInfo(EVENT_TIMEZONE)
DEFAULT_DURATION = timedelta(minutes=60)

FORM_FORMAT = "%Y-%m-%dT%H:%M"
COMPACT_FORMAT = "%Y%m%dT%H%M%S"
_TIME_FORMATS = ("%H:%M", "%H:%M:%S")


class InvalidDateTime(ValueError):
    pass


def combine_start(start_date: str, start_time: str) -> datetime:
    """Combine ``YYYY-MM-DD`` and ``HH:mm`` into an aware datetime."""
    d = (start_date or "").strip()
    t = (start_time or "").strip()
    if not d or not t:
        raise InvalidDateTime(f"incomplete date/time: {start_date!r} {start_time!r}")
    for fmt in _TIME_FORMATS:
        try:
            naive = datetime.strptime(f"{d}T{t}", f"%Y-%m-%dT{fmt}")
        except ValueError:
            continue
        return naive.replace(tzinfo=EVENT_ZONE)
    raise InvalidDateTime(f"not a real date/time: {start_date!r} {start_time!r}")


def default_end(start: datetime, end: Optional[datetime] = None) -> datetime:
    return end if end is not None else start + DEFAULT_DURATION


def localize(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=EVENT_ZONE)
    return dt.astimezone(EVENT_ZONE)


def to_form_value(dt: datetime) -> str:
    return localize(dt).strftime(FORM_FORMAT)


def parse_form_value(value: str) -> datetime:
    """Parse a datetime-local field value (or any ISO 8601 string)."""
    raw = (value or "").strip()
    if not raw:
        raise InvalidDateTime("empty date/time")
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError as e:
        raise InvalidDateTime(f"not a real date/time: {value!r}") from e
    return localize(parsed)


def to_compact(dt: datetime) -> str:
    return localize(dt).strftime(COMPACT_FORMAT)


def to_service_value(dt: datetime) -> str:
    return localize(dt).isoformat(timespec="seconds")


def build_draft(fields: ExtractedFields) -> EventDraft:
    start = combine_start(fields.start_date, fields.start_time)
    return EventDraft(
        title=fields.title,
        start=start,
        end=default_end(start),
        location=fields.location or "",
        description=fields.notes or "",
    )
