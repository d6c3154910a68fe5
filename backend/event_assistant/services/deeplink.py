"""Google Calendar "quick add" links built from a draft, no API call involved."""
from __future__ import annotations
from typing import Dict
from urllib.parse import urlencode, urlsplit, parse_qs

from ..domain.draft import EventDraft
from .normalizer import EVENT_TIMEZONE, to_compact

CALENDAR_TEMPLATE_URL = "https://www.google.com/calendar/render?action=TEMPLATE"


def build_calendar_link(draft: EventDraft) -> str:
    """Return the quick-add URL, or "" when the draft lacks title/start/end."""
    if not draft.is_complete():
        return ""
    params = {
        "text": draft.title,
        "dates": f"{to_compact(draft.start)}/{to_compact(draft.end)}",
        "details": draft.description or "",
        "ctz": EVENT_TIMEZONE,
    }
    if draft.location:
        params["location"] = draft.location
    return f"{CALENDAR_TEMPLATE_URL}&{urlencode(params)}"


def parse_calendar_link(url: str) -> Dict[str, str]:
    query = parse_qs(urlsplit(url).query, keep_blank_values=True)
    return {k: v[0] for k, v in query.items()}
