from __future__ import annotations
from typing import Dict, Any

from googleapiclient.discovery import build
from google.oauth2 import service_account

from ..ports.calendar_provider import CalendarProvider

CALENDAR_SCOPES = ["https://www.googleapis.com/auth/calendar"]
DEFAULT_TOKEN_URI = "https://oauth2.googleapis.com/token"


def service_account_credentials(info: Dict[str, Any]) -> service_account.Credentials:
    """Build credentials from a service-account JSON object.

    Only ``client_email`` and ``private_key`` are strictly needed; the token
    URI is filled in when a trimmed-down key is supplied.
    """
    info = dict(info)
    info.setdefault("token_uri", DEFAULT_TOKEN_URI)
    return service_account.Credentials.from_service_account_info(info, scopes=CALENDAR_SCOPES)


class GoogleCalendarProvider(CalendarProvider):
    def __init__(self, credentials):
        self._service = build('calendar', 'v3', credentials=credentials, cache_discovery=False)

    def insert_event(self, calendar_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        return self._service.events().insert(calendarId=calendar_id, body=body).execute()
