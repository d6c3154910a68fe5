"""Google Calendar submission.

Creates one event in the configured calendar. Event creation is not
idempotent: resubmitting the same draft creates a duplicate.
"""
from typing import Dict, Any
import logging

from googleapiclient.errors import HttpError

from ..domain.draft import EventDraft
from ..errors import BaseAppException, ValidationAppError
from ..ports.calendar_provider import CalendarProvider
from .normalizer import EVENT_TIMEZONE, to_service_value

logger = logging.getLogger(__name__)


class GoogleCalendarError(BaseAppException):
    def __init__(self, code: str, message: str, error: str | None = None):
        super().__init__(code, message, http_status=502, error=error)


def validate_draft(draft: EventDraft) -> None:
    missing = draft.missing_fields()
    if missing:
        raise ValidationAppError(
            "EVENT_FIELDS_REQUIRED",
            f"Missing required event details: {', '.join(missing)}.",
        )
    if draft.end <= draft.start:
        raise ValidationAppError("EVENT_INVALID_TIME", "end before start")


def to_google_event(draft: EventDraft) -> Dict[str, Any]:
    google_event: Dict[str, Any] = {
        'summary': draft.title,
        'start': {
            'dateTime': to_service_value(draft.start),
            'timeZone': EVENT_TIMEZONE,
        },
        'end': {
            'dateTime': to_service_value(draft.end),
            'timeZone': EVENT_TIMEZONE,
        },
    }
    if draft.location:
        google_event['location'] = draft.location
    if draft.description:
        google_event['description'] = draft.description
    return google_event


class CalendarService:
    """Service for Google Calendar API operations."""

    def __init__(self, provider: CalendarProvider, calendar_id: str):
        self.provider = provider
        self.calendar_id = calendar_id

    def create_event(self, draft: EventDraft) -> Dict[str, Any]:
        """Insert ``draft`` and return the created-event record verbatim."""
        validate_draft(draft)
        try:
            created = self.provider.insert_event(self.calendar_id, to_google_event(draft))
        except HttpError as e:
            logger.error("google calendar rejected event insert: %s", e)
            raise GoogleCalendarError("GOOGLE_API_ERROR", "Failed to create event.", f"Google API error: {e}")
        except Exception as e:
            logger.exception("event insert failed")
            raise GoogleCalendarError("CREATE_ERROR", "Failed to create event.", str(e))
        logger.info("created calendar event id=%s", created.get('id'))
        return created
