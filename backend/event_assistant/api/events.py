from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional

from ..domain.draft import EventDraft
from ..errors import BaseAppException, ValidationAppError
from ..metrics import ANALYZE_COUNT, ANALYZE_DURATION, CREATE_EVENT_COUNT, CREATE_EVENT_DURATION
from ..services.calendar_service import CalendarService
from ..services.extraction_service import ExtractionService
from ..services.normalizer import InvalidDateTime, parse_form_value
from .auth import require_access_token
from .dependencies import get_calendar_service, get_extraction_service

router = APIRouter(prefix="/api", tags=["events"], dependencies=[Depends(require_access_token)])

class AnalyzeRequest(BaseModel):
    input_text: Optional[str] = Field(None, alias="inputText")

    model_config = ConfigDict(populate_by_name=True)

class EventCreate(BaseModel):
    # Required fields are checked by hand so missing ones map to EVENT_FIELDS_REQUIRED
    title: Optional[str] = None
    start: Optional[str] = None
    end: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None

    def to_draft(self) -> EventDraft:
        if not (self.title or "").strip() or not self.start or not self.end:
            raise ValidationAppError(
                "EVENT_FIELDS_REQUIRED", "Missing required event details: title, start, end."
            )
        try:
            start = parse_form_value(self.start)
            end = parse_form_value(self.end)
        except InvalidDateTime as e:
            raise ValidationAppError("EVENT_INVALID_TIME", str(e))
        return EventDraft(
            title=self.title.strip(),
            start=start,
            end=end,
            location=self.location or "",
            description=self.description or "",
        )

@router.post("/analyze")
def analyze(body: AnalyzeRequest, service: ExtractionService = Depends(get_extraction_service)):
    with ANALYZE_DURATION.time():
        try:
            fields = service.extract(body.input_text or "")
        except BaseAppException:
            ANALYZE_COUNT.labels(outcome="error").inc()
            raise
    ANALYZE_COUNT.labels(outcome="ok").inc()
    return fields.to_wire()

@router.post("/create-event")
def create_event(body: EventCreate, service: CalendarService = Depends(get_calendar_service)):
    with CREATE_EVENT_DURATION.time():
        try:
            event = service.create_event(body.to_draft())
        except BaseAppException:
            CREATE_EVENT_COUNT.labels(outcome="error").inc()
            raise
    CREATE_EVENT_COUNT.labels(outcome="ok").inc()
    return {"message": "Event created successfully!", "event": event}
