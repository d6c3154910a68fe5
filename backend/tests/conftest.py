import os, sys
import json
import pytest
from datetime import date
from fastapi.testclient import TestClient

# Ensure app import path
backend_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if backend_root not in sys.path:
    sys.path.insert(0, backend_root)

from event_assistant.main import app  # noqa: E402
from event_assistant.config import Settings, get_settings  # noqa: E402
from event_assistant.api.dependencies import get_extraction_service, get_calendar_service  # noqa: E402
from event_assistant.services.auth_service import hash_password  # noqa: E402
from event_assistant.services.calendar_service import CalendarService  # noqa: E402
from event_assistant.services.extraction_service import ExtractionService  # noqa: E402

TEST_PASSWORD = "mat-khau-thu"
TEST_TODAY = date(2024, 1, 10)
_PASSWORD_HASH = hash_password(TEST_PASSWORD)

SCENARIO_TEXT = "Chiều mai họp lúc 15g30 tại hội trường về dự án mới"
SCENARIO_FIELDS = {
    "tieu_de": "Họp dự án mới",
    "ngay_bat_dau": "2024-01-11",
    "gio_bat_dau": "15:30",
    "dia_diem": "Hội trường",
}


class FakeLanguageModel:
    def __init__(self, response=None, exc=None):
        self.response = json.dumps(SCENARIO_FIELDS, ensure_ascii=False) if response is None else response
        self.exc = exc
        self.calls = []

    def generate_json(self, system_instruction, text, schema):
        self.calls.append({"instruction": system_instruction, "text": text, "schema": schema})
        if self.exc:
            raise self.exc
        return self.response


class FakeCalendarProvider:
    def __init__(self, exc=None):
        self.exc = exc
        self.inserted = []

    def insert_event(self, calendar_id, body):
        self.inserted.append((calendar_id, body))
        if self.exc:
            raise self.exc
        return {"id": f"evt_{len(self.inserted)}", "status": "confirmed", "htmlLink": "https://calendar.google.com/event?eid=x", **body}


def make_settings(**overrides) -> Settings:
    values = dict(
        gemini_api_key="test-key",
        google_service_account_credentials=json.dumps({"client_email": "svc@test.iam.gserviceaccount.com"}),
        google_calendar_id="team@group.calendar.google.com",
        access_password_hash=_PASSWORD_HASH,
        secret_key="test-secret",
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def fake_model():
    return FakeLanguageModel()


@pytest.fixture
def fake_provider():
    return FakeCalendarProvider()


@pytest.fixture(scope="function")
def client(settings, fake_model, fake_provider):
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_extraction_service] = lambda: ExtractionService(
        fake_model, today_provider=lambda: TEST_TODAY
    )
    app.dependency_overrides[get_calendar_service] = lambda: CalendarService(
        fake_provider, settings.google_calendar_id
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(client):
    r = client.post('/auth/token', data={'password': TEST_PASSWORD})
    assert r.status_code == 200, r.text
    return {'Authorization': f"Bearer {r.json()['access_token']}"}
