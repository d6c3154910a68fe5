import pytest

from event_assistant.domain.enums import FormState, SubmissionStatus
from event_assistant.errors import AuthError, BaseAppException, UpstreamResponseError
from event_assistant.usecases.event_form import EventFormController, RESET_DELAY_SECONDS

from conftest import SCENARIO_FIELDS, SCENARIO_TEXT


class FakeApi:
    def __init__(self):
        self.password = "pw"
        self.analyze_result = dict(SCENARIO_FIELDS)
        self.analyze_exc = None
        self.create_exc = None
        self.analyze_calls = []
        self.created = []

    def login(self, password):
        if password != self.password:
            raise AuthError("INVALID_CREDENTIALS", "invalid credentials")
        return "token-1"

    def analyze(self, token, input_text):
        self.analyze_calls.append((token, input_text))
        if self.analyze_exc:
            raise self.analyze_exc
        return self.analyze_result

    def create_event(self, token, draft):
        self.created.append(draft.copy())
        if self.create_exc:
            raise self.create_exc
        return {"message": "Event created successfully!", "event": {"id": f"e{len(self.created)}"}}


class Clock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


@pytest.fixture
def api():
    return FakeApi()


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def form(api, clock):
    f = EventFormController(api, time_provider=clock)
    assert f.login("pw")
    return f


def _reviewing(form):
    form.set_input(SCENARIO_TEXT)
    assert form.analyze()
    return form


def test_starts_unauthenticated_and_rejects_bad_password(api, clock):
    f = EventFormController(api, time_provider=clock)
    assert f.state == FormState.UNAUTHENTICATED
    assert not f.can_analyze
    assert not f.login("2107")
    assert f.state == FormState.UNAUTHENTICATED
    assert f.auth_error == "Mật khẩu không chính xác."
    assert f.login("pw")
    assert f.state == FormState.AUTHENTICATED_IDLE
    assert f.token == "token-1"
    assert f.auth_error == ""


def test_empty_input_fails_locally(form, api):
    form.set_input("   \n")
    assert not form.analyze()
    assert form.analysis_error == "Vui lòng nhập văn bản để phân tích."
    assert form.state == FormState.AUTHENTICATED_IDLE
    assert api.analyze_calls == []


def test_scenario_draft(form, api):
    _reviewing(form)
    assert api.analyze_calls == [("token-1", SCENARIO_TEXT)]
    assert form.state == FormState.REVIEWING
    values = form.form_values()
    assert values["title"] == "Họp dự án mới"
    assert values["start"] == "2024-01-11T15:30"
    assert values["end"] == "2024-01-11T16:30"
    assert values["location"] == "Hội trường"
    assert form.calendar_link


def test_invalid_date_from_service_never_produces_draft(form, api):
    api.analyze_result = {"tieu_de": "Họp", "ngay_bat_dau": "2024-13-01", "gio_bat_dau": "10:00"}
    form.set_input("họp")
    assert not form.analyze()
    assert form.draft is None
    assert form.state == FormState.AUTHENTICATED_IDLE
    assert form.analysis_error == "Ngày hoặc giờ không hợp lệ được trả về từ AI. Vui lòng thử lại."


def test_missing_required_field_from_service(form, api):
    api.analyze_result = {"tieu_de": "Họp", "ngay_bat_dau": "2024-01-11"}
    form.set_input("họp")
    assert not form.analyze()
    assert form.draft is None
    assert form.analysis_error


def test_server_error_message_is_shown_with_retry_hint(form, api):
    api.analyze_exc = UpstreamResponseError("EXTRACTION_INVALID", "Failed to analyze text.")
    form.set_input("họp")
    assert not form.analyze()
    assert form.analysis_error == "Failed to analyze text. Vui lòng thử lại."


def test_expired_session_returns_to_login(form, api):
    api.analyze_exc = AuthError("INVALID_TOKEN", "invalid token")
    form.set_input("họp")
    assert not form.analyze()
    assert form.state == FormState.UNAUTHENTICATED
    assert form.token is None


def test_reanalyze_replaces_draft(form, api):
    _reviewing(form)
    api.analyze_result = {"tieu_de": "Ăn trưa", "ngay_bat_dau": "2024-01-12", "gio_bat_dau": "12:00"}
    form.set_input("trưa mốt ăn trưa")
    assert form.analyze()
    assert form.form_values()["title"] == "Ăn trưa"
    assert form.form_values()["end"] == "2024-01-12T13:00"


def test_edits_flow_into_link_and_submission(form, api):
    _reviewing(form)
    form.edit("title", "Họp dự án (đổi giờ)")
    form.edit("start", "2024-01-11T16:00")
    form.edit("end", "2024-01-11T17:15")
    assert "dates=20240111T160000%2F20240111T171500" in form.calendar_link
    assert form.submit()
    sent = api.created[0]
    assert sent.title == "Họp dự án (đổi giờ)"
    assert sent.end.hour == 17 and sent.end.minute == 15


def test_unknown_field_edit_rejected(form):
    _reviewing(form)
    with pytest.raises(ValueError):
        form.edit("attendees", "x")


def test_incomplete_draft_is_not_submitted(form, api):
    _reviewing(form)
    form.edit("end", "")
    assert form.calendar_link == ""
    assert not form.submit()
    assert form.submit_error
    assert form.state == FormState.REVIEWING
    assert api.created == []


def test_successful_submission_then_revert(form, api, clock):
    _reviewing(form)
    assert form.submit_label == "Gửi lên Calendar"
    assert form.submit()
    assert form.state == FormState.SUBMITTED
    assert form.submission_status == SubmissionStatus.SUCCESS
    assert form.submit_label == "Đã tạo thành công!"
    assert form.created_event == {"id": "e1"}
    assert not form.can_submit
    clock.now += RESET_DELAY_SECONDS
    assert form.state == FormState.REVIEWING
    assert form.submission_status == SubmissionStatus.IDLE
    assert form.draft is not None


def test_failed_submission_reverts_with_draft_unchanged(form, api, clock):
    _reviewing(form)
    before = form.draft.copy()
    api.create_exc = BaseAppException("GOOGLE_API_ERROR", "Failed to create event.", 502)
    assert not form.submit()
    assert form.state == FormState.SUBMIT_FAILED
    assert form.submission_status == SubmissionStatus.ERROR
    assert form.submit_label == "Tạo lỗi, thử lại?"
    assert not form.submit()  # still showing the failure
    clock.now += RESET_DELAY_SECONDS - 0.5
    assert form.state == FormState.SUBMIT_FAILED
    clock.now += 0.5
    assert form.state == FormState.REVIEWING
    assert form.submission_status == SubmissionStatus.IDLE
    assert form.draft == before
    assert len(api.created) == 1


def test_resubmission_after_revert_sends_again(form, api, clock):
    _reviewing(form)
    form.submit()
    clock.now += RESET_DELAY_SECONDS
    assert form.submit()
    assert len(api.created) == 2


def test_in_flight_actions_are_suppressed(form, api):
    _reviewing(form)

    def reentrant_create(token, draft):
        assert form.state == FormState.SUBMITTING
        assert form.submission_status == SubmissionStatus.LOADING
        assert not form.submit()
        assert not form.analyze()
        return {"message": "ok", "event": {}}

    api.create_event = reentrant_create
    assert form.submit()


def test_rejected_token_on_submit_returns_to_login(form, api, clock):
    _reviewing(form)
    api.create_exc = AuthError("INVALID_TOKEN", "invalid token")
    assert not form.submit()
    assert form.state == FormState.UNAUTHENTICATED
    assert form.submission_status == SubmissionStatus.IDLE
    assert form.token is None
    assert form.draft is None
    assert form.auth_error == "Phiên đăng nhập đã hết hạn. Vui lòng đăng nhập lại."
    clock.now += RESET_DELAY_SECONDS
    assert form.state == FormState.UNAUTHENTICATED
    assert not form.login("wrong")
    assert form.token is None
    assert form.login("pw")
    assert form.state == FormState.AUTHENTICATED_IDLE


def test_malformed_time_edit_keeps_draft(form):
    _reviewing(form)
    before = form.draft.copy()
    assert not form.edit("start", "2024-13-45T99:99")
    assert form.edit_error == "Thời gian không hợp lệ."
    assert form.draft == before
    assert form.state == FormState.REVIEWING
    assert form.edit("start", "2024-01-11T16:00")
    assert form.edit_error == ""
    assert form.form_values()["start"] == "2024-01-11T16:00"
