"""Headless event form: the state the browser form keeps between user actions.

States::

    unauthenticated -> authenticated_idle -> analyzing -> reviewing
    reviewing -> submitting -> submitted | submit_failed -> reviewing (after RESET_DELAY_SECONDS)
    analyzing | submitting -> unauthenticated (token rejected)

Every action runs at most one backend call. While a call is in flight the
triggering action is disabled and a repeated request is ignored, not queued.
The post-submit revert is applied lazily from ``time_provider`` whenever the
state is read.
"""
from __future__ import annotations
import logging
import time
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from pydantic import ValidationError

from ..domain.draft import EventDraft
from ..domain.enums import FormState, SubmissionStatus
from ..domain.extraction import ExtractedFields
from ..errors import BaseAppException
from ..ports.assistant_api import AssistantApi
from ..services.deeplink import build_calendar_link
from ..services.normalizer import InvalidDateTime, build_draft, parse_form_value, to_form_value

logger = logging.getLogger(__name__)

RESET_DELAY_SECONDS = 3.0

MSG_EMPTY_INPUT = "Vui lòng nhập văn bản để phân tích."
MSG_BAD_PASSWORD = "Mật khẩu không chính xác."
MSG_SESSION_EXPIRED = "Phiên đăng nhập đã hết hạn. Vui lòng đăng nhập lại."
MSG_INVALID_DATETIME = "Ngày hoặc giờ không hợp lệ được trả về từ AI."
MSG_MISSING_FIELDS = "Thiếu thông tin bắt buộc từ AI."
MSG_ANALYZE_FAILED = "Không thể phân tích văn bản."
MSG_RETRY = "Vui lòng thử lại."
MSG_DRAFT_INCOMPLETE = "Vui lòng điền tiêu đề, thời gian bắt đầu và kết thúc."
MSG_INVALID_FIELD_TIME = "Thời gian không hợp lệ."

SUBMIT_LABELS = {
    SubmissionStatus.IDLE: "Gửi lên Calendar",
    SubmissionStatus.LOADING: "Đang gửi...",
    SubmissionStatus.SUCCESS: "Đã tạo thành công!",
    SubmissionStatus.ERROR: "Tạo lỗi, thử lại?",
}

TEXT_FIELDS = ("title", "location", "description")
TIME_FIELDS = ("start", "end")
BUSY_STATES = (FormState.UNAUTHENTICATED, FormState.ANALYZING, FormState.SUBMITTING)


class EventFormController:
    def __init__(self, api: AssistantApi, time_provider: Optional[Callable[[], float]] = None):
        self.api = api
        self.time_provider = time_provider or time.monotonic
        self._state = FormState.UNAUTHENTICATED
        self._submission_status = SubmissionStatus.IDLE
        self._settled_at: Optional[float] = None
        self.token: Optional[str] = None
        self.input_text = ""
        self.auth_error = ""
        self.analysis_error = ""
        self.submit_error = ""
        self.edit_error = ""
        self.draft: Optional[EventDraft] = None
        self.created_event: Optional[Dict[str, Any]] = None

    # --- observed state ---
    @property
    def state(self) -> FormState:
        self._expire_submission()
        return self._state

    @property
    def submission_status(self) -> SubmissionStatus:
        self._expire_submission()
        return self._submission_status

    @property
    def can_analyze(self) -> bool:
        return self.state not in BUSY_STATES

    @property
    def can_submit(self) -> bool:
        return self.state == FormState.REVIEWING

    @property
    def submit_label(self) -> str:
        return SUBMIT_LABELS[self.submission_status]

    @property
    def calendar_link(self) -> str:
        if self.draft is None:
            return ""
        return build_calendar_link(self.draft)

    def form_values(self) -> Dict[str, str]:
        """Draft as datetime-local friendly strings."""
        if self.draft is None:
            return {}
        return {
            "title": self.draft.title,
            "start": to_form_value(self.draft.start) if self.draft.start else "",
            "end": to_form_value(self.draft.end) if self.draft.end else "",
            "location": self.draft.location,
            "description": self.draft.description,
        }

    def _expire_submission(self) -> None:
        if self._state not in (FormState.SUBMITTED, FormState.SUBMIT_FAILED) or self._settled_at is None:
            return
        if self.time_provider() - self._settled_at >= RESET_DELAY_SECONDS:
            self._state = FormState.REVIEWING
            self._submission_status = SubmissionStatus.IDLE
            self._settled_at = None

    # --- actions ---
    def login(self, password: str) -> bool:
        if self._state != FormState.UNAUTHENTICATED:
            return True
        try:
            self.token = self.api.login(password)
        except BaseAppException as e:
            if e.http_status == 401:
                self.auth_error = MSG_BAD_PASSWORD
            else:
                self.auth_error = e.message
            logger.info("login rejected (%s)", e.code)
            return False
        self.auth_error = ""
        self._state = FormState.AUTHENTICATED_IDLE
        return True

    def set_input(self, text: str) -> None:
        self.input_text = text

    def analyze(self) -> bool:
        if not self.can_analyze:
            return False
        if not self.input_text.strip():
            self.analysis_error = MSG_EMPTY_INPUT
            return False

        self._state = FormState.ANALYZING
        self.analysis_error = ""
        self.draft = None
        self.created_event = None
        self._submission_status = SubmissionStatus.IDLE
        self._settled_at = None
        try:
            raw = self.api.analyze(self.token, self.input_text)
            draft = build_draft(ExtractedFields.model_validate(raw))
        except BaseAppException as e:
            if e.http_status == 401:
                self._logout()
                return False
            return self._analysis_failed(e.message or MSG_ANALYZE_FAILED)
        except ValidationError:
            return self._analysis_failed(MSG_MISSING_FIELDS)
        except InvalidDateTime:
            return self._analysis_failed(MSG_INVALID_DATETIME)
        except Exception:
            logger.exception("unexpected analysis failure")
            return self._analysis_failed(MSG_ANALYZE_FAILED)

        self.draft = draft
        self._state = FormState.REVIEWING
        return True

    def _analysis_failed(self, message: str) -> bool:
        logger.info("analysis failed: %s", message)
        self.analysis_error = f"{message} {MSG_RETRY}"
        self._state = FormState.AUTHENTICATED_IDLE
        return False

    def _logout(self) -> None:
        self.token = None
        self.draft = None
        self.auth_error = MSG_SESSION_EXPIRED
        self._submission_status = SubmissionStatus.IDLE
        self._settled_at = None
        self._state = FormState.UNAUTHENTICATED

    def edit(self, field: str, value: Any) -> bool:
        """Update one draft field; empty start/end clears it.

        A start/end that is not a real date/time leaves the draft untouched,
        sets ``edit_error`` and returns False.
        """
        if self.draft is None or self.state == FormState.SUBMITTING:
            raise RuntimeError("no editable draft")
        if field in TEXT_FIELDS:
            setattr(self.draft, field, value or "")
        elif field in TIME_FIELDS:
            if isinstance(value, datetime):
                parsed = value
            elif not value:
                parsed = None
            else:
                try:
                    parsed = parse_form_value(value)
                except InvalidDateTime:
                    logger.info("rejected %s edit: %r", field, value)
                    self.edit_error = MSG_INVALID_FIELD_TIME
                    return False
            setattr(self.draft, field, parsed)
        else:
            raise ValueError(f"unknown draft field: {field}")
        self.edit_error = ""
        return True

    def submit(self) -> bool:
        if not self.can_submit:
            return False
        if not self.draft.is_complete():
            self.submit_error = MSG_DRAFT_INCOMPLETE
            return False

        self._state = FormState.SUBMITTING
        self._submission_status = SubmissionStatus.LOADING
        self.submit_error = ""
        try:
            result = self.api.create_event(self.token, self.draft)
        except BaseAppException as e:
            if e.http_status == 401:
                self._logout()
                return False
            logger.info("event submission failed (%s)", e.code)
            self.submit_error = e.message
            self._state = FormState.SUBMIT_FAILED
            self._submission_status = SubmissionStatus.ERROR
        except Exception:
            logger.exception("unexpected submission failure")
            self.submit_error = SUBMIT_LABELS[SubmissionStatus.ERROR]
            self._state = FormState.SUBMIT_FAILED
            self._submission_status = SubmissionStatus.ERROR
        else:
            self.created_event = result.get("event")
            self._state = FormState.SUBMITTED
            self._submission_status = SubmissionStatus.SUCCESS
        self._settled_at = self.time_provider()
        return self._state == FormState.SUBMITTED
