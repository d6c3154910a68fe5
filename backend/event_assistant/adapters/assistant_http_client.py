from __future__ import annotations
import logging
from typing import Dict, Any, Optional

import requests

from ..domain.draft import EventDraft
from ..errors import BaseAppException, UpstreamTransportError, ValidationAppError
from ..ports.assistant_api import AssistantApi
from ..services.normalizer import to_form_value

logger = logging.getLogger(__name__)

UNKNOWN_SERVER_ERROR = "Lỗi không xác định từ server."


def _error_from_response(resp: requests.Response) -> BaseAppException:
    try:
        body = resp.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}
    message = body.get("message") or (f"Lỗi server: {resp.reason}" if resp.reason else UNKNOWN_SERVER_ERROR)
    return BaseAppException(body.get("code") or "HTTP_ERROR", message, resp.status_code, body.get("error"))


class AssistantHttpClient(AssistantApi):
    """Talks to the event assistant HTTP API the way the browser form does."""

    def __init__(self, base_url: str, timeout: float = 30.0, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def _post(self, path: str, token: Optional[str] = None, **kwargs) -> Dict[str, Any]:
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        try:
            resp = self._session.post(f"{self.base_url}{path}", headers=headers, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error("POST %s failed: %s", path, e)
            raise UpstreamTransportError("NETWORK_ERROR", "Không thể kết nối tới server.", str(e))
        if not resp.ok:
            raise _error_from_response(resp)
        try:
            return resp.json()
        except ValueError:
            raise BaseAppException("HTTP_ERROR", UNKNOWN_SERVER_ERROR, resp.status_code)

    def login(self, password: str) -> str:
        return self._post("/auth/token", data={"password": password})["access_token"]

    def analyze(self, token: str, input_text: str) -> Dict[str, Any]:
        return self._post("/api/analyze", token, json={"inputText": input_text})

    def create_event(self, token: str, draft: EventDraft) -> Dict[str, Any]:
        missing = draft.missing_fields()
        if missing:
            raise ValidationAppError(
                "EVENT_FIELDS_REQUIRED", f"Missing required event details: {', '.join(missing)}."
            )
        payload = {
            "title": draft.title,
            "start": to_form_value(draft.start),
            "end": to_form_value(draft.end),
            "description": draft.description,
            "location": draft.location,
        }
        return self._post("/api/create-event", token, json=payload)
