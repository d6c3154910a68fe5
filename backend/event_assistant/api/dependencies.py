"""Service wiring for request handlers.

Each factory fails fast with a configuration error before any external call
when the environment lacks what the service needs. Tests replace these via
``app.dependency_overrides``.
"""
import json
import logging

from fastapi import Depends

from ..adapters.gemini_provider import GeminiLanguageModel
from ..adapters.google_calendar_provider import GoogleCalendarProvider, service_account_credentials
from ..config import Settings, get_settings
from ..errors import ConfigurationError
from ..services.auth_service import AuthService
from ..services.calendar_service import CalendarService
from ..services.extraction_service import ExtractionService

logger = logging.getLogger(__name__)


def get_auth_service(settings: Settings = Depends(get_settings)) -> AuthService:
    return AuthService(settings)


def get_extraction_service(settings: Settings = Depends(get_settings)) -> ExtractionService:
    if not settings.gemini_api_key:
        logger.error("Missing GEMINI_API_KEY/API_KEY in environment variables.")
        raise ConfigurationError("CONFIG_MISSING", "Server configuration error: Missing API Key.")
    model = GeminiLanguageModel(
        settings.gemini_api_key,
        model=settings.gemini_model,
        timeout=settings.outbound_timeout_seconds,
    )
    return ExtractionService(model)


def get_calendar_service(settings: Settings = Depends(get_settings)) -> CalendarService:
    if not settings.google_service_account_credentials or not settings.google_calendar_id:
        logger.error("Missing Google credentials or Calendar ID in environment variables.")
        raise ConfigurationError("CONFIG_MISSING", "Server configuration error.")
    try:
        info = json.loads(settings.google_service_account_credentials)
        credentials = service_account_credentials(info)
    except (ValueError, KeyError, TypeError) as e:
        logger.error("service account credentials unusable: %s", e)
        raise ConfigurationError("CONFIG_INVALID", "Server configuration error: invalid service account credentials.")
    return CalendarService(GoogleCalendarProvider(credentials), settings.google_calendar_id)
