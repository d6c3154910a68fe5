"""Environment-driven settings.

Everything secret (API key, service-account JSON, password hash, signing key)
comes from the process environment. Nothing here is user input.
"""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

TRUTHY = {"1", "true", "TRUE", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.5-flash"
    google_service_account_credentials: Optional[str] = None
    google_calendar_id: Optional[str] = None
    access_password_hash: Optional[str] = None
    secret_key: Optional[str] = None
    access_token_expire_minutes: int = 12 * 60
    outbound_timeout_seconds: float = 30.0
    cors_allow_origins: tuple[str, ...] = ("http://localhost:3000",)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        cors_env = os.getenv("CORS_ALLOW_ORIGINS")
        if cors_env:
            origins = tuple(o.strip() for o in cors_env.split(",") if o.strip())
        else:
            origins = cls.cors_allow_origins
        return cls(
            # API_KEY is the name the hosted deployment used
            gemini_api_key=os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY"),
            gemini_model=os.getenv("GEMINI_MODEL", cls.gemini_model),
            google_service_account_credentials=os.getenv("GOOGLE_SERVICE_ACCOUNT_CREDENTIALS"),
            google_calendar_id=os.getenv("GOOGLE_CALENDAR_ID"),
            access_password_hash=os.getenv("APP_ACCESS_PASSWORD_HASH"),
            secret_key=os.getenv("APP_SECRET_KEY"),
            access_token_expire_minutes=int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", cls.access_token_expire_minutes)),
            outbound_timeout_seconds=float(os.getenv("OUTBOUND_TIMEOUT_SECONDS", cls.outbound_timeout_seconds)),
            cors_allow_origins=origins,
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
        )


def load_dotenv_if_enabled() -> None:
    """Opt-in .env loading via APP_LOAD_DOTENV. Existing env always wins."""
    if os.getenv("APP_LOAD_DOTENV") in TRUTHY:
        from dotenv import load_dotenv
        load_dotenv(override=False)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )
