"""Access check for the event assistant.

A single shared access password, stored only as a bcrypt hash in the
environment, is exchanged for a short-lived signed bearer token.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional
import logging

from passlib.context import CryptContext
from jose import jwt, JWTError

from ..config import Settings
from ..errors import AuthError, ConfigurationError

ALGORITHM = "HS256"
TOKEN_SUBJECT = "event-assistant"

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

def hash_password(raw: str) -> str:
    return pwd_context.hash(raw)

def verify_password(raw: str, hashed: str) -> bool:
    if not hashed:
        return False
    return pwd_context.verify(raw, hashed)


class AuthService:
    def __init__(self, settings: Settings):
        if not settings.access_password_hash or not settings.secret_key:
            logger.error("access password hash or signing key missing from environment")
            raise ConfigurationError("CONFIG_MISSING", "Server configuration error: missing access credentials.")
        self.password_hash = settings.access_password_hash
        self.secret_key = settings.secret_key
        self.expire_minutes = settings.access_token_expire_minutes

    def create_access_token(self, expires_delta: Optional[timedelta] = None) -> str:
        expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=self.expire_minutes))
        to_encode = {"sub": TOKEN_SUBJECT, "exp": expire}
        return jwt.encode(to_encode, self.secret_key, algorithm=ALGORITHM)

    def login(self, password: str) -> str:
        if not verify_password(password or "", self.password_hash):
            raise AuthError("INVALID_CREDENTIALS", "invalid credentials")
        return self.create_access_token()

    def verify_token(self, token: str) -> str:
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[ALGORITHM])
        except JWTError:
            raise AuthError("INVALID_TOKEN", "invalid token")
        sub = payload.get("sub")
        if sub != TOKEN_SUBJECT:
            raise AuthError("INVALID_TOKEN", "invalid token")
        return sub
