from typing import Optional

from fastapi import status


class BaseAppException(Exception):
    def __init__(self, code: str, message: str, http_status: int, error: Optional[str] = None):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.error = error
        super().__init__(message)

    def to_body(self) -> dict:
        body = {"message": self.message, "code": self.code}
        if self.error:
            body["error"] = self.error
        return body

class ValidationAppError(BaseAppException):
    def __init__(self, code: str, message: str):
        super().__init__(code, message, status.HTTP_400_BAD_REQUEST)

class AuthError(BaseAppException):
    def __init__(self, code: str, message: str):
        super().__init__(code, message, status.HTTP_401_UNAUTHORIZED)

class ConfigurationError(BaseAppException):
    def __init__(self, code: str, message: str):
        super().__init__(code, message, status.HTTP_500_INTERNAL_SERVER_ERROR)

class UpstreamResponseError(BaseAppException):
    """The extraction service answered, but with something we cannot use."""
    def __init__(self, code: str, message: str, error: Optional[str] = None):
        super().__init__(code, message, status.HTTP_502_BAD_GATEWAY, error)

class UpstreamTransportError(BaseAppException):
    def __init__(self, code: str, message: str, error: Optional[str] = None):
        super().__init__(code, message, status.HTTP_502_BAD_GATEWAY, error)
