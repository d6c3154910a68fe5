"""Domain enumerations for strong typing & validation."""
from enum import Enum

class SubmissionStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"

class FormState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED_IDLE = "authenticated_idle"
    ANALYZING = "analyzing"
    REVIEWING = "reviewing"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"
    SUBMIT_FAILED = "submit_failed"
