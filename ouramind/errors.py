"""
errors.py — Error kinds raised by the journal pipeline.

Every failure the core can report maps to one ErrorCode, so a request layer
can translate errors to responses without inspecting messages:

    try:
        view = journal.get(entry_id, user_id)
    except NotFound as e:
        return 404, e.to_dict()
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Stable codes for every error kind the core raises."""

    NOT_FOUND = "NOT_FOUND"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    MALFORMED_TOKEN = "MALFORMED_TOKEN"
    DECRYPTION_FAILED = "DECRYPTION_FAILED"
    CLASSIFICATION_FAILED = "CLASSIFICATION_FAILED"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"


class JournalError(Exception):
    """Base class for all pipeline errors."""

    code: ErrorCode = ErrorCode.VALIDATION_FAILED

    def __init__(self, message: str = ""):
        super().__init__(message or self.code.value)
        self.message = message or self.code.value

    def to_dict(self) -> dict:
        return {"code": self.code.value, "message": self.message}


class NotFound(JournalError):
    """Entry or tool is absent, or not owned by the caller."""

    code = ErrorCode.NOT_FOUND


class ValidationFailed(JournalError):
    code = ErrorCode.VALIDATION_FAILED


class CipherError(JournalError):
    """Base for both cipher-boundary failures."""


class MalformedToken(CipherError):
    code = ErrorCode.MALFORMED_TOKEN


class DecryptionFailed(CipherError):
    code = ErrorCode.DECRYPTION_FAILED


class ClassificationFailed(JournalError):
    """The external classifier was unreachable, timed out, or answered garbage."""

    code = ErrorCode.CLASSIFICATION_FAILED


class ConfigurationError(JournalError):
    code = ErrorCode.CONFIGURATION_ERROR
