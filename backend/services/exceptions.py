"""Error taxonomy for document extraction and external-service calls.

Every failure carries an ``ErrorKind`` so callers (the HTTP layer, batch
outcome records) can tell a bad document from a failed upstream call
without inspecting message text.
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    INVALID_FORMAT = "invalid_format"
    ENCRYPTED = "encrypted"
    CORRUPT = "corrupt"
    NO_TEXT = "no_text"
    EXTERNAL_SERVICE = "external_service"
    NOT_CONFIGURED = "not_configured"


class ScreeningError(Exception):
    """Base exception for the screening core."""

    kind: ErrorKind = ErrorKind.EXTERNAL_SERVICE

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        self.message = message
        self.details = details or {}
        self.cause = cause
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        result = {
            "error_type": self.__class__.__name__,
            "error_code": self.kind.value,
            "message": self.message,
            "details": self.details,
        }
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class DocumentError(ScreeningError):
    """A single uploaded document could not be turned into text."""

    def __init__(self, message: str, filename: str | None = None, **kwargs: Any):
        details = kwargs.pop("details", None) or {}
        if filename:
            details["filename"] = filename
        super().__init__(message, details=details, **kwargs)


class InvalidFormatError(DocumentError):
    kind = ErrorKind.INVALID_FORMAT


class EncryptedDocumentError(DocumentError):
    kind = ErrorKind.ENCRYPTED


class CorruptDocumentError(DocumentError):
    kind = ErrorKind.CORRUPT


class NoTextError(DocumentError):
    kind = ErrorKind.NO_TEXT


class ExternalServiceError(ScreeningError):
    """The text-generation (or analytics) call itself failed."""

    kind = ErrorKind.EXTERNAL_SERVICE

    def __init__(
        self,
        message: str,
        service_name: str | None = None,
        status_code: int | None = None,
        **kwargs: Any,
    ):
        details = kwargs.pop("details", None) or {}
        if service_name:
            details["service_name"] = service_name
        if status_code:
            details["status_code"] = status_code
        self.status_code = status_code
        super().__init__(message, details=details, **kwargs)


class ServiceNotConfiguredError(ExternalServiceError):
    kind = ErrorKind.NOT_CONFIGURED
