"""
File share errors.

Two families live here. Domain errors are raised by the storage index and
its repositories and know nothing about HTTP. API errors pair an error
kind with the status code and the text shown to clients.
"""

import logging
from enum import Enum
from typing import Dict, NamedTuple, Optional

logger = logging.getLogger(__name__)


class ErrorCategory(Enum):
    """Kinds of failure reported to API clients."""

    INVALID_REQUEST = "invalid_request"
    FILE_NOT_FOUND = "file_not_found"
    FILE_EXPIRED = "file_expired"
    UPLOAD_FAILED = "upload_failed"
    SYSTEM_ERROR = "system_error"


class ErrorText(NamedTuple):
    status_code: int
    title: str
    message: str
    action: str


ERROR_TEXTS: Dict[ErrorCategory, ErrorText] = {
    ErrorCategory.INVALID_REQUEST: ErrorText(
        400,
        "Invalid Request",
        "No file was attached to the upload.",
        "Send the file as the 'file' field of a multipart form.",
    ),
    ErrorCategory.FILE_NOT_FOUND: ErrorText(
        404,
        "File Not Found",
        "There is no shared file with this identifier.",
        "Check the link or ask the uploader for a new one.",
    ),
    ErrorCategory.FILE_EXPIRED: ErrorText(
        410,
        "File Expired",
        "This file has outlived its lifetime and will be removed shortly.",
        "Ask the uploader to share the file again.",
    ),
    ErrorCategory.UPLOAD_FAILED: ErrorText(
        500,
        "Upload Failed",
        "The file could not be stored.",
        "Retry the upload in a moment.",
    ),
    ErrorCategory.SYSTEM_ERROR: ErrorText(
        500,
        "Server Error",
        "The file share could not complete the request.",
        "Retry in a moment; report the problem if it keeps happening.",
    ),
}


# ----------------------------------------------------------------------------
# Domain errors
# ----------------------------------------------------------------------------

class DomainError(Exception):
    """
    Root of the storage index errors.

    ``original_error`` keeps the low-level exception (OSError, database
    error) that triggered this one, when there is one.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.original_error = original_error


class StorageInitializationError(DomainError):
    """
    Raised when the storage index cannot provision its stores.

    Covers both the blob root directory and the record schema.
    Fatal to startup; never retried.
    """


class FileNotFoundError(DomainError):
    """
    Raised when no record exists for an identifier.

    Deliberately distinct from I/O failures so callers can answer
    "does not exist" to their own clients.
    """


class StorageClosedError(DomainError):
    """Raised when the storage index is used after close()."""


class InvalidFileIdError(DomainError, ValueError):
    """Raised when a string is not a well-formed file identifier."""


# ----------------------------------------------------------------------------
# API errors
# ----------------------------------------------------------------------------

class ApiError(Exception):
    """
    An error answered to an API client.

    ``detail`` is for the logs only and never appears in the response body.
    """

    def __init__(self, category: ErrorCategory, detail: str = "",
                 status_code: Optional[int] = None):
        text = ERROR_TEXTS[category]
        super().__init__(text.message)
        self.category = category
        self.detail = detail
        self.text = text
        self.status_code = status_code if status_code is not None else text.status_code

    def to_dict(self) -> Dict[str, str]:
        return {
            "error": self.category.value,
            "title": self.text.title,
            "message": self.text.message,
            "action": self.text.action,
        }


def create_error_response(category: ErrorCategory, detail: str = "",
                          status_code: Optional[int] = None):
    """
    Build a flask-restx ``(body, status)`` pair for an error.

    The status defaults to the one registered for the category.
    """
    error = ApiError(category, detail, status_code)
    if detail:
        logger.debug(f"{category.value} ({error.status_code}): {detail}")
    return error.to_dict(), error.status_code
