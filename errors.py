from enum import Enum
from googleapiclient.errors import HttpError


class ValidationError(ValueError):
    """Bad or missing request input. Reported as 400, never retried."""


class ConfigurationError(Exception):
    """Missing or unusable server configuration (credentials, ids). Reported as 500."""

    def __init__(self, message: str, details: str = None):
        super().__init__(message)
        self.details = details


class DeleteErrorKind(Enum):
    NOT_FOUND = 'not_found'
    FORBIDDEN = 'forbidden'
    OTHER = 'other'


def http_status(error: Exception):
    """Return the HTTP status of a Google API error, or None for transport failures"""
    if isinstance(error, HttpError):
        try:
            return int(error.resp.status)
        except (AttributeError, TypeError, ValueError):
            return None
    return None


def classify_delete_error(error: Exception) -> DeleteErrorKind:
    """
    Classify a failed events.delete call.

    404 and 410 both mean the event is already gone (Google answers 410 for
    events that were deleted but are still tombstoned).
    """
    status = http_status(error)
    if status in (404, 410):
        return DeleteErrorKind.NOT_FOUND
    if status == 403:
        return DeleteErrorKind.FORBIDDEN
    return DeleteErrorKind.OTHER
