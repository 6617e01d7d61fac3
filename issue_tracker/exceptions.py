"""
Domain exceptions for the Issue Tracker.

Every error a caller can see is an IssueTrackerError carrying the HTTP status
and the message the API returns. The HTTP layer renders them; nothing below
it builds responses.
"""

from typing import Any

from .constants import (
    MSG_BACKEND_UNAVAILABLE,
    MSG_ID_ERROR,
    MSG_INVALID_PROJECT,
    MSG_MISSING_REQUIRED,
    MSG_NO_UPDATE_FIELDS,
)


class IssueTrackerError(Exception):
    """Base class for errors reported to API callers."""

    status_code: int = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(IssueTrackerError):
    """Caller input was rejected before reaching the storage backend."""

    status_code = 400


class MissingFieldsError(ValidationError):
    """Create payload lacks one or more required fields."""

    def __init__(self, errors: list[dict[str, Any]]):
        self.errors = errors
        super().__init__(MSG_MISSING_REQUIRED)


class InvalidProjectError(ValidationError):
    def __init__(self, project: str | None = None):
        self.project = project
        super().__init__(MSG_INVALID_PROJECT)


class MissingIdError(ValidationError):
    def __init__(self):
        super().__init__(MSG_ID_ERROR)


class NoFieldsToUpdateError(IssueTrackerError):
    """Update carried a valid id but nothing to change."""

    status_code = 400

    def __init__(self):
        super().__init__(MSG_NO_UPDATE_FIELDS)


class IssueNotFoundError(IssueTrackerError):
    """No issue with the given id exists in the project."""

    status_code = 400

    def __init__(self, issue_id: str, message: str):
        self.issue_id = issue_id
        super().__init__(message)


class BackendUnavailableError(IssueTrackerError):
    """The storage backend failed or timed out during an operation."""

    status_code = 503

    def __init__(self, detail: str | None = None):
        self.detail = detail
        super().__init__(MSG_BACKEND_UNAVAILABLE)


class BackendConnectionError(IssueTrackerError):
    """The storage backend could not be reached at all."""

    status_code = 500

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)


__all__ = [
    "IssueTrackerError",
    "ValidationError",
    "MissingFieldsError",
    "InvalidProjectError",
    "MissingIdError",
    "NoFieldsToUpdateError",
    "IssueNotFoundError",
    "BackendUnavailableError",
    "BackendConnectionError",
]
