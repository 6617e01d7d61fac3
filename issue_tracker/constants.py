"""
Application constants for the Issue Tracker.

Field names and the fixed client-facing messages of the issue API.
"""

# =============================================================================
# Issue Fields
# =============================================================================

# Wire name of the identifier in bodies, queries and responses
ID_FIELD = "_id"
ID_ALIASES = (ID_FIELD, "id")

REQUIRED_TEXT_FIELDS = ("issue_title", "issue_text", "created_by")
OPTIONAL_TEXT_FIELDS = ("assigned_to", "status_text")
TEXT_FIELDS = REQUIRED_TEXT_FIELDS + OPTIONAL_TEXT_FIELDS

TIMESTAMP_FIELDS = ("created_on", "updated_on")
BOOLEAN_FIELDS = ("open",)

# Fields a caller may change through an update
UPDATABLE_FIELDS = TEXT_FIELDS + BOOLEAN_FIELDS


# =============================================================================
# Messages
# =============================================================================

MSG_MISSING_REQUIRED = "Missing required fields"
MSG_ID_ERROR = "_id error"
MSG_NO_UPDATE_FIELDS = "no updated field sent"
MSG_UPDATED = "successfully updated"
MSG_INVALID_PROJECT = "Invalid project name"
MSG_BACKEND_UNAVAILABLE = "backend unavailable"


def msg_update_failed(issue_id: str) -> str:
    return f"could not update {issue_id}"


def msg_deleted(issue_id: str) -> str:
    return f"Deleted {issue_id}"


def msg_delete_failed(issue_id: str) -> str:
    return f"Could not delete {issue_id}"
