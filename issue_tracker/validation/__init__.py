"""
Validation and sanitation of issue API input.

Usage:
    from issue_tracker.validation import validate_create, validate_project

    project = validate_project("apitest")
    new_issue = validate_create({"issue_title": "Title", ...})
"""

from .requests import (
    IssueDeletion,
    IssueUpdate,
    NewIssue,
    validate_create,
    validate_delete,
    validate_filters,
    validate_project,
    validate_update,
)
from .sanitizers import (
    coerce_text,
    escape,
    parse_bool,
    parse_issue_id,
    parse_timestamp,
    sanitize_text,
)

__all__ = [
    "IssueDeletion",
    "IssueUpdate",
    "NewIssue",
    "validate_create",
    "validate_delete",
    "validate_filters",
    "validate_project",
    "validate_update",
    "coerce_text",
    "escape",
    "parse_bool",
    "parse_issue_id",
    "parse_timestamp",
    "sanitize_text",
]
