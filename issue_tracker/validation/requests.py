"""
Per-operation request validation.

Each validator takes the raw body or query mapping and returns a normalized
value object, or raises one of the ValidationError subclasses. No I/O happens
here.
"""

from collections.abc import Mapping, Set
from dataclasses import dataclass, field
from typing import Any

from issue_tracker.constants import (
    BOOLEAN_FIELDS,
    ID_ALIASES,
    MSG_MISSING_REQUIRED,
    OPTIONAL_TEXT_FIELDS,
    REQUIRED_TEXT_FIELDS,
    TEXT_FIELDS,
    TIMESTAMP_FIELDS,
    UPDATABLE_FIELDS,
)
from issue_tracker.exceptions import (
    InvalidProjectError,
    MissingFieldsError,
    MissingIdError,
    NoFieldsToUpdateError,
)

from .sanitizers import coerce_text, parse_bool, parse_issue_id, parse_timestamp, sanitize_text


@dataclass(frozen=True)
class NewIssue:
    """Validated Create payload."""

    issue_title: str
    issue_text: str
    created_by: str
    assigned_to: str = ""
    status_text: str = ""


@dataclass(frozen=True)
class IssueUpdate:
    """
    Validated Update payload.

    raw_id is the id as the caller sent it (sanitized), used in messages.
    issue_id is the normalized identifier, or None when raw_id cannot be one.
    """

    raw_id: str
    issue_id: str | None
    fields: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class IssueDeletion:
    raw_id: str
    issue_id: str | None


def validate_project(project: Any, allowed: Set[str] = frozenset()) -> str:
    """
    Sanitize the project path segment.

    Any non-empty name selects (or lazily creates) a partition unless an
    allow-list is configured.
    """
    name = sanitize_text(project)
    if not name:
        raise InvalidProjectError(project)
    if allowed and name not in allowed:
        raise InvalidProjectError(name)
    return name


def validate_create(payload: Mapping[str, Any]) -> NewIssue:
    errors = []
    values = {}
    for name in REQUIRED_TEXT_FIELDS:
        value = sanitize_text(payload.get(name))
        if not value:
            errors.append({
                "msg": MSG_MISSING_REQUIRED,
                "param": name,
                "location": "body",
                "value": coerce_text(payload.get(name)) or "",
            })
            continue
        values[name] = value

    if errors:
        raise MissingFieldsError(errors)

    for name in OPTIONAL_TEXT_FIELDS:
        values[name] = sanitize_text(payload.get(name)) or ""

    return NewIssue(**values)


def validate_filters(query: Mapping[str, Any]) -> dict[str, Any]:
    """
    Build exact-match filters from query parameters.

    Lenient by policy: a parameter that is empty or fails to parse as its
    type is dropped, exactly as if the caller had not sent it. Unknown
    parameters are ignored.
    """
    filters: dict[str, Any] = {}

    for name in TEXT_FIELDS:
        value = sanitize_text(query.get(name))
        if value:
            filters[name] = value

    for name in TIMESTAMP_FIELDS:
        value = parse_timestamp(query.get(name))
        if value is not None:
            filters[name] = value

    for name in BOOLEAN_FIELDS:
        value = parse_bool(query.get(name))
        if value is not None:
            filters[name] = value

    issue_id = parse_issue_id(_get_id(query))
    if issue_id is not None:
        filters["id"] = issue_id

    return filters


def validate_update(payload: Mapping[str, Any]) -> IssueUpdate:
    """
    Validate an Update payload.

    The id check comes first. Then every updatable field that survives
    sanitation is kept; system fields and unknown keys are dropped. An update
    that keeps nothing is rejected before any storage call.
    """
    raw_id = _require_id(payload)

    fields: dict[str, Any] = {}
    for name in UPDATABLE_FIELDS:
        if name not in payload:
            continue
        if name in BOOLEAN_FIELDS:
            value = parse_bool(payload[name])
            if value is not None:
                fields[name] = value
        else:
            value = sanitize_text(payload[name])
            if value:
                fields[name] = value

    if not fields:
        raise NoFieldsToUpdateError()

    return IssueUpdate(raw_id=raw_id, issue_id=parse_issue_id(raw_id), fields=fields)


def validate_delete(payload: Mapping[str, Any]) -> IssueDeletion:
    raw_id = _require_id(payload)
    return IssueDeletion(raw_id=raw_id, issue_id=parse_issue_id(raw_id))


def _get_id(data: Mapping[str, Any]) -> Any:
    for alias in ID_ALIASES:
        value = data.get(alias)
        if value not in (None, ""):
            return value
    return None


def _require_id(payload: Mapping[str, Any]) -> str:
    raw_id = sanitize_text(_get_id(payload))
    if not raw_id:
        raise MissingIdError()
    return raw_id


__all__ = [
    "NewIssue",
    "IssueUpdate",
    "IssueDeletion",
    "validate_project",
    "validate_create",
    "validate_filters",
    "validate_update",
    "validate_delete",
]
