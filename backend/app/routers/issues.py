"""
Issue endpoints.

One resource per project: /issues/{project}. Handlers are thin; validation,
persistence and error mapping live in IssueService.
"""

from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from issue_tracker.services import IssueService

from ..dependencies import get_issue_service, read_payload
from ..schemas import FieldErrorResponse, IssueResponse

router = APIRouter(prefix="/issues", tags=["issues"])

_TEXT_ERRORS: dict[int | str, dict[str, Any]] = {
    400: {"description": "Rejected request", "content": {"text/plain": {}}},
    503: {"description": "Storage backend unavailable", "content": {"text/plain": {}}},
}


@router.post(
    "/{project}",
    response_model=IssueResponse,
    responses={400: {"model": FieldErrorResponse, "description": "Missing required fields"}},
    summary="Create an issue",
)
def create_issue(
    project: str,
    payload: dict[str, Any] = Depends(read_payload),
    service: IssueService = Depends(get_issue_service),
):
    """
    Add an issue to a project.

    issue_title, issue_text and created_by are required; assigned_to and
    status_text default to "". The response carries created_on, updated_on,
    open and _id as well.
    """
    return service.create(project, payload)


@router.get("/{project}", response_model=list[IssueResponse], summary="List issues")
def list_issues(
    project: str,
    request: Request,
    service: IssueService = Depends(get_issue_service),
):
    """
    List a project's issues.

    Any issue field passed in the query string filters by exact match.
    Filters that are empty or do not parse as their type are ignored.
    """
    return service.list(project, dict(request.query_params))


@router.put(
    "/{project}",
    response_class=PlainTextResponse,
    responses=_TEXT_ERRORS,
    summary="Update an issue",
)
def update_issue(
    project: str,
    payload: dict[str, Any] = Depends(read_payload),
    service: IssueService = Depends(get_issue_service),
):
    """
    Update any fields of the issue identified by _id.

    updated_on is always set to the current time.
    """
    return PlainTextResponse(service.update(project, payload))


@router.delete(
    "/{project}",
    response_class=PlainTextResponse,
    responses=_TEXT_ERRORS,
    summary="Delete an issue",
)
def delete_issue(
    project: str,
    payload: dict[str, Any] = Depends(read_payload),
    service: IssueService = Depends(get_issue_service),
):
    """Permanently delete the issue identified by _id."""
    return PlainTextResponse(service.delete(project, payload))
