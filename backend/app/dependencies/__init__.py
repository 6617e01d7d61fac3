"""
FastAPI dependency injection module.

Provides centralized dependencies for:
- Settings and the shared database manager
- Services
- Request bodies (JSON or form encoded)
"""

import json
from typing import Any

from fastapi import Depends, HTTPException, Request, status

from issue_tracker.config import Settings
from issue_tracker.db import DatabaseManager
from issue_tracker.services import IssueService

_FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

# =============================================================================
# Application State
# =============================================================================


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_database(request: Request) -> DatabaseManager:
    """The database manager started in the application lifespan."""
    return request.app.state.database


# =============================================================================
# Service Dependencies
# =============================================================================


def get_issue_service(
    database: DatabaseManager = Depends(get_database),
    settings: Settings = Depends(get_app_settings),
) -> IssueService:
    """Get IssueService bound to the shared connection pool."""
    return IssueService(database, allowed_projects=settings.allowed_projects_set)


# =============================================================================
# Request Body
# =============================================================================


async def read_payload(request: Request) -> dict[str, Any]:
    """
    Read the request body as a flat mapping.

    Form bodies and JSON objects are both accepted. An empty body, or JSON
    that is not an object, reads as {}.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(_FORM_CONTENT_TYPES):
        form = await request.form()
        return {key: value for key, value in form.items() if isinstance(value, str)}

    body = await request.body()
    if not body.strip():
        return {}
    try:
        data = json.loads(body)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Malformed JSON body")
    return data if isinstance(data, dict) else {}


__all__ = [
    "get_app_settings",
    "get_database",
    "get_issue_service",
    "read_payload",
]
