"""
Issue service - the four issue operations against one project partition.

Validation runs first; only validated input reaches the repository. Each
operation is one session on the shared pool, committed before the method
returns, so backend failures surface here and are translated to domain
errors.
"""

from collections.abc import Generator, Mapping
from contextlib import contextmanager
from typing import Any

from sqlalchemy.exc import (
    DisconnectionError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

from issue_tracker.constants import (
    MSG_UPDATED,
    msg_delete_failed,
    msg_deleted,
    msg_update_failed,
)
from issue_tracker.db import DatabaseManager
from issue_tracker.exceptions import (
    BackendConnectionError,
    BackendUnavailableError,
    IssueNotFoundError,
)
from issue_tracker.logging import LogContext, get_logger, log_timing
from issue_tracker.models import Issue, new_issue_id, utc_now
from issue_tracker.repositories import IssueRepository, OutcomeStatus, WriteOutcome
from issue_tracker.validation import (
    validate_create,
    validate_delete,
    validate_filters,
    validate_project,
    validate_update,
)

logger = get_logger("services.issue")

# Driver messages of an OperationalError that ran out of time rather than failed:
# SQLite busy timeout, PostgreSQL statement_timeout and connect_timeout,
# MySQL lock wait
_TIMEOUT_MARKERS = (
    "database is locked",
    "canceling statement due to statement timeout",
    "timeout expired",
    "lock wait timeout exceeded",
)


def _is_timeout(exc: Exception) -> bool:
    if isinstance(exc, PoolTimeoutError):
        return True
    if not isinstance(exc, OperationalError):
        return False
    message = str(getattr(exc, "orig", None) or exc).lower()
    return any(marker in message for marker in _TIMEOUT_MARKERS)


class IssueService:
    """
    Create, list, update and delete issues.

    Args:
        database: The application's DatabaseManager (shared connection pool).
        allowed_projects: Optional allow-list of project names. Empty accepts
            any non-empty name.
    """

    def __init__(self, database: DatabaseManager, allowed_projects: frozenset[str] = frozenset()):
        self.database = database
        self.allowed_projects = allowed_projects

    @contextmanager
    def _backend(self, operation: str, project: str) -> Generator[Session, None, None]:
        """One backend round-trip; maps storage failures to domain errors."""
        with LogContext(project=project, operation=operation):
            try:
                with self.database.session() as session:
                    yield session
            except SQLAlchemyError as e:
                if _is_timeout(e):
                    logger.error("backend_timeout", error=str(e))
                    raise BackendUnavailableError(str(e)) from e
                if isinstance(e, (OperationalError, InterfaceError, DisconnectionError)):
                    detail = str(getattr(e, "orig", None) or e)
                    logger.error("backend_connection_failed", error=detail)
                    raise BackendConnectionError(detail) from e
                logger.error("backend_write_failed", error=str(e))
                raise BackendUnavailableError(str(e)) from e

    def _project(self, project: Any) -> str:
        return validate_project(project, self.allowed_projects)

    @log_timing("issue_create")
    def create(self, project: Any, payload: Mapping[str, Any]) -> dict[str, Any]:
        """
        Create an issue in the project and return the stored record.

        created_on and updated_on share one timestamp; open starts True.
        """
        project = self._project(project)
        new_issue = validate_create(payload)

        now = utc_now()
        with self._backend("create", project) as session:
            issue = IssueRepository(session, project).insert(
                id=new_issue_id(),
                issue_title=new_issue.issue_title,
                issue_text=new_issue.issue_text,
                created_by=new_issue.created_by,
                assigned_to=new_issue.assigned_to,
                status_text=new_issue.status_text,
                created_on=now,
                updated_on=now,
                open=True,
            )
            record = issue.to_dict()

        logger.info("issue_created", project=project, issue_id=record["id"])
        return record

    @log_timing("issue_list")
    def list(self, project: Any, query: Mapping[str, Any]) -> list[dict[str, Any]]:
        """Return every issue in the project matching the supplied filters exactly."""
        project = self._project(project)
        filters = validate_filters(query)

        with self._backend("list", project) as session:
            issues: list[Issue] = IssueRepository(session, project).search(filters)
            records = [issue.to_dict() for issue in issues]

        logger.info("issues_listed", project=project, filters=sorted(filters), count=len(records))
        return records

    @log_timing("issue_update")
    def update(self, project: Any, payload: Mapping[str, Any]) -> str:
        """
        Partially update an issue.

        Only supplied fields change, plus updated_on which is always refreshed.
        """
        project = self._project(project)
        update = validate_update(payload)

        if update.issue_id is None:
            outcome = WriteOutcome.not_found()
        else:
            with self._backend("update", project) as session:
                outcome = IssueRepository(session, project).update(update.issue_id, update.fields)

        if outcome.status is OutcomeStatus.NOT_FOUND:
            logger.info("issue_update_missed", project=project, issue_id=update.raw_id)
            raise IssueNotFoundError(update.raw_id, msg_update_failed(update.raw_id))
        if outcome.status is OutcomeStatus.BACKEND_ERROR:
            raise BackendUnavailableError(outcome.detail)

        logger.info(
            "issue_updated",
            project=project,
            issue_id=update.issue_id,
            fields=sorted(update.fields),
        )
        return MSG_UPDATED

    @log_timing("issue_delete")
    def delete(self, project: Any, payload: Mapping[str, Any]) -> str:
        """Permanently delete an issue."""
        project = self._project(project)
        deletion = validate_delete(payload)

        if deletion.issue_id is None:
            outcome = WriteOutcome.not_found()
        else:
            with self._backend("delete", project) as session:
                outcome = IssueRepository(session, project).delete(deletion.issue_id)

        if outcome.status is OutcomeStatus.NOT_FOUND:
            logger.info("issue_delete_missed", project=project, issue_id=deletion.raw_id)
            raise IssueNotFoundError(deletion.raw_id, msg_delete_failed(deletion.raw_id))
        if outcome.status is OutcomeStatus.BACKEND_ERROR:
            raise BackendUnavailableError(outcome.detail)

        logger.info("issue_deleted", project=project, issue_id=deletion.issue_id)
        return msg_deleted(deletion.raw_id)


__all__ = ["IssueService"]
