"""
Issue repository scoped to one project.
"""

from datetime import datetime

from sqlalchemy.exc import (
    DisconnectionError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Query, Session

from issue_tracker.logging import get_logger
from issue_tracker.models import Issue
from issue_tracker.models.issue import TIMESTAMP_RESOLUTION, utc_now

from .base import BaseRepository
from .outcome import WriteOutcome

logger = get_logger("repositories.issue")

# Connection-level failures are not write outcomes; they propagate to the caller
_CONNECTION_ERRORS = (OperationalError, InterfaceError, DisconnectionError, PoolTimeoutError)


class IssueRepository(BaseRepository[Issue]):
    """
    Repository for one project's issues.

    The project name selects the partition. Nothing has to exist beforehand:
    the first insert creates the project implicitly.

    Usage:
        with db.session() as session:
            repo = IssueRepository(session, "apitest")
            issue = repo.insert(issue_title="Title", issue_text="text", created_by="A")
    """

    model = Issue

    def __init__(self, session: Session, project: str):
        super().__init__(session)
        self.project = project

    def _query(self) -> Query:
        return self.session.query(Issue).filter(Issue.project == self.project)

    def get(self, issue_id: str) -> Issue | None:
        """Get an issue by id within this project."""
        return self._query().filter(Issue.id == issue_id).first()

    def insert(self, **fields) -> Issue:
        """Insert a new issue into this project."""
        return self.create(project=self.project, **fields)

    def search(self, filters: dict) -> list[Issue]:
        """
        Exact-match lookup over the supplied filter columns.

        Columns absent from filters are not constrained. Results come back in
        creation order.
        """
        return self._filtered(filters).order_by(Issue.created_on, Issue.seq).all()

    def update(self, issue_id: str, fields: dict) -> WriteOutcome:
        """
        Merge-set fields onto the issue and refresh updated_on.

        updated_on always moves forward by at least one timestamp tick, so it
        stays strictly increasing even when two updates land in the same
        millisecond.
        """
        self._check_filter_keys(fields)
        try:
            issue = self.get(issue_id)
            if issue is None:
                return WriteOutcome.not_found()

            for key, value in fields.items():
                setattr(issue, key, value)
            issue.updated_on = _next_timestamp(issue.updated_on)
            self.session.flush()
            return WriteOutcome.applied(1)
        except _CONNECTION_ERRORS:
            raise
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("backend_write_failed", operation="update", issue_id=issue_id, error=str(e))
            return WriteOutcome.backend_error(str(e))

    def delete(self, issue_id: str) -> WriteOutcome:
        """Hard-delete the issue with this id."""
        try:
            deleted = (
                self._query()
                .filter(Issue.id == issue_id)
                .delete(synchronize_session=False)
            )
            self.session.flush()
        except _CONNECTION_ERRORS:
            raise
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("backend_write_failed", operation="delete", issue_id=issue_id, error=str(e))
            return WriteOutcome.backend_error(str(e))

        if not deleted:
            return WriteOutcome.not_found()
        return WriteOutcome.applied(deleted)


def _next_timestamp(previous: datetime | None) -> datetime:
    now = utc_now()
    if previous is not None and now <= previous:
        return previous + TIMESTAMP_RESOLUTION
    return now
