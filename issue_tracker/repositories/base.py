"""Base repository class with common CRUD operations."""

from typing import Generic, TypeVar

from sqlalchemy.orm import Query, Session

from issue_tracker.db import Base

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """
    Base repository providing common CRUD operations.

    Subclasses narrow every read through _query(), so scoping rules (such as
    a partition key) apply to all inherited helpers.

    Usage:
        class IssueRepository(BaseRepository[Issue]):
            model = Issue

        repo = IssueRepository(session, "apitest")
        issue = repo.create(issue_title="Title", ...)
    """

    model: type[T]

    def __init__(self, session: Session):
        self.session = session

    def _query(self) -> Query:
        return self.session.query(self.model)

    def _check_filter_keys(self, filters: dict) -> None:
        unknown = [key for key in filters if not hasattr(self.model, key)]
        if unknown:
            raise ValueError(f"Unknown filter key(s): {', '.join(sorted(unknown))}")

    def _filtered(self, filters: dict) -> Query:
        """Exact-match query over the given columns."""
        self._check_filter_keys(filters)
        query = self._query()
        for key, value in filters.items():
            query = query.filter(getattr(self.model, key) == value)
        return query

    def create(self, **kwargs) -> T:
        """Create a new record."""
        instance = self.model(**kwargs)
        self.session.add(instance)
        self.session.flush()
        return instance
