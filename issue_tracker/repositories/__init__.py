"""
Repository pattern implementations for data access.

Usage:
    from issue_tracker.repositories import IssueRepository
    from issue_tracker.db import db

    with db.session() as session:
        repo = IssueRepository(session, "apitest")
        issues = repo.search({"open": True})
"""

from .base import BaseRepository
from .issue_repository import IssueRepository
from .outcome import OutcomeStatus, WriteOutcome

__all__ = [
    "BaseRepository",
    "IssueRepository",
    "OutcomeStatus",
    "WriteOutcome",
]
