"""
Pytest fixtures for Issue Tracker tests.

Every test gets its own in-memory SQLite database behind a fresh
DatabaseManager, so nothing leaks between tests.
"""

import pytest

from issue_tracker.db import DatabaseManager
from issue_tracker.repositories import IssueRepository
from issue_tracker.services import IssueService


@pytest.fixture
def test_db():
    """Create a fresh in-memory database with all tables."""
    manager = DatabaseManager()
    manager.initialize("sqlite://", timeout_seconds=1.0)
    manager.create_all_tables()
    yield manager
    manager.reset()


@pytest.fixture
def test_session(test_db):
    """Get a session on the test database; committed on success."""
    with test_db.session() as session:
        yield session


@pytest.fixture
def issue_repo(test_session):
    """Repository scoped to the 'apitest' project."""
    return IssueRepository(test_session, "apitest")


@pytest.fixture
def issue_service(test_db):
    return IssueService(test_db)


@pytest.fixture
def sample_payload():
    """A create payload with every field filled in."""
    return {
        "issue_title": "Title",
        "issue_text": "text",
        "created_by": "Functional Test - Every field filled in",
        "assigned_to": "Chai and Mocha",
        "status_text": "In QA",
    }


@pytest.fixture
def required_payload():
    """A create payload with only the required fields."""
    return {
        "issue_title": "Title",
        "issue_text": "text",
        "created_by": "Functional Test - Required fields filled in",
    }
