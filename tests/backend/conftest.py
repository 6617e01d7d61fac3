from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from backend.app.main import create_app
from issue_tracker.config import Settings
from issue_tracker.db import DatabaseManager


@pytest.fixture
def test_settings() -> Settings:
    return Settings(database_url="sqlite://", backend_timeout_seconds=1.0)


@pytest.fixture
def test_app_client(test_settings) -> Iterator[TestClient]:
    app = create_app(settings=test_settings, database=DatabaseManager())

    with TestClient(app) as client:
        yield client


@pytest.fixture
def create_issue(test_app_client):
    """POST an issue and return the response body."""

    def _create(project: str = "apitest", **fields) -> dict:
        payload = {
            "issue_title": "Title",
            "issue_text": "text",
            "created_by": "A",
            **fields,
        }
        resp = test_app_client.post(f"/api/issues/{project}", json=payload)
        assert resp.status_code == 200, resp.text
        return resp.json()

    return _create
