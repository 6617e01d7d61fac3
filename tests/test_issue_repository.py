"""
Tests for the project-scoped IssueRepository.
"""

from datetime import datetime, timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from issue_tracker.models import Issue, new_issue_id, utc_now
from issue_tracker.repositories import IssueRepository, OutcomeStatus


def _insert(repo: IssueRepository, **fields) -> Issue:
    values = {
        "id": new_issue_id(),
        "issue_title": "Title",
        "issue_text": "text",
        "created_by": "A",
        **fields,
    }
    return repo.insert(**values)


class TestInsertAndSearch:
    def test_insert_applies_model_defaults(self, issue_repo):
        issue = _insert(issue_repo)

        assert issue.project == "apitest"
        assert issue.assigned_to == ""
        assert issue.status_text == ""
        assert issue.open is True
        assert issue.created_on is not None

    def test_projects_are_separate_partitions(self, test_session):
        first = IssueRepository(test_session, "first")
        second = IssueRepository(test_session, "second")
        _insert(first)
        _insert(first)
        _insert(second)

        assert len(first.search({})) == 2
        assert len(second.search({})) == 1
        assert IssueRepository(test_session, "never-used").search({}) == []

    def test_search_is_exact_match(self, issue_repo):
        _insert(issue_repo, issue_title="Title")
        _insert(issue_repo, issue_title="Title 2")

        titles = [i.issue_title for i in issue_repo.search({"issue_title": "Title"})]

        assert titles == ["Title"]

    def test_search_on_open_is_boolean(self, issue_repo):
        _insert(issue_repo, open=True)
        _insert(issue_repo, open=False)

        assert [i.open for i in issue_repo.search({"open": True})] == [True]
        assert [i.open for i in issue_repo.search({"open": False})] == [False]

    def test_search_returns_creation_order(self, issue_repo):
        base = datetime(2024, 1, 15, 10, 0, 0)
        _insert(issue_repo, issue_title="second", created_on=base + timedelta(seconds=1))
        _insert(issue_repo, issue_title="first", created_on=base)

        assert [i.issue_title for i in issue_repo.search({})] == ["first", "second"]

    def test_same_millisecond_keeps_insertion_order(self, issue_repo):
        created_on = datetime(2024, 1, 15, 10, 0, 0)
        for title in ("a", "b", "c", "d"):
            _insert(issue_repo, issue_title=title, created_on=created_on)

        assert [i.issue_title for i in issue_repo.search({})] == ["a", "b", "c", "d"]

    def test_unknown_filter_key_raises(self, issue_repo):
        with pytest.raises(ValueError, match="Unknown filter key"):
            issue_repo.search({"priority": "high"})

    def test_get_is_scoped_to_project(self, test_session):
        issue = _insert(IssueRepository(test_session, "first"))

        assert IssueRepository(test_session, "first").get(issue.id) is not None
        assert IssueRepository(test_session, "second").get(issue.id) is None


class TestUpdate:
    def test_merges_only_supplied_fields(self, issue_repo):
        issue = _insert(issue_repo, assigned_to="B")

        outcome = issue_repo.update(issue.id, {"status_text": "In QA"})

        assert outcome.status is OutcomeStatus.APPLIED
        assert outcome.count == 1
        stored = issue_repo.get(issue.id)
        assert stored.status_text == "In QA"
        assert stored.assigned_to == "B"
        assert stored.issue_title == "Title"

    def test_updated_on_strictly_increases(self, issue_repo):
        future = utc_now() + timedelta(days=1)
        issue = _insert(issue_repo, created_on=future, updated_on=future)

        issue_repo.update(issue.id, {"open": False})

        # Clock is behind the stored value, so it is bumped by one tick
        assert issue_repo.get(issue.id).updated_on == future + timedelta(milliseconds=1)

    def test_missing_issue(self, issue_repo):
        outcome = issue_repo.update(new_issue_id(), {"open": False})

        assert outcome.status is OutcomeStatus.NOT_FOUND

    def test_other_project_is_not_touched(self, test_session):
        issue = _insert(IssueRepository(test_session, "first"))

        outcome = IssueRepository(test_session, "second").update(issue.id, {"open": False})

        assert outcome.status is OutcomeStatus.NOT_FOUND
        assert IssueRepository(test_session, "first").get(issue.id).open is True

    def test_backend_error_is_reported_not_raised(self, issue_repo, monkeypatch):
        issue = _insert(issue_repo)

        def failing_flush(*args, **kwargs):
            raise IntegrityError("UPDATE issues", {}, Exception("constraint failed"))

        monkeypatch.setattr(issue_repo.session, "flush", failing_flush)
        outcome = issue_repo.update(issue.id, {"issue_title": "Updated"})

        assert outcome.status is OutcomeStatus.BACKEND_ERROR
        assert "constraint failed" in outcome.detail


class TestDelete:
    def test_delete_then_delete_again(self, issue_repo):
        issue = _insert(issue_repo)

        first = issue_repo.delete(issue.id)
        second = issue_repo.delete(issue.id)

        assert first.status is OutcomeStatus.APPLIED
        assert first.count == 1
        assert second.status is OutcomeStatus.NOT_FOUND
        assert issue_repo.search({}) == []

    def test_delete_is_scoped_to_project(self, test_session):
        issue = _insert(IssueRepository(test_session, "first"))

        outcome = IssueRepository(test_session, "second").delete(issue.id)

        assert outcome.status is OutcomeStatus.NOT_FOUND
        assert IssueRepository(test_session, "first").get(issue.id) is not None
