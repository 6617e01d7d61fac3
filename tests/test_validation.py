"""
Tests for per-operation request validation.
"""

from datetime import datetime

import pytest

from issue_tracker.exceptions import (
    InvalidProjectError,
    MissingFieldsError,
    MissingIdError,
    NoFieldsToUpdateError,
)
from issue_tracker.validation import (
    validate_create,
    validate_delete,
    validate_filters,
    validate_project,
    validate_update,
)

ISSUE_ID = "0123456789abcdef0123456789abcdef"


class TestValidateProject:
    def test_name_is_sanitized(self):
        assert validate_project("  apitest ") == "apitest"

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_empty_name_is_rejected(self, name):
        with pytest.raises(InvalidProjectError):
            validate_project(name)

    def test_allow_list(self):
        assert validate_project("apitest", frozenset({"apitest"})) == "apitest"
        with pytest.raises(InvalidProjectError):
            validate_project("other", frozenset({"apitest"}))


class TestValidateCreate:
    def test_optional_fields_default_to_empty(self, required_payload):
        new_issue = validate_create(required_payload)

        assert new_issue.issue_title == "Title"
        assert new_issue.assigned_to == ""
        assert new_issue.status_text == ""

    def test_all_fields(self, sample_payload):
        new_issue = validate_create(sample_payload)

        assert new_issue.assigned_to == "Chai and Mocha"
        assert new_issue.status_text == "In QA"

    def test_one_error_per_missing_field(self):
        with pytest.raises(MissingFieldsError) as exc_info:
            validate_create({"issue_title": "", "issue_text": "   ", "created_by": ""})

        errors = exc_info.value.errors
        assert [e["param"] for e in errors] == ["issue_title", "issue_text", "created_by"]
        assert all(e["msg"] == "Missing required fields" for e in errors)
        assert all(e["location"] == "body" for e in errors)

    def test_only_missing_fields_are_reported(self):
        with pytest.raises(MissingFieldsError) as exc_info:
            validate_create({"issue_title": "Title", "created_by": "A"})

        assert [e["param"] for e in exc_info.value.errors] == ["issue_text"]

    def test_error_reports_the_value_as_sent(self):
        with pytest.raises(MissingFieldsError) as exc_info:
            validate_create({"issue_title": "   ", "issue_text": None, "created_by": ""})

        assert [e["value"] for e in exc_info.value.errors] == ["   ", "", ""]

    def test_text_is_sanitized(self):
        new_issue = validate_create({
            "issue_title": "  <script>  ",
            "issue_text": "text",
            "created_by": "A",
        })

        assert new_issue.issue_title == "&lt;script&gt;"


class TestValidateFilters:
    def test_no_filters(self):
        assert validate_filters({}) == {}

    def test_typed_filters_are_parsed(self):
        filters = validate_filters({
            "open": "false",
            "created_on": "2024-01-15T10:00:00.000Z",
            "_id": ISSUE_ID,
        })

        assert filters == {
            "open": False,
            "created_on": datetime(2024, 1, 15, 10, 0, 0),
            "id": ISSUE_ID,
        }

    def test_id_alias(self):
        assert validate_filters({"id": ISSUE_ID}) == {"id": ISSUE_ID}

    def test_malformed_typed_filters_are_dropped(self):
        filters = validate_filters({
            "open": "perhaps",
            "updated_on": "last week",
            "_id": "not-an-id",
            "issue_title": "Title",
        })

        assert filters == {"issue_title": "Title"}

    def test_empty_and_unknown_parameters_are_ignored(self):
        assert validate_filters({"issue_title": "", "project": "x", "limit": "5"}) == {}


class TestValidateUpdate:
    def test_missing_id(self):
        with pytest.raises(MissingIdError):
            validate_update({"issue_title": "Updated"})

    def test_missing_id_is_checked_before_fields(self):
        with pytest.raises(MissingIdError):
            validate_update({})

    def test_only_id(self):
        with pytest.raises(NoFieldsToUpdateError):
            validate_update({"_id": ISSUE_ID})

    def test_fields_that_sanitize_to_nothing_do_not_count(self):
        with pytest.raises(NoFieldsToUpdateError):
            validate_update({"_id": ISSUE_ID, "issue_title": "  ", "open": "maybe"})

    def test_system_and_unknown_fields_are_dropped(self):
        with pytest.raises(NoFieldsToUpdateError):
            validate_update({"_id": ISSUE_ID, "created_on": "2024-01-01", "project": "other"})

    def test_supplied_fields_are_kept(self):
        update = validate_update({"_id": ISSUE_ID, "issue_title": " Updated ", "open": "false"})

        assert update.raw_id == ISSUE_ID
        assert update.issue_id == ISSUE_ID
        assert update.fields == {"issue_title": "Updated", "open": False}

    def test_unparseable_id_is_kept_for_messages(self):
        update = validate_update({"id": "abc", "status_text": "Done"})

        assert update.raw_id == "abc"
        assert update.issue_id is None


class TestValidateDelete:
    @pytest.mark.parametrize("payload", [{}, {"_id": ""}, {"_id": "   "}])
    def test_missing_id(self, payload):
        with pytest.raises(MissingIdError) as exc_info:
            validate_delete(payload)

        assert exc_info.value.message == "_id error"

    def test_id(self):
        deletion = validate_delete({"_id": ISSUE_ID})

        assert deletion.issue_id == ISSUE_ID
