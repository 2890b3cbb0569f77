#!/usr/bin/env python3
"""Tests for jira_cli.py - Jira issue operations."""

import json
from typing import Any
from unittest.mock import MagicMock, patch

import pytest

from atlassian_client import AtlassianClient, AtlassianError, ApiResponse, ConfigError
from jira_cli import (
    build_update_fields,
    create_issue,
    create_issues,
    get_issue,
    main,
    search_issues,
    update_issue,
)

SITE_URL = "https://example.atlassian.net"


def make_client() -> MagicMock:
    client = MagicMock(spec=AtlassianClient)
    client.site_url = SITE_URL
    return client


def project_lookup(endpoint: str, params: Any = None) -> ApiResponse:
    """Fake jira_get for the project and issue-type lookups used by create."""
    if endpoint == "project/search":
        if params["keys"] == "PROJ":
            return ApiResponse(ok=True, data={"values": [{"id": "100", "key": "PROJ"}]})
        return ApiResponse(ok=True, data={"values": []})
    if endpoint == "project/100":
        return ApiResponse(ok=True, data={"issueTypes": [{"id": "1", "name": "Task"}, {"id": "2", "name": "Bug"}]})
    return ApiResponse(ok=False, error="API error (404): not found", status=404)


class TestCreate:
    """Tests for single and bulk issue creation."""

    def test_create_single_issue(self) -> None:
        client = make_client()
        client.jira_get.side_effect = project_lookup
        client.jira_post.return_value = ApiResponse(ok=True, data={"id": "9", "key": "PROJ-7"})

        result = create_issue(
            client,
            {"project": "PROJ", "type": "bug", "summary": "Login fails", "description": "Steps", "labels": ["x"]},
        )

        assert result == {"key": "PROJ-7", "url": f"{SITE_URL}/browse/PROJ-7"}
        endpoint, body = client.jira_post.call_args.args
        assert endpoint == "issue"
        fields = body["fields"]
        assert fields["project"] == {"id": "100"}
        assert fields["issuetype"] == {"id": "2"}
        assert fields["labels"] == ["x"]
        assert fields["description"]["type"] == "doc"

    def test_unknown_issue_type_lists_available(self) -> None:
        client = make_client()
        client.jira_get.side_effect = project_lookup
        with pytest.raises(AtlassianError, match='Issue type "Epic" not found. Available: Task, Bug'):
            create_issue(client, {"project": "PROJ", "type": "Epic", "summary": "x"})

    def test_missing_required_fields(self) -> None:
        with pytest.raises(ConfigError, match="Missing required fields: project, type, summary"):
            create_issue(make_client(), {"project": "PROJ"})

    def test_bulk_create_collects_failures(self) -> None:
        """One failing item never aborts the rest of the batch."""
        client = make_client()
        client.jira_get.side_effect = project_lookup
        client.jira_post.side_effect = [
            ApiResponse(ok=True, data={"key": "PROJ-1"}),
            ApiResponse(ok=True, data={"key": "PROJ-2"}),
        ]

        result = create_issues(
            client,
            [
                {"project": "PROJ", "type": "Task", "summary": "One"},
                {"project": "NOPE", "type": "Task", "summary": "Two"},
                {"summary": "Three"},
                {"project": "PROJ", "type": "Task", "summary": "Four"},
            ],
        )

        assert result["created"] == 2
        assert result["failed"] == 2
        assert result["results"] == [
            {"key": "PROJ-1", "url": f"{SITE_URL}/browse/PROJ-1"},
            {"error": 'Project "NOPE" not found'},
            {"error": "Missing required fields: project, type, summary"},
            {"key": "PROJ-2", "url": f"{SITE_URL}/browse/PROJ-2"},
        ]

    def test_bulk_create_records_mistyped_item(self) -> None:
        """A non-string type or non-list components fails only that item."""
        client = make_client()
        client.jira_get.side_effect = project_lookup
        client.jira_post.return_value = ApiResponse(ok=True, data={"key": "PROJ-3"})

        result = create_issues(
            client,
            [
                {"project": "PROJ", "type": 5, "summary": "Bad type"},
                {"project": "PROJ", "type": "Task", "summary": "Bad components", "components": "api"},
                {"project": "PROJ", "type": "Task", "summary": "Good"},
            ],
        )

        assert result["created"] == 1
        assert result["failed"] == 2
        assert result["results"] == [
            {"error": 'Field "type" must be a string'},
            {"error": 'Field "components" must be a list of strings'},
            {"key": "PROJ-3", "url": f"{SITE_URL}/browse/PROJ-3"},
        ]
        client.jira_post.assert_called_once()


class TestUpdate:
    """Tests for field updates and status transitions."""

    def test_build_update_fields_clears_with_null(self) -> None:
        fields = build_update_fields({"assignee": None, "description": "", "duedate": None})
        assert fields == {"assignee": None, "description": None, "duedate": None}

    def test_transition_then_update(self) -> None:
        client = make_client()
        client.jira_get.return_value = ApiResponse(
            ok=True,
            data={"transitions": [{"id": "31", "name": "Close", "to": {"name": "Done"}}]},
        )
        client.jira_post.return_value = ApiResponse(ok=True, status=204)
        client.jira_put.return_value = ApiResponse(ok=True, status=204)

        result = update_issue(client, "PROJ-1", {"status": "done", "labels": ["urgent"]})

        client.jira_post.assert_called_once_with("issue/PROJ-1/transitions", {"transition": {"id": "31"}})
        client.jira_put.assert_called_once_with("issue/PROJ-1", {"fields": {"labels": ["urgent"]}})
        assert result == {"key": "PROJ-1", "updated": True, "fields": ["labels"], "transitioned": "done"}

    def test_unknown_transition(self) -> None:
        client = make_client()
        client.jira_get.return_value = ApiResponse(
            ok=True,
            data={"transitions": [{"id": "31", "name": "Close", "to": {"name": "Done"}}]},
        )
        with pytest.raises(AtlassianError, match='Cannot transition to "Blocked". Available: Close'):
            update_issue(client, "PROJ-1", {"status": "Blocked"})
        client.jira_put.assert_not_called()


class TestRead:
    """Tests for get and search output shaping."""

    def test_get_issue(self) -> None:
        client = make_client()
        client.jira_get.return_value = ApiResponse(
            ok=True,
            data={
                "key": "PROJ-1",
                "id": "10",
                "fields": {
                    "summary": "Login fails",
                    "issuetype": {"name": "Bug"},
                    "status": {"name": "Open"},
                    "assignee": {"displayName": "Ada", "emailAddress": "ada@example.com"},
                    "comment": {"comments": [{"author": {"displayName": "Bob"}, "body": "hi", "created": "t"}]},
                },
            },
        )
        issue = get_issue(client, "PROJ-1")
        assert issue["url"] == f"{SITE_URL}/browse/PROJ-1"
        assert issue["priority"] == "None"
        assert issue["assignee"] == {"name": "Ada", "email": "ada@example.com"}
        assert issue["reporter"] is None
        assert issue["recentComments"] == [{"author": "Bob", "body": "hi", "created": "t"}]

    def test_search_passes_page_token(self) -> None:
        client = make_client()
        client.jira_get.return_value = ApiResponse(ok=True, data={"issues": [], "nextPageToken": "abc", "isLast": False})
        result = search_issues(client, "project = PROJ", max_results=10, page_token="tok")

        endpoint, params = client.jira_get.call_args.args
        assert endpoint == "search/jql"
        assert params["maxResults"] == "10"
        assert params["nextPageToken"] == "tok"
        assert result == {"returned": 0, "isLast": False, "nextPageToken": "abc", "issues": []}

    def test_api_error_propagates(self) -> None:
        client = make_client()
        client.jira_get.return_value = ApiResponse(ok=False, error="API error (404): Issue does not exist", status=404)
        with pytest.raises(AtlassianError, match="Issue does not exist"):
            get_issue(client, "NOPE-1")


class TestMain:
    """Tests for CLI error reporting."""

    def test_missing_config_is_fatal(self, capsys: pytest.CaptureFixture[str]) -> None:
        with patch("jira_cli.load_config", side_effect=ConfigError("ATLASSIAN_SITE not set")):
            assert main(["get", "PROJ-1"]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Error: ATLASSIAN_SITE not set" in captured.err

    def test_invalid_json_is_fatal(self, capsys: pytest.CaptureFixture[str]) -> None:
        with patch("jira_cli.load_config"), patch("jira_cli.AtlassianClient"):
            assert main(["create", "{oops"]) == 1
        assert "Error: Invalid JSON for issue config" in capsys.readouterr().err

    def test_prints_json_result(self, capsys: pytest.CaptureFixture[str]) -> None:
        client = make_client()
        client.jira_get.return_value = ApiResponse(ok=True, data={"total": 0, "comments": []})
        with patch("jira_cli.load_config"), patch("jira_cli.AtlassianClient", return_value=client):
            assert main(["comment", "PROJ-1", "get"]) == 0
        assert json.loads(capsys.readouterr().out) == {"issueKey": "PROJ-1", "total": 0, "comments": []}
