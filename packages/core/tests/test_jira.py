"""Tests for the Jira client wrapper and ticket records."""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from perfdigest_core.gh.models import PullRequest
from perfdigest_core.jira.client import ISSUE_FIELDS, JiraClient, created_tickets_filter, status_filter
from perfdigest_core.jira.models import Filter, Ticket, parse_jira_time


def _issue(key="DX-57", assignee=True, comments=()):
    return {
        "key": key,
        "fields": {
            "created": "2025-06-16T09:15:02.123+0200",
            "updated": "2025-06-16T11:00:00.000+0000",
            "assignee": {"displayName": "Alice A"} if assignee else None,
            "creator": {"displayName": "Alice A"},
            "reporter": {"displayName": "Bob B"},
            "summary": "Add feature",
            "description": "Details",
            "status": {"name": "In Progress"},
            "comment": {"comments": list(comments)},
        },
    }


def _pr(pr_id):
    return PullRequest(id=pr_id, number=pr_id, owner="org", repo="api", author="alice", created_at=None, title="DX-1")


def _client():
    api = MagicMock()
    return JiraClient(url="https://example.atlassian.net", username="me", token="tok", client=api), api


class TestParseJiraTime:
    def test_parses_offset(self):
        ts = parse_jira_time("2025-06-16T09:15:02.123+0200")
        assert ts == datetime(2025, 6, 16, 7, 15, 2, 123000, tzinfo=timezone.utc)
        assert ts.utcoffset() == timedelta(hours=2)

    def test_none_for_missing(self):
        assert parse_jira_time(None) is None

    def test_malformed_raises(self):
        with pytest.raises(ValueError):
            parse_jira_time("16/06/2025 09:15")


class TestTicket:
    def test_from_api(self):
        ticket = Ticket.from_api(
            _issue(
                comments=[
                    {
                        "author": {"displayName": "Carol"},
                        "created": "2025-06-16T10:00:00.000+0000",
                        "updated": "2025-06-16T10:05:00.000+0000",
                        "body": "LGTM",
                    }
                ]
            )
        )
        assert ticket.key == "DX-57"
        assert ticket.assignee == "Alice A"
        assert ticket.reporter == "Bob B"
        assert ticket.title == "Add feature"
        assert ticket.status == "In Progress"
        assert ticket.comments[0].author == "Carol"
        assert ticket.comments[0].body == "LGTM"
        assert ticket.pull_requests == []

    def test_unassigned(self):
        assert Ticket.from_api(_issue(assignee=False)).assignee == ""

    def test_malformed_comment_time_raises(self):
        issue = _issue(comments=[{"author": {}, "created": "yesterday", "updated": None, "body": ""}])
        with pytest.raises(ValueError):
            Ticket.from_api(issue)

    def test_add_pull_request_is_idempotent(self):
        ticket = Ticket(key="DX-1")
        assert ticket.add_pull_request(_pr(1)) is True
        assert ticket.add_pull_request(_pr(1)) is False
        assert ticket.add_pull_request(_pr(2)) is True
        assert [pr.id for pr in ticket.pull_requests] == [1, 2]


class TestFilters:
    def test_created_tickets_filter_jql(self):
        f = created_tickets_filter("DX", "Alice A", "2025-06-16", "2025-06-17")
        assert f.name == "Created today"
        assert 'reporter = "Alice A"' in f.jql
        assert 'created >= "2025-06-16" AND created <= "2025-06-17"' in f.jql
        assert f.jql.startswith("project = DX AND")

    def test_status_filter_jql(self):
        f = status_filter("DX", "In Review")
        assert f.name == "In Review"
        assert 'status = "In Review"' in f.jql
        assert "assignee = currentUser()" in f.jql


class TestJiraClient:
    def test_find_filter_matches_exact_name(self):
        client, api = _client()
        api.get.return_value = {
            "values": [
                {"id": 1, "name": "Created today (old)", "jql": "x"},
                {"id": 2, "name": "Created today", "jql": "project = DX"},
            ]
        }

        found = client.find_filter("Created today")

        assert found == Filter(name="Created today", jql="project = DX", id="2")
        api.get.assert_called_once_with(
            "rest/api/3/filter/search", params={"filterName": "Created today", "expand": "jql,owner"}
        )

    def test_find_filter_none(self):
        client, api = _client()
        api.get.return_value = {"values": []}
        assert client.find_filter("missing") is None

    def test_save_filter_updates_existing(self):
        client, api = _client()
        api.get.return_value = {"values": [{"id": 7, "name": "F", "jql": "old"}]}

        saved = client.save_filter("F", "new jql")

        api.put.assert_called_once_with("rest/api/3/filter/7", data={"name": "F", "jql": "new jql"})
        api.post.assert_not_called()
        assert saved == Filter(name="F", jql="new jql", id="7")

    def test_save_filter_creates_missing(self):
        client, api = _client()
        api.get.return_value = {"values": []}
        api.post.return_value = {"id": 9, "name": "F", "jql": "new jql"}

        saved = client.save_filter("F", "new jql")

        api.post.assert_called_once_with("rest/api/3/filter", data={"name": "F", "jql": "new jql"})
        assert saved.id == "9"

    def test_get_ticket_uses_fixed_fields(self):
        client, api = _client()
        api.issue.return_value = _issue("DX-5")

        ticket = client.get_ticket("DX-5")

        api.issue.assert_called_once_with("DX-5", fields=ISSUE_FIELDS)
        assert ticket.key == "DX-5"

    def test_get_ticket_missing_raises(self):
        client, api = _client()
        api.issue.return_value = None
        with pytest.raises(LookupError):
            client.get_ticket("DX-404")

    def test_get_tickets_by_filter_runs_saved_jql(self):
        client, api = _client()
        api.get.return_value = {"values": []}
        api.post.return_value = {"id": 1, "jql": "project = DX"}
        api.enhanced_jql.return_value = {"issues": [{"key": "DX-1"}, {"key": "DX-2"}]}
        api.issue.side_effect = lambda key, fields: _issue(key)

        tickets = client.get_tickets_by_filter(Filter(name="F", jql="project = DX"))

        api.enhanced_jql.assert_called_once_with("project = DX", fields="key")
        assert [t.key for t in tickets] == ["DX-1", "DX-2"]

    def test_lookup_failure_propagates(self):
        client, api = _client()
        api.get.return_value = {"values": []}
        api.post.return_value = {"id": 1, "jql": "q"}
        api.enhanced_jql.return_value = {"issues": [{"key": "DX-1"}]}
        api.issue.side_effect = RuntimeError("401 Unauthorized")

        with pytest.raises(RuntimeError):
            client.get_tickets_by_filter(Filter(name="F", jql="q"))

    def test_get_board_groups_by_status(self):
        client, api = _client()
        api.get.return_value = {"values": []}
        api.post.side_effect = lambda path, data: {"id": 1, "jql": data["jql"]}
        api.enhanced_jql.side_effect = lambda jql, fields: {"issues": [{"key": "DX-1"}] if "In Progress" in jql else []}
        api.issue.side_effect = lambda key, fields: _issue(key)

        board = client.get_board("DX", statuses=("In Progress", "Done"))

        assert list(board) == ["In Progress", "Done"]
        assert [t.key for t in board["In Progress"]] == ["DX-1"]
        assert board["Done"] == []
