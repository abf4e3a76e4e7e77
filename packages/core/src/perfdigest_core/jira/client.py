"""Thin wrapper around ``atlassian.Jira``.

Tickets are located through named saved filters: a filter with the given
name is created, or updated in place when one already exists, and its JQL
is then run. Every ticket is re-fetched by key with a fixed field set so
that tickets from a filter and tickets looked up from PR titles carry the
same data.
"""

from __future__ import annotations

import logging

from atlassian import Jira

from perfdigest_core.jira.models import Filter, Ticket

logger = logging.getLogger(__name__)

ISSUE_FIELDS = "assignee,creator,reporter,summary,description,comment,created,updated,status"

_FILTER_PATH = "rest/api/3/filter"

BOARD_STATUSES = (
    "Selected for Development",
    "In Progress",
    "In Review",
    "Blocked",
    "Canceled",
    "Done",
    "BACKLOG",
)


def created_tickets_filter(project: str, reporter: str, date_from: str, date_to: str) -> Filter:
    return Filter(
        name="Created today",
        jql=(
            f"project = {project} AND type IN (standardIssueTypes(), subTaskIssueTypes()) "
            f'AND reporter = "{reporter}" AND created >= "{date_from}" AND created <= "{date_to}" '
            "ORDER BY created DESC"
        ),
    )


def status_filter(project: str, status: str) -> Filter:
    return Filter(
        name=status,
        jql=(
            f"project = {project} AND type IN (standardIssueTypes(), subTaskIssueTypes()) "
            f'AND assignee = currentUser() AND status = "{status}" ORDER BY created DESC'
        ),
    )


class JiraClient:
    def __init__(self, url: str, username: str, token: str, client: Jira | None = None):
        self.client = client if client is not None else Jira(url=url, username=username, password=token, cloud=True)

    def find_filter(self, name: str) -> Filter | None:
        """Return the saved filter with exactly this name, or None."""
        result = self.client.get(
            f"{_FILTER_PATH}/search",
            params={"filterName": name, "expand": "jql,owner"},
        )
        for value in (result or {}).get("values", []):
            if value.get("name") == name:
                return Filter(name=value["name"], jql=value.get("jql", ""), id=str(value.get("id")))
        return None

    def save_filter(self, name: str, jql: str) -> Filter:
        """Create the named filter or overwrite the JQL of the existing one."""
        payload = {"name": name, "jql": jql}
        existing = self.find_filter(name)
        if existing is not None:
            logger.debug("Updating Jira filter %r (id=%s)", name, existing.id)
            self.client.put(f"{_FILTER_PATH}/{existing.id}", data=payload)
            return Filter(name=name, jql=jql, id=existing.id)

        logger.debug("Creating Jira filter %r", name)
        created = self.client.post(_FILTER_PATH, data=payload) or {}
        return Filter(name=name, jql=created.get("jql", jql), id=str(created.get("id")))

    def search_keys(self, jql: str) -> list[str]:
        # Jira Cloud retired /rest/api/2/search; enhanced_jql uses /rest/api/3/search/jql.
        result = self.client.enhanced_jql(jql, fields="key")
        keys = [issue["key"] for issue in (result or {}).get("issues", [])]
        logger.info("Found %d Jira issue(s)", len(keys))
        return keys

    def get_ticket(self, key: str) -> Ticket:
        issue = self.client.issue(key, fields=ISSUE_FIELDS)
        if not issue:
            raise LookupError(f"Jira issue {key} not found")
        return Ticket.from_api(issue)

    def get_tickets_by_filter(self, jira_filter: Filter) -> list[Ticket]:
        saved = self.save_filter(jira_filter.name, jira_filter.jql)
        return [self.get_ticket(key) for key in self.search_keys(saved.jql)]

    def get_board(self, project: str, statuses: tuple[str, ...] = BOARD_STATUSES) -> dict[str, list[Ticket]]:
        """Return the current user's tickets in ``project`` grouped by status."""
        board: dict[str, list[Ticket]] = {}
        for status in statuses:
            board[status] = self.get_tickets_by_filter(status_filter(project, status))
        logger.info("Board: %d ticket(s) total", sum(len(t) for t in board.values()))
        return board
