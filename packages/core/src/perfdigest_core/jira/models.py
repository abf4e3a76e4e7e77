"""Jira ticket records.

Built from the plain dicts returned by ``atlassian.Jira`` so the rest of the
pipeline never touches raw API payloads.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from perfdigest_core.gh.models import PullRequest

JIRA_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S.%f%z"


def parse_jira_time(value: str | None) -> datetime | None:
    """Parse a Jira timestamp such as ``2025-06-16T09:15:02.123+0200``.

    Returns None for a missing value and raises ValueError for a malformed one.
    """
    if not value:
        return None
    try:
        return datetime.strptime(value, JIRA_TIME_FORMAT)
    except ValueError as e:
        raise ValueError(f"failed to parse Jira timestamp {value!r}") from e


def _display_name(person: dict | None) -> str:
    if not person:
        return ""
    return person.get("displayName") or person.get("name") or ""


@dataclass
class Filter:
    name: str
    jql: str
    id: str | None = None


@dataclass(frozen=True)
class Comment:
    author: str
    created_at: datetime | None
    updated_at: datetime | None
    body: str

    @classmethod
    def from_api(cls, data: dict) -> Comment:
        return cls(
            author=_display_name(data.get("author")),
            created_at=parse_jira_time(data.get("created")),
            updated_at=parse_jira_time(data.get("updated")),
            body=data.get("body") or "",
        )


@dataclass
class Ticket:
    key: str
    created: datetime | None = None
    updated: datetime | None = None
    assignee: str = ""
    creator: str = ""
    reporter: str = ""
    title: str = ""
    body: str = ""
    status: str = ""
    comments: list[Comment] = field(default_factory=list)
    pull_requests: list[PullRequest] = field(default_factory=list)

    @classmethod
    def from_api(cls, issue: dict) -> Ticket:
        fields = issue.get("fields") or {}
        comment_block = fields.get("comment") or {}
        return cls(
            key=issue.get("key", ""),
            created=parse_jira_time(fields.get("created")),
            updated=parse_jira_time(fields.get("updated")),
            assignee=_display_name(fields.get("assignee")),
            creator=_display_name(fields.get("creator")),
            reporter=_display_name(fields.get("reporter")),
            title=fields.get("summary") or "",
            body=fields.get("description") or "",
            status=(fields.get("status") or {}).get("name", ""),
            comments=[Comment.from_api(c) for c in comment_block.get("comments") or []],
        )

    def add_pull_request(self, pr: PullRequest) -> bool:
        """Attach a PR unless one with the same id is already attached.

        Returns True when the PR was added.
        """
        if any(existing.id == pr.id for existing in self.pull_requests):
            return False
        self.pull_requests.append(pr)
        return True
