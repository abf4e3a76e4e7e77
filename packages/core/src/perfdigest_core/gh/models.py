"""GitHub activity records.

Plain dataclasses decoupled from PyGithub so aggregation and report code can
be exercised without network objects. The ``from_*`` constructors are the
only place that reads PyGithub attributes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from perfdigest_core.utils.dates import to_utc


def _login(user) -> str:
    return user.login if user is not None else ""


def _utc(value: datetime | None) -> datetime | None:
    return to_utc(value) if value is not None else None


def parse_repository_url(url: str) -> tuple[str, str]:
    """Split ``https://api.github.com/repos/<owner>/<repo>`` into ``(owner, repo)``."""
    parts = [p for p in (url or "").rstrip("/").split("/") if p]
    if len(parts) < 2:
        return "", ""
    return parts[-2], parts[-1]


@dataclass(frozen=True)
class CommitFile:
    sha: str
    filename: str
    status: str
    patch: str = ""
    previous_filename: str = ""

    @classmethod
    def from_github(cls, f) -> CommitFile:
        return cls(
            sha=f.sha or "",
            filename=f.filename or "",
            status=f.status or "",
            patch=f.patch or "",
            previous_filename=f.previous_filename or "",
        )


@dataclass(frozen=True)
class Commit:
    sha: str
    author: str
    timestamp: datetime
    files: tuple[CommitFile, ...] = ()
    message: str = ""

    @classmethod
    def from_github(cls, commit) -> Commit:
        """Build from a fully fetched ``github.Commit.Commit`` (files included)."""
        git_author = commit.commit.author
        return cls(
            sha=commit.sha,
            author=git_author.name if git_author is not None else "",
            timestamp=_utc(git_author.date) if git_author is not None else None,
            files=tuple(CommitFile.from_github(f) for f in commit.files or []),
            message=commit.commit.message or "",
        )


@dataclass
class PullRequest:
    id: int
    number: int
    owner: str
    repo: str
    author: str
    created_at: datetime | None
    title: str
    description: str = ""
    url: str = ""
    ticket: str = ""
    commits: list[Commit] = field(default_factory=list)
    created: bool = False
    updated: bool = False
    reviewed: bool = False

    @classmethod
    def from_search_result(cls, issue, query: str, ticket: str = "") -> PullRequest:
        """Build from a ``github.Issue.Issue`` returned by the search API.

        ``query`` is the query class (created/updated/reviewed) that produced it.
        """
        owner, repo = parse_repository_url(issue.repository_url or "")
        return cls(
            id=issue.id,
            number=issue.number,
            owner=owner,
            repo=repo,
            author=_login(issue.user),
            created_at=_utc(issue.created_at),
            title=issue.title or "",
            description=issue.body or "",
            url=issue.html_url or "",
            ticket=ticket,
            created=query == "created",
            updated=query == "updated",
            reviewed=query == "reviewed",
        )

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass(frozen=True)
class ReviewSummary:
    id: int
    user: str
    state: str
    body: str
    submitted_at: datetime | None
    url: str = ""

    @classmethod
    def from_github(cls, review) -> ReviewSummary:
        return cls(
            id=review.id,
            user=_login(review.user),
            state=review.state or "",
            body=review.body or "",
            submitted_at=_utc(review.submitted_at),
            url=review.html_url or "",
        )


@dataclass(frozen=True)
class ReviewComment:
    """An inline comment attached to a review."""

    id: int
    user: str
    path: str
    body: str
    created_at: datetime | None
    diff_hunk: str = ""

    @classmethod
    def from_github(cls, comment) -> ReviewComment:
        return cls(
            id=comment.id,
            user=_login(comment.user),
            path=comment.path or "",
            body=comment.body or "",
            created_at=_utc(comment.created_at),
            diff_hunk=comment.diff_hunk or "",
        )


@dataclass
class Review:
    summary: ReviewSummary
    comments: list[ReviewComment] = field(default_factory=list)


@dataclass(frozen=True)
class IssueComment:
    """A top-level comment in a PR conversation."""

    id: int
    user: str
    body: str
    created_at: datetime | None
    url: str = ""

    @classmethod
    def from_github(cls, comment) -> IssueComment:
        return cls(
            id=comment.id,
            user=_login(comment.user),
            body=comment.body or "",
            created_at=_utc(comment.created_at),
            url=comment.html_url or "",
        )


@dataclass
class ReviewsByPullRequest:
    pull_request: PullRequest
    reviews: list[Review] = field(default_factory=list)
    comments: list[IssueComment] = field(default_factory=list)
