"""Render aggregated activity as prompt text for the summary model.

The output is read by a language model, not parsed back, so the layout only
has to be stable and readable. Debug serialization lives in
``perfdigest_core.utils.dump`` and is deliberately independent of this.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Mapping

from perfdigest_core.gh.models import Commit, PullRequest, ReviewsByPullRequest
from perfdigest_core.jira.models import Ticket

CREATED_TICKETS_HEADER = "Jira Tickets created today"
CONTRIBUTIONS_HEADER = "Individual contributions by Jira Ticket"
REVIEWS_HEADER = "Reviewed Pull Requests"

DEFAULT_MAX_CHARS = 4000


def _ts(value: datetime | None) -> str:
    return value.strftime("%Y-%m-%d %H:%M UTC") if value is not None else "-"


def _truncate(text: str, max_chars: int) -> str:
    if len(text) > max_chars:
        return text[:max_chars] + "\n... [truncated]"
    return text


def _indent(text: str, prefix: str = "    ") -> str:
    return "\n".join(prefix + line for line in text.splitlines())


def format_ticket(ticket: Ticket, max_chars: int = DEFAULT_MAX_CHARS) -> str:
    lines = [
        f"[{ticket.key}] {ticket.title}",
        f"  Status: {ticket.status or '-'}",
        f"  Reporter: {ticket.reporter or '-'}  Assignee: {ticket.assignee or '-'}",
        f"  Created: {_ts(ticket.created)}  Updated: {_ts(ticket.updated)}",
    ]
    if ticket.body:
        lines.append("  Description:")
        lines.append(_indent(_truncate(ticket.body, max_chars)))
    if ticket.comments:
        lines.append("  Comments:")
        for c in ticket.comments:
            lines.append(f"  - {c.author} ({_ts(c.created_at)}):")
            lines.append(_indent(_truncate(c.body, max_chars), "      "))
    return "\n".join(lines)


def format_commit(commit: Commit, max_chars: int = DEFAULT_MAX_CHARS) -> str:
    lines = [f"Commit {commit.sha[:7]} by {commit.author} at {_ts(commit.timestamp)}"]
    lines.append(_indent(commit.message.strip() or "(no message)"))
    for f in commit.files:
        renamed = f" (from {f.previous_filename})" if f.previous_filename else ""
        lines.append(f"  File {f.filename} [{f.status}]{renamed}")
        if f.patch:
            lines.append(_indent(_truncate(f.patch, max_chars), "      "))
    return "\n".join(lines)


def format_pull_request(pr: PullRequest, max_chars: int = DEFAULT_MAX_CHARS, with_commits: bool = True) -> str:
    lines = [
        f"Pull Request {pr.full_name}#{pr.number}: {pr.title}",
        f"  Author: {pr.author}  Created: {_ts(pr.created_at)}",
        f"  URL: {pr.url}",
    ]
    if pr.description:
        lines.append("  Description:")
        lines.append(_indent(_truncate(pr.description, max_chars)))
    if with_commits:
        if pr.commits:
            lines.append(f"  Commits on this day ({len(pr.commits)}):")
            for commit in pr.commits:
                lines.append(_indent(format_commit(commit, max_chars)))
        else:
            lines.append("  No commits on this day.")
    return "\n".join(lines)


def format_reviews(entry: ReviewsByPullRequest, max_chars: int = DEFAULT_MAX_CHARS) -> str:
    lines = [format_pull_request(entry.pull_request, max_chars, with_commits=False)]
    for review in entry.reviews:
        s = review.summary
        lines.append(f"  Review {s.state or 'COMMENTED'} at {_ts(s.submitted_at)}")
        if s.body:
            lines.append(_indent(_truncate(s.body, max_chars), "      "))
        for c in review.comments:
            lines.append(f"    On {c.path}:")
            if c.diff_hunk:
                lines.append(_indent(_truncate(c.diff_hunk, max_chars), "        "))
            lines.append(_indent(c.body, "      > "))
    if entry.comments:
        lines.append("  Conversation comments:")
        for c in entry.comments:
            lines.append(f"  - {_ts(c.created_at)}:")
            lines.append(_indent(_truncate(c.body, max_chars), "      "))
    return "\n".join(lines)


def assemble_report(
    date: str,
    new_tickets: Iterable[Ticket],
    tickets_by_key: Mapping[str, Ticket],
    reviews_by_pr: Mapping[str, ReviewsByPullRequest],
    max_chars: int = DEFAULT_MAX_CHARS,
) -> str:
    """Concatenate the three activity sections into one text block."""
    parts = [f"Date: {date}", "", f"{CREATED_TICKETS_HEADER}:"]
    for ticket in new_tickets:
        parts.append(format_ticket(ticket, max_chars))
        parts.append("")

    parts += ["", f"{CONTRIBUTIONS_HEADER}:"]
    for key, ticket in tickets_by_key.items():
        parts.append(f"TICKET [{key}]:")
        parts.append(format_ticket(ticket, max_chars))
        for pr in ticket.pull_requests:
            parts.append(_indent(format_pull_request(pr, max_chars), "  "))
        parts.append("")

    parts += ["", f"{REVIEWS_HEADER}:"]
    for key, entry in reviews_by_pr.items():
        parts.append(f"PULL REQUEST [{key}]:")
        parts.append(format_reviews(entry, max_chars))
        parts.append("")

    return "\n".join(parts).rstrip() + "\n"
