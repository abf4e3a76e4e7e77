"""Keyed accumulation, skip predicates and merge policies.

Every aggregation step in the pipeline follows the same shape: decide whether
an item should be skipped, derive a key, then insert or merge into a keyed
container. The pieces live here so each policy can be tested on its own.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, ItemsView, Iterable, Iterator, TypeVar, ValuesView

from perfdigest_core.gh.models import PullRequest, ReviewsByPullRequest
from perfdigest_core.jira.models import Ticket
from perfdigest_core.utils.tickets import extract_ticket_id

logger = logging.getLogger(__name__)

V = TypeVar("V")


class SkipReason(str, Enum):
    NO_TICKET_ID = "no_ticket_id"
    DUPLICATE = "duplicate"
    INVALID_KEY = "invalid_key"


@dataclass(frozen=True)
class Skip:
    """Tagged result for an item that is dropped from aggregation."""

    reason: SkipReason
    detail: str = ""


class KeyedAccumulator(Generic[V]):
    """Insertion-ordered mapping with an explicit insert-or-merge operation."""

    def __init__(self) -> None:
        self._items: dict[str, V] = {}

    def upsert(self, key: str, value: V, merge: Callable[[V, V], V]) -> V:
        """Insert ``value`` under ``key`` or merge it into the existing entry.

        ``merge(existing, incoming)`` returns the value to store. Empty keys
        are rejected with ValueError.
        """
        if not key:
            raise ValueError("refusing to insert an empty key")
        if key in self._items:
            self._items[key] = merge(self._items[key], value)
        else:
            self._items[key] = value
        return self._items[key]

    def get(self, key: str) -> V | None:
        return self._items.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def items(self) -> ItemsView[str, V]:
        return self._items.items()

    def values(self) -> ValuesView[V]:
        return self._items.values()

    def as_dict(self) -> dict[str, V]:
        return dict(self._items)


def make_pr_key(owner: str, repo: str, number: int) -> str:
    """Return ``owner/repo/number`` or ``""`` when any part is missing or invalid."""
    if not owner or not repo or number <= 0:
        return ""
    return f"{owner}/{repo}/{number}"


def classify_search_result(title: str, pr_id: int, seen_ids: Iterable[int]) -> str | Skip:
    """Return the ticket key for a search result, or a Skip explaining why it is dropped."""
    ticket = extract_ticket_id(title)
    if not ticket:
        return Skip(SkipReason.NO_TICKET_ID, title)
    if pr_id in seen_ids:
        return Skip(SkipReason.DUPLICATE, str(pr_id))
    return ticket


def check_pr_key(pr: PullRequest) -> str | Skip:
    key = make_pr_key(pr.owner, pr.repo, pr.number)
    if not key:
        return Skip(SkipReason.INVALID_KEY, f"{pr.owner!r}/{pr.repo!r}/{pr.number!r}")
    return key


def _append_unique(existing: list, incoming: Iterable, key: Callable) -> None:
    seen = {key(item) for item in existing}
    for item in incoming:
        k = key(item)
        if k in seen:
            continue
        seen.add(k)
        existing.append(item)


def merge_reviews(existing: ReviewsByPullRequest, incoming: ReviewsByPullRequest) -> ReviewsByPullRequest:
    """Concatenate reviews and comments in encounter order, dropping repeated ids."""
    _append_unique(existing.reviews, incoming.reviews, key=lambda r: r.summary.id)
    _append_unique(existing.comments, incoming.comments, key=lambda c: c.id)
    return existing


def merge_ticket_pull_requests(existing: Ticket, incoming: Ticket) -> Ticket:
    for pr in incoming.pull_requests:
        existing.add_pull_request(pr)
    return existing


def aggregate_pull_requests_by_ticket(
    fetch_ticket: Callable[[str], Ticket],
    pull_requests: Iterable[PullRequest],
    accumulator: KeyedAccumulator[Ticket] | None = None,
) -> KeyedAccumulator[Ticket]:
    """Group PRs under their Jira ticket, fetching each ticket once.

    Any failure from ``fetch_ticket`` propagates and aborts the whole pass.
    """
    tickets: KeyedAccumulator[Ticket] = accumulator if accumulator is not None else KeyedAccumulator()
    for pr in pull_requests:
        if not pr.ticket:
            logger.debug("PR %s#%d has no ticket, not enriching", pr.full_name, pr.number)
            continue
        existing = tickets.get(pr.ticket)
        if existing is not None:
            existing.add_pull_request(pr)
            continue
        ticket = fetch_ticket(pr.ticket)
        ticket.add_pull_request(pr)
        tickets.upsert(pr.ticket, ticket, merge_ticket_pull_requests)
    return tickets
