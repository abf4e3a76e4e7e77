"""Collect a user's GitHub activity for a date range.

Two passes over the search API:

- authored PRs (query classes ``created`` then ``updated``), each carrying
  the commits made on the first day of the range;
- PRs by other people the user commented on (``reviewed``), grouped by
  ``owner/repo/number`` together with the user's reviews and comments.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from github import Github

from perfdigest_core.aggregate import (
    KeyedAccumulator,
    Skip,
    check_pr_key,
    classify_search_result,
    merge_reviews,
)
from perfdigest_core.gh.models import (
    Commit,
    IssueComment,
    PullRequest,
    Review,
    ReviewComment,
    ReviewsByPullRequest,
    ReviewSummary,
)
from perfdigest_core.gh.pull_request import (
    get_commit_detail,
    get_commits,
    get_issue_comments,
    get_pull,
    get_repo,
    get_review_comments,
    get_reviews,
    search_pull_requests,
)
from perfdigest_core.utils.dates import is_on_date, parse_date
from perfdigest_core.utils.tickets import extract_ticket_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Query:
    name: str
    query: str


@dataclass
class AuthoredPullRequests:
    pull_requests: list[PullRequest] = field(default_factory=list)
    skipped: list[Skip] = field(default_factory=list)


@dataclass
class ReviewedPullRequests:
    reviews: KeyedAccumulator[ReviewsByPullRequest] = field(default_factory=KeyedAccumulator)
    skipped: list[Skip] = field(default_factory=list)


def authored_queries(org: str, user: str, date_from: str, date_to: str) -> list[Query]:
    """Return the authored-PR queries in processing order: created, then updated."""
    window = f"{date_from}..{date_to}"
    return [
        Query("created", f"org:{org} type:pr author:{user} created:{window}"),
        Query("updated", f"org:{org} type:pr author:{user} -created:{window} updated:{window}"),
    ]


def reviewed_query(org: str, user: str, date_from: str, date_to: str) -> Query:
    window = f"{date_from}..{date_to}"
    return Query("reviewed", f"org:{org} type:pr -author:{user} commenter:{user} updated:{window}")


def fetch_commits(client: Github, pr: PullRequest, date: str) -> list[Commit]:
    """Return the PR's commits authored on ``date`` (UTC), in PR order."""
    parse_date(date)
    repo = get_repo(client, pr.owner, pr.repo)
    pull = get_pull(repo, pr.number)

    commits: list[Commit] = []
    for repo_commit in get_commits(pull):
        commit = Commit.from_github(get_commit_detail(repo, repo_commit.sha))
        if is_on_date(commit.timestamp, date):
            commits.append(commit)
    logger.debug("%s#%d: %d commit(s) on %s", pr.full_name, pr.number, len(commits), date)
    return commits


def fetch_pull_requests_by_date(
    client: Github,
    org: str,
    user: str,
    date_from: str,
    date_to: str,
) -> AuthoredPullRequests:
    """Collect PRs authored by ``user`` that were created or updated in the range.

    PRs without a ticket key in the title and PRs already seen in an earlier
    query are skipped. Every kept PR has its commits filtered to ``date_from``.
    """
    result = AuthoredPullRequests()
    seen_ids: set[int] = set()

    for q in authored_queries(org, user, date_from, date_to):
        issues = search_pull_requests(client, q.query)
        logger.info("Query %r returned %d result(s)", q.name, len(issues))

        for issue in issues:
            outcome = classify_search_result(issue.title, issue.id, seen_ids)
            if isinstance(outcome, Skip):
                logger.debug("Skipping PR %s (%s)", issue.html_url, outcome.reason.value)
                result.skipped.append(outcome)
                continue

            pr = PullRequest.from_search_result(issue, q.name, ticket=outcome)
            pr.commits = fetch_commits(client, pr, date_from)
            seen_ids.add(pr.id)
            result.pull_requests.append(pr)

    return result


def fetch_issue_comments(pull, user: str) -> list[IssueComment]:
    comments = [IssueComment.from_github(c) for c in get_issue_comments(pull)]
    return [c for c in comments if c.user == user]


def fetch_reviews(pull, user: str, date: str) -> list[Review]:
    """Return ``user``'s reviews of ``pull`` submitted on ``date`` with their inline comments."""
    parse_date(date)

    reviews: list[Review] = []
    for gh_review in get_reviews(pull):
        summary = ReviewSummary.from_github(gh_review)
        if summary.user != user or not is_on_date(summary.submitted_at, date):
            continue
        comments = [ReviewComment.from_github(c) for c in get_review_comments(pull, summary.id)]
        reviews.append(Review(summary=summary, comments=comments))
    return reviews


def fetch_reviewed_pull_requests(
    client: Github,
    org: str,
    user: str,
    date_from: str,
    date_to: str,
) -> ReviewedPullRequests:
    """Collect ``user``'s reviews and comments on other people's PRs."""
    result = ReviewedPullRequests()
    q = reviewed_query(org, user, date_from, date_to)
    issues = search_pull_requests(client, q.query)
    logger.info("Query %r returned %d result(s)", q.name, len(issues))

    for issue in issues:
        pr = PullRequest.from_search_result(issue, q.name, ticket=extract_ticket_id(issue.title))
        key = check_pr_key(pr)
        if isinstance(key, Skip):
            logger.debug("Skipping reviewed PR %s (%s)", pr.url, key.reason.value)
            result.skipped.append(key)
            continue

        pull = get_pull(get_repo(client, pr.owner, pr.repo), pr.number)
        entry = ReviewsByPullRequest(
            pull_request=pr,
            reviews=fetch_reviews(pull, user, date_from),
            comments=fetch_issue_comments(pull, user),
        )
        result.reviews.upsert(key, entry, merge_reviews)

    return result
