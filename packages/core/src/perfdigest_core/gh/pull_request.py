from __future__ import annotations

import logging

from github import Auth, Github

logger = logging.getLogger(__name__)

SEARCH_SORT = "created"
SEARCH_ORDER = "desc"


def get_client(token: str) -> Github:
    return Github(auth=Auth.Token(token))


def search_pull_requests(client: Github, query: str) -> list:
    """Run an issue search and return every result as a list of ``Issue`` objects."""
    logger.debug("Searching GitHub: %s", query)
    return list(client.search_issues(query, sort=SEARCH_SORT, order=SEARCH_ORDER))


def get_repo(client: Github, owner: str, repo: str):
    return client.get_repo(f"{owner}/{repo}")


def get_pull(repo, pr_number: int):
    return repo.get_pull(pr_number)


def get_commits(pr):
    return pr.get_commits()


def get_commit_detail(repo, sha: str):
    """Fetch the full commit, including changed files and patches."""
    return repo.get_commit(sha)


def get_reviews(pr):
    return pr.get_reviews()


def get_review_comments(pr, review_id: int):
    return pr.get_single_review_comments(review_id)


def get_issue_comments(pr):
    return pr.get_issue_comments()
