"""Tests for GitHub pull request helper functions."""

from unittest.mock import MagicMock

from perfdigest_core.gh.pull_request import (
    get_client,
    get_commit_detail,
    get_repo,
    get_review_comments,
    search_pull_requests,
)

SHA = "a" * 40


class TestSearchPullRequests:
    def test_sorted_newest_first(self):
        client = MagicMock()
        client.search_issues.return_value = iter(["first", "second"])

        results = search_pull_requests(client, "org:acme type:pr author:alice")

        assert results == ["first", "second"]
        client.search_issues.assert_called_once_with("org:acme type:pr author:alice", sort="created", order="desc")

    def test_empty_search(self):
        client = MagicMock()
        client.search_issues.return_value = iter([])
        assert search_pull_requests(client, "q") == []


class TestRepoHelpers:
    def test_get_repo_uses_full_name(self):
        client = MagicMock()
        get_repo(client, "acme", "api")
        client.get_repo.assert_called_once_with("acme/api")

    def test_commit_detail_by_sha(self):
        repo = MagicMock()
        get_commit_detail(repo, SHA)
        repo.get_commit.assert_called_once_with(SHA)

    def test_review_comments_by_review_id(self):
        pr = MagicMock()
        get_review_comments(pr, 42)
        pr.get_single_review_comments.assert_called_once_with(42)


def test_client_authenticates_with_token(mocker):
    github_cls = mocker.patch("perfdigest_core.gh.pull_request.Github")
    token_cls = mocker.patch("perfdigest_core.gh.pull_request.Auth.Token")

    get_client("gh-token")

    token_cls.assert_called_once_with("gh-token")
    github_cls.assert_called_once_with(auth=token_cls.return_value)
