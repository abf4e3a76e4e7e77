"""Tests for the CLI entry point."""

import json

import pytest
import requests
from click.testing import CliRunner
from github import GithubException

from perfdigest_cli.cli import main
from perfdigest_core.config import MissingCredentialError
from perfdigest_core.digest import Activity, DigestResult
from perfdigest_core.jira.models import Ticket


def _make_config(**overrides):
    config = {
        "org": "acme",
        "user": "alice",
        "jira_url": "https://acme.atlassian.net",
        "jira_project": "DX",
        "jira_user": "Alice A",
        "model": "openai",
        "prompt": None,
        "date_from": None,
        "date_to": None,
        "github_token": "gh",
        "jira_token": "jt",
        "jira_username": "me",
        "openai_api_key": "oai",
    }
    config.update(overrides)
    return config


def _result(summary="**Great** day."):
    activity = Activity(date_from="2025-06-16", date_to="2025-06-17", new_tickets=[Ticket(key="DX-9")])
    return DigestResult(activity=activity, report="Date: 2025-06-16\nreport body\n", summary=summary)


def _patch_config(mocker, config=None):
    return mocker.patch("perfdigest_core.config.load_config", return_value=config or _make_config())


class TestSummaryCommand:
    def test_prints_summary(self, mocker):
        _patch_config(mocker)
        mocker.patch("perfdigest_cli.commands.summary.run_digest", return_value=_result())

        result = CliRunner().invoke(main, ["summary", "--raw"])

        assert result.exit_code == 0
        assert "**Great** day." in result.output

    def test_cli_options_become_overrides(self, mocker):
        load = _patch_config(mocker)
        mocker.patch("perfdigest_cli.commands.summary.run_digest", return_value=_result())

        CliRunner().invoke(
            main,
            ["--config", "custom.yml", "summary", "--from", "2025-06-16", "--to", "2025-06-17", "--org", "other"],
        )

        assert load.call_args.args[0] == "custom.yml"
        overrides = load.call_args.kwargs["cli_overrides"]
        assert overrides["date_from"] == "2025-06-16"
        assert overrides["date_to"] == "2025-06-17"
        assert overrides["org"] == "other"
        assert overrides["user"] is None

    def test_dump_input_writes_report(self, mocker, tmp_path):
        _patch_config(mocker)
        mocker.patch("perfdigest_cli.commands.summary.run_digest", return_value=_result())
        target = tmp_path / "input.txt"

        result = CliRunner().invoke(main, ["summary", "--dump-input", str(target)])

        assert result.exit_code == 0
        assert target.read_text() == "Date: 2025-06-16\nreport body\n"

    def test_missing_credentials_is_usage_error(self, mocker):
        _patch_config(mocker)
        mocker.patch(
            "perfdigest_cli.commands.summary.run_digest",
            side_effect=MissingCredentialError(["GITHUB_API_TOKEN"]),
        )

        result = CliRunner().invoke(main, ["summary"])

        assert result.exit_code == 2
        assert "GITHUB_API_TOKEN" in result.output

    def test_api_error_exits_non_zero(self, mocker):
        _patch_config(mocker)
        mocker.patch(
            "perfdigest_cli.commands.summary.run_digest",
            side_effect=GithubException(502, {"message": "Bad gateway"}, None),
        )

        result = CliRunner().invoke(main, ["summary"])

        assert result.exit_code == 1
        assert "GitHub API error" in result.output

    def test_connection_error_exits_non_zero(self, mocker):
        _patch_config(mocker)
        mocker.patch(
            "perfdigest_cli.commands.summary.run_digest",
            side_effect=requests.ConnectionError("Connection refused"),
        )

        result = CliRunner().invoke(main, ["summary"])

        assert result.exit_code == 1
        assert "HTTP request failed: Connection refused" in result.output

    def test_anthropic_error_exits_non_zero(self, mocker):
        anthropic = pytest.importorskip("anthropic")
        httpx = pytest.importorskip("httpx")
        _patch_config(mocker)
        error = anthropic.APIError(
            "overloaded", httpx.Request("POST", "https://api.anthropic.com/v1/messages"), body=None
        )
        mocker.patch("perfdigest_cli.commands.summary.run_digest", side_effect=error)

        result = CliRunner().invoke(main, ["summary", "--model", "anthropic"])

        assert result.exit_code == 1
        assert "Completion failed: overloaded" in result.output

    def test_bad_date_exits_non_zero(self, mocker):
        _patch_config(mocker)
        mocker.patch("perfdigest_cli.commands.summary.run_digest", side_effect=ValueError("invalid date string"))

        result = CliRunner().invoke(main, ["summary", "--from", "yesterday"])

        assert result.exit_code == 1
        assert "invalid date string" in result.output


class TestReportCommand:
    def test_prints_report_without_summarizing(self, mocker):
        _patch_config(mocker)
        run = mocker.patch("perfdigest_cli.commands.report.run_digest", return_value=_result(summary=None))

        result = CliRunner().invoke(main, ["report"])

        assert result.exit_code == 0
        assert "report body" in result.output
        assert run.call_args.kwargs["summarize"] is False

    def test_json_dump(self, mocker):
        _patch_config(mocker)
        mocker.patch("perfdigest_cli.commands.report.run_digest", return_value=_result(summary=None))

        result = CliRunner().invoke(main, ["report", "--json"])

        data = json.loads(result.output)
        assert data["date_from"] == "2025-06-16"
        assert data["new_tickets"][0]["key"] == "DX-9"


class TestBoardCommand:
    def test_renders_board(self, mocker):
        _patch_config(mocker)
        client = mocker.patch("perfdigest_core.digest.get_jira_client").return_value
        client.get_board.return_value = {"In Progress": [Ticket(key="DX-1", title="Fix login")], "Done": []}

        result = CliRunner().invoke(main, ["board"])

        assert result.exit_code == 0
        assert "DX-1" in result.output
        assert "Total tickets: 1" in result.output
        client.get_board.assert_called_once_with("DX")

    def test_empty_board(self, mocker):
        _patch_config(mocker)
        client = mocker.patch("perfdigest_core.digest.get_jira_client").return_value
        client.get_board.return_value = {"In Progress": []}

        result = CliRunner().invoke(main, ["board"])

        assert "No tickets assigned" in result.output

    def test_missing_jira_credentials(self, mocker):
        _patch_config(mocker, _make_config(jira_token=None))

        result = CliRunner().invoke(main, ["board"])

        assert result.exit_code == 2
        assert "JIRA_API_TOKEN" in result.output
