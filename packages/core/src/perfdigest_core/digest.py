"""Core digest orchestration."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from rich.console import Console

from perfdigest_core.aggregate import KeyedAccumulator, Skip, aggregate_pull_requests_by_ticket
from perfdigest_core.config import load_prompt, require_credentials, required_credentials
from perfdigest_core.gh.activity import fetch_pull_requests_by_date, fetch_reviewed_pull_requests
from perfdigest_core.gh.models import PullRequest, ReviewsByPullRequest
from perfdigest_core.gh.pull_request import get_client
from perfdigest_core.jira.client import JiraClient, created_tickets_filter
from perfdigest_core.jira.models import Ticket
from perfdigest_core.providers.anthropic import AnthropicSummarizer
from perfdigest_core.providers.openai import OpenAISummarizer
from perfdigest_core.report import assemble_report
from perfdigest_core.utils.dates import default_date_range, parse_date

console = Console(stderr=True)
logger = logging.getLogger(__name__)


@dataclass
class Activity:
    """Everything collected for one date range, before formatting."""

    date_from: str
    date_to: str
    new_tickets: list[Ticket] = field(default_factory=list)
    pull_requests: list[PullRequest] = field(default_factory=list)
    tickets: KeyedAccumulator[Ticket] = field(default_factory=KeyedAccumulator)
    reviews: KeyedAccumulator[ReviewsByPullRequest] = field(default_factory=KeyedAccumulator)
    skipped: list[Skip] = field(default_factory=list)


@dataclass
class DigestResult:
    activity: Activity
    report: str
    summary: str | None = None


def resolve_date_range(config: dict) -> tuple[str, str]:
    """Return the configured range, defaulting missing ends to yesterday/today (UTC)."""
    default_from, default_to = default_date_range()
    date_from = config.get("date_from") or default_from
    date_to = config.get("date_to") or default_to
    # Fail on malformed dates before any network call.
    if parse_date(date_from) > parse_date(date_to):
        raise ValueError(f"date_from {date_from} is after date_to {date_to}")
    return date_from, date_to


def _require_settings(config: dict, keys: tuple[str, ...]) -> None:
    missing = [k for k in keys if not config.get(k)]
    if missing:
        raise ValueError(f"Missing configuration value(s): {', '.join(missing)}")


def get_summarizer(config: dict):
    model = config["model"]
    if model == "openai":
        return OpenAISummarizer(api_key=config["openai_api_key"], model=config.get("model_name"))
    if model == "anthropic":
        return AnthropicSummarizer(api_key=config["anthropic_api_key"], model=config.get("model_name"))
    raise ValueError(f"Unknown model provider: {model!r}. Choose 'openai' or 'anthropic'.")


def get_jira_client(config: dict) -> JiraClient:
    return JiraClient(url=config["jira_url"], username=config["jira_username"], token=config["jira_token"])


def collect_activity(config: dict, gh_client, jira_client: JiraClient) -> Activity:
    """Fetch tickets, authored PRs and reviews in the fixed pipeline order."""
    date_from, date_to = resolve_date_range(config)
    org, user = config["org"], config["user"]
    activity = Activity(date_from=date_from, date_to=date_to)

    console.print(f"[cyan]Collecting activity for {user} in {org}: {date_from} → {date_to}[/cyan]")

    jira_filter = created_tickets_filter(config["jira_project"], config["jira_user"], date_from, date_to)
    activity.new_tickets = jira_client.get_tickets_by_filter(jira_filter)
    console.print(f"  {len(activity.new_tickets)} ticket(s) created.")

    authored = fetch_pull_requests_by_date(gh_client, org, user, date_from, date_to)
    activity.pull_requests = authored.pull_requests
    activity.skipped.extend(authored.skipped)
    console.print(f"  {len(authored.pull_requests)} authored pull request(s) linked to tickets.")

    activity.tickets = aggregate_pull_requests_by_ticket(jira_client.get_ticket, authored.pull_requests)
    console.print(f"  {len(activity.tickets)} ticket(s) with contributions.")

    reviewed = fetch_reviewed_pull_requests(gh_client, org, user, date_from, date_to)
    activity.reviews = reviewed.reviews
    activity.skipped.extend(reviewed.skipped)
    console.print(f"  {len(reviewed.reviews)} reviewed pull request(s).")

    if activity.skipped:
        logger.info("Skipped %d search result(s)", len(activity.skipped))
    return activity


def build_report(config: dict, activity: Activity) -> str:
    return assemble_report(
        activity.date_from,
        activity.new_tickets,
        activity.tickets.as_dict(),
        activity.reviews.as_dict(),
        max_chars=config.get("max_chars_per_patch", 4000),
    )


def run_digest(
    config: dict,
    summarize: bool = True,
    gh_client=None,
    jira_client: JiraClient | None = None,
) -> DigestResult:
    """Run the full pipeline and return the collected activity, report text and summary.

    With ``summarize=False`` the completion API is not called and no model
    credential is required.
    """
    require_credentials(config, required_credentials(config, summarize=summarize))
    _require_settings(config, ("org", "user", "jira_url", "jira_project", "jira_user"))
    system_prompt = load_prompt(config) if summarize else None

    gh_client = gh_client if gh_client is not None else get_client(config["github_token"])
    jira_client = jira_client if jira_client is not None else get_jira_client(config)

    activity = collect_activity(config, gh_client, jira_client)
    report = build_report(config, activity)

    if not summarize:
        return DigestResult(activity=activity, report=report)

    summarizer = get_summarizer(config)
    console.print("[dim]Requesting summary...[/dim]")
    summary = summarizer.summarize(report, system_prompt)
    return DigestResult(activity=activity, report=report, summary=summary)
