"""summary: collect activity and generate the performance summary."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.markdown import Markdown

from perfdigest_cli.commands.options import handle_errors, load_command_config, range_options
from perfdigest_core.digest import run_digest

console = Console()


@click.command("summary")
@range_options
@click.option(
    "--model",
    type=click.Choice(["openai", "anthropic"]),
    default=None,
    help="AI model provider. Overrides config file.",
)
@click.option(
    "--prompt",
    "prompt_path",
    default=None,
    help="Path to a system prompt file. Overrides config file.",
)
@click.option(
    "--dump-input",
    "dump_input",
    type=click.Path(dir_okay=False, writable=True),
    default=None,
    help="Also write the assembled activity report sent to the model to this file.",
)
@click.option("--raw", is_flag=True, help="Print the summary as plain text instead of rendered Markdown.")
@click.pass_context
@handle_errors
def summary_cmd(
    ctx,
    date_from: str | None,
    date_to: str | None,
    org: str | None,
    user: str | None,
    model: str | None,
    prompt_path: str | None,
    dump_input: str | None,
    raw: bool,
):
    """Generate a performance summary for a date range.

    Collects Jira tickets created in the range, authored pull requests grouped
    by ticket (with the commits of the first day) and reviews given on other
    people's pull requests, then asks the model to summarize them.

    \b
    Required environment variables:
      GITHUB_API_TOKEN     GitHub personal access token
      JIRA_API_TOKEN       Jira API token
      JIRA_USERNAME        Jira account e-mail
      OPENAI_API_KEY       Required when using --model openai (default)
      ANTHROPIC_API_KEY    Required when using --model anthropic
    """
    config = load_command_config(
        ctx,
        date_from=date_from,
        date_to=date_to,
        org=org,
        user=user,
        model=model,
        prompt=prompt_path,
    )

    result = run_digest(config)

    if dump_input:
        Path(dump_input).write_text(result.report, encoding="utf-8")
        console.print(f"[dim]Activity report written to {dump_input}[/dim]")

    if raw:
        click.echo(result.summary)
    else:
        console.print(Markdown(result.summary))
