"""board: the current user's Jira tickets grouped by status."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from perfdigest_cli.commands.options import handle_errors, load_command_config

console = Console()

_STATUS_STYLE = {
    "In Progress": "cyan",
    "In Review": "yellow",
    "Blocked": "red",
    "Done": "green",
    "Canceled": "dim",
}


@click.command("board")
@click.option("--project", default=None, help="Jira project key. Overrides config file.")
@click.pass_context
@handle_errors
def board_cmd(ctx, project: str | None):
    """Show the Jira tickets assigned to you, grouped by status."""
    from perfdigest_core.config import require_credentials
    from perfdigest_core.digest import get_jira_client

    config = load_command_config(ctx, jira_project=project)
    require_credentials(config, ["jira_token", "jira_username"])
    if not config.get("jira_url"):
        raise click.UsageError("jira_url is not set in the configuration file.")

    board = get_jira_client(config).get_board(config["jira_project"])

    total = sum(len(tickets) for tickets in board.values())
    if total == 0:
        console.print("[yellow]No tickets assigned to you.[/yellow]")
        return

    table = Table(title=f"Jira board: {config['jira_project']}", show_header=True, header_style="bold cyan")
    table.add_column("Status", width=24)
    table.add_column("Key", style="bold", width=10)
    table.add_column("Title", max_width=60)
    table.add_column("Updated", width=16)

    for status, tickets in board.items():
        style = _STATUS_STYLE.get(status, "white")
        for t in tickets:
            updated = t.updated.strftime("%Y-%m-%d %H:%M") if t.updated else ""
            table.add_row(f"[{style}]{status}[/{style}]", t.key, t.title[:60], updated)

    console.print(table)
    console.print(f"  Total tickets: {total}")
