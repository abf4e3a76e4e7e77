"""report: print the collected activity without calling the model."""

from __future__ import annotations

import click

from perfdigest_cli.commands.options import handle_errors, load_command_config, range_options
from perfdigest_core.digest import run_digest
from perfdigest_core.utils.dump import dump_json


@click.command("report")
@range_options
@click.option("--json", "as_json", is_flag=True, help="Print a JSON dump of the collected data instead.")
@click.pass_context
@handle_errors
def report_cmd(ctx, date_from: str | None, date_to: str | None, org: str | None, user: str | None, as_json: bool):
    """Print the activity report that would be sent to the model."""
    config = load_command_config(ctx, date_from=date_from, date_to=date_to, org=org, user=user)
    result = run_digest(config, summarize=False)

    if as_json:
        click.echo(dump_json(result.activity))
    else:
        click.echo(result.report, nl=False)
