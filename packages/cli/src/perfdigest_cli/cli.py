"""CLI entry point for perfdigest.

Commands:
  summary: collect the day's activity and ask the model for a performance summary
  report: collect and print the activity report without calling the model
  board: show the current user's Jira tickets grouped by status
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.logging import RichHandler

from perfdigest_cli.commands.board import board_cmd
from perfdigest_cli.commands.report import report_cmd
from perfdigest_cli.commands.summary import summary_cmd


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=False, show_path=False)],
        force=True,
    )
    # urllib3/requests debug output drowns the pipeline's own messages.
    logging.getLogger("urllib3").setLevel(logging.WARNING)


@click.group()
@click.version_option(
    version=importlib.metadata.version("perfdigest"),
    prog_name="perfdigest",
)
@click.option(
    "--config",
    "config_path",
    default=".perfdigest.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="PERFDIGEST_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Log every API call and skipped item.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Summarize a day of GitHub and Jira activity with an LLM."""
    _configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


main.add_command(summary_cmd)
main.add_command(report_cmd)
main.add_command(board_cmd)
