"""Options and error mapping shared by the collecting commands."""

from __future__ import annotations

import functools

import click
from github import GithubException
from openai import OpenAIError
from requests import RequestException

from perfdigest_core.config import MissingCredentialError
from perfdigest_core.providers.base import CompletionError

_RANGE_OPTIONS = [
    click.option("--from", "date_from", default=None, help="First day of the range (YYYY-MM-DD). Default: yesterday."),
    click.option("--to", "date_to", default=None, help="Last day of the range (YYYY-MM-DD). Default: today."),
    click.option("--org", default=None, help="GitHub organization. Overrides config file."),
    click.option("--user", default=None, help="GitHub login of the developer. Overrides config file."),
]


def _completion_errors() -> tuple:
    errors: tuple = (CompletionError, OpenAIError)
    try:
        import anthropic
    except ImportError:
        return errors
    return errors + (anthropic.APIError,)


_COMPLETION_ERRORS = _completion_errors()


def range_options(func):
    for option in reversed(_RANGE_OPTIONS):
        func = option(func)
    return func


def load_command_config(ctx: click.Context, **overrides) -> dict:
    from perfdigest_core.config import load_config

    config_path = ctx.obj.get("config_path", ".perfdigest.yml") if ctx.obj else ".perfdigest.yml"
    return load_config(config_path, cli_overrides=overrides)


def handle_errors(func):
    """Turn pipeline failures into click errors so the run ends with a message and a non-zero exit."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (MissingCredentialError, FileNotFoundError) as e:
            raise click.UsageError(str(e))
        except GithubException as e:
            raise click.ClickException(f"GitHub API error ({e.status}): {e.data}")
        except RequestException as e:
            raise click.ClickException(f"HTTP request failed: {e}")
        except _COMPLETION_ERRORS as e:
            raise click.ClickException(f"Completion failed: {e}")
        except (LookupError, ValueError) as e:
            raise click.ClickException(str(e))

    return wrapper
