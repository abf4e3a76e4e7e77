import os
from datetime import date
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG: dict = {
    "org": None,
    "user": None,  # GitHub login
    "jira_url": None,
    "jira_project": "DX",
    "jira_user": None,  # Jira display name, used as the reporter in JQL
    "model": "openai",
    "model_name": None,  # None = provider default (gpt-4.1-mini / claude-sonnet-4)
    "prompt": None,  # None = use built-in default; set to a path string to override
    "date_from": None,  # None = yesterday (UTC)
    "date_to": None,  # None = today (UTC)
    "max_chars_per_patch": 4000,
}

DATE_KEYS = ("date_from", "date_to")

# Environment variable per credential key.
CREDENTIAL_ENV: dict = {
    "github_token": "GITHUB_API_TOKEN",
    "jira_token": "JIRA_API_TOKEN",
    "jira_username": "JIRA_USERNAME",
    "openai_api_key": "OPENAI_API_KEY",
    "anthropic_api_key": "ANTHROPIC_API_KEY",
}

BUILTIN_PROMPTS_DIR = Path(__file__).parent / "prompts"
_BUILTIN_DEFAULT = BUILTIN_PROMPTS_DIR / "summary.md"


class MissingCredentialError(RuntimeError):
    """Raised before any network call when a required environment variable is unset."""

    def __init__(self, names: list):
        self.names = names
        super().__init__(f"Missing required environment variable(s): {', '.join(names)}")


def load_config(config_path: str = ".perfdigest.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .perfdigest.yml in the current directory
      3. CLI argument overrides
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)
        # YAML reads an unquoted 2025-06-16 as a date, the pipeline expects YYYY-MM-DD text.
        for key in DATE_KEYS:
            if isinstance(config.get(key), date):
                config[key] = config[key].strftime("%Y-%m-%d")

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    for key, env_name in CREDENTIAL_ENV.items():
        config[key] = os.environ.get(env_name)

    return config


def required_credentials(config: dict, summarize: bool = True) -> list:
    keys = ["github_token", "jira_token", "jira_username"]
    if summarize:
        keys.append("anthropic_api_key" if config.get("model") == "anthropic" else "openai_api_key")
    return keys


def require_credentials(config: dict, keys: Optional[list] = None) -> None:
    """Raise MissingCredentialError listing every unset variable among ``keys``."""
    keys = keys if keys is not None else required_credentials(config)
    missing = [CREDENTIAL_ENV[k] for k in keys if not config.get(k)]
    if missing:
        raise MissingCredentialError(missing)


def load_prompt(config: dict) -> str:
    """
    Load the system prompt for the summary.

    If ``prompt`` is set in config, loads from that path (relative to cwd).
    Otherwise falls back to the built-in default.
    """
    custom_path = config.get("prompt")
    if custom_path:
        p = Path(custom_path)
        if not p.exists():
            raise FileNotFoundError(f"Prompt file not found: {custom_path}")
        return p.read_text()

    if _BUILTIN_DEFAULT.exists():
        return _BUILTIN_DEFAULT.read_text()

    raise FileNotFoundError("No prompt configured and built-in default is missing.")
