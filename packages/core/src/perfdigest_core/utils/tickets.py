from __future__ import annotations

import re

# Two or more uppercase letters, optional digits, a hyphen, then digits: DX-57, PF-5, AB2-10.
_TICKET_RE = re.compile(r"[A-Z]{2,}\d*-\d+")


def extract_ticket_id(title: str | None) -> str:
    """Return the first Jira key found in a PR title, or an empty string."""
    match = _TICKET_RE.search(title or "")
    return match.group(0) if match else ""
