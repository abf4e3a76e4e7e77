"""Base summarizer implementing the Template Method pattern.

All providers share the same flow:
    summarize() → _build_user_prompt() → _call_api()   ← only this differs per provider
                → _check()

Subclasses implement two things only:
  - __init__: validate and store the SDK client
  - _call_api: make one raw API call and return the text of the first choice

There is no retry: a failed call propagates and ends the run.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)

_MAX_TOKENS = 4096


class CompletionError(RuntimeError):
    """The completion API answered without any usable choice."""


class BaseSummarizer(ABC):
    MAX_TOKENS: int = _MAX_TOKENS

    def summarize(self, report: str, system_prompt: str) -> str:
        """Send the assembled activity report and return the model's summary."""
        user = self._build_user_prompt(report)
        logger.debug("%s: sending %d chars of activity", self.__class__.__name__, len(user))
        return self._check(self._call_api(system_prompt, user))

    @abstractmethod
    def _call_api(self, system_prompt: str, user_prompt: str) -> str | None:
        """Make a single API call and return the first choice's text.

        Raise CompletionError when the response carries no choices.
        """

    def _build_user_prompt(self, report: str) -> str:
        return report.strip()

    def _check(self, text: str | None) -> str:
        if text is None:
            raise CompletionError(f"{self.__class__.__name__}: completion returned no content")
        return text
