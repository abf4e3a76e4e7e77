from __future__ import annotations

from openai import OpenAI

from perfdigest_core.providers.base import BaseSummarizer, CompletionError


class OpenAISummarizer(BaseSummarizer):
    MODEL = "gpt-4.1-mini"
    TEMPERATURE = 0.3

    def __init__(self, api_key: str, model: str | None = None):
        self.client = OpenAI(api_key=api_key)
        self.model = model or self.MODEL

    def _call_api(self, system_prompt: str, user_prompt: str) -> str | None:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=self.TEMPERATURE,
            max_tokens=self.MAX_TOKENS,
        )
        if not response.choices:
            raise CompletionError("OpenAI returned zero choices")
        return response.choices[0].message.content
