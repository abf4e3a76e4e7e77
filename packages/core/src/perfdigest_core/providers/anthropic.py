"""Claude summarizer, available with the optional ``anthropic`` extra."""

from __future__ import annotations

from perfdigest_core.providers.base import BaseSummarizer, CompletionError


class AnthropicSummarizer(BaseSummarizer):
    MODEL = "claude-sonnet-4-20250514"
    TEMPERATURE = 0.3

    def __init__(self, api_key: str, model: str | None = None):
        try:
            import anthropic
        except ImportError:
            raise ImportError(
                "model 'anthropic' needs the Anthropic SDK: pip install 'perfdigest[anthropic]', "
                "or set model: openai in .perfdigest.yml"
            )
        self.client = anthropic.Anthropic(api_key=api_key)
        self.model = model or self.MODEL

    def _call_api(self, system_prompt: str, user_prompt: str) -> str | None:
        message = self.client.messages.create(
            model=self.model,
            max_tokens=self.MAX_TOKENS,
            temperature=self.TEMPERATURE,
            system=system_prompt,
            messages=[{"role": "user", "content": user_prompt}],
        )
        parts = [block.text for block in message.content if block.type == "text"]
        if not parts:
            raise CompletionError(f"Claude answered without text (stop_reason={message.stop_reason})")
        return "".join(parts).strip()
