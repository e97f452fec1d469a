from __future__ import annotations

import logging

from anthropic import Anthropic, AnthropicError, AsyncAnthropic
from anthropic.types import TextBlock

from reviewbot_core.prompt import SYSTEM_PROMPT
from reviewbot_core.providers.base import AgentSuccess, AgentText, BaseAgent

logger = logging.getLogger(__name__)


class AnthropicAgent(BaseAgent):
    """Single-call review: one Messages API request, no tools."""

    # temperature=0 keeps the JSON structure stable between runs.
    TEMPERATURE = 0

    def __init__(
        self,
        model: str,
        api_key: str | None = None,
        max_tokens: int = 4096,
        output_schema: dict | None = None,
        client=None,
    ):
        super().__init__(model, output_schema=output_schema)
        self.max_tokens = max_tokens
        # max_retries=0: a failed call is reported on the PR, never retried.
        self.client = client if client is not None else AsyncAnthropic(api_key=api_key, max_retries=0)

    async def stream(self, prompt: str):
        response = await self.client.messages.create(
            model=self.model,
            system=SYSTEM_PROMPT,
            messages=[{"role": "user", "content": prompt}],
            temperature=self.TEMPERATURE,
            max_tokens=self.max_tokens,
        )
        text = "\n".join(block.text for block in response.content if isinstance(block, TextBlock)).strip()

        if self.output_schema and text:
            payload = self._parse_json(text)
            if isinstance(payload, dict):
                yield AgentSuccess(structured_output=payload, num_turns=1)
                return

        if text:
            yield AgentText(text)
        yield AgentSuccess(result=text, num_turns=1)


def list_model_ids(api_key: str | None, limit: int = 20) -> list[str] | None:
    """Return model ids visible to api_key, or None when they cannot be listed."""
    if not api_key:
        return None
    try:
        page = Anthropic(api_key=api_key, max_retries=0).models.list(limit=limit)
        ids = [model.id for model in page.data][:limit]
    except AnthropicError as e:
        logger.debug("Could not list models: %s", e)
        return None
    return ids or None
