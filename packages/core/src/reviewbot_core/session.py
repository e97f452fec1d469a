"""Agent session driver.

Consumes one agent's message stream to its first terminal message. The last
non-empty assistant utterance is kept as a fallback in case the terminal
message carries no text of its own. A structured payload seen mid-stream is
kept the same way.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from reviewbot_core.providers.base import AgentFailure, AgentPayload, AgentSuccess, AgentText, BaseAgent

logger = logging.getLogger(__name__)


class AgentRunError(RuntimeError):
    """The agent session ended with a failure result."""

    def __init__(self, subtype: str, errors=()):
        self.subtype = subtype
        self.errors = tuple(errors)
        message = "\n".join(self.errors) if self.errors else f"agent run failed with subtype {subtype}"
        super().__init__(message)


@dataclass
class SessionOutput:
    text: str = ""
    structured: Any = None
    num_turns: int | None = None
    cost_usd: float | None = None


async def run_session(agent: BaseAgent, prompt: str) -> SessionOutput:
    """Run one agent session and return its final text and structured payload.

    Raises AgentRunError on a failure result. Nothing is retried.
    """
    fallback = ""
    payload = None
    stream = agent.stream(prompt)
    try:
        async for message in stream:
            if isinstance(message, AgentText):
                if message.text.strip():
                    fallback = message.text
            elif isinstance(message, AgentPayload):
                payload = message.payload
            elif isinstance(message, AgentSuccess):
                logger.info("Agent finished after %s turn(s), cost %s USD", message.num_turns, message.cost_usd)
                text = message.result if message.result and message.result.strip() else fallback
                return SessionOutput(
                    text=text,
                    structured=message.structured_output if message.structured_output is not None else payload,
                    num_turns=message.num_turns,
                    cost_usd=message.cost_usd,
                )
            elif isinstance(message, AgentFailure):
                raise AgentRunError(message.subtype, message.errors)
            else:
                raise TypeError(f"Unhandled agent message: {type(message).__name__}")
    finally:
        await stream.aclose()

    logger.warning("Agent stream ended without a result message; using the last assistant text.")
    return SessionOutput(text=fallback, structured=payload)
