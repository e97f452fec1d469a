"""Agent message variants and the base agent interface.

Every provider, whether it runs a multi-turn tool-using session or a single
API call, exposes the same thing to the session driver: an async stream of a
closed set of message kinds.

    AgentText     — one assistant utterance (free text)
    AgentPayload  — a structured review payload delivered mid-stream
    AgentSuccess  — terminal: the run finished normally
    AgentFailure  — terminal: the run failed (max turns, execution error, ...)

Providers translate their SDK's objects into these at the boundary so the
driver never probes untyped fields.
"""

from __future__ import annotations

import json
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Union

from reviewbot_core.providers.permissions import AllowAllPolicy, ToolPolicy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AgentText:
    text: str


@dataclass(frozen=True)
class AgentPayload:
    payload: Any


@dataclass(frozen=True)
class AgentSuccess:
    result: str = ""
    structured_output: Any = None
    num_turns: int | None = None
    cost_usd: float | None = None


@dataclass(frozen=True)
class AgentFailure:
    subtype: str
    errors: tuple[str, ...] = field(default_factory=tuple)


AgentMessage = Union[AgentText, AgentPayload, AgentSuccess, AgentFailure]


class BaseAgent(ABC):
    def __init__(
        self,
        model: str,
        output_schema: dict | None = None,
        policy: ToolPolicy | None = None,
    ):
        self.model = model
        self.output_schema = output_schema
        self.policy = policy or AllowAllPolicy()

    @abstractmethod
    def stream(self, prompt: str) -> AsyncIterator[AgentMessage]:
        """Open one session for prompt and yield its messages as they arrive.

        Implemented as an async generator. The driver closes the generator as
        soon as it sees a terminal message, so implementations must release
        their session in a finally/async-with block.
        """

    def _parse_json(self, raw: str) -> Any:
        """Load a JSON answer, stripping one outer ```json fence. None if it is not JSON."""
        try:
            cleaned = re.sub(r"^```(?:json)?\s*", "", raw.strip())
            cleaned = re.sub(r"\s*```$", "", cleaned.strip())
            return json.loads(cleaned)
        except json.JSONDecodeError:
            logger.debug("%s: response is not JSON: %s", self.__class__.__name__, raw[:200])
            return None
