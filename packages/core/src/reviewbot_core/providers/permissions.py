"""Tool-execution approval.

The agent may call tools (read files, query the GitHub API, ...) while it
reviews. No human is around to confirm those calls in CI, so approval is
delegated to a policy object the agent holds.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ToolDecision:
    allowed: bool
    updated_input: dict = field(default_factory=dict)
    message: str = ""


class ToolPolicy(ABC):
    @abstractmethod
    def decide(self, tool_name: str, tool_input: dict) -> ToolDecision:
        """Allow or deny one proposed tool call, optionally rewriting its input."""


class AllowAllPolicy(ToolPolicy):
    """Approve every tool call, or only the allow-listed ones when a list is given."""

    def __init__(self, allowed_tools=None):
        self.allowed_tools = frozenset(allowed_tools) if allowed_tools else None

    def decide(self, tool_name: str, tool_input: dict) -> ToolDecision:
        if self.allowed_tools is not None and tool_name not in self.allowed_tools:
            return ToolDecision(
                allowed=False,
                updated_input=tool_input,
                message=f"Tool {tool_name!r} is not in the allowed tool list.",
            )
        return ToolDecision(allowed=True, updated_input=tool_input)
