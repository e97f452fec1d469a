from __future__ import annotations

import logging
from typing import Any

from claude_agent_sdk import (
    AssistantMessage,
    ClaudeAgentOptions,
    ClaudeSDKClient,
    PermissionResultAllow,
    PermissionResultDeny,
    ResultMessage,
    TextBlock,
    ToolPermissionContext,
    ToolUseBlock,
)

from reviewbot_core.prompt import SYSTEM_PROMPT
from reviewbot_core.providers.base import (
    AgentFailure,
    AgentMessage,
    AgentPayload,
    AgentSuccess,
    AgentText,
    BaseAgent,
)

logger = logging.getLogger(__name__)


def _result_errors(message: ResultMessage) -> tuple[str, ...]:
    # Error result messages carry an "errors" list on newer CLI versions;
    # older ones only put the reason in "result".
    errors = getattr(message, "errors", None) or []
    if not errors and message.result:
        errors = [message.result]
    return tuple(str(e) for e in errors if e)


# Some CLI versions deliver the output_format payload as a tool call rather
# than on the result message.
_STRUCTURED_OUTPUT_TOOL = "StructuredOutput"


def translate(message: Any) -> list[AgentMessage]:
    """Map one SDK message to agent message variants. Messages the driver ignores map to []."""
    if isinstance(message, AssistantMessage):
        translated: list[AgentMessage] = []
        text = "".join(block.text for block in message.content if isinstance(block, TextBlock)).strip()
        if text:
            translated.append(AgentText(text))
        for block in message.content:
            if isinstance(block, ToolUseBlock) and block.name == _STRUCTURED_OUTPUT_TOOL and block.input:
                translated.append(AgentPayload(block.input))
        return translated
    if isinstance(message, ResultMessage):
        if message.subtype == "success" and not message.is_error:
            return [
                AgentSuccess(
                    result=message.result or "",
                    structured_output=getattr(message, "structured_output", None),
                    num_turns=message.num_turns,
                    cost_usd=message.total_cost_usd,
                )
            ]
        return [AgentFailure(subtype=message.subtype, errors=_result_errors(message))]
    return []


class ClaudeAgent(BaseAgent):
    """Multi-turn, tool-using review session on the Claude Agent SDK."""

    def __init__(
        self,
        model: str,
        api_key: str | None = None,
        permission_mode: str = "default",
        max_turns: int = 30,
        allowed_tools=(),
        cwd: str | None = None,
        output_schema: dict | None = None,
        policy=None,
    ):
        super().__init__(model, output_schema=output_schema, policy=policy)
        self.api_key = api_key
        self.permission_mode = permission_mode
        self.max_turns = max_turns
        self.allowed_tools = list(allowed_tools)
        self.cwd = cwd

    async def _can_use_tool(self, tool_name: str, tool_input: dict, context: ToolPermissionContext):
        decision = self.policy.decide(tool_name, tool_input)
        if decision.allowed:
            logger.debug("Tool approved: %s", tool_name)
            return PermissionResultAllow(updated_input=decision.updated_input)
        logger.info("Tool denied: %s (%s)", tool_name, decision.message)
        return PermissionResultDeny(message=decision.message)

    def _options(self) -> ClaudeAgentOptions:
        kwargs: dict[str, Any] = {
            "model": self.model,
            "system_prompt": SYSTEM_PROMPT,
            "permission_mode": self.permission_mode,
            "max_turns": self.max_turns,
            "allowed_tools": self.allowed_tools,
            "can_use_tool": self._can_use_tool,
        }
        if self.cwd:
            kwargs["cwd"] = self.cwd
        if self.api_key:
            kwargs["env"] = {"ANTHROPIC_API_KEY": self.api_key}
        if self.output_schema:
            kwargs["output_format"] = {"type": "json_schema", "schema": self.output_schema}
        return ClaudeAgentOptions(**kwargs)

    async def stream(self, prompt: str):
        async with ClaudeSDKClient(options=self._options()) as client:
            await client.query(prompt)
            async for message in client.receive_response():
                for translated in translate(message):
                    yield translated
