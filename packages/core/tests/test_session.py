"""Tests for the agent session driver."""

import asyncio

import pytest

from reviewbot_core.providers.base import AgentFailure, AgentPayload, AgentSuccess, AgentText, BaseAgent
from reviewbot_core.session import AgentRunError, SessionOutput, run_session


class ScriptedAgent(BaseAgent):
    """Yields a fixed list of messages and records how far the driver read."""

    def __init__(self, messages):
        super().__init__(model="test-model")
        self.messages = messages
        self.consumed = 0
        self.closed = False

    async def stream(self, prompt):
        try:
            for message in self.messages:
                self.consumed += 1
                yield message
        finally:
            self.closed = True


def run(agent, prompt="review this"):
    return asyncio.run(run_session(agent, prompt))


class TestSuccess:
    def test_result_text_and_structured_payload_returned(self):
        agent = ScriptedAgent([AgentSuccess(result="final", structured_output={"summary": "s"}, num_turns=3)])
        output = run(agent)
        assert output == SessionOutput(text="final", structured={"summary": "s"}, num_turns=3)

    def test_stops_at_first_success_and_closes_stream(self):
        agent = ScriptedAgent(
            [
                AgentText("thinking"),
                AgentSuccess(result="done"),
                AgentText("late text"),
                AgentFailure(subtype="error_during_execution"),
            ]
        )
        output = run(agent)
        assert output.text == "done"
        assert agent.consumed == 2
        assert agent.closed is True

    def test_empty_result_falls_back_to_last_assistant_text(self):
        agent = ScriptedAgent([AgentText("first"), AgentText("second"), AgentSuccess(result="  ")])
        assert run(agent).text == "second"

    def test_blank_assistant_text_does_not_replace_fallback(self):
        agent = ScriptedAgent([AgentText("useful"), AgentText("   "), AgentSuccess()])
        assert run(agent).text == "useful"

    def test_fragments_are_not_concatenated(self):
        agent = ScriptedAgent([AgentText("part one"), AgentText("part two"), AgentSuccess()])
        assert run(agent).text == "part two"

    def test_payload_from_tool_call_used_when_result_has_none(self):
        agent = ScriptedAgent([AgentPayload({"summary": "from tool"}), AgentSuccess(result="done")])
        assert run(agent).structured == {"summary": "from tool"}

    def test_result_payload_preferred_over_tool_call_payload(self):
        agent = ScriptedAgent(
            [AgentPayload({"summary": "tool"}), AgentSuccess(structured_output={"summary": "result"})]
        )
        assert run(agent).structured == {"summary": "result"}


class TestFailure:
    def test_max_turns_failure_raises_with_subtype(self):
        agent = ScriptedAgent([AgentText("working"), AgentFailure(subtype="error_max_turns")])
        with pytest.raises(AgentRunError, match="agent run failed with subtype error_max_turns") as exc_info:
            run(agent)
        assert exc_info.value.subtype == "error_max_turns"
        assert agent.closed is True

    def test_reported_errors_are_joined(self):
        agent = ScriptedAgent([AgentFailure(subtype="error_during_execution", errors=("boom", "bang"))])
        with pytest.raises(AgentRunError) as exc_info:
            run(agent)
        assert str(exc_info.value) == "boom\nbang"
        assert exc_info.value.errors == ("boom", "bang")

    def test_unknown_message_kind_rejected(self):
        agent = ScriptedAgent([object()])
        with pytest.raises(TypeError, match="Unhandled agent message"):
            run(agent)

    def test_errors_raised_by_the_stream_propagate(self):
        class BrokenAgent(BaseAgent):
            async def stream(self, prompt):
                yield AgentText("hi")
                raise RuntimeError("connection lost")

        with pytest.raises(RuntimeError, match="connection lost"):
            run(BrokenAgent(model="m"))


class TestStreamWithoutResult:
    def test_returns_last_text(self):
        agent = ScriptedAgent([AgentText("only text")])
        output = run(agent)
        assert output.text == "only text"
        assert output.structured is None

    def test_returns_payload_seen_before_stream_ended(self):
        agent = ScriptedAgent([AgentPayload({"summary": "s"})])
        assert run(agent).structured == {"summary": "s"}

    def test_empty_stream_returns_empty_output(self):
        assert run(ScriptedAgent([])) == SessionOutput()
