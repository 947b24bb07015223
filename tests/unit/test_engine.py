"""Tests for the scripted execution engine."""

import pytest

from tests.builders import make_basic_conversation
from turntree.core.engine import ExecutionEngine, ScriptedEngine


class TestScriptedEngine:
    def test_satisfies_protocol(self):
        assert isinstance(ScriptedEngine(), ExecutionEngine)

    @pytest.mark.asyncio
    async def test_continuation_pairs_human_and_agent(self):
        engine = ScriptedEngine(make_basic_conversation(), replies=["Sure thing"])

        result = await engine.submit_continuation("n4", "what next?")

        human, agent = result.turns
        assert human.parent_node_id == "n4"
        assert human.user_message == "what next?"
        assert agent.parent_node_id == human.node_id
        assert agent.agent_message == "Sure thing"
        assert agent.timestamp > human.timestamp

    @pytest.mark.asyncio
    async def test_turn_numbers_follow_parent(self):
        records = make_basic_conversation()
        engine = ScriptedEngine(records)
        result = await engine.submit_continuation("n4", "hi again")
        assert [t.turn_number for t in result.turns] == [5, 5]

    @pytest.mark.asyncio
    async def test_alternate_reply_reuses_anchor_turn_number(self):
        records = make_basic_conversation()
        engine = ScriptedEngine(records)
        # n3 is turn 3 and its parent n2 is turn 2
        result = await engine.submit_fork("n3", "n2", "another answer")
        assert [t.turn_number for t in result.turns] == [3, 3]

    @pytest.mark.asyncio
    async def test_first_message_starts_main_branch(self):
        engine = ScriptedEngine()
        result = await engine.submit_continuation(None, "hello")
        assert result.human_turn.parent_node_id is None
        assert result.human_turn.turn_number == 1
        assert result.human_turn.branch_id == "branch-main"

    @pytest.mark.asyncio
    async def test_fork_gets_its_own_branch(self):
        engine = ScriptedEngine(make_basic_conversation())
        result = await engine.submit_fork("n3", "n2", "another answer")
        assert result.human_turn.parent_node_id == "n2"
        assert result.human_turn.branch_id.startswith("branch-")
        assert result.human_turn.branch_id != "branch-main"
        assert result.agent_turn.branch_id == result.human_turn.branch_id

    @pytest.mark.asyncio
    async def test_replies_cycle(self):
        engine = ScriptedEngine(replies=["one", "two"])
        texts = []
        parent = None
        for _ in range(3):
            result = await engine.submit_continuation(parent, "msg")
            texts.append(result.agent_turn.agent_message)
            parent = result.last_turn.node_id
        assert texts == ["one", "two", "one"]

    @pytest.mark.asyncio
    async def test_human_only(self):
        engine = ScriptedEngine(reply=False)
        result = await engine.submit_continuation(None, "hello")
        assert len(result.turns) == 1

    @pytest.mark.asyncio
    async def test_timestamps_after_existing_records(self):
        records = make_basic_conversation()
        engine = ScriptedEngine(records)
        result = await engine.submit_continuation("n4", "later")
        assert result.human_turn.timestamp > records[-1].timestamp
