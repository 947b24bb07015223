"""Tests for turntree core data types."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from tests.builders import make_agent, make_human
from turntree.core.types import (
    PendingTurn,
    Speaker,
    StepResult,
    TreeNode,
    TurnRecord,
    TurnStatus,
)


class TestTurnRecord:
    """Test TurnRecord validation and helpers."""

    def test_human_turn(self):
        record = make_human("n1", text="hi")
        assert record.is_human_turn
        assert not record.is_agent_turn
        assert record.speaker == Speaker.HUMAN
        assert record.text == "hi"
        assert record.is_root

    def test_agent_turn(self):
        record = make_agent("n2", parent="n1", text="hello")
        assert record.is_agent_turn
        assert record.speaker == Speaker.AGENT
        assert record.text == "hello"
        assert not record.is_root

    def test_requires_a_message(self):
        with pytest.raises(ValidationError, match="neither"):
            TurnRecord(node_id="n1")

    def test_rejects_both_messages(self):
        with pytest.raises(ValidationError, match="both"):
            TurnRecord(node_id="n1", user_message="hi", agent_message="hello")

    def test_accepts_engine_field_names(self):
        record = TurnRecord.model_validate(
            {
                "nodeId": "node-002",
                "parentNodeId": "node-001",
                "branchId": "branch-main",
                "turnNumber": 2,
                "userMessage": "I want to bench 300 lbs",
                "timestamp": "2026-01-12T10:00:00Z",
                "status": "DRIFTED",
            }
        )
        assert record.node_id == "node-002"
        assert record.parent_node_id == "node-001"
        assert record.branch_id == "branch-main"
        assert record.turn_number == 2
        assert record.status == TurnStatus.DRIFTED

    def test_naive_timestamp_is_utc(self):
        record = TurnRecord(
            node_id="n1", user_message="hi", timestamp=datetime(2026, 1, 1, 12, 0)
        )
        assert record.timestamp.tzinfo == timezone.utc

    def test_is_immutable(self):
        record = make_human("n1")
        with pytest.raises(ValidationError):
            record.user_message = "changed"

    def test_diagnostics_pass_through(self):
        record = make_agent("n2", diagnostics={"decision": "STALL", "confidence": 0.4})
        assert record.diagnostics["decision"] == "STALL"


class TestTreeNode:
    def test_proxies_record(self):
        record = make_human("n1", parent="n0", text="hi")
        node = TreeNode(record=record)
        assert node.node_id == "n1"
        assert node.parent_node_id == "n0"
        assert node.user_message == "hi"
        assert node.agent_message is None
        assert node.children == []
        assert node.depth == 0

    def test_repr_lists_children(self):
        parent = TreeNode(record=make_human("n1"))
        parent.children.append(TreeNode(record=make_agent("n2", parent="n1"), depth=1))
        assert "n2" in repr(parent)


class TestPendingTurn:
    def test_is_not_a_record(self):
        pending = PendingTurn(message="hello", parent_node_id="n4")
        assert not isinstance(pending, TurnRecord)
        assert not hasattr(pending, "node_id")
        assert pending.created_at.tzinfo is not None


class TestStepResult:
    def test_human_then_agent(self):
        human = make_human("h")
        agent = make_agent("a", parent="h")
        result = StepResult(turns=[human, agent])
        assert result.human_turn is human
        assert result.agent_turn is agent
        assert result.last_turn is agent

    def test_human_only(self):
        human = make_human("h")
        result = StepResult(turns=[human])
        assert result.agent_turn is None
        assert result.last_turn is human

    def test_empty(self):
        result = StepResult(turns=[])
        assert result.human_turn is None
        assert result.last_turn is None
