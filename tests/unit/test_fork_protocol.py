"""Tests for the continuation/fork rule."""

import pytest

from tests.builders import make_agent, make_human
from turntree.core.ancestry import AncestryResolver
from turntree.core.constants import ComposerMode, SubmissionKind
from turntree.core.exceptions import (
    InvalidAnchorError,
    NodeNotFoundError,
    StaleAnchorError,
)
from turntree.core.fork_protocol import BranchForkProtocol, fork_label
from turntree.core.tree_builder import build_tree


def protocol_for(records):
    return BranchForkProtocol(AncestryResolver(build_tree(records)))


class TestContinuation:
    def test_selected_leaf_is_parent(self, basic_records):
        plan = protocol_for(basic_records).plan("n4")
        assert plan.kind == SubmissionKind.CONTINUATION
        assert plan.parent_node_id == "n4"
        assert not plan.is_fork

    def test_inner_selection_uses_latest_leaf_below(self, branching_records):
        protocol = protocol_for(branching_records)
        assert protocol.plan("c1").parent_node_id == "e1"
        assert protocol.plan("b1").parent_node_id == "b2"

    def test_no_selection_uses_latest_leaf(self, branching_records):
        assert protocol_for(branching_records).plan(None).parent_node_id == "e1"

    def test_empty_tree_starts_a_root(self):
        plan = protocol_for([]).plan(None)
        assert plan.parent_node_id is None
        assert plan.creates_root

    def test_unknown_selection(self, basic_records):
        with pytest.raises(NodeNotFoundError):
            protocol_for(basic_records).plan("nope")


class TestFork:
    def test_fork_attaches_to_anchor_parent(self, basic_records):
        plan = protocol_for(basic_records).plan("n3", anchor_id="n3")
        assert plan.is_fork
        assert plan.parent_node_id == "n2"
        assert plan.anchor_node_id == "n3"

    def test_fork_at_root_starts_new_root(self, basic_records):
        plan = protocol_for(basic_records).plan(None, anchor_id="n1")
        assert plan.is_fork
        assert plan.parent_node_id is None
        assert plan.creates_root

    def test_anchor_wins_over_selection(self, basic_records):
        plan = protocol_for(basic_records).plan("n4", anchor_id="n3")
        assert plan.parent_node_id == "n2"

    def test_stale_anchor(self, basic_records):
        with pytest.raises(StaleAnchorError):
            protocol_for(basic_records).plan("n4", anchor_id="gone")

    def test_agent_anchor_rejected(self, basic_records):
        with pytest.raises(InvalidAnchorError):
            protocol_for(basic_records).plan(None, anchor_id="n2")

    def test_branch_label(self):
        records = [make_human("n1", turn_number=3)]
        node = build_tree(records)[0]
        assert fork_label(node) == "Alternate Reply from Turn 3"

    def test_fork_plan_carries_label(self, basic_records):
        plan = protocol_for(basic_records).plan(None, anchor_id="n3")
        assert plan.branch_label == "Alternate Reply from Turn 3"


class TestValidateAnchor:
    def test_human_turn_ok(self, basic_records):
        assert protocol_for(basic_records).validate_anchor("n3").node_id == "n3"

    def test_agent_turn_rejected(self, basic_records):
        with pytest.raises(InvalidAnchorError):
            protocol_for(basic_records).validate_anchor("n4")

    def test_unknown(self, basic_records):
        with pytest.raises(NodeNotFoundError):
            protocol_for(basic_records).validate_anchor("nope")


class TestComposerMode:
    def test_nothing_selected(self, basic_records):
        assert protocol_for(basic_records).composer_mode(None) == ComposerMode.SEND

    def test_anchor_set(self, basic_records):
        mode = protocol_for(basic_records).composer_mode("n3", "n3")
        assert mode == ComposerMode.ALTERNATE_REPLY

    def test_inner_agent_turn_disabled(self, basic_records):
        assert protocol_for(basic_records).composer_mode("n2") == ComposerMode.DISABLED

    def test_leaf_agent_turn_can_be_replied_to(self, basic_records):
        assert protocol_for(basic_records).composer_mode("n4") == ComposerMode.SEND

    def test_human_turn(self, basic_records):
        assert protocol_for(basic_records).composer_mode("n3") == ComposerMode.SEND

    def test_unknown_selection_falls_back(self):
        records = [make_human("n1"), make_agent("n2", parent="n1", ts=1)]
        assert protocol_for(records).composer_mode("nope") == ComposerMode.SEND
