"""Tests for the flattened tree rows."""

from tests.builders import make_chain, make_human
from turntree.core.collapse import CollapsePolicy, CollapseState, diverge_key, linear_key
from turntree.core.tree_builder import build_tree
from turntree.core.view_model import RowKind, TreeViewBuilder


def rows_for(records, state=None, selected=None, policy=None):
    policy = policy or CollapsePolicy()
    roots = build_tree(records)
    if state is None:
        state = policy.initial_state(roots, set())
    return TreeViewBuilder(policy).rows(roots, state, selected)


def kinds(rows):
    return [row.kind for row in rows]


class TestLinear:
    def test_short_chain(self, basic_records):
        rows = rows_for(basic_records)
        assert kinds(rows) == [RowKind.TURN] * 4
        assert [row.node.node_id for row in rows] == ["n1", "n2", "n3", "n4"]
        assert all(row.depth == 0 for row in rows)

    def test_selection_flag(self, basic_records):
        rows = rows_for(basic_records, selected="n3")
        assert [row.selected for row in rows] == [False, False, True, False]

    def test_snippet_is_truncated(self):
        records = [make_human("n1", text="x" * 100)]
        row = rows_for(records)[0]
        assert row.text == "x" * 60 + "..."


class TestFolds:
    def test_chain_starts_unfolded(self):
        rows = rows_for(make_chain(8))
        assert len(rows) == 9
        assert RowKind.FOLD_INDICATOR not in kinds(rows)

    def test_folded_chain(self):
        rows = rows_for(make_chain(8), state=CollapseState(frozenset({linear_key("n1")})))
        assert kinds(rows) == [
            RowKind.TURN,
            RowKind.TURN,
            RowKind.FOLD_INDICATOR,
            RowKind.TURN,
            RowKind.TURN,
        ]
        indicator = rows[2]
        assert indicator.text == "Show 4 more"
        assert indicator.key == linear_key("n1")
        assert [rows[i].node.node_id for i in (0, 1, 3, 4)] == ["n1", "n2", "n7", "n8"]

    def test_expanded_chain_offers_fold(self):
        rows = rows_for(make_chain(8), state=CollapseState())
        assert len(rows) == 9
        assert rows[1].kind == RowKind.FOLD_CONTROL
        assert rows[1].text == "Fold 8 turns"
        assert rows[1].key == linear_key("n1")

    def test_folded_run_continues_into_divergence(self):
        records = make_chain(8) + [
            make_human("x", parent="n8", ts=20),
            make_human("y", parent="n8", ts=21),
        ]
        state = CollapseState(frozenset({linear_key("n1"), diverge_key("n8")}))
        rows = rows_for(records, state=state)
        assert kinds(rows) == [
            RowKind.TURN,
            RowKind.TURN,
            RowKind.FOLD_INDICATOR,
            RowKind.TURN,
            RowKind.TURN,
            RowKind.DIVERGENCE,
            RowKind.COLLAPSED,
        ]
        assert rows[5].key == diverge_key("n8")


class TestDivergences:
    def test_branching_rows(self, branching_records):
        rows = rows_for(branching_records)
        assert kinds(rows) == [
            RowKind.TURN,  # h1
            RowKind.TURN,  # a1
            RowKind.DIVERGENCE,
            RowKind.PATH_LABEL,
            RowKind.TURN,  # h2
            RowKind.TURN,  # a2
            RowKind.PATH_LABEL,
            RowKind.TURN,  # b1
            RowKind.TURN,  # b2
            RowKind.PATH_LABEL,
            RowKind.TURN,  # c1
            RowKind.TURN,  # c2
            RowKind.DIVERGENCE,
            RowKind.COLLAPSED,
        ]

    def test_divergence_badge(self, branching_records):
        badge = rows_for(branching_records)[2]
        assert badge.text == "3 paths"
        assert badge.key == diverge_key("a1")
        assert not badge.collapsed

    def test_path_labels(self, branching_records):
        labels = [r for r in rows_for(branching_records) if r.kind == RowKind.PATH_LABEL]
        assert labels[0].text == '"Lead says h2"'
        assert labels[1].text == 'Alt: "Lead says b1"'
        assert [label.is_alternate for label in labels] == [False, True, True]
        assert [label.is_last for label in labels] == [False, False, True]
        assert all(label.depth == 1 for label in labels)

    def test_collapsed_summary(self, branching_records):
        summary = rows_for(branching_records)[-1]
        assert summary.text == "Collapsed: 2 paths • 3 turns hidden"
        assert summary.depth == 2

    def test_expand_all_shows_every_turn(self, branching_records):
        rows = rows_for(branching_records, state=CollapseState())
        turns = [r.node.node_id for r in rows if r.kind == RowKind.TURN]
        assert sorted(turns) == sorted(r.node_id for r in branching_records)

    def test_empty_tree(self):
        assert rows_for([]) == []
