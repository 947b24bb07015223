"""Flatten the tree into the rows a tree view draws.

The rendering layer only needs to draw rows in order; every collapse and
fold decision has already been applied here.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

from .collapse import CollapsePolicy, CollapseState, diverge_key
from .constants import DisplayDefaults
from .playback import truncate
from .tree_builder import compute_linear_run, count_subtree_turns, is_divergence
from .types import TreeNode


class RowKind(str, Enum):
    TURN = "turn"
    DIVERGENCE = "divergence"  # "N paths" badge under a divergence node
    COLLAPSED = "collapsed"  # Summary replacing a collapsed divergence
    PATH_LABEL = "path_label"  # Label heading one child path of a divergence
    FOLD_INDICATOR = "fold_indicator"  # Stands in for the hidden middle of a run
    FOLD_CONTROL = "fold_control"  # Offered on the first turn of a foldable run


@dataclass
class Row:
    kind: RowKind
    depth: int
    text: str
    node: Optional[TreeNode] = None
    key: Optional[str] = None
    selected: bool = False
    collapsed: bool = False
    is_last: bool = False
    is_alternate: bool = False


class TreeViewBuilder:
    """Builds the visible rows for a tree, a collapse state and a selection."""

    def __init__(
        self,
        policy: CollapsePolicy,
        snippet_length: int = DisplayDefaults.SNIPPET_LENGTH,
        path_label_length: int = DisplayDefaults.PATH_LABEL_LENGTH,
    ):
        self.policy = policy
        self.snippet_length = snippet_length
        self.path_label_length = path_label_length

    def rows(
        self,
        roots: Sequence[TreeNode],
        state: CollapseState,
        selected_id: Optional[str] = None,
    ) -> List[Row]:
        rows: List[Row] = []
        for root in roots:
            self._render_node(root, 0, state, selected_id, rows)
        return rows

    def _turn_row(self, node: TreeNode, depth: int, selected_id: Optional[str]) -> Row:
        return Row(
            kind=RowKind.TURN,
            depth=depth,
            text=truncate(node.record.text, self.snippet_length),
            node=node,
            selected=node.node_id == selected_id,
        )

    def _path_label(self, child: TreeNode, index: int) -> str:
        snippet = truncate(child.record.text, self.path_label_length)
        if index == 0:
            return f'"{snippet}"'
        return f'Alt: "{snippet}"'

    def _render_node(
        self,
        node: TreeNode,
        depth: int,
        state: CollapseState,
        selected_id: Optional[str],
        rows: List[Row],
    ) -> None:
        if is_divergence(node):
            rows.append(self._turn_row(node, depth, selected_id))
            self._render_paths(node, depth, state, selected_id, rows)
            return

        run = compute_linear_run(node)
        fold = self.policy.fold_run(run, state)

        if fold.folded:
            rows.extend(self._turn_row(n, depth, selected_id) for n in fold.head)
            rows.append(
                Row(
                    kind=RowKind.FOLD_INDICATOR,
                    depth=depth,
                    text=f"Show {fold.hidden_count} more",
                    key=fold.key,
                    collapsed=True,
                )
            )
            rows.extend(self._turn_row(n, depth, selected_id) for n in fold.tail)
        else:
            for idx, n in enumerate(fold.head):
                rows.append(self._turn_row(n, depth, selected_id))
                if idx == 0 and fold.foldable:
                    rows.append(
                        Row(
                            kind=RowKind.FOLD_CONTROL,
                            depth=depth,
                            text=f"Fold {len(run)} turns",
                            key=fold.key,
                        )
                    )

        # A run stops at a divergence; its paths continue below the last turn
        last = run[-1]
        if is_divergence(last):
            self._render_paths(last, depth, state, selected_id, rows)

    def _render_paths(
        self,
        node: TreeNode,
        depth: int,
        state: CollapseState,
        selected_id: Optional[str],
        rows: List[Row],
    ) -> None:
        key = diverge_key(node.node_id)
        collapsed = key in state
        path_count = len(node.children)

        rows.append(
            Row(
                kind=RowKind.DIVERGENCE,
                depth=depth,
                text=f"{path_count} paths",
                node=node,
                key=key,
                collapsed=collapsed,
            )
        )

        if collapsed:
            hidden = count_subtree_turns(node) - 1
            rows.append(
                Row(
                    kind=RowKind.COLLAPSED,
                    depth=depth + 1,
                    text=f"Collapsed: {path_count} paths • {hidden} turns hidden",
                    node=node,
                    key=key,
                    collapsed=True,
                )
            )
            return

        for idx, child in enumerate(node.children):
            rows.append(
                Row(
                    kind=RowKind.PATH_LABEL,
                    depth=depth + 1,
                    text=self._path_label(child, idx),
                    node=child,
                    is_last=idx == path_count - 1,
                    is_alternate=idx > 0,
                )
            )
            self._render_node(child, depth + 1, state, selected_id, rows)
