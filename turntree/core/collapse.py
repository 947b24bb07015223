"""Collapse and fold decisions that keep a large tree readable.

Two independent mechanisms hide parts of the tree:

* Divergence collapsing hides every path below a divergence point
  (key ``diverge:<nodeId>``). Deep divergences are collapsed automatically
  whenever the tree is rebuilt, except those on the selected path.
* Linear-run folding compresses a long unbranching chain to its first and
  last few turns plus one indicator (key ``linear:<nodeId>`` where the id is
  the first turn of the run).

The collapse state is a value kept beside the tree, never inside it.
"""

from dataclasses import dataclass, field
from typing import AbstractSet, FrozenSet, Iterable, List, Sequence

from ..io.logger import get_logger
from .constants import CollapseDefaults, CollapseKeyPrefix
from .tree_builder import compute_linear_run, is_divergence, iter_nodes
from .types import TreeNode

logger = get_logger("collapse")


def diverge_key(node_id: str) -> str:
    return f"{CollapseKeyPrefix.DIVERGE}:{node_id}"


def linear_key(node_id: str) -> str:
    return f"{CollapseKeyPrefix.LINEAR}:{node_id}"


def parse_key(key: str):
    """Split a collapse key into ``(prefix, node_id)``.

    Raises:
        ValueError: If the key has no known namespace
    """
    prefix, sep, node_id = key.partition(":")
    if not sep or not node_id or prefix not in (
        CollapseKeyPrefix.DIVERGE,
        CollapseKeyPrefix.LINEAR,
    ):
        raise ValueError(f"Invalid collapse key: {key!r}")
    return prefix, node_id


@dataclass(frozen=True)
class CollapseState:
    """The set of currently collapsed keys.

    Instances are immutable; every change produces a new state.
    """

    keys: FrozenSet[str] = field(default_factory=frozenset)

    def __contains__(self, key: str) -> bool:
        return key in self.keys

    def __len__(self) -> int:
        return len(self.keys)

    def is_collapsed(self, key: str) -> bool:
        return key in self.keys

    def with_key(self, key: str) -> "CollapseState":
        return CollapseState(self.keys | {key})

    def without(self, keys: Iterable[str]) -> "CollapseState":
        return CollapseState(self.keys - frozenset(keys))


@dataclass
class FoldedRun:
    """A linear run as it should be displayed.

    When ``folded`` is True only ``head`` and ``tail`` are shown with a single
    indicator standing in for ``hidden_count`` turns; otherwise ``head``
    holds the full run and ``tail`` is empty.
    """

    key: str
    head: List[TreeNode]
    tail: List[TreeNode]
    hidden_count: int
    folded: bool
    foldable: bool

    @property
    def visible_count(self) -> int:
        """Visible elements, counting the fold indicator as one."""
        indicator = 1 if self.folded else 0
        return len(self.head) + len(self.tail) + indicator


class CollapsePolicy:
    """Seeds and updates the collapse state.

    Args:
        auto_collapse_depth: Divergences deeper than this are collapsed on
            rebuild
        linear_fold_threshold: Linear runs longer than this can be folded
        fold_show_edges: Turns kept visible at each end of a folded run
    """

    def __init__(
        self,
        auto_collapse_depth: int = CollapseDefaults.AUTO_COLLAPSE_DEPTH,
        linear_fold_threshold: int = CollapseDefaults.LINEAR_FOLD_THRESHOLD,
        fold_show_edges: int = CollapseDefaults.FOLD_SHOW_EDGES,
    ):
        if fold_show_edges < 1:
            raise ValueError("fold_show_edges must be at least 1")
        if linear_fold_threshold < 2 * fold_show_edges:
            raise ValueError(
                "linear_fold_threshold must leave room for both fold edges"
            )
        self.auto_collapse_depth = auto_collapse_depth
        self.linear_fold_threshold = linear_fold_threshold
        self.fold_show_edges = fold_show_edges

    @classmethod
    def from_config(cls, config) -> "CollapsePolicy":
        """Build a policy from the ``tree`` section of a Config."""
        tree = config.get("tree", {})
        return cls(
            auto_collapse_depth=tree.get(
                "auto_collapse_depth", CollapseDefaults.AUTO_COLLAPSE_DEPTH
            ),
            linear_fold_threshold=tree.get(
                "linear_fold_threshold", CollapseDefaults.LINEAR_FOLD_THRESHOLD
            ),
            fold_show_edges=tree.get(
                "fold_show_edges", CollapseDefaults.FOLD_SHOW_EDGES
            ),
        )

    def initial_state(
        self, roots: Sequence[TreeNode], ancestry: AbstractSet[str]
    ) -> CollapseState:
        """State for a freshly built tree.

        Collapses every divergence deeper than ``auto_collapse_depth`` that is
        not on the current ancestry path. Linear runs start unfolded; folding
        them is left to ``toggle`` and ``fold_all``.
        """
        keys = {
            diverge_key(node.node_id)
            for node in iter_nodes(roots)
            if is_divergence(node)
            and node.depth > self.auto_collapse_depth
            and node.node_id not in ancestry
        }
        logger.debug(f"Auto-collapsed {len(keys)} deep divergences")
        return CollapseState(frozenset(keys))

    def reveal(
        self,
        state: CollapseState,
        ancestry: AbstractSet[str],
        roots: Sequence[TreeNode] = (),
    ) -> CollapseState:
        """Make a new selection visible.

        Expands every divergence on the ancestry path and, when ``roots`` is
        given, unfolds any folded run that would hide part of that path.
        """
        keys = [diverge_key(node_id) for node_id in ancestry]
        keys.extend(
            linear_key(run[0].node_id)
            for run in self.linear_runs(roots)
            if self.is_foldable(run) and self._hides(run, ancestry)
        )
        if not any(key in state for key in keys):
            return state
        return state.without(keys)

    def toggle(self, state: CollapseState, key: str) -> CollapseState:
        """Flip one divergence or fold."""
        parse_key(key)
        if key in state:
            return state.without([key])
        return state.with_key(key)

    def collapse_all(
        self, roots: Sequence[TreeNode], ancestry: AbstractSet[str]
    ) -> CollapseState:
        """Collapse every divergence except those on the ancestry path."""
        keys = {
            diverge_key(node.node_id)
            for node in iter_nodes(roots)
            if is_divergence(node) and node.node_id not in ancestry
        }
        return CollapseState(frozenset(keys))

    def expand_all(self) -> CollapseState:
        return CollapseState()

    def is_foldable(self, run: Sequence[TreeNode]) -> bool:
        return len(run) > self.linear_fold_threshold

    def fold_run(self, run: Sequence[TreeNode], state: CollapseState) -> FoldedRun:
        """Decide how a linear run is displayed under ``state``."""
        if not run:
            raise ValueError("Cannot fold an empty run")
        key = linear_key(run[0].node_id)
        foldable = self.is_foldable(run)
        if not foldable or key not in state:
            return FoldedRun(
                key=key,
                head=list(run),
                tail=[],
                hidden_count=0,
                folded=False,
                foldable=foldable,
            )

        edges = self.fold_show_edges
        return FoldedRun(
            key=key,
            head=list(run[:edges]),
            tail=list(run[-edges:]),
            hidden_count=len(run) - 2 * edges,
            folded=True,
            foldable=True,
        )

    def linear_runs(self, roots: Sequence[TreeNode]) -> List[List[TreeNode]]:
        """Every linear run of the forest.

        A run starts at a root or at a child of a divergence and is
        evaluated independently of divergence collapsing.
        """
        starts = list(roots)
        for node in iter_nodes(roots):
            if is_divergence(node):
                starts.extend(node.children)
        return [compute_linear_run(start) for start in starts]

    def foldable_runs(self, roots: Sequence[TreeNode]) -> List[str]:
        """Keys of every run long enough to fold."""
        return [
            linear_key(run[0].node_id)
            for run in self.linear_runs(roots)
            if self.is_foldable(run)
        ]

    def fold_all(
        self,
        state: CollapseState,
        roots: Sequence[TreeNode],
        ancestry: AbstractSet[str] = frozenset(),
    ) -> CollapseState:
        """Fold every long linear run, keeping divergence decisions.

        Runs whose hidden middle holds part of ``ancestry`` stay unfolded.
        """
        folds = {
            linear_key(run[0].node_id)
            for run in self.linear_runs(roots)
            if self.is_foldable(run) and not self._hides(run, ancestry)
        }
        return CollapseState(state.keys | frozenset(folds))

    def _hides(self, run: Sequence[TreeNode], ancestry: AbstractSet[str]) -> bool:
        """True if folding ``run`` would hide a node of ``ancestry``."""
        edges = self.fold_show_edges
        return any(node.node_id in ancestry for node in run[edges:-edges])
