"""Build the conversation execution tree from flat turn records.

Every record is indexed by ``node_id`` and attached to its parent in a
single pass; siblings are then ordered by timestamp. A node with more than
one child is a divergence point: two or more turns could follow it.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Set

from ..io.logger import get_logger
from .types import TreeNode, TurnRecord

logger = get_logger("tree_builder")


@dataclass
class TreeBuildResult:
    """Roots of the built forest plus the structural anomalies found."""

    roots: List[TreeNode]
    orphaned: List[str] = field(default_factory=list)
    duplicates: List[str] = field(default_factory=list)
    cycle_breaks: List[str] = field(default_factory=list)

    @property
    def has_anomalies(self) -> bool:
        return bool(self.orphaned or self.duplicates or self.cycle_breaks)


class TreeBuilder:
    """Converts an unordered collection of turn records into a forest.

    The builder keeps no state between calls; ``build`` is a pure function
    of its input.
    """

    def build(self, records: Iterable[TurnRecord]) -> TreeBuildResult:
        """Build the tree.

        Args:
            records: Turn records in any order

        Returns:
            TreeBuildResult with one TreeNode per distinct node id
        """
        nodes: Dict[str, TreeNode] = {}
        order: Dict[str, int] = {}
        duplicates: List[str] = []

        for record in records:
            if record.node_id in nodes:
                logger.warning(
                    f"Duplicate node id {record.node_id}; keeping the first record"
                )
                duplicates.append(record.node_id)
                continue
            order[record.node_id] = len(order)
            nodes[record.node_id] = TreeNode(record=record)

        roots: List[TreeNode] = []
        orphaned: List[str] = []

        for node in nodes.values():
            parent_id = node.parent_node_id
            if parent_id is None:
                roots.append(node)
                continue

            parent = nodes.get(parent_id)
            if parent is None:
                logger.warning(
                    f"Node {node.node_id} has parentNodeId {parent_id} "
                    "but parent not found; treating it as a root"
                )
                orphaned.append(node.node_id)
                roots.append(node)
                continue

            parent.children.append(node)
            if len(parent.children) > 1:
                logger.debug(
                    f"Divergence at {parent_id}: "
                    f"{[c.node_id for c in parent.children]}"
                )

        cycle_breaks = self._break_cycles(nodes, roots, order)

        for root in roots:
            self._finalize(root)

        return TreeBuildResult(
            roots=roots,
            orphaned=orphaned,
            duplicates=duplicates,
            cycle_breaks=cycle_breaks,
        )

    def _break_cycles(
        self,
        nodes: Dict[str, TreeNode],
        roots: List[TreeNode],
        order: Dict[str, int],
    ) -> List[str]:
        """Promote one record of every parent loop to a root.

        Records whose parent chain loops back on itself are unreachable from
        any root. The earliest such record (by timestamp, then input order)
        is detached from its parent and kept as a root, so no record is lost.
        """
        reachable: Set[str] = {n.node_id for n in iter_nodes(roots)}
        if len(reachable) == len(nodes):
            return []

        def rank(node: TreeNode):
            return (node.timestamp, order[node.node_id])

        breaks: List[str] = []
        while len(reachable) < len(nodes):
            stranded = [n for n in nodes.values() if n.node_id not in reachable]
            # Walk up from any stranded node until the chain repeats; the
            # repeated segment is the loop itself.
            chain: List[TreeNode] = []
            seen: Dict[str, int] = {}
            current = min(stranded, key=rank)
            while current.node_id not in seen:
                seen[current.node_id] = len(chain)
                chain.append(current)
                current = nodes[current.parent_node_id]
            loop = chain[seen[current.node_id]:]

            candidate = min(loop, key=rank)
            parent = nodes[candidate.parent_node_id]
            parent.children.remove(candidate)

            logger.warning(
                f"Node {candidate.node_id} is part of a parent loop; "
                "treating it as a root"
            )
            breaks.append(candidate.node_id)
            roots.append(candidate)
            reachable.update(n.node_id for n in iter_nodes([candidate]))

        return breaks

    def _finalize(self, root: TreeNode) -> None:
        """Sort every node's children by timestamp and assign depths."""
        root.depth = 0
        stack = [root]
        while stack:
            node = stack.pop()
            # sorted() is stable, so equal timestamps keep input order
            node.children.sort(key=lambda child: child.timestamp)
            for child in node.children:
                child.depth = node.depth + 1
                stack.append(child)


def build_tree(records: Iterable[TurnRecord]) -> List[TreeNode]:
    """Build the forest and return its roots."""
    return TreeBuilder().build(records).roots


def iter_nodes(roots: Iterable[TreeNode]) -> Iterator[TreeNode]:
    """Depth-first pre-order walk over every node of the forest."""
    stack = list(reversed(list(roots)))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def index_tree(roots: Iterable[TreeNode]) -> Dict[str, TreeNode]:
    """Map every node id in the forest to its node."""
    return {node.node_id: node for node in iter_nodes(roots)}


def is_divergence(node: TreeNode) -> bool:
    """True when two or more turns could follow this one."""
    return len(node.children) > 1


def is_leaf(node: TreeNode) -> bool:
    return not node.children


def compute_linear_run(node: TreeNode) -> List[TreeNode]:
    """Straight-line segment starting at ``node``.

    Follows single children until a divergence or a leaf; the node where the
    walk stops is included.
    """
    run = [node]
    current = node
    while len(current.children) == 1:
        current = current.children[0]
        run.append(current)
    return run


def count_subtree_turns(node: TreeNode) -> int:
    """Number of turns in the subtree, counting the node itself."""
    return sum(1 for _ in iter_nodes([node]))


def find_divergences(roots: Iterable[TreeNode]) -> List[TreeNode]:
    """All divergence points of the forest, in pre-order."""
    return [node for node in iter_nodes(roots) if is_divergence(node)]


def find_leaves(roots: Iterable[TreeNode]) -> List[TreeNode]:
    """All leaves of the forest, in pre-order."""
    return [node for node in iter_nodes(roots) if is_leaf(node)]
