"""Ancestry lookups over a built conversation tree."""

from typing import Dict, List, Optional, Sequence, Set

from .exceptions import NodeNotFoundError
from .tree_builder import index_tree
from .types import TreeNode


class AncestryResolver:
    """Answers "which turns lead to this one" for a single tree snapshot.

    The resolver is read-only and is recreated on every rebuild; nothing is
    cached across snapshots.
    """

    def __init__(self, roots: Sequence[TreeNode]):
        self.roots = list(roots)
        self.index: Dict[str, TreeNode] = index_tree(self.roots)
        # Parent links as placed in the tree. These match parent_node_id
        # except for records promoted to roots (orphans, broken loops).
        self._parent_of: Dict[str, Optional[str]] = {
            root.node_id: None for root in self.roots
        }
        for node in self.index.values():
            for child in node.children:
                self._parent_of[child.node_id] = node.node_id

    def get(self, node_id: str) -> Optional[TreeNode]:
        return self.index.get(node_id)

    def require(self, node_id: str) -> TreeNode:
        node = self.index.get(node_id)
        if node is None:
            raise NodeNotFoundError(node_id)
        return node

    def parent_of(self, node_id: str) -> Optional[TreeNode]:
        parent_id = self._parent_of.get(node_id)
        return self.index.get(parent_id) if parent_id else None

    def ancestry_chain(self, target_id: str) -> List[TreeNode]:
        """Nodes from the root down to ``target_id``, inclusive.

        Raises:
            NodeNotFoundError: If the target is not in the tree
        """
        node = self.require(target_id)
        chain = [node]
        seen = {node.node_id}
        parent_id = self._parent_of.get(node.node_id)
        while parent_id is not None and parent_id not in seen:
            node = self.index[parent_id]
            chain.append(node)
            seen.add(parent_id)
            parent_id = self._parent_of.get(parent_id)
        chain.reverse()
        return chain

    def ancestry_path(self, target_id: Optional[str]) -> Set[str]:
        """Ids of every turn that must stay visible for ``target_id``.

        Returns an empty set when nothing is selected or the id is unknown.
        """
        if target_id is None or target_id not in self.index:
            return set()
        return {node.node_id for node in self.ancestry_chain(target_id)}

    def default_path(self) -> List[TreeNode]:
        """The main line: first root, then always the earliest child."""
        if not self.roots:
            return []
        node = self.roots[0]
        path = [node]
        while node.children:
            node = node.children[0]
            path.append(node)
        return path

    def subtree_leaves(self, node_id: Optional[str] = None) -> List[TreeNode]:
        """Leaves below ``node_id``, or of the whole forest when None."""
        starts = [self.require(node_id)] if node_id is not None else self.roots
        leaves = []
        stack = list(reversed(starts))
        while stack:
            node = stack.pop()
            if not node.children:
                leaves.append(node)
            stack.extend(reversed(node.children))
        return leaves

    def latest_leaf(self, node_id: Optional[str] = None) -> Optional[TreeNode]:
        """Most recently created leaf below ``node_id`` (or in the forest).

        Ties on timestamp go to the leaf that comes last in pre-order.
        """
        latest = None
        for leaf in self.subtree_leaves(node_id):
            if latest is None or leaf.timestamp >= latest.timestamp:
                latest = leaf
        return latest
