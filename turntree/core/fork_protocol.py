"""Decide where a newly submitted human message attaches.

Branches exist because the human said something different; the agent
merely responded. A new message either continues the current chain or,
when an alternate-reply anchor is set, becomes a sibling of that anchor.
Agent turns are never submitted here and never serve as anchors.
"""

from dataclasses import dataclass
from typing import Optional

from ..io.logger import get_logger
from .ancestry import AncestryResolver
from .constants import ComposerMode, SubmissionKind, SystemDefaults
from .exceptions import InvalidAnchorError, NodeNotFoundError, StaleAnchorError
from .tree_builder import is_leaf
from .types import TreeNode

logger = get_logger("fork_protocol")


@dataclass(frozen=True)
class SubmissionPlan:
    """Where the next human message goes."""

    kind: str
    parent_node_id: Optional[str]
    anchor_node_id: Optional[str] = None
    branch_label: Optional[str] = None

    @property
    def is_fork(self) -> bool:
        return self.kind == SubmissionKind.FORK

    @property
    def creates_root(self) -> bool:
        return self.parent_node_id is None


def fork_label(anchor: TreeNode) -> str:
    return SystemDefaults.FORK_LABEL_TEMPLATE.format(turn_number=anchor.turn_number)


class BranchForkProtocol:
    """Continuation-or-fork rule over one tree snapshot."""

    def __init__(self, resolver: AncestryResolver):
        self.resolver = resolver

    def validate_anchor(self, node_id: str) -> TreeNode:
        """Check that ``node_id`` may be marked for an alternate reply.

        Raises:
            NodeNotFoundError: If the node is not in the tree
            InvalidAnchorError: If the node is an agent turn
        """
        node = self.resolver.require(node_id)
        if not node.is_human_turn:
            raise InvalidAnchorError(
                node_id, "agent turns are outcomes and cannot be forked"
            )
        return node

    def continuation_parent(self, selected_id: Optional[str]) -> Optional[TreeNode]:
        """The leaf a continuation attaches to.

        The selected node when it is a leaf, otherwise the latest leaf below
        it; with nothing selected, the latest leaf of the whole forest. None
        only when the tree is empty.
        """
        if selected_id is not None:
            selected = self.resolver.require(selected_id)
            if is_leaf(selected):
                return selected
        return self.resolver.latest_leaf(selected_id)

    def plan(
        self, selected_id: Optional[str], anchor_id: Optional[str] = None
    ) -> SubmissionPlan:
        """Work out the parent of the next human message.

        Raises:
            StaleAnchorError: If ``anchor_id`` no longer resolves
            InvalidAnchorError: If the anchor is an agent turn
            NodeNotFoundError: If ``selected_id`` does not resolve
        """
        if anchor_id is not None:
            anchor = self.resolver.get(anchor_id)
            if anchor is None:
                raise StaleAnchorError(anchor_id)
            self.validate_anchor(anchor_id)
            if anchor.parent_node_id is None:
                logger.info(
                    f"Forking at root {anchor_id}; the reply starts a new root"
                )
            return SubmissionPlan(
                kind=SubmissionKind.FORK,
                parent_node_id=anchor.parent_node_id,
                anchor_node_id=anchor_id,
                branch_label=fork_label(anchor),
            )

        parent = self.continuation_parent(selected_id)
        return SubmissionPlan(
            kind=SubmissionKind.CONTINUATION,
            parent_node_id=parent.node_id if parent else None,
        )

    def composer_mode(
        self, selected_id: Optional[str], anchor_id: Optional[str] = None
    ) -> str:
        """What the composer offers for the current selection.

        Agent turns in the middle of a chain are read-only outcomes, so the
        composer is disabled for them; the latest agent turn can always be
        replied to.
        """
        if anchor_id is not None:
            return ComposerMode.ALTERNATE_REPLY
        if selected_id is None:
            return ComposerMode.SEND
        try:
            selected = self.resolver.require(selected_id)
        except NodeNotFoundError:
            return ComposerMode.SEND
        if selected.is_agent_turn and not is_leaf(selected):
            return ComposerMode.DISABLED
        return ComposerMode.SEND
