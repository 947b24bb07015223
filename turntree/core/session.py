"""Simulation session state.

A session owns the authoritative snapshot of turn records and everything
derived from it. Every change to the records goes through ``rebuild``, which
replaces the tree in one step, so readers never see a partial update.
"""

from typing import Iterable, List, Optional, Tuple
from uuid import uuid4

from ..io.logger import get_logger
from .ancestry import AncestryResolver
from .collapse import CollapsePolicy, CollapseState
from .constants import DisplayDefaults
from .event_bus import EventBus
from .events import (
    AnchorChangedEvent,
    CollapseChangedEvent,
    OrphanedTurnEvent,
    SelectionChangedEvent,
    TreeRebuiltEvent,
)
from .fork_protocol import BranchForkProtocol, SubmissionPlan
from .playback import PlaybackPathExtractor
from .tree_builder import TreeBuilder, TreeBuildResult, find_divergences
from .types import StepResult, TreeNode, TurnRecord
from .view_model import Row, TreeViewBuilder

logger = get_logger("session")


class SimulationSession:
    """One explored conversation: records, tree, selection, anchor, collapse.

    Args:
        records: Initial turn records
        policy: Collapse policy (defaults to the standard thresholds)
        bus: Event bus for session events
        session_id: Identifier used on events
        snippet_length: Characters of a turn shown in tree rows
        path_label_length: Characters of a turn shown in path labels
        breadcrumb_length: Characters of a reply shown in the breadcrumb
    """

    def __init__(
        self,
        records: Iterable[TurnRecord] = (),
        policy: Optional[CollapsePolicy] = None,
        bus: Optional[EventBus] = None,
        session_id: Optional[str] = None,
        snippet_length: int = DisplayDefaults.SNIPPET_LENGTH,
        path_label_length: int = DisplayDefaults.PATH_LABEL_LENGTH,
        breadcrumb_length: int = DisplayDefaults.BREADCRUMB_LENGTH,
    ):
        self.session_id = session_id or uuid4().hex[:8]
        self.policy = policy or CollapsePolicy()
        self.bus = bus or EventBus()
        self.builder = TreeBuilder()
        self.view_builder = TreeViewBuilder(
            self.policy,
            snippet_length=snippet_length,
            path_label_length=path_label_length,
        )
        self.breadcrumb_length = breadcrumb_length

        self.selected_node_id: Optional[str] = None
        self.anchor_node_id: Optional[str] = None
        self.collapse_state = CollapseState()
        self._records: Tuple[TurnRecord, ...] = ()
        self.build_result = TreeBuildResult(roots=[])
        self.resolver = AncestryResolver([])

        self.rebuild(records)

    @classmethod
    def from_config(cls, records: Iterable[TurnRecord], config, **kwargs):
        """Create a session using thresholds and lengths from a Config."""
        display = config.get("display", {})
        return cls(
            records,
            policy=CollapsePolicy.from_config(config),
            snippet_length=display.get(
                "snippet_length", DisplayDefaults.SNIPPET_LENGTH
            ),
            path_label_length=display.get(
                "path_label_length", DisplayDefaults.PATH_LABEL_LENGTH
            ),
            breadcrumb_length=display.get(
                "breadcrumb_length", DisplayDefaults.BREADCRUMB_LENGTH
            ),
            **kwargs,
        )

    # Snapshot

    @property
    def records(self) -> Tuple[TurnRecord, ...]:
        return self._records

    @property
    def roots(self) -> List[TreeNode]:
        return self.build_result.roots

    def rebuild(self, records: Iterable[TurnRecord]) -> None:
        """Replace the record snapshot and rebuild everything derived from it."""
        snapshot = tuple(records)
        result = self.builder.build(snapshot)
        resolver = AncestryResolver(result.roots)

        self._records = snapshot
        self.build_result = result
        self.resolver = resolver

        if self.selected_node_id is not None and resolver.get(self.selected_node_id) is None:
            logger.warning(
                f"Selected node {self.selected_node_id} is gone after rebuild"
            )
            self._set_selection(None)

        if self.anchor_node_id is not None and resolver.get(self.anchor_node_id) is None:
            logger.warning(f"Anchor {self.anchor_node_id} is gone after rebuild")
            self.clear_anchor(reason="stale")

        self.collapse_state = self.policy.initial_state(
            result.roots, self.ancestry_path()
        )

        for node_id in result.orphaned:
            self.bus.publish(
                OrphanedTurnEvent(
                    session_id=self.session_id,
                    node_id=node_id,
                    parent_node_id=resolver.index[node_id].parent_node_id,
                )
            )
        self.bus.publish(
            TreeRebuiltEvent(
                session_id=self.session_id,
                node_count=len(resolver.index),
                root_count=len(result.roots),
                divergence_count=len(find_divergences(result.roots)),
            )
        )
        self._publish_collapse("rebuild")

    def add_records(self, records: Iterable[TurnRecord]) -> None:
        """Append new records to the snapshot and rebuild."""
        self.rebuild(self._records + tuple(records))

    def get_node(self, node_id: str) -> Optional[TreeNode]:
        return self.resolver.get(node_id)

    # Selection and ancestry

    def ancestry_path(self, node_id: Optional[str] = None):
        """Ancestry of ``node_id``, defaulting to the current selection."""
        target = node_id if node_id is not None else self.selected_node_id
        return self.resolver.ancestry_path(target)

    def default_path(self) -> List[TreeNode]:
        return self.resolver.default_path()

    def _set_selection(self, node_id: Optional[str]) -> None:
        previous = self.selected_node_id
        self.selected_node_id = node_id
        self.bus.publish(
            SelectionChangedEvent(
                session_id=self.session_id,
                node_id=node_id,
                previous_node_id=previous,
            )
        )

    def select(self, node_id: Optional[str]) -> None:
        """Select a turn (or clear the selection with None).

        A new selection expands every collapsed divergence on its ancestry
        path so that it is always visible.

        Raises:
            NodeNotFoundError: If ``node_id`` is not in the tree
        """
        if node_id is not None:
            self.resolver.require(node_id)
        if node_id == self.selected_node_id:
            return

        self._set_selection(node_id)
        if node_id is None:
            return

        revealed = self.policy.reveal(
            self.collapse_state, self.ancestry_path(node_id), self.roots
        )
        if revealed is not self.collapse_state:
            self.collapse_state = revealed
            self._publish_collapse("selection")

    # Collapse state

    def _publish_collapse(self, trigger: str) -> None:
        self.bus.publish(
            CollapseChangedEvent(
                session_id=self.session_id,
                collapsed_keys=sorted(self.collapse_state.keys),
                trigger=trigger,
            )
        )

    def toggle(self, key: str) -> None:
        self.collapse_state = self.policy.toggle(self.collapse_state, key)
        self._publish_collapse("toggle")

    def collapse_all(self) -> None:
        self.collapse_state = self.policy.collapse_all(self.roots, self.ancestry_path())
        self._publish_collapse("collapse_all")

    def expand_all(self) -> None:
        self.collapse_state = self.policy.expand_all()
        self._publish_collapse("expand_all")

    def fold_all(self) -> None:
        self.collapse_state = self.policy.fold_all(
            self.collapse_state, self.roots, self.ancestry_path()
        )
        self._publish_collapse("fold_all")

    def visible_rows(self) -> List[Row]:
        return self.view_builder.rows(
            self.roots, self.collapse_state, self.selected_node_id
        )

    # Anchor and submission contract

    @property
    def fork_protocol(self) -> BranchForkProtocol:
        return BranchForkProtocol(self.resolver)

    def set_anchor(self, node_id: str) -> None:
        """Mark a human turn as the point to try a different reply from.

        Setting an anchor also selects it.

        Raises:
            NodeNotFoundError: If the node is not in the tree
            InvalidAnchorError: If the node is an agent turn
        """
        self.fork_protocol.validate_anchor(node_id)
        self.anchor_node_id = node_id
        self.bus.publish(
            AnchorChangedEvent(session_id=self.session_id, node_id=node_id)
        )
        self.select(node_id)

    def clear_anchor(self, reason: Optional[str] = None) -> None:
        if self.anchor_node_id is None:
            return
        self.anchor_node_id = None
        self.bus.publish(
            AnchorChangedEvent(session_id=self.session_id, node_id=None, reason=reason)
        )

    def plan_submission(self) -> SubmissionPlan:
        return self.fork_protocol.plan(self.selected_node_id, self.anchor_node_id)

    def composer_mode(self) -> str:
        return self.fork_protocol.composer_mode(
            self.selected_node_id, self.anchor_node_id
        )

    def commit(self, result: StepResult, plan: SubmissionPlan) -> None:
        """Admit the engine's turns, clear a used anchor, select the newest turn."""
        human = result.human_turn
        if human is not None and human.parent_node_id != plan.parent_node_id:
            logger.warning(
                f"Engine attached {human.node_id} to {human.parent_node_id}, "
                f"expected {plan.parent_node_id}"
            )

        self.add_records(result.turns)
        if plan.is_fork and self.anchor_node_id == plan.anchor_node_id:
            self.clear_anchor(reason="used")
        self.select(result.last_turn.node_id)

    # Playback

    def playback(self) -> List[TreeNode]:
        return PlaybackPathExtractor(self.resolver).extract(self.selected_node_id)

    def breadcrumb(self) -> str:
        extractor = PlaybackPathExtractor(self.resolver, self.breadcrumb_length)
        return extractor.breadcrumb(self.selected_node_id)
