"""Event types published while a simulated conversation is explored."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional
from uuid import uuid4


@dataclass
class Event:
    """Base event with timestamp and ID."""

    timestamp: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc), init=False
    )
    event_id: str = field(default_factory=lambda: uuid4().hex[:8], init=False)


@dataclass
class TreeRebuiltEvent(Event):
    """The tree was rebuilt from a new record snapshot."""

    session_id: str
    node_count: int
    root_count: int
    divergence_count: int


@dataclass
class OrphanedTurnEvent(Event):
    """A record referenced a parent that is not in the snapshot."""

    session_id: str
    node_id: str
    parent_node_id: str


@dataclass
class SelectionChangedEvent(Event):
    """The selected turn changed."""

    session_id: str
    node_id: Optional[str]
    previous_node_id: Optional[str] = None


@dataclass
class AnchorChangedEvent(Event):
    """The alternate-reply anchor was set or cleared."""

    session_id: str
    node_id: Optional[str]
    reason: Optional[str] = None


@dataclass
class CollapseChangedEvent(Event):
    """The set of collapsed divergences and folds changed."""

    session_id: str
    collapsed_keys: List[str]
    trigger: str


@dataclass
class SubmissionStartedEvent(Event):
    """A human message was sent to the execution engine."""

    session_id: str
    message: str
    kind: str
    parent_node_id: Optional[str]
    anchor_node_id: Optional[str] = None


@dataclass
class TurnsCommittedEvent(Event):
    """The engine accepted a message and its turns entered the tree."""

    session_id: str
    node_ids: List[str]
    kind: str
    branch_label: Optional[str] = None


@dataclass
class SubmissionFailedEvent(Event):
    """A submission failed; the tree is unchanged."""

    session_id: str
    error: str
    kind: Optional[str] = None
    anchor_node_id: Optional[str] = None
