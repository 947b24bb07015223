"""Core data types for turntree.

This module defines the records that make up a simulated conversation, the
tree nodes built from them, and the placeholder shown while a submission is
in flight.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class TurnStatus(str, Enum):
    """Validity of a turn as judged by the execution engine."""

    VALID = "VALID"
    DRIFTED = "DRIFTED"
    INVALID = "INVALID"


class Speaker(str, Enum):
    """Who produced a turn."""

    HUMAN = "human"  # The lead
    AGENT = "agent"  # The automated agent


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TurnRecord(BaseModel):
    """A single conversation turn as reported by the execution engine.

    Records are immutable. The tree structure is carried entirely by
    ``parent_node_id``; ``branch_id`` is only a display label.

    Attributes:
        node_id: Unique identifier of the turn
        parent_node_id: Identifier of the preceding turn, None for a root
        branch_id: Display label of the branch the turn belongs to
        turn_number: Ordinal used for display only
        timestamp: Creation time, orders siblings
        user_message: The human utterance, if this is a human turn
        agent_message: The agent utterance, if this is an agent turn
        status: Externally computed validity
        diagnostics: Opaque engine payload (intent, confidence, decision...)

    Example:
        record = TurnRecord(
            node_id="n1",
            user_message="Hi, I need help with my plan",
        )
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    node_id: str = Field(alias="nodeId")
    parent_node_id: Optional[str] = Field(default=None, alias="parentNodeId")
    branch_id: Optional[str] = Field(default=None, alias="branchId")
    turn_number: int = Field(default=0, alias="turnNumber")
    timestamp: datetime = Field(default_factory=_utc_now)
    user_message: Optional[str] = Field(default=None, alias="userMessage")
    agent_message: Optional[str] = Field(default=None, alias="agentMessage")
    status: TurnStatus = TurnStatus.VALID
    diagnostics: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("timestamp")
    @classmethod
    def ensure_aware(cls, v: datetime) -> datetime:
        """Treat naive timestamps as UTC so siblings always compare."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @model_validator(mode="after")
    def exactly_one_message(self) -> "TurnRecord":
        """A turn carries one human OR one agent utterance, never both."""
        has_user = self.user_message is not None
        has_agent = self.agent_message is not None
        if not has_user and not has_agent:
            raise ValueError(
                f"Turn {self.node_id} has neither a user nor an agent message"
            )
        if has_user and has_agent:
            raise ValueError(
                f"Turn {self.node_id} has both a user and an agent message"
            )
        return self

    @property
    def speaker(self) -> Speaker:
        return Speaker.HUMAN if self.user_message is not None else Speaker.AGENT

    @property
    def is_human_turn(self) -> bool:
        return self.user_message is not None

    @property
    def is_agent_turn(self) -> bool:
        return self.agent_message is not None

    @property
    def is_root(self) -> bool:
        return self.parent_node_id is None

    @property
    def text(self) -> str:
        """The utterance regardless of speaker."""
        return self.user_message if self.user_message is not None else self.agent_message


@dataclass
class TreeNode:
    """A turn record placed in the conversation tree.

    ``children`` are ordered by ascending timestamp. ``depth`` is the
    distance from the node's root (a root has depth 0).
    """

    record: TurnRecord
    children: List["TreeNode"] = field(default_factory=list)
    depth: int = 0

    @property
    def node_id(self) -> str:
        return self.record.node_id

    @property
    def parent_node_id(self) -> Optional[str]:
        return self.record.parent_node_id

    @property
    def timestamp(self) -> datetime:
        return self.record.timestamp

    @property
    def turn_number(self) -> int:
        return self.record.turn_number

    @property
    def user_message(self) -> Optional[str]:
        return self.record.user_message

    @property
    def agent_message(self) -> Optional[str]:
        return self.record.agent_message

    @property
    def status(self) -> TurnStatus:
        return self.record.status

    @property
    def is_human_turn(self) -> bool:
        return self.record.is_human_turn

    @property
    def is_agent_turn(self) -> bool:
        return self.record.is_agent_turn

    def __repr__(self) -> str:
        return (
            f"TreeNode({self.node_id!r}, depth={self.depth}, "
            f"children={[c.node_id for c in self.children]})"
        )


@dataclass(frozen=True)
class PendingTurn:
    """Optimistic placeholder for a human message awaiting the engine.

    Deliberately not a TurnRecord: it has no node id and can never be fed
    to the tree builder or persisted.
    """

    message: str
    parent_node_id: Optional[str]
    is_fork: bool = False
    anchor_node_id: Optional[str] = None
    created_at: datetime = field(default_factory=_utc_now)


@dataclass
class StepResult:
    """Records produced by the engine for one submitted human message.

    ``turns`` holds the human turn first, followed by the agent reply when
    the engine produced one.
    """

    turns: List[TurnRecord]

    @property
    def human_turn(self) -> Optional[TurnRecord]:
        return self.turns[0] if self.turns else None

    @property
    def agent_turn(self) -> Optional[TurnRecord]:
        return self.turns[1] if len(self.turns) > 1 else None

    @property
    def last_turn(self) -> Optional[TurnRecord]:
        return self.turns[-1] if self.turns else None
