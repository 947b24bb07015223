"""Execution engine interface and an offline scripted engine."""

from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Protocol, runtime_checkable
from uuid import uuid4

from ..io.logger import get_logger
from .constants import SubmissionKind
from .types import StepResult, TurnRecord

logger = get_logger("engine")


@runtime_checkable
class ExecutionEngine(Protocol):
    """Processes one human message and returns the turns it produced.

    Both calls are asynchronous and may fail with any exception; the
    composer turns failures into ``SubmissionError``.
    """

    async def submit_continuation(
        self, parent_node_id: Optional[str], message: str
    ) -> StepResult:
        ...

    async def submit_fork(
        self, anchor_node_id: str, parent_node_id: Optional[str], message: str
    ) -> StepResult:
        ...


class ScriptedEngine:
    """Deterministic engine for offline exploration and testing.

    Every human message is answered by the next scripted reply (cycling).
    Timestamps strictly increase so sibling order follows submission order.
    """

    DEFAULT_REPLIES = [
        "Thanks for reaching out! What are you hoping to achieve?",
        "That makes sense. When would you like to get started?",
        "Got it. What has held you back so far?",
        "Understood. Could you share the best email to reach you?",
        "Perfect, I have what I need. Let's book a time to talk.",
    ]

    def __init__(
        self,
        records: Iterable[TurnRecord] = (),
        replies: Optional[List[str]] = None,
        reply: bool = True,
    ):
        self.replies = list(replies) if replies is not None else list(self.DEFAULT_REPLIES)
        self.reply = reply
        self._reply_index = 0
        self._known: Dict[str, TurnRecord] = {}
        self._clock = datetime.now(timezone.utc)
        for record in records:
            self._remember(record)

    def _remember(self, record: TurnRecord) -> None:
        self._known.setdefault(record.node_id, record)
        if record.timestamp > self._clock:
            self._clock = record.timestamp

    def _tick(self) -> datetime:
        now = datetime.now(timezone.utc)
        self._clock = max(now, self._clock + timedelta(microseconds=1))
        return self._clock

    def _next_reply(self) -> str:
        text = self.replies[self._reply_index % len(self.replies)]
        self._reply_index += 1
        return text

    def _step(
        self,
        parent_node_id: Optional[str],
        message: str,
        branch_id: str,
        kind: str,
    ) -> StepResult:
        parent = self._known.get(parent_node_id) if parent_node_id else None
        turn_number = parent.turn_number + 1 if parent else 1

        human = TurnRecord(
            node_id=uuid4().hex[:12],
            parent_node_id=parent_node_id,
            branch_id=branch_id,
            turn_number=turn_number,
            timestamp=self._tick(),
            user_message=message,
            diagnostics={"submission": kind},
        )
        turns = [human]
        self._remember(human)

        if self.reply and self.replies:
            # A reply shares the ordinal of the message it answers
            agent = TurnRecord(
                node_id=uuid4().hex[:12],
                parent_node_id=human.node_id,
                branch_id=branch_id,
                turn_number=turn_number,
                timestamp=self._tick(),
                agent_message=self._next_reply(),
                diagnostics={"decision": "ADVANCE", "confidence": 1.0},
            )
            turns.append(agent)
            self._remember(agent)

        logger.debug(f"Scripted {kind} produced {[t.node_id for t in turns]}")
        return StepResult(turns=turns)

    async def submit_continuation(
        self, parent_node_id: Optional[str], message: str
    ) -> StepResult:
        parent = self._known.get(parent_node_id) if parent_node_id else None
        branch_id = (parent.branch_id if parent else None) or "branch-main"
        return self._step(parent_node_id, message, branch_id, SubmissionKind.CONTINUATION)

    async def submit_fork(
        self, anchor_node_id: str, parent_node_id: Optional[str], message: str
    ) -> StepResult:
        branch_id = f"branch-{uuid4().hex[:8]}"
        return self._step(parent_node_id, message, branch_id, SubmissionKind.FORK)
