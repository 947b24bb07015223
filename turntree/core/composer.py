"""Message composer: submits human messages to the execution engine.

Only one submission is in flight at a time. While it is pending a
``PendingTurn`` placeholder is exposed for display, but nothing enters the
tree until the engine answers; on failure the typed text is restored.
"""

from typing import Optional

from ..io.logger import get_logger
from .engine import ExecutionEngine
from .events import (
    SubmissionFailedEvent,
    SubmissionStartedEvent,
    TurnsCommittedEvent,
)
from .exceptions import (
    EmptyMessageError,
    StaleAnchorError,
    SubmissionError,
    SubmissionInProgressError,
)
from .session import SimulationSession
from .types import PendingTurn, StepResult

logger = get_logger("composer")


class Composer:
    """Sends the draft message as a continuation or a fork."""

    def __init__(self, session: SimulationSession, engine: ExecutionEngine):
        self.session = session
        self.engine = engine
        self.draft = ""
        self.pending = False
        self.placeholder: Optional[PendingTurn] = None
        self.last_error: Optional[Exception] = None

    @property
    def mode(self) -> str:
        return self.session.composer_mode()

    async def submit(self, message: Optional[str] = None) -> StepResult:
        """Submit ``message`` (or the current draft).

        Returns:
            The engine's StepResult, already committed to the session

        Raises:
            SubmissionInProgressError: If a submission is already pending
            EmptyMessageError: If the message is blank
            StaleAnchorError: If the anchor vanished; the anchor is cleared
            SubmissionError: If the engine failed; the tree is unchanged
        """
        if self.pending:
            raise SubmissionInProgressError()

        text = (message if message is not None else self.draft).strip()
        if not text:
            raise EmptyMessageError()

        session = self.session
        bus = session.bus

        try:
            plan = session.plan_submission()
        except StaleAnchorError as e:
            session.clear_anchor(reason="stale")
            self.last_error = e
            await bus.emit(
                SubmissionFailedEvent(
                    session_id=session.session_id,
                    error=str(e),
                    anchor_node_id=e.node_id,
                )
            )
            raise

        self.pending = True
        self.last_error = None
        self.placeholder = PendingTurn(
            message=text,
            parent_node_id=plan.parent_node_id,
            is_fork=plan.is_fork,
            anchor_node_id=plan.anchor_node_id,
        )
        self.draft = ""

        await bus.emit(
            SubmissionStartedEvent(
                session_id=session.session_id,
                message=text,
                kind=plan.kind,
                parent_node_id=plan.parent_node_id,
                anchor_node_id=plan.anchor_node_id,
            )
        )

        try:
            if plan.is_fork:
                logger.info(
                    f"Forking at {plan.anchor_node_id} under {plan.parent_node_id}"
                )
                result = await self.engine.submit_fork(
                    plan.anchor_node_id, plan.parent_node_id, text
                )
            else:
                logger.debug(f"Continuing from {plan.parent_node_id}")
                result = await self.engine.submit_continuation(
                    plan.parent_node_id, text
                )
            if not result.turns:
                raise ValueError("engine returned no turns")
        except Exception as e:
            self.draft = text
            self.last_error = e
            logger.error(f"Submission failed: {e}")
            await bus.emit(
                SubmissionFailedEvent(
                    session_id=session.session_id,
                    error=str(e),
                    kind=plan.kind,
                    anchor_node_id=plan.anchor_node_id,
                )
            )
            raise SubmissionError(
                f"Failed to submit message: {e}", is_fork=plan.is_fork
            ) from e
        finally:
            self.pending = False
            self.placeholder = None

        session.commit(result, plan)
        await bus.emit(
            TurnsCommittedEvent(
                session_id=session.session_id,
                node_ids=[turn.node_id for turn in result.turns],
                kind=plan.kind,
                branch_label=plan.branch_label,
            )
        )
        return result
