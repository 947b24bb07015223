"""Custom exceptions for turntree core functionality."""


class TurnTreeError(Exception):
    """Base exception for all turntree errors."""


class NodeNotFoundError(TurnTreeError):
    """Raised when a node id does not resolve in the current tree."""

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"Node not found: {node_id}")


class AnchorError(TurnTreeError):
    """Base exception for alternate-reply anchor problems."""


class InvalidAnchorError(AnchorError):
    """Raised when a node cannot serve as an alternate-reply anchor."""

    def __init__(self, node_id: str, reason: str = None):
        self.node_id = node_id
        self.reason = reason
        message = f"Node {node_id} cannot be used as an anchor"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class StaleAnchorError(AnchorError):
    """Raised when the anchor no longer resolves at submission time."""

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(
            f"Anchor {node_id} is no longer in the tree; the anchor was cleared"
        )


class SubmissionError(TurnTreeError):
    """Raised when the execution engine fails to process a message."""

    def __init__(self, message: str, is_fork: bool = False):
        self.is_fork = is_fork
        super().__init__(message)


class SubmissionInProgressError(SubmissionError):
    """Raised when a second submission starts while one is in flight."""

    def __init__(self):
        super().__init__("A message is already being submitted")


class EmptyMessageError(TurnTreeError):
    """Raised when a blank message is submitted."""

    def __init__(self):
        super().__init__("Cannot submit an empty message")


class RecordFormatError(TurnTreeError):
    """Raised when turn records cannot be parsed."""

    def __init__(self, source: str, detail: str):
        self.source = source
        self.detail = detail
        super().__init__(f"Invalid turn records in {source}: {detail}")
