"""Core constants for turntree."""


# Nord color scheme for console output
class Colors:
    """Nord color scheme constants."""

    RED = "#bf616a"
    YELLOW = "#ebcb8b"
    BLUE = "#5e81ac"
    TEAL = "#8fbcbb"
    PURPLE = "#b48ead"
    DIM = "#4c566a"


class CollapseDefaults:
    """Default thresholds for keeping a large tree readable."""

    AUTO_COLLAPSE_DEPTH = 2  # Auto-collapse divergences deeper than this
    LINEAR_FOLD_THRESHOLD = 6  # Fold linear runs longer than this
    FOLD_SHOW_EDGES = 2  # Show first N and last N turns of a folded run


class CollapseKeyPrefix:
    """Namespaces for collapse keys."""

    DIVERGE = "diverge"
    LINEAR = "linear"


class DisplayDefaults:
    """Truncation lengths for snippets shown in the tree and playback."""

    SNIPPET_LENGTH = 60
    PATH_LABEL_LENGTH = 25
    BREADCRUMB_LENGTH = 30
    ELLIPSIS = "..."


class ComposerMode:
    """What the message composer offers for the current selection."""

    SEND = "send"
    ALTERNATE_REPLY = "alternate_reply"
    DISABLED = "disabled"


class SubmissionKind:
    """How a submitted human message attaches to the tree."""

    CONTINUATION = "continuation"
    FORK = "fork"


class SystemDefaults:
    """System-wide default values."""

    MAX_EVENT_HISTORY = 1000  # Maximum events to keep in memory
    MAIN_BRANCH_LABEL = "Main"
    FORK_LABEL_TEMPLATE = "Alternate Reply from Turn {turn_number}"
