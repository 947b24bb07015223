"""Core tree, branching and submission logic for turntree."""

from .ancestry import AncestryResolver
from .collapse import CollapsePolicy, CollapseState, FoldedRun
from .composer import Composer
from .engine import ExecutionEngine, ScriptedEngine
from .event_bus import EventBus
from .events import *
from .exceptions import *
from .fork_protocol import BranchForkProtocol, SubmissionPlan
from .playback import PlaybackPathExtractor
from .session import SimulationSession
from .tree_builder import TreeBuilder, TreeBuildResult, build_tree
from .types import *
from .view_model import Row, RowKind, TreeViewBuilder

__all__ = [
    # From tree_builder
    'TreeBuilder',
    'TreeBuildResult',
    'build_tree',

    # From ancestry
    'AncestryResolver',

    # From collapse
    'CollapsePolicy',
    'CollapseState',
    'FoldedRun',

    # From fork_protocol
    'BranchForkProtocol',
    'SubmissionPlan',

    # From playback
    'PlaybackPathExtractor',

    # From view_model
    'Row',
    'RowKind',
    'TreeViewBuilder',

    # From session, composer and engine
    'SimulationSession',
    'Composer',
    'ExecutionEngine',
    'ScriptedEngine',

    # From event_bus
    'EventBus',

    # From events - explicitly list all event types
    'Event',
    'TreeRebuiltEvent',
    'OrphanedTurnEvent',
    'SelectionChangedEvent',
    'AnchorChangedEvent',
    'CollapseChangedEvent',
    'SubmissionStartedEvent',
    'TurnsCommittedEvent',
    'SubmissionFailedEvent',

    # From exceptions
    'TurnTreeError',
    'NodeNotFoundError',
    'AnchorError',
    'InvalidAnchorError',
    'StaleAnchorError',
    'SubmissionError',
    'SubmissionInProgressError',
    'EmptyMessageError',
    'RecordFormatError',

    # From types
    'TurnRecord',
    'TreeNode',
    'PendingTurn',
    'StepResult',
    'TurnStatus',
]
