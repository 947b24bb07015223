"""turntree - explore branching lead/agent conversations as a tree"""

__version__ = "0.1.0"

# Config exports
from .config import Config

# Core exports
from .core import (
    BranchForkProtocol,
    CollapsePolicy,
    Composer,
    EventBus,
    ScriptedEngine,
    SimulationSession,
    TreeBuilder,
    TurnRecord,
)

# IO exports
from .io import get_logger, load_records, save_records

__all__ = [
    # Version
    "__version__",
    # Core
    "BranchForkProtocol",
    "CollapsePolicy",
    "Composer",
    "EventBus",
    "ScriptedEngine",
    "SimulationSession",
    "TreeBuilder",
    "TurnRecord",
    # Config
    "Config",
    # IO
    "get_logger",
    "load_records",
    "save_records",
]
