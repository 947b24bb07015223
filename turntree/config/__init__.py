"""Configuration for turntree."""

from .config import Config
from .schema import DisplayConfig, LoggingConfig, TreeConfig, TurnTreeConfig

__all__ = [
    # From config
    "Config",
    # From schema
    "TurnTreeConfig",
    "TreeConfig",
    "DisplayConfig",
    "LoggingConfig",
]
