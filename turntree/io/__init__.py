"""Input/output and logging utilities for turntree."""

from .directories import get_config_dir, get_config_path
from .logger import get_logger, setup_logging
from .records import from_engine_node, load_records, parse_records, save_records

__all__ = [
    "from_engine_node",
    "get_config_dir",
    "get_config_path",
    "get_logger",
    "load_records",
    "parse_records",
    "save_records",
    "setup_logging",
]
