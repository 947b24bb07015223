"""Shared helpers for CLI commands."""

from pathlib import Path
from typing import Optional

import rich_click as click

from ..config import Config
from ..core.session import SimulationSession
from ..io.records import load_records
from ..ui.display_utils import DisplayUtils
from .error_handler import ConfigError
from .error_handler import FileNotFoundError as CLIFileNotFoundError


def get_config(ctx: click.Context) -> Config:
    """Config loaded by the group callback, or the defaults."""
    obj = ctx.find_root().obj or {}
    config = obj.get("config")
    if config is None:
        try:
            config = Config()
        except ValueError as e:
            raise ConfigError(str(e)) from e
    return config


def open_session(
    records_path: str,
    config: Config,
    select: Optional[str] = None,
    anchor: Optional[str] = None,
) -> SimulationSession:
    """Load records into a session and apply the requested selection.

    Raises:
        FileNotFoundError: If the records file does not exist
        RecordFormatError: If the records cannot be parsed
        NodeNotFoundError: If ``select`` does not resolve
        InvalidAnchorError: If ``anchor`` is an agent turn
    """
    path = Path(records_path)
    if not path.exists():
        raise CLIFileNotFoundError(path, "Check the path to the records file")

    session = SimulationSession.from_config(load_records(path), config)
    if select:
        session.select(select)
    if anchor:
        session.set_anchor(anchor)
    return session


def report_anomalies(session: SimulationSession, display: DisplayUtils) -> None:
    """Warn about records the tree builder had to repair."""
    result = session.build_result
    if result.orphaned:
        display.warning(
            f"{len(result.orphaned)} turn(s) reference a missing parent and are shown as roots",
            use_panel=False,
        )
    if result.duplicates:
        display.warning(
            f"{len(result.duplicates)} duplicate node id(s) ignored",
            use_panel=False,
        )
    if result.cycle_breaks:
        display.warning(
            f"{len(result.cycle_breaks)} parent cycle(s) broken",
            use_panel=False,
        )
