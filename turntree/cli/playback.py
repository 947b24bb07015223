"""Playback command: print one conversation path."""

from typing import Optional

import rich_click as click
from rich.console import Console

from ..ui.playback_view import print_playback
from .error_handler import CLIErrorHandler
from .helpers import get_config, open_session

console = Console()
error_handler = CLIErrorHandler()


@click.command()
@click.argument("records", type=click.Path())
@click.option("--select", "-s", help="Play back the path ending at this node")
@click.pass_context
@error_handler.wrap_command
def playback(ctx: click.Context, records: str, select: Optional[str]):
    """Print the conversation so far, from the root to the selected turn.

    Without --select the main line is shown: from the first root, always
    following the earliest reply.
    """
    session = open_session(records, get_config(ctx), select=select)
    print_playback(console, session.playback(), session.breadcrumb())
