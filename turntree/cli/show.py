"""Show command: draw the conversation tree."""

from typing import Optional

import rich_click as click
from rich.console import Console

from ..ui.display_utils import DisplayUtils
from ..ui.tree_view import TreeView
from .error_handler import CLIErrorHandler, ValidationError
from .helpers import get_config, open_session, report_anomalies

console = Console()
display = DisplayUtils(console)
error_handler = CLIErrorHandler()


@click.command()
@click.argument("records", type=click.Path())
@click.option("--select", "-s", help="Node id to select (its path is revealed)")
@click.option("--collapse-all", is_flag=True, help="Collapse every divergence off the selected path")
@click.option("--expand-all", is_flag=True, help="Expand every divergence and fold")
@click.option("--fold-all", is_flag=True, help="Fold every long linear run to its first and last turns")
@click.option("--debug", is_flag=True, help="Show node ids next to each turn")
@click.pass_context
@error_handler.wrap_command
def show(
    ctx: click.Context,
    records: str,
    select: Optional[str],
    collapse_all: bool,
    expand_all: bool,
    fold_all: bool,
    debug: bool,
):
    """Draw the conversation tree stored in RECORDS.

    Divergences deeper than the configured depth start collapsed. Long
    linear runs are drawn in full with a fold control until --fold-all
    folds them. The selected turn is always visible.

    [bold]EXAMPLES:[/bold]

    [#4c566a]Whole tree:[/#4c566a]
      turntree show run.jsonl

    [#4c566a]Reveal one turn, hide the rest:[/#4c566a]
      turntree show run.jsonl --select node-007 --collapse-all

    [#4c566a]Shorten long stretches without branches:[/#4c566a]
      turntree show run.jsonl --fold-all
    """
    if collapse_all and expand_all:
        raise ValidationError("--collapse-all and --expand-all cannot be combined")

    config = get_config(ctx)
    session = open_session(records, config, select=select)

    if collapse_all:
        session.collapse_all()
    elif expand_all:
        session.expand_all()
    if fold_all:
        session.fold_all()

    report_anomalies(session, display)
    view = TreeView(debug=debug or config.get("display.debug", False))
    view.print(console, session.visible_rows())
