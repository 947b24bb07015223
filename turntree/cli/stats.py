"""Stats command: summarize the shape of a conversation tree."""

import rich_click as click
from rich.console import Console
from rich.table import Table

from ..core.tree_builder import find_divergences, find_leaves, iter_nodes
from .constants import NORD_CYAN, NORD_DARK, NORD_YELLOW
from .error_handler import CLIErrorHandler
from .helpers import get_config, open_session

console = Console()
error_handler = CLIErrorHandler()


@click.command()
@click.argument("records", type=click.Path())
@click.pass_context
@error_handler.wrap_command
def stats(ctx: click.Context, records: str):
    """Count roots, turns, divergences and leaves in RECORDS."""
    session = open_session(records, get_config(ctx))
    roots = session.roots
    result = session.build_result

    nodes = list(iter_nodes(roots))
    human = sum(1 for node in nodes if node.is_human_turn)

    table = Table(title="Conversation tree", border_style=NORD_DARK, title_justify="left")
    table.add_column("Metric", style=NORD_CYAN)
    table.add_column("Value", justify="right")

    table.add_row("Roots", str(len(roots)))
    table.add_row("Turns", str(len(nodes)))
    table.add_row("Lead turns", str(human))
    table.add_row("Agent turns", str(len(nodes) - human))
    table.add_row("Divergences", str(len(find_divergences(roots))))
    table.add_row("Leaves", str(len(find_leaves(roots))))
    table.add_row("Max depth", str(max((node.depth for node in nodes), default=0)))

    if result.has_anomalies:
        table.add_row("Orphaned", str(len(result.orphaned)), style=NORD_YELLOW)
        table.add_row("Duplicates", str(len(result.duplicates)), style=NORD_YELLOW)
        table.add_row("Cycles broken", str(len(result.cycle_breaks)), style=NORD_YELLOW)

    console.print(table)
