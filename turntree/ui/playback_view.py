"""Rich rendering of the playback path."""

from typing import Optional, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from ..core.constants import Colors
from ..core.types import TreeNode


def print_playback(
    console: Console,
    path: Sequence[TreeNode],
    breadcrumb: str,
    anchor_node_id: Optional[str] = None,
) -> None:
    """Print the breadcrumb, then one panel per turn of the path."""
    console.print(Text(breadcrumb, style=f"bold {Colors.TEAL}"))
    console.print()

    if not path:
        console.print(Text("No turns yet.", style=Colors.DIM))
        return

    for node in path:
        if node.is_human_turn:
            title = f" 👤 Lead · Turn {node.turn_number}"
            color = Colors.PURPLE if node.node_id == anchor_node_id else Colors.BLUE
            body = node.user_message
        else:
            title = f" 🤖 Agent · Turn {node.turn_number}"
            color = Colors.TEAL
            body = node.agent_message
        console.print(
            Panel(body, title=title, title_align="left", border_style=color)
        )
