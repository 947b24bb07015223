"""Rich rendering of the conversation tree rows."""

from typing import List, Optional, Sequence

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from ..core.constants import Colors
from ..core.types import TreeNode, TurnStatus
from ..core.view_model import Row, RowKind

STATUS_ICONS = {
    TurnStatus.DRIFTED: ("⚠", Colors.YELLOW),
    TurnStatus.INVALID: ("✗", Colors.RED),
}

# Engine decisions worth calling out next to an agent turn
DECISION_ICONS = {
    "STALL": "⏸",
    "EXPLAIN": "💡",
    "FAST_TRACK": "🚀",
    "HANDOFF": "👋",
    "NO_OP": "⊘",
}


class TreeView:
    """Turns view-model rows into indented rich text lines.

    Args:
        debug: Show node ids next to each turn
        anchor_node_id: Turn marked for an alternate reply, highlighted
    """

    INDENT = "  "

    def __init__(self, debug: bool = False, anchor_node_id: Optional[str] = None):
        self.debug = debug
        self.anchor_node_id = anchor_node_id

    def _prefix(self, row: Row) -> str:
        return self.INDENT * row.depth

    def _turn_line(self, row: Row) -> Text:
        node: TreeNode = row.node
        line = Text(self._prefix(row))

        if row.selected:
            line.append("▶ ", style=f"bold {Colors.TEAL}")
        else:
            line.append("  ")

        if node.is_human_turn:
            line.append("👤 ", style=Colors.BLUE)
        else:
            line.append("🤖 ", style=Colors.TEAL)

        style = "bold" if row.selected else ""
        line.append(row.text, style=style)

        if node.node_id == self.anchor_node_id:
            line.append("  ⑂ alternate reply", style=f"bold {Colors.PURPLE}")

        icon = STATUS_ICONS.get(node.status)
        if icon:
            line.append(f"  {icon[0]} {node.status.value}", style=icon[1])

        decision = node.record.diagnostics.get("decision")
        if decision in DECISION_ICONS:
            line.append(f"  {DECISION_ICONS[decision]} {decision}", style=Colors.PURPLE)

        if self.debug:
            line.append(f"  [{node.node_id}]", style=Colors.DIM)
        return line

    def render_row(self, row: Row) -> Text:
        if row.kind == RowKind.TURN:
            return self._turn_line(row)

        prefix = self._prefix(row)
        if row.kind == RowKind.DIVERGENCE:
            marker = "▸" if row.collapsed else "▾"
            return Text(f"{prefix}  {marker} ⑂ {row.text}", style=Colors.YELLOW)
        if row.kind == RowKind.COLLAPSED:
            return Text(f"{prefix}  {row.text}", style=Colors.DIM)
        if row.kind == RowKind.PATH_LABEL:
            guide = "└─" if row.is_last else "├─"
            color = Colors.YELLOW if row.is_alternate else Colors.DIM
            return Text(f"{prefix}{guide} {row.text}", style=color)
        if row.kind == RowKind.FOLD_INDICATOR:
            return Text(f"{prefix}    ⋮ {row.text}", style=Colors.DIM)
        return Text(f"{prefix}    ⇡ {row.text}", style=Colors.DIM)

    def render(self, rows: Sequence[Row]) -> List[Text]:
        return [self.render_row(row) for row in rows]

    def print(self, console: Console, rows: Sequence[Row], title: str = "Conversation") -> None:
        if not rows:
            console.print(Text("No turns yet. Send a message to start.", style=Colors.DIM))
            return
        console.print(
            Panel(
                Group(*self.render(rows)),
                title=f" {title}",
                title_align="left",
                border_style=Colors.BLUE,
                expand=False,
            )
        )
