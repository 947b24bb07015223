"""Shared console messages for turntree.

Every command reports errors, warnings and results through ``DisplayUtils``
so the terminal output keeps one look.
"""

from typing import Optional, Union

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

# Nord color palette
NORD_COLORS = {
    "nord3": "#4c566a",  # Muted gray (dim text)
    "nord4": "#d8dee9",  # Light gray
    "nord7": "#8fbcbb",  # Teal - Info
    "nord8": "#88c0d0",  # Light blue - Status
    "nord11": "#bf616a",  # Red - Errors
    "nord13": "#ebcb8b",  # Yellow - Warnings
    "nord14": "#a3be8c",  # Green - Success
    "nord15": "#b48ead",  # Purple - Alternate replies
}


class DisplayUtils:
    """Utilities for consistent message display."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def _panel_width(
        self,
        content: Union[str, Text],
        title: str = "",
        min_width: int = 40,
        max_width: int = 80,
    ) -> int:
        plain = content.plain if isinstance(content, Text) else content
        longest = max((len(line) for line in plain.split("\n")), default=0)
        content_width = max(longest, len(title) + 4)
        # +6 for panel borders and padding
        return max(min_width, min(content_width + 6, max_width))

    def _panel(self, content: str, title: str, color: str, max_width: int = 80):
        self.console.print()
        self.console.print(
            Panel(
                content,
                title=f" {title}",
                title_align="left",
                border_style=color,
                padding=(1, 2),
                width=self._panel_width(content, title, max_width=max_width),
                expand=False,
            )
        )
        self.console.print()

    def error(
        self,
        message: str,
        title: Optional[str] = None,
        context: Optional[str] = None,
        use_panel: bool = True,
    ) -> None:
        """Display an error message.

        Args:
            message: The error message
            title: Optional title for the panel
            context: Optional context information
            use_panel: Whether to use a panel (True) or plain text (False)
        """
        color = NORD_COLORS["nord11"]
        if use_panel:
            content = message
            if context:
                content += f"\n\nContext: {context}"
            self._panel(content, title or "! Error", color)
        else:
            self.console.print(f"[{color}][FAIL] {message}[/{color}]")
            if context:
                self.dim(f"       {context}")

    def warning(
        self,
        message: str,
        title: Optional[str] = None,
        context: Optional[str] = None,
        use_panel: bool = True,
    ) -> None:
        """Display a warning message."""
        color = NORD_COLORS["nord13"]
        if use_panel:
            content = message
            if context:
                content += f"\n\n{context}"
            self._panel(content, title or "⚠ Warning", color, max_width=70)
        else:
            self.console.print(f"[{color}]⚠ {message}[/{color}]")
            if context:
                self.dim(f"  {context}")

    def info(
        self, message: str, title: Optional[str] = None, use_panel: bool = True
    ) -> None:
        color = NORD_COLORS["nord7"]
        if use_panel:
            self._panel(message, title or "◆ Info", color, max_width=70)
        else:
            self.console.print(f"[{color}]◆ {message}[/{color}]")

    def success(self, message: str) -> None:
        color = NORD_COLORS["nord14"]
        self.console.print(f"[{color}][OK] {message}[/{color}]")

    def submission_error(self, message: str, is_fork: bool = False) -> None:
        """Report a failed submission; the tree was left untouched."""
        kind = "Alternate reply" if is_fork else "Message"
        content = (
            f"[bold {NORD_COLORS['nord11']}]{kind} was not recorded"
            f"[/bold {NORD_COLORS['nord11']}]\n\n"
            f"◈ {message}\n"
            f"\n[{NORD_COLORS['nord3']}]◇ The conversation tree is unchanged"
            f"[/{NORD_COLORS['nord3']}]"
        )
        self._panel(content, "◆ Submission Failed", NORD_COLORS["nord11"])

    def dim(self, message: str) -> None:
        color = NORD_COLORS["nord3"]
        self.console.print(f"[{color}]{message}[/{color}]")

    def status(self, message: str, style: str = "nord8") -> None:
        """Display a status message.

        Args:
            message: The status message
            style: Palette name to color it with (defaults to nord8/light blue)
        """
        color = NORD_COLORS.get(style, NORD_COLORS["nord8"])
        self.console.print(f"[{color}]→ {message}[/{color}]")
