"""Standardized error handling for CLI commands."""

import functools
import sys
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from ..core.exceptions import (
    AnchorError,
    EmptyMessageError,
    NodeNotFoundError,
    RecordFormatError,
    SubmissionError,
    TurnTreeError,
)


class ErrorType(Enum):
    """Categories of errors for appropriate handling."""

    CONFIG = "Configuration Error"
    FILE_NOT_FOUND = "File Not Found"
    VALIDATION = "Validation Error"
    RECORDS = "Invalid Records"
    NODE = "Unknown Turn"
    SUBMISSION = "Submission Failed"
    RUNTIME = "Runtime Error"
    USER_INTERRUPT = "User Interrupted"


class CLIError(Exception):
    """Base exception for CLI-specific errors."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.RUNTIME,
        suggestion: Optional[str] = None,
        exit_code: int = 1,
    ):
        super().__init__(message)
        self.error_type = error_type
        self.suggestion = suggestion
        self.exit_code = exit_code


class ConfigError(CLIError):
    """Configuration-related errors."""

    def __init__(self, message: str, suggestion: Optional[str] = None):
        super().__init__(message, ErrorType.CONFIG, suggestion, exit_code=2)


class ValidationError(CLIError):
    def __init__(self, message: str, suggestion: Optional[str] = None):
        super().__init__(message, ErrorType.VALIDATION, suggestion, exit_code=3)


class FileNotFoundError(CLIError):
    def __init__(self, path: Path, suggestion: Optional[str] = None):
        message = f"File not found: {path}"
        super().__init__(message, ErrorType.FILE_NOT_FOUND, suggestion, exit_code=4)


class SubmissionFailedError(CLIError):
    """The execution engine did not accept a message."""

    def __init__(self, message: str, suggestion: Optional[str] = None):
        super().__init__(message, ErrorType.SUBMISSION, suggestion, exit_code=5)


def to_cli_error(error: TurnTreeError) -> CLIError:
    """Map a core error onto the CLI error and exit code that reports it."""
    if isinstance(error, RecordFormatError):
        return CLIError(
            str(error),
            ErrorType.RECORDS,
            "Records must be a JSON array, a {\"nodes\": [...]} object, or JSONL",
            exit_code=3,
        )
    if isinstance(error, NodeNotFoundError):
        return CLIError(
            str(error),
            ErrorType.NODE,
            "Run 'turntree show RECORDS --debug' to list node ids",
            exit_code=3,
        )
    if isinstance(error, AnchorError):
        return ValidationError(
            str(error), "Alternate replies can only start from a lead's message"
        )
    if isinstance(error, EmptyMessageError):
        return ValidationError(str(error))
    if isinstance(error, SubmissionError):
        return SubmissionFailedError(str(error))
    return CLIError(str(error))


class CLIErrorHandler:
    """Centralized error handling for CLI commands."""

    def __init__(self, console: Optional[Console] = None, debug: bool = False):
        self.console = console or Console(stderr=True)
        self.debug = debug

    def handle_error(self, error: Exception) -> None:
        """Handle an error with appropriate formatting and exit code."""
        if isinstance(error, KeyboardInterrupt):
            self._handle_interrupt()
        elif isinstance(error, CLIError):
            self._handle_cli_error(error)
        elif isinstance(error, TurnTreeError):
            self._handle_cli_error(to_cli_error(error))
        else:
            self._handle_unexpected_error(error)

    def _handle_interrupt(self) -> None:
        self.console.print("\n[yellow]✗ Operation cancelled by user[/yellow]")
        sys.exit(130)  # Standard exit code for SIGINT

    def _handle_cli_error(self, error: CLIError) -> None:
        """Handle known CLI errors with formatting."""
        error_text = Text()
        error_text.append(f"✗ {error.error_type.value}: ", style="bold red")
        error_text.append(str(error))

        if error.suggestion:
            error_text.append("\n\n", style="")
            error_text.append("💡 Suggestion: ", style="bold yellow")
            error_text.append(error.suggestion, style="yellow")

        panel = Panel(
            error_text,
            title="[bold red]Error[/bold red]",
            border_style="red",
            expand=False,
        )
        self.console.print(panel)

        if self.debug:
            self.console.print("\n[dim]Debug traceback:[/dim]")
            self.console.print_exception(show_locals=True)

        sys.exit(error.exit_code)

    def _handle_unexpected_error(self, error: Exception) -> None:
        """Handle unexpected errors with full traceback."""
        error_text = Text()
        error_text.append("✗ Unexpected error: ", style="bold red")
        error_text.append(str(error))

        panel = Panel(
            error_text,
            title="[bold red]Unexpected Error[/bold red]",
            border_style="red",
            expand=False,
        )
        self.console.print(panel)

        self.console.print("\n[dim]Full traceback:[/dim]")
        self.console.print_exception(show_locals=self.debug)

        sys.exit(1)

    def wrap_command(self, func: Callable) -> Callable:
        """Decorator to wrap CLI commands with error handling.

        Usage:
            @error_handler.wrap_command
            def my_command():
                ...
        """

        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                self.handle_error(e)

        return wrapper
