# turntree/cli/__init__.py
"""Main CLI entry point."""

# Configure rich-click BEFORE importing
# NOTE: The following imports violate E402 (module level import not at top)
# rich-click settings must be applied before it is imported as click.

import rich_click.rich_click as rc

from rich.console import Console

rc.USE_RICH_MARKUP = True
rc.SHOW_ARGUMENTS = True
rc.GROUP_ARGUMENTS_OPTIONS = True
rc.SHOW_METAVARS_COLUMN = False
rc.APPEND_METAVARS_HELP = True
rc.MAX_WIDTH = 100

# Nord color scheme
rc.STYLE_OPTION = "bold #8fbcbb"  # Nord7 teal
rc.STYLE_ARGUMENT = "bold #88c0d0"  # Nord8 light blue
rc.STYLE_COMMAND = "bold #5e81ac"  # Nord10 blue
rc.STYLE_SWITCH = "#a3be8c"  # Nord14 green
rc.STYLE_METAVAR = "#d8dee9"  # Nord4 light gray
rc.STYLE_USAGE = "bold #8fbcbb"
rc.STYLE_OPTION_DEFAULT = "#4c566a"  # Nord3 dim gray
rc.STYLE_REQUIRED_SHORT = "bold #bf616a"  # Nord11 red
rc.STYLE_REQUIRED_LONG = "bold #bf616a"
rc.STYLE_HELPTEXT_FIRST_LINE = "bold"
rc.STYLE_HELPTEXT = "#d8dee9"  # Nord4 light gray
rc.STYLE_OPTION_HELP = "#d8dee9"

# Now import as click
import rich_click as click

from .. import __version__
from ..config import Config
from ..io.logger import setup_logging
from .constants import BANNER
from .error_handler import CLIErrorHandler, ConfigError
from .playback import playback
from .reply import reply
from .show import show
from .stats import stats

console = Console()
error_handler = CLIErrorHandler()


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="turntree")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="YAML configuration file (default: ~/.config/turntree/turntree.yaml)",
)
@click.option("--verbose", "-v", is_flag=True, help="Log at DEBUG level")
@click.pass_context
def cli(ctx: click.Context, config_path, verbose: bool) -> None:
    """Explore branching lead/agent conversations as a tree.

    Every alternate reply a lead could have given becomes a sibling branch.
    Browse the tree, play back one path, or record new messages.

    [bold]EXAMPLES:[/bold]
    Draw the tree:          turntree show run.jsonl
    Play back a path:       turntree playback run.jsonl --select node-007
    Continue:               turntree reply run.jsonl "Sounds good"
    Alternate reply:        turntree reply run.jsonl "Not now" --anchor node-003
    """
    try:
        config = Config(config_path)
    except ValueError as e:
        error_handler.handle_error(ConfigError(str(e), "Fix or remove the config file"))
        return

    level = "DEBUG" if verbose else config.get("logging.level", "WARNING")
    setup_logging(level, config.get("logging.file"))

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


cli.add_command(show)
cli.add_command(playback)
cli.add_command(reply)
cli.add_command(stats)


def main() -> None:
    import sys

    if "--help" in sys.argv or "-h" in sys.argv or len(sys.argv) == 1:
        console.print(BANNER)

    cli()


if __name__ == "__main__":
    main()
