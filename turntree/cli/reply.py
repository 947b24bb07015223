"""Reply command: submit a lead message against a scripted engine."""

import asyncio
from pathlib import Path
from typing import Optional

import rich_click as click
from rich.console import Console

from ..core.composer import Composer
from ..core.engine import ScriptedEngine
from ..core.exceptions import SubmissionError
from ..io.records import save_records
from ..ui.display_utils import DisplayUtils
from ..ui.tree_view import TreeView
from .error_handler import CLIErrorHandler
from .helpers import get_config, open_session

console = Console()
display = DisplayUtils(console)
error_handler = CLIErrorHandler()


@click.command()
@click.argument("records", type=click.Path())
@click.argument("message")
@click.option("--select", "-s", help="Continue from this node")
@click.option(
    "--anchor",
    "-a",
    help="Lead turn to try a different reply from (creates a sibling)",
)
@click.option(
    "--agent-reply",
    help="Text the scripted agent answers with (default: built-in script)",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    help="Where to write the updated records as JSONL (default: RECORDS)",
)
@click.pass_context
@error_handler.wrap_command
def reply(
    ctx: click.Context,
    records: str,
    message: str,
    select: Optional[str],
    anchor: Optional[str],
    agent_reply: Optional[str],
    output: Optional[str],
):
    """Send MESSAGE as the lead and record the scripted agent's answer.

    Without --anchor the message continues the conversation: from the
    selected turn if it is a leaf, otherwise from the latest leaf under it.
    With --anchor the message becomes an alternate reply next to that turn.

    [bold]EXAMPLES:[/bold]

    [#4c566a]Continue the latest conversation:[/#4c566a]
      turntree reply run.jsonl "What does it cost?"

    [#4c566a]Try a different answer at turn node-003:[/#4c566a]
      turntree reply run.jsonl "I'd rather start next month" --anchor node-003
    """
    config = get_config(ctx)
    session = open_session(records, config, select=select, anchor=anchor)

    replies = [agent_reply] if agent_reply else None
    engine = ScriptedEngine(session.records, replies=replies)
    composer = Composer(session, engine)

    plan = session.plan_submission()
    try:
        asyncio.run(composer.submit(message))
    except SubmissionError as e:
        display.submission_error(str(e.__cause__ or e), is_fork=e.is_fork)
        raise

    destination = Path(output) if output else Path(records)
    save_records(session.records, destination)

    if plan.is_fork:
        display.success(f"{plan.branch_label} recorded")
    else:
        display.success("Message recorded")
    display.dim(f"Saved {len(session.records)} records to {destination}")

    view = TreeView(
        debug=config.get("display.debug", False),
        anchor_node_id=session.anchor_node_id,
    )
    view.print(console, session.visible_rows())
