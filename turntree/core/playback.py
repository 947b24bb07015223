"""The single conversation path shown in playback."""

from typing import List, Optional

from .ancestry import AncestryResolver
from .constants import DisplayDefaults, SystemDefaults
from .types import TreeNode


def truncate(text: str, length: int) -> str:
    """Cut ``text`` to ``length`` characters, marking the cut."""
    if len(text) <= length:
        return text
    return text[:length] + DisplayDefaults.ELLIPSIS


class PlaybackPathExtractor:
    """Produces "the conversation so far" for a selection.

    Sibling branches are never part of the result; only the single chain
    from a root down to the selection (or the main line) is returned.
    """

    def __init__(
        self,
        resolver: AncestryResolver,
        breadcrumb_length: int = DisplayDefaults.BREADCRUMB_LENGTH,
    ):
        self.resolver = resolver
        self.breadcrumb_length = breadcrumb_length

    def extract(self, selected_id: Optional[str] = None) -> List[TreeNode]:
        """Root-to-selection path, or the default path when nothing is selected.

        Raises:
            NodeNotFoundError: If ``selected_id`` does not resolve
        """
        if selected_id is None:
            return self.resolver.default_path()
        return self.resolver.ancestry_chain(selected_id)

    def breadcrumb(self, selected_id: Optional[str] = None) -> str:
        """``Main > "first reply" > "second reply"`` for the playback path."""
        replies = [
            f'"{truncate(node.user_message, self.breadcrumb_length)}"'
            for node in self.extract(selected_id)
            if node.user_message
        ]
        return " > ".join([SystemDefaults.MAIN_BRANCH_LABEL, *replies])
