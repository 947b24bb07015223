"""Terminal rendering for turntree."""

from .display_utils import DisplayUtils
from .playback_view import print_playback
from .tree_view import TreeView

__all__ = ["DisplayUtils", "TreeView", "print_playback"]
