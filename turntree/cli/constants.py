"""CLI constants and styling."""

# Nord color scheme
NORD_YELLOW = "#ebcb8b"  # nord13
NORD_CYAN = "#8fbcbb"    # nord7
NORD_DARK = "#4c566a"    # nord3

BANNER = r"""
    [bold #5e81ac]┌┬┐┬ ┬┬─┐┌┐┌[/] [bold #88c0d0]┌┬┐┬─┐┌─┐┌─┐[/]
    [bold #5e81ac] │ │ │├┬┘│││[/] [bold #88c0d0] │ ├┬┘├┤ ├┤ [/]
    [bold #5e81ac] ┴ └─┘┴└─┘└┘[/] [bold #88c0d0] ┴ ┴└─└─┘└─┘[/]

    [#4c566a]branching conversation explorer[/#4c566a]
"""
