"""XDG Base Directory support for turntree."""

import os
from pathlib import Path


def get_config_dir() -> Path:
    """Get the configuration directory for turntree.

    Returns ~/.config/turntree/ by default, or respects $XDG_CONFIG_HOME if set.
    The directory is not created; turntree only reads from it unless a
    configuration is explicitly saved there.

    Returns:
        Path to the configuration directory
    """
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config_home:
        return Path(xdg_config_home) / "turntree"
    return Path.home() / ".config" / "turntree"


def get_config_path() -> Path:
    """Path of the user configuration file."""
    return get_config_dir() / "turntree.yaml"
