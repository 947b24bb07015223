"""Configuration management for turntree."""

import copy
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from ..core.constants import CollapseDefaults, DisplayDefaults
from ..io.directories import get_config_path
from ..io.logger import get_logger
from .schema import TurnTreeConfig

logger = get_logger("config")


class Config:
    """Configuration manager for turntree."""

    DEFAULT_CONFIG = {
        "tree": {
            "auto_collapse_depth": CollapseDefaults.AUTO_COLLAPSE_DEPTH,
            "linear_fold_threshold": CollapseDefaults.LINEAR_FOLD_THRESHOLD,
            "fold_show_edges": CollapseDefaults.FOLD_SHOW_EDGES,
        },
        "display": {
            "snippet_length": DisplayDefaults.SNIPPET_LENGTH,
            "path_label_length": DisplayDefaults.PATH_LABEL_LENGTH,
            "breadcrumb_length": DisplayDefaults.BREADCRUMB_LENGTH,
            "debug": False,
        },
        "logging": {
            "level": "WARNING",
            "file": None,
        },
    }

    def __init__(self, config_path: Optional[Path] = None):
        try:
            validated_config = TurnTreeConfig(**self.DEFAULT_CONFIG)
            self.config = validated_config.model_dump()
        except ValidationError as e:
            logger.error("Default configuration is invalid!")
            raise RuntimeError("Invalid default configuration") from e

        self.config_path = config_path

        if config_path:
            self.load_from_file(config_path)
        else:
            config_path = get_config_path()
            if config_path.exists():
                logger.debug(f"Loading config from: {config_path}")
                self.load_from_file(config_path)

    def load_from_file(self, path: Path):
        """Load configuration from YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            user_config = yaml.safe_load(f)

        if user_config:
            if not isinstance(user_config, dict):
                raise ValueError(f"Invalid configuration in {path}: expected a mapping")

            merged_config = self._deep_merge(self.config, user_config)

            try:
                validated_config = TurnTreeConfig(**merged_config)
                self.config = validated_config.model_dump()
                self.config_path = path
            except ValidationError as e:
                logger.error(f"Configuration validation failed: {path}")
                for err in e.errors():
                    field_path = ".".join(str(loc) for loc in err["loc"])
                    logger.error(f"  {field_path}: {err['msg']}")
                raise ValueError(f"Invalid configuration in {path}") from e

    def _deep_merge(self, base: Dict, update: Dict) -> Dict:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in update.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get config value using dot notation (e.g., 'tree.fold_show_edges')."""
        keys = key_path.split(".")
        value = self.config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def set(self, key_path: str, value: Any):
        """Set config value using dot notation.

        Raises:
            ValueError: If the resulting configuration does not validate
        """
        test_config = copy.deepcopy(self.config)

        keys = key_path.split(".")
        config = test_config

        for key in keys[:-1]:
            if key not in config:
                config[key] = {}
            config = config[key]

        config[keys[-1]] = value

        try:
            validated_config = TurnTreeConfig(**test_config)
            self.config = validated_config.model_dump()
        except ValidationError as e:
            for err in e.errors():
                err_path = ".".join(str(loc) for loc in err["loc"])
                if err_path == key_path or err_path.startswith(key_path):
                    raise ValueError(
                        f"Invalid value for {key_path}: {err['msg']}"
                    ) from e
            raise ValueError(
                f"Configuration validation failed after setting {key_path}"
            ) from e

    def save(self, path: Optional[Path] = None):
        """Save configuration to file."""
        save_path = path or self.config_path
        if not save_path:
            save_path = Path.cwd() / "turntree.yaml"
        save_path = Path(save_path)

        save_path.parent.mkdir(parents=True, exist_ok=True)

        with open(save_path, "w") as f:
            yaml.dump(self.config, f, default_flow_style=False)

    def to_dict(self) -> Dict[str, Any]:
        """Return the full configuration as a dictionary."""
        return copy.deepcopy(self.config)
