"""Pydantic schema for configuration validation."""

from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator

from ..core.constants import CollapseDefaults, DisplayDefaults


class TreeConfig(BaseModel):
    """Schema for tree collapse and fold thresholds."""

    auto_collapse_depth: int = Field(
        default=CollapseDefaults.AUTO_COLLAPSE_DEPTH,
        ge=0,
        description="Collapse divergences deeper than this when the tree loads",
    )
    linear_fold_threshold: int = Field(
        default=CollapseDefaults.LINEAR_FOLD_THRESHOLD,
        ge=1,
        description="Linear runs longer than this may be folded",
    )
    fold_show_edges: int = Field(
        default=CollapseDefaults.FOLD_SHOW_EDGES,
        ge=1,
        description="Turns kept visible at each end of a folded run",
    )

    @model_validator(mode="after")
    def validate_edges(self) -> "TreeConfig":
        """A folded run must still hide at least one turn."""
        if self.linear_fold_threshold < 2 * self.fold_show_edges:
            raise ValueError(
                f"linear_fold_threshold ({self.linear_fold_threshold}) must be at "
                f"least twice fold_show_edges ({self.fold_show_edges})"
            )
        return self


class DisplayConfig(BaseModel):
    """Schema for display settings."""

    snippet_length: int = Field(
        default=DisplayDefaults.SNIPPET_LENGTH,
        ge=1,
        description="Characters of a turn shown in a tree row",
    )
    path_label_length: int = Field(
        default=DisplayDefaults.PATH_LABEL_LENGTH,
        ge=1,
        description="Characters of a turn shown in a path label",
    )
    breadcrumb_length: int = Field(
        default=DisplayDefaults.BREADCRUMB_LENGTH,
        ge=1,
        description="Characters of a human reply shown in the breadcrumb",
    )
    debug: bool = Field(default=False, description="Show node ids and diagnostics")


class LoggingConfig(BaseModel):
    """Schema for logging settings."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="WARNING")
    file: Optional[str] = Field(default=None, description="Optional log file")


class TurnTreeConfig(BaseModel):
    """Root schema for turntree configuration."""

    tree: TreeConfig = Field(default_factory=TreeConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"extra": "allow"}
