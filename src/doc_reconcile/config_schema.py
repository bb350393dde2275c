"""Unified configuration schema for doc-reconcile.

Pydantic models for the YAML config structure, with one section per
concern: conflict-marker labels, revision history and logging.

Usage:
    from doc_reconcile.config_loader import load_hierarchical_config
    from doc_reconcile.config_schema import build_config

    unified = build_config(load_hierarchical_config())
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from .validators import validate_label

# ---------------------------------------------------------------------------
# Section models
# ---------------------------------------------------------------------------


class MergeConfig(BaseModel):
    """Labels used when rendering conflicts with Git-style markers."""

    current_label: str = Field(
        default="CURRENT", description="Label for the editor's side"
    )
    incoming_label: str = Field(
        default="INCOMING", description="Label for the agent's side"
    )

    model_config = {"frozen": True}

    @field_validator("current_label", "incoming_label")
    @classmethod
    def _check_label(cls, value: str) -> str:
        is_valid, error = validate_label(value)
        if not is_valid:
            raise ValueError(error)
        return value


class RevisionConfig(BaseModel):
    """Revision history settings."""

    max_revisions: int = Field(
        default=50,
        ge=1,
        le=1000,
        description="Revisions kept per draft (1-1000)",
    )

    model_config = {"frozen": True}


class LoggingConfig(BaseModel):
    """Logging configuration.

    Attributes:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file: Optional log file path.
    """

    level: str = Field(default="INFO", description="Log level")
    file: str | None = Field(default=None, description="Log file path")

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Top-level unified config
# ---------------------------------------------------------------------------


class UnifiedConfig(BaseModel):
    """Top-level configuration.

    Every section has defaults, so ``UnifiedConfig()`` is always valid.
    """

    merge: MergeConfig = Field(default_factory=MergeConfig)
    revisions: RevisionConfig = Field(default_factory=RevisionConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}


def build_config(raw_data: dict) -> UnifiedConfig:
    """Construct a ``UnifiedConfig`` from ``load_hierarchical_config()`` output.

    Missing sections get defaults.

    Args:
        raw_data: Merged configuration dictionary.

    Returns:
        Validated ``UnifiedConfig`` instance.

    Raises:
        pydantic.ValidationError: If a section holds invalid values.
    """
    if not raw_data:
        return UnifiedConfig()

    return UnifiedConfig(**raw_data)
