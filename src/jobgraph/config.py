"""Configuration for the scheduling engine (jobgraph_config.yaml)."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ParseError, ValidationError

CONFIG_FILENAME = "jobgraph_config.yaml"

# Set by the CLI --config option for the duration of a command
_cli_config_path: Path | None = None


class ResolverType(str, Enum):
    """Available readiness resolvers."""

    SCAN = "scan"  # Rescan the whole workflow on every evaluation
    INCREMENTAL = "incremental"  # Reverse edges + outstanding-dependency sets


class ResolverConfig(BaseModel):
    """Configuration for resolver selection."""

    type: ResolverType = ResolverType.SCAN


class SchedulerConfig(BaseModel):
    """Top-level engine configuration."""

    resolver: ResolverConfig = ResolverConfig()


def load_config(config_path: Path | str) -> SchedulerConfig:
    """Load a configuration file.

    An empty file yields the defaults.

    Raises:
        ParseError: The file is missing or is not valid YAML
        ValidationError: The YAML does not match the configuration schema
    """
    path = Path(config_path)
    if not path.exists():
        raise ParseError(f"Config file not found: {config_path}")

    try:
        with path.open(encoding="utf-8") as f:
            data: Any = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ParseError(f"Failed to parse config YAML: {e}") from e

    if data is None:
        return SchedulerConfig()
    if not isinstance(data, dict):
        raise ParseError("Config YAML must contain a dictionary at the root level")

    try:
        return SchedulerConfig(**data)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid config: {e}") from e


def discover_config(
    submission_path: Path | None = None,
    config_path: Path | None = None,
) -> SchedulerConfig:
    """Find and load configuration, falling back to defaults.

    Search order:
    1. Explicit config_path argument
    2. Path set with set_config_path() (CLI --config)
    3. Submission file directory / jobgraph_config.yaml
    4. Current directory / jobgraph_config.yaml
    """
    if config_path is not None:
        return load_config(config_path)

    if _cli_config_path is not None:
        return load_config(_cli_config_path)

    if submission_path is not None:
        dir_config = Path(submission_path).parent / CONFIG_FILENAME
        if dir_config.exists():
            return load_config(dir_config)

    cwd_config = Path(CONFIG_FILENAME)
    if cwd_config.exists():
        return load_config(cwd_config)

    return SchedulerConfig()


def set_config_path(path: Path | None) -> None:
    """Override config discovery with ``path`` (None clears the override)."""
    global _cli_config_path
    _cli_config_path = path
