"""
Graph configuration management.

This module loads the graph options from the ``[tool.tsqldeps]`` table of
pyproject.toml and from ``TSQLDEPS_*`` environment variables, environment
variables taking precedence. Command-line flags are applied on top by the CLI.
"""

import logging
import os
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from tsqldeps.parser.shared.constants import DEFAULT_GRAPH_NAME, OUTPUT_FORMATS
from tsqldeps.parser.shared.exceptions import ConfigError
from tsqldeps.parser.shared.types import RawConfig

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class GraphConfig:
    """Options controlling extraction and rendering."""

    output_format: str = "dot"
    escape_quotes: bool = False
    wrap_digraph: bool = False
    graph_name: str = DEFAULT_GRAPH_NAME
    include_alter: bool = False
    exclude_temp_tables: bool = False
    ignore_alias_case: bool = False
    strict: bool = False

    def __post_init__(self):
        if self.output_format not in OUTPUT_FORMATS:
            raise ConfigError(
                f"Invalid output_format '{self.output_format}', expected one of {', '.join(OUTPUT_FORMATS)}"
            )
        if not self.graph_name:
            raise ConfigError("graph_name must not be empty")

    def with_overrides(self, **overrides: Any) -> "GraphConfig":
        """Return a copy with the given options replaced; None values are ignored."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        unknown = set(changes) - {f.name for f in fields(self)}
        if unknown:
            raise ConfigError(f"Unknown configuration option(s): {', '.join(sorted(unknown))}")
        return replace(self, **changes)


def _env_var_name(option: str) -> str:
    return f"TSQLDEPS_{option.upper()}"


def _coerce(option: str, value: Any, expected: type) -> Any:
    """Convert a raw TOML or environment value to the option's type."""
    if expected is bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE_VALUES:
                return True
            if lowered in _FALSE_VALUES:
                return False
        raise ConfigError(f"Option '{option}' must be a boolean, got {value!r}")
    if not isinstance(value, str):
        raise ConfigError(f"Option '{option}' must be a string, got {value!r}")
    return value


def _load_toml_config(project_root: Path) -> RawConfig:
    """Read ``[tool.tsqldeps]`` from pyproject.toml, if there is one."""
    toml_file = project_root / "pyproject.toml"
    if not toml_file.exists():
        logger.debug(f"No pyproject.toml found in {project_root}")
        return {}

    try:
        with open(toml_file, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Could not read {toml_file}: {e}") from e

    section = data.get("tool", {}).get("tsqldeps", {})
    if not isinstance(section, dict):
        raise ConfigError(f"[tool.tsqldeps] in {toml_file} must be a table")
    return section


def _load_env_config() -> RawConfig:
    env_config: RawConfig = {}
    for f in fields(GraphConfig):
        value = os.getenv(_env_var_name(f.name))
        if value is not None:
            env_config[f.name] = value
    return env_config


def load_config(project_root: str | Path | None = None) -> GraphConfig:
    """
    Load the graph configuration.

    Args:
        project_root: Directory holding pyproject.toml (default: current directory)

    Returns:
        GraphConfig with TOML values overridden by environment variables

    Raises:
        ConfigError: If an option is unknown or has an invalid value
    """
    root = Path(project_root) if project_root else Path.cwd()
    merged = _load_toml_config(root)
    merged.update(_load_env_config())

    types = {f.name: f.type for f in fields(GraphConfig)}
    options = {}
    for option, value in merged.items():
        if option not in types:
            raise ConfigError(f"Unknown configuration option '{option}'")
        expected = bool if types[option] in (bool, "bool") else str
        options[option] = _coerce(option, value, expected)

    if options:
        logger.debug(f"Loaded configuration options: {sorted(options)}")
    return GraphConfig(**options)
