"""
Configuration for the cal command line.

Settings come from an optional ``cal.toml`` and from the environment:

    [output]
    tree = false        # print the tree along with every result
    format = "plain"    # "plain" or "json"

    [logging]
    level = "WARNING"

CAL_LOG_LEVEL overrides ``[logging].level``.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from cal.core.errors import ConfigError

CONFIG_FILENAME = "cal.toml"

# Environment variable name
CAL_LOG_LEVEL_VAR = "CAL_LOG_LEVEL"

_DEFAULT_LOG_LEVEL = "WARNING"
_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class OutputFormat(StrEnum):
    """How results are printed."""

    PLAIN = "plain"
    JSON = "json"


@dataclass
class OutputConfig:
    """Output configuration."""

    tree: bool = False
    format: OutputFormat = OutputFormat.PLAIN


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = _DEFAULT_LOG_LEVEL


@dataclass
class CalConfig:
    """Top-level configuration."""

    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: Path | None = None) -> CalConfig:
    """Load configuration from ``path``, or from ./cal.toml if it exists.

    A missing default file yields the defaults; a missing explicit path
    is an error.

    Raises:
        ConfigError: If the file cannot be read or holds invalid values.
    """
    if path is None:
        path = Path.cwd() / CONFIG_FILENAME
        if not path.exists():
            return _apply_env(CalConfig())

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}") from None
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    output_data = data.get("output", {})
    logging_data = data.get("logging", {})

    format_value = output_data.get("format", OutputFormat.PLAIN.value)
    try:
        output_format = OutputFormat(format_value)
    except ValueError:
        valid = ", ".join(f.value for f in OutputFormat)
        raise ConfigError(
            f"Invalid output format '{format_value}' in {path}. Valid values: {valid}"
        ) from None

    tree = output_data.get("tree", False)
    if not isinstance(tree, bool):
        raise ConfigError(f"[output].tree must be true or false in {path}")

    config = CalConfig(
        output=OutputConfig(tree=tree, format=output_format),
        logging=LoggingConfig(level=str(logging_data.get("level", _DEFAULT_LOG_LEVEL))),
    )
    return _apply_env(config)


def _apply_env(config: CalConfig) -> CalConfig:
    env_level = os.environ.get(CAL_LOG_LEVEL_VAR, "").strip()
    if env_level:
        config.logging.level = env_level
    return config


def resolve_log_level(name: str) -> int:
    """Map a level name to a logging level, defaulting to WARNING.

    Examples:
        >>> resolve_log_level("debug")
        10
    """
    level = logging.getLevelName(name.upper().strip())
    if isinstance(level, int):
        return level

    logging.getLogger(__name__).warning(
        "Unknown log level '%s'. Valid values: DEBUG, INFO, WARNING, ERROR, CRITICAL. "
        "Defaulting to WARNING.",
        name,
    )
    return logging.WARNING


def configure_logging(config: CalConfig, *, verbose: bool = False) -> None:
    """Configure root logging from the loaded configuration."""
    level = logging.DEBUG if verbose else resolve_log_level(config.logging.level)
    logging.basicConfig(level=level, format=_LOG_FORMAT)
