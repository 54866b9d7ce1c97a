"""Settings for aio-statemachine.

Settings can be built directly or discovered from the
``[tool.aio-statemachine]`` table of a project's pyproject.toml.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, Union

import pydantic as pd

from aio_statemachine.diagnostics import DebugMode

logger = logging.getLogger(__name__)

TOOL_TABLE = "aio-statemachine"

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class MachineSettings(pd.BaseModel):
    """Runtime configuration for an AsyncStateMachine.

    Attributes:
        debug_mode: Where soft-rejection diagnostics are delivered.
        log_level: Level of diagnostic records in ``log`` mode.
    """

    debug_mode: DebugMode = DebugMode.LOG
    log_level: str = "WARNING"

    model_config = pd.ConfigDict(extra="forbid")

    @pd.field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized = value.upper()
        if normalized not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}, got {value!r}")
        return normalized

    @property
    def log_level_value(self) -> int:
        """Numeric logging level for log_level."""
        return logging.getLevelName(self.log_level)


def read_tool_table(pyproject_path: Union[str, Path]) -> Dict[str, Any]:
    """Read the ``[tool.aio-statemachine]`` table from a pyproject.toml.

    Args:
        pyproject_path: Path to pyproject.toml, or to a directory containing it.

    Returns:
        The table contents, or an empty dict if the file or table is missing
        or the file cannot be parsed.
    """
    config_path = Path(pyproject_path)
    if config_path.is_dir():
        config_path = config_path / "pyproject.toml"

    if not config_path.exists():
        logger.debug(f"No pyproject.toml found at {config_path}")
        return {}

    try:
        with open(config_path, "rb") as f:
            content = tomllib.load(f)
    except (IOError, OSError, tomllib.TOMLDecodeError) as e:
        logger.warning(f"Failed to parse pyproject.toml {config_path}: {e}")
        return {}

    table = content.get("tool", {}).get(TOOL_TABLE, {})
    if not isinstance(table, dict):
        logger.warning(f"[tool.{TOOL_TABLE}] in {config_path} is not a table, ignoring")
        return {}
    return table


def load_settings(pyproject_path: Union[str, Path] = ".") -> MachineSettings:
    """Build MachineSettings from a pyproject.toml, falling back to defaults.

    Raises:
        pydantic.ValidationError: If the table holds unknown keys or invalid values.
    """
    table = read_tool_table(pyproject_path)
    settings = MachineSettings(**table)
    logger.debug(f"Loaded settings: {settings!r}")
    return settings
