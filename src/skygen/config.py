"""``[tool.skygen]`` configuration loaded from ``pyproject.toml``."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import ConfigError

logger = logging.getLogger(__name__)


class SkygenConfig(BaseModel):
    """User configuration for the ``skygen`` command.

    CLI flags override these values for a single invocation.
    Precedence: CLI flag > pyproject.toml > default.
    """

    model_config = ConfigDict(extra="ignore")

    output_format: Literal["go", "json"] = "go"
    """How ``skygen extract`` prints structs."""

    include_tests: bool = False
    """Also scan ``*_test.go`` files when a directory is given."""


def find_pyproject(start: Path) -> Path | None:
    """Return the nearest ``pyproject.toml`` at or above *start*."""
    start = start.resolve()
    for d in [start, *start.parents]:
        candidate = d / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None


def load_config(start: Path | None = None) -> SkygenConfig:
    """Load ``[tool.skygen]`` from the nearest ``pyproject.toml``.

    Missing file or table yields the defaults.
    """
    pyproject = find_pyproject(start or Path.cwd())
    if pyproject is None:
        return SkygenConfig()
    try:
        data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{pyproject}: {exc}") from exc

    table = data.get("tool", {}).get("skygen", {})
    logger.debug("Loaded [tool.skygen] from %s: %s", pyproject, table)
    try:
        return SkygenConfig.model_validate(table)
    except ValidationError as exc:
        raise ConfigError(f"{pyproject}: invalid [tool.skygen] table: {exc}") from exc
