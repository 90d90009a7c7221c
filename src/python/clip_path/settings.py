# SPDX-FileCopyrightText: 2025 LichtFeld Studio Authors
# SPDX-License-Identifier: GPL-3.0-or-later
"""Extractor settings and their TOML loader.

Settings can live in any TOML file under a ``[tool.clip_path]`` table, the same
place the plugin manifests keep their tool section::

    [tool.clip_path]
    time_step = 0.05
    use_rotation = false
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping

try:
    import tomllib
except ImportError:
    import tomli as tomllib

from .errors import ConfigurationError
from .sampler import PathFlags

TOOL_TABLE = "clip_path"


@dataclass
class ExtractorSettings:
    """Runtime parameters of a transform extraction session."""

    #: Seconds between two samples.
    time_step: float = 0.1
    #: Apply the sampled position to placed markers.
    use_position: bool = True
    #: Apply the sampled rotation to placed markers.
    use_rotation: bool = True
    #: Apply the sampled scale to placed markers.
    use_scale: bool = True
    #: Select the marker parent group once placement finishes.
    select_parent_after_placement: bool = True

    @property
    def flags(self) -> PathFlags:
        return PathFlags(self.use_position, self.use_rotation, self.use_scale)

    def validate(self) -> list[str]:
        """Return a list of problems (empty if valid)."""
        errors = []
        if not self.time_step > 0:
            errors.append("Time step must be greater than 0")
        return errors


_FIELD_TYPES = {
    "time_step": (int, float),
    "use_position": bool,
    "use_rotation": bool,
    "use_scale": bool,
    "select_parent_after_placement": bool,
}


def settings_from_mapping(data: Mapping[str, Any]) -> ExtractorSettings:
    """Build settings from a plain mapping, rejecting unknown or mistyped keys."""
    known = {f.name for f in fields(ExtractorSettings)}
    errors = []
    values = {}
    for key, value in data.items():
        if key not in known:
            errors.append(f"unknown setting '{key}'")
            continue
        expected = _FIELD_TYPES[key]
        # bool is an int subclass; a boolean time step is still a mistake.
        if isinstance(value, bool) and expected is not bool:
            errors.append(f"setting '{key}' must be a number, got {value!r}")
            continue
        if not isinstance(value, expected):
            errors.append(f"setting '{key}' has wrong type {type(value).__name__}")
            continue
        values[key] = float(value) if key == "time_step" else value

    if errors:
        raise ConfigurationError(errors)

    settings = ExtractorSettings(**values)
    problems = settings.validate()
    if problems:
        raise ConfigurationError(problems)
    return settings


def load_settings(path: str | Path) -> ExtractorSettings:
    """Read ``[tool.clip_path]`` from the TOML file at *path*.

    A file without that table yields the defaults.
    """
    path = Path(path)
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"{path.name}: {e}") from e

    tool = data.get("tool", {})
    if not isinstance(tool, dict):
        raise ConfigurationError(f"{path.name}: [tool] must be a table")
    table = tool.get(TOOL_TABLE, {})
    if not isinstance(table, dict):
        raise ConfigurationError(f"{path.name}: [tool.{TOOL_TABLE}] must be a table")
    return settings_from_mapping(table)
