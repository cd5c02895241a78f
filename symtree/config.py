"""symtree Configuration — project-level .symtreerc.yml support.

Loads configuration from .symtreerc.yml (or .symtreerc.yaml,
.symtreerc.json) found by walking up from the working directory.

Example .symtreerc.yml:
    solver_timeout_ms: 2000   # per obligation
    stop_at_first: true       # report only the first counterexample
    log_level: DEBUG
    render_trees: true        # dump the execution tree at DEBUG level
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

import yaml

from symtree.errors import AnalysisError, config_error


@dataclass
class SymtreeConfig:
    """Analysis-wide settings."""
    # Per-query solver timeout; 0 disables the timeout
    solver_timeout_ms: int = 5000
    # Stop dispatching obligations after the first satisfiable one
    stop_at_first: bool = False
    # Level for the "symtree" logger
    log_level: str = "WARNING"
    # Log the rendered execution tree after it is built
    render_trees: bool = False


# ---------------------------------------------------------------------------
# Config file names (in priority order)
# ---------------------------------------------------------------------------

_CONFIG_FILES = [
    ".symtreerc.yml",
    ".symtreerc.yaml",
    ".symtreerc.json",
]


def find_config(start_dir: str = ".") -> Optional[str]:
    """Find the nearest config file by walking up from start_dir."""
    current = os.path.abspath(start_dir)
    while True:
        for name in _CONFIG_FILES:
            path = os.path.join(current, name)
            if os.path.isfile(path):
                return path
        parent = os.path.dirname(current)
        if parent == current:
            break
        current = parent
    return None


def load_config(path: Optional[str] = None, start_dir: str = ".") -> SymtreeConfig:
    """Load configuration from a file.

    If no path is given, searches for a config file starting from start_dir.
    If no config file is found, returns defaults.
    """
    if path is None:
        path = find_config(start_dir)

    if path is None:
        return SymtreeConfig()

    try:
        with open(path, "r") as f:
            content = f.read()
    except OSError as exc:
        raise AnalysisError(config_error(path, str(exc))) from exc

    if path.endswith(".json"):
        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            raise AnalysisError(config_error(path, str(exc))) from exc
    else:
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as exc:
            raise AnalysisError(config_error(path, str(exc))) from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise AnalysisError(config_error(path, "top level must be a mapping"))
    return _dict_to_config(data, path)


def _dict_to_config(data: Dict[str, Any], path: str = "<dict>") -> SymtreeConfig:
    """Convert a parsed dict to SymtreeConfig.

    Values are checked, not coerced: "false" is not a boolean and a
    boolean is not a timeout.
    """
    config = SymtreeConfig()

    def fail(reason: str) -> AnalysisError:
        return AnalysisError(config_error(path, reason))

    if "solver_timeout_ms" in data:
        value = data["solver_timeout_ms"]
        if isinstance(value, bool) or not isinstance(value, int):
            raise fail(f"solver_timeout_ms must be an integer, got {value!r}")
        if value < 0:
            raise fail("solver_timeout_ms must be >= 0")
        config.solver_timeout_ms = value

    for key in ("stop_at_first", "render_trees"):
        if key in data:
            value = data[key]
            if not isinstance(value, bool):
                raise fail(f"{key} must be true or false, got {value!r}")
            setattr(config, key, value)

    if "log_level" in data:
        value = data["log_level"]
        if not isinstance(value, str) or not isinstance(logging.getLevelName(value.upper()), int):
            raise fail(f"log_level must be a logging level name, got {value!r}")
        config.log_level = value.upper()

    return config
