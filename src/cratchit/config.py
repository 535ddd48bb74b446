# Cratchit — Message-Driven Command Interpreter
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Configuration and startup resolution for Cratchit.

Handles:
- Packaged YAML defaults loading (cratchit.defaults/system.yaml)
- Data root resolution (CRATCHIT_DATA_HOME, ~/.local/share)
- Startup settings resolved once from the process (cwd, PATH, argv)
"""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from importlib import resources as importlib_resources
from pathlib import Path
from typing import Any

import yaml

DEFAULT_ENV_FILENAME = "cratchit.env"
DEFAULT_UNSET_DISPLAY = "<unset>"


# -----------------------
# Config model wrapper
# -----------------------


class YAMLConfig:
    """Simple config wrapper that implements ConfigModel protocol."""

    def __init__(self, config_dict: dict[str, Any]):
        self._config = config_dict

    @property
    def system(self) -> dict[str, Any]:
        return self._config.get("system", {})

    @property
    def texts(self) -> dict[str, Any]:
        texts = self._config.get("texts", {})
        return texts if isinstance(texts, dict) else {}

    @property
    def env_filename(self) -> str:
        return str(
            self.get_path("environment.filename", DEFAULT_ENV_FILENAME)
        )

    @property
    def seed_entries(self) -> dict[str, str]:
        seed = self.get_path("environment.seed", {})
        if not isinstance(seed, dict):
            return {}
        return {str(k): str(v) for k, v in seed.items()}

    @property
    def quit_triggers(self) -> tuple[str, ...]:
        triggers = self.get_path("commands.quit.triggers", None)
        if not triggers:
            return ("quit", "q")
        return tuple(str(t) for t in triggers)

    def get_path(self, path: str, default: Any = None) -> Any:
        """
        Nested lookup using dot-separated path.
        Example: get_path("texts.farewell", "") -> farewell text
        """
        if not path:
            return default

        cur: Any = self._config
        for part in path.split("."):
            if not isinstance(cur, dict):
                return default
            if part not in cur:
                return default
            cur = cur[part]
        return cur


# -----------------------
# Data root
# -----------------------


def get_data_root() -> Path:
    """Get the data root directory for Cratchit.

    Resolution order:
    1. CRATCHIT_DATA_HOME environment variable (if set)
    2. ~/.local/share (default, XDG_DATA_HOME is ignored)
    """
    data_home = os.getenv("CRATCHIT_DATA_HOME")
    if data_home:
        root = Path(data_home)
    else:
        root = Path.home() / ".local" / "share"

    root.mkdir(parents=True, exist_ok=True)
    return root


def crash_log_path(data_root: Path) -> Path:
    """<data_root>/cratchit/logs/crash.log"""
    return data_root / "cratchit" / "logs" / "crash.log"


# -----------------------
# Startup settings
# -----------------------


@dataclass(frozen=True)
class StartupSettings:
    """Process inputs resolved once at startup.

    ``path`` is None when PATH is not set in the process environment.
    """

    cwd: Path
    path: str | None
    command: str

    def path_display(self, unset: str = DEFAULT_UNSET_DISPLAY) -> str:
        return self.path if self.path is not None else unset


def join_command(args: Sequence[str]) -> str:
    """Concatenate process arguments, each followed by a space."""
    return "".join(arg + " " for arg in args)


def resolve_startup(
    argv: Sequence[str],
    environ: Mapping[str, str] | None = None,
    cwd: Path | None = None,
) -> StartupSettings:
    """Resolve startup settings from argv (without program name)."""
    env = os.environ if environ is None else environ
    return StartupSettings(
        cwd=cwd if cwd is not None else Path.cwd(),
        path=env.get("PATH"),
        command=join_command(argv),
    )


def env_file_path(cwd: Path, cfg: YAMLConfig) -> Path:
    """<cwd>/<environment.filename>"""
    return cwd / cfg.env_filename


# -----------------------
# Packaged defaults loading
# -----------------------


def _defaults_dir() -> Path:
    """Return the installed path to packaged defaults directory."""
    return Path(
        importlib_resources.files("cratchit.defaults")
    )  # type: ignore[arg-type]


def load_defaults_yaml(filename: str) -> dict[str, Any]:
    """
    Load a YAML file from cratchit/defaults/.
    """
    defaults_dir = _defaults_dir()
    path = defaults_dir / filename
    if not path.exists():
        raise FileNotFoundError(
            f"Missing defaults YAML: {filename} "
            f"(looked in {defaults_dir})"
        )

    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(
            f"Defaults YAML {filename} must load to a mapping/dict."
        )
    return data


def load_system_config() -> YAMLConfig:
    """
    Load system.yaml from packaged defaults and return a YAMLConfig wrapper.
    """
    return YAMLConfig(load_defaults_yaml("system.yaml"))
