# Cratchit — Message-Driven Command Interpreter
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Protocol definitions for dependency injection.

These interfaces keep the kernel and UI independent of how configuration
is loaded.
"""

from __future__ import annotations

from typing import Any, Protocol


class ConfigModel(Protocol):
    """Protocol for configuration access."""

    @property
    def system(self) -> dict[str, Any]:
        """System configuration."""
        ...

    @property
    def texts(self) -> dict[str, Any]:
        """Display texts."""
        ...

    @property
    def env_filename(self) -> str:
        """Environment file name, relative to the working directory."""
        ...

    @property
    def seed_entries(self) -> dict[str, str]:
        """Entries pre-seeded into the environment."""
        ...

    @property
    def quit_triggers(self) -> tuple[str, ...]:
        """Input lines classified as Quit."""
        ...

    def get_path(self, path: str, default: Any = None) -> Any:
        """Dot-separated nested lookup."""
        ...
