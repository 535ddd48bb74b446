# Cratchit — Message-Driven Command Interpreter
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Model and message types for the Cratchit update cycle.

``Msg`` is a closed union. Anything that consumes it must handle every
variant (see ``update.Updater``).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Union

QUIT_TRIGGERS: tuple[str, ...] = ("quit", "q")


@dataclass(frozen=True)
class Model:
    """Complete interpreter state for one turn."""

    prompt: str = ""
    quit: bool = False


@dataclass(frozen=True)
class Nop:
    """No-op tick."""


@dataclass(frozen=True)
class Quit:
    """Terminates the interpreter loop."""


@dataclass(frozen=True)
class Command:
    """User text awaiting dispatch."""

    text: str


Msg = Union[Nop, Quit, Command]


def classify(line: str, quit_triggers: Iterable[str] = QUIT_TRIGGERS) -> Msg:
    """Turn one raw input line into a message.

    Exact, case-sensitive match against the quit triggers; everything else
    (including the empty line) is a Command.
    """
    if line in tuple(quit_triggers):
        return Quit()
    return Command(line)
