# Cratchit — Message-Driven Command Interpreter
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
State transitions for Cratchit.

The Updater is the only place transition policy lives:

    Nop         -> model unchanged
    Quit        -> farewell appended, quit set
    Command(c)  -> "not yet implemented" notice and a fresh prompt marker

Models are frozen; every transition returns a new value.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import assert_never

from .environment import EnvironmentStore
from .messages import Command, Model, Msg, Nop, Quit


@dataclass(frozen=True)
class Texts:
    """Display texts appended by transitions."""

    init: str = "\nInit from "
    not_implemented: str = "\nUpdate for command not yet implemented"
    prompt_marker: str = "\n>"
    farewell: str = "\nBye for now :)"

    @classmethod
    def from_mapping(cls, data: dict) -> Texts:
        defaults = cls()
        return cls(
            init=str(data.get("init", defaults.init)),
            not_implemented=str(
                data.get("not_implemented", defaults.not_implemented)
            ),
            prompt_marker=str(
                data.get("prompt_marker", defaults.prompt_marker)
            ),
            farewell=str(data.get("farewell", defaults.farewell)),
        )


@dataclass(frozen=True)
class Updater:
    """Pure (Model, Msg) -> Model transition function.

    ``store`` is the handle future domain commands will read and write
    through; the Command branch does not touch it yet.
    """

    texts: Texts = field(default_factory=Texts)
    store: EnvironmentStore | None = None

    def __call__(self, model: Model, msg: Msg) -> Model:
        if isinstance(msg, Nop):
            return model
        elif isinstance(msg, Quit):
            return replace(
                model, prompt=model.prompt + self.texts.farewell, quit=True
            )
        elif isinstance(msg, Command):
            return self._command(model, msg)
        else:
            assert_never(msg)

    def _command(self, model: Model, command: Command) -> Model:
        return replace(
            model,
            prompt=(
                model.prompt
                + self.texts.not_implemented
                + self.texts.prompt_marker
            ),
        )


def update(model: Model, msg: Msg, texts: Texts | None = None) -> Model:
    """Apply a single message with default wiring."""
    return Updater(texts or Texts())(model, msg)
