# Cratchit — Message-Driven Command Interpreter
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Cratchit kernel.

Session engine for the init/update/view cycle:
- init() builds the first Model
- update() applies one Msg through the Updater
- view() renders a Model into display rows

Important boundary:
- Kernel does not load YAML or open the environment file.
- Kernel consumes the injected ConfigModel and EnvironmentStore.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .environment import EnvironmentStore
from .interfaces import ConfigModel
from .messages import QUIT_TRIGGERS, Model, Msg, classify
from .update import Texts, Updater


@dataclass
class Cratchit:
    """Cratchit session engine."""

    env_path: Path
    store: EnvironmentStore | None = None
    config: ConfigModel | None = None

    # Derived from config
    texts: Texts = field(default_factory=Texts)
    quit_triggers: tuple[str, ...] = QUIT_TRIGGERS
    updater: Updater = field(init=False)

    def __post_init__(self) -> None:
        if self.config is not None:
            self.texts = Texts.from_mapping(self.config.texts)
            self.quit_triggers = self.config.quit_triggers
        self.updater = Updater(texts=self.texts, store=self.store)

    def init(self) -> Model:
        return Model(prompt=self.texts.init + str(self.env_path))

    def classify(self, line: str) -> Msg:
        return classify(line, self.quit_triggers)

    def update(self, msg: Msg, model: Model) -> Model:
        return self.updater(model, msg)

    def view(self, model: Model) -> list[str]:
        return [model.prompt]
