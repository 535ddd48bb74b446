# Cratchit — Message-Driven Command Interpreter
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Cratchit interpreter loop.

Each step pops one pending message (Nop when none is pending), updates the
model, renders it, and then either stops (model.quit) or blocks for the
next input line. The only suspension point is that read.
"""

from __future__ import annotations

import sys
import traceback
from collections import deque
from collections.abc import Callable
from datetime import datetime

from . import config as cfg_module
from .kernel import Cratchit
from .messages import Command, Model, Msg, Nop, Quit


def _stdout_write(text: str) -> None:
    sys.stdout.write(text)
    sys.stdout.flush()


def _input_read(prompt: str) -> str:
    return input(prompt)


def write_crash_log(
    error: Exception,
    raw_command: str = "",
    model: Model | None = None,
) -> None:
    """Write an entry to the crash log.

    Logs unhandled exceptions from the interpreter loop.
    Only creates the log directory when actually needed.
    Appends to crash.log (never overwrites).
    """
    try:
        crash_log = cfg_module.crash_log_path(cfg_module.get_data_root())

        # Create logs directory only when we need to write
        crash_log.parent.mkdir(parents=True, exist_ok=True)

        lines = [f"{datetime.now().isoformat()}"]
        if raw_command:
            lines.append(f"raw={raw_command}")
        if model is not None:
            lines.append(f"quit={model.quit}")
        lines.append(f"error={type(error).__name__}: {error}")
        lines.append("traceback:")
        lines.append(traceback.format_exc())
        lines.append("----")

        with crash_log.open("a", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")

    except Exception:
        # Already handling an error; nowhere left to report this one
        pass


class REPL:
    """Drives the update/render/read cycle of a Cratchit kernel."""

    def __init__(
        self,
        kernel: Cratchit,
        command: str,
        read_fn: Callable[[str], str] = _input_read,
        write_fn: Callable[[str], None] = _stdout_write,
    ):
        self.kernel = kernel
        self.read_fn = read_fn
        self.write_fn = write_fn
        self.model: Model = kernel.init()
        self.pending: deque[Msg] = deque([Command(command)])
        self.current: Msg = Nop()

    @property
    def running(self) -> bool:
        return not self.model.quit

    def step(self) -> bool:
        """Run one iteration.

        Returns:
            False once the model is terminal (no read was performed),
            True otherwise.
        """
        msg: Msg = self.pending.popleft() if self.pending else Nop()
        self.current = msg

        self.model = self.kernel.update(msg, self.model)

        for row in self.kernel.view(self.model):
            self.write_fn(row)

        if self.model.quit:
            return False

        self.pending.append(self._read_msg())
        return True

    def _read_msg(self) -> Msg:
        try:
            line = self.read_fn("")
        except (KeyboardInterrupt, EOFError):
            # Input is gone; route the shutdown through the Updater
            return Quit()
        except Exception as e:
            # A broken input source will not recover; end the session
            write_crash_log(e)
            self.write_fn(
                f"\n[ERROR] Input failed: {type(e).__name__}: {e}"
            )
            return Quit()
        return self.kernel.classify(line)

    def run(self) -> Model:
        """Step until the model is terminal and return the final model."""
        while True:
            try:
                if not self.step():
                    return self.model
            except Exception as e:
                raw = (
                    self.current.text
                    if isinstance(self.current, Command)
                    else ""
                )
                write_crash_log(e, raw_command=raw, model=self.model)
                self.write_fn(
                    f"\n[ERROR] Unhandled exception: {type(e).__name__}: {e}"
                )
                # Continue session
