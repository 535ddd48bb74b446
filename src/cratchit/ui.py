# Cratchit — Message-Driven Command Interpreter
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.formatted_text import ANSI
from prompt_toolkit.patch_stdout import patch_stdout
from prompt_toolkit.shortcuts import print_formatted_text
from prompt_toolkit.styles import Style

if TYPE_CHECKING:
    from .interfaces import ConfigModel  # pragma: no cover


# ----------------------------
# Theme / Style
# ----------------------------


def _default_style_dict() -> dict[str, str]:
    return {
        "completion-menu": "bg:#111111 #d0d0d0",
        "completion-menu.completion": "bg:#111111 #d0d0d0",
        "completion-menu.completion.current": "bg:#303030 #ffffff bold",
        "completion-menu.meta.completion": "bg:#111111 #808080",
        "completion-menu.meta.completion.current": "bg:#303030 #a0a0a0",
    }


def _build_style(cfg: ConfigModel | None) -> Style:
    base = _default_style_dict()
    overrides = {}
    if cfg is not None:
        overrides = cfg.get_path("ui.theme.style", {}) or {}
    if isinstance(overrides, dict):
        # only keep string->string
        for k, v in overrides.items():
            if isinstance(k, str) and isinstance(v, str):
                base[k] = v
    return Style.from_dict(base)


# ----------------------------
# Completions
# ----------------------------


class TriggerCompleter(Completer):
    """Completes built-in triggers (quit) on the first token."""

    def __init__(self, cfg: ConfigModel | None) -> None:
        self.cfg = cfg

    def _triggers(self) -> list[str]:
        if self.cfg is None:
            return []
        return sorted(self.cfg.quit_triggers)

    def get_completions(
        self, document, complete_event
    ) -> Iterable[Completion]:
        text = document.text_before_cursor or ""
        token = text.lstrip()
        # Only the first token
        if not token or " " in token:
            return

        for trig in self._triggers():
            if trig.startswith(token) and trig != token:
                yield Completion(
                    trig, start_position=-len(token), display_meta="quit"
                )


# ----------------------------
# PromptSession UI
# ----------------------------


class PromptToolkitUI:
    """
    Terminal-friendly line UI:
      - Keeps normal terminal scrollback + drag-select copy.
      - Text after the last newline written is held back and becomes the
        prompt of the next read, so the rendered prompt marker and the
        user's input share a line.
    """

    def __init__(self, cfg: ConfigModel | None = None) -> None:
        self.cfg = cfg
        self.session: PromptSession[str] | None = None
        self._style = _build_style(cfg)
        self._pending = ""

    def _ensure_session(self) -> None:
        if self.session is not None:
            return

        self.session = PromptSession(
            completer=TriggerCompleter(self.cfg),
            complete_while_typing=True,
            style=self._style,
        )

    # ---------- public API ----------

    def read(self, prompt: str) -> str:
        self._ensure_session()
        assert self.session is not None

        message = self._pending + prompt
        self._pending = ""
        with patch_stdout():
            return self.session.prompt(ANSI(message))

    def write(self, text: str) -> None:
        """Write EXACTLY what we receive (no extra newline)."""
        if not text:
            return
        text = self._pending + text
        head, sep, tail = text.rpartition("\n")
        self._pending = tail
        if sep:
            print_formatted_text(
                ANSI(head + sep), style=self._style, end=""
            )

    def flush(self) -> None:
        """Write out any held-back partial line."""
        if self._pending:
            print_formatted_text(
                ANSI(self._pending), style=self._style, end=""
            )
            self._pending = ""
