# Cratchit — Message-Driven Command Interpreter
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Cratchit CLI entry point.

Design:
- CLI owns process startup: config, PATH, argv and the environment file.
- The environment store is scoped to the session and written back on
  every exit path.
- Kernel is the session engine (config + store injected).
- UI is terminal-friendly PromptSession (keeps scrollback + copy/select).
"""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Sequence

from . import config
from .environment import EnvironmentStore
from .kernel import Cratchit
from .repl import REPL
from .ui import PromptToolkitUI


def run_session(
    settings: config.StartupSettings,
    cfg: config.YAMLConfig,
    read_fn: Callable[[str], str] | None = None,
    write_fn: Callable[[str], None] | None = None,
    error_fn: Callable[[str], None] | None = None,
) -> None:
    """Run one interpreter session against <cwd>/<env file>."""
    env_path = config.env_file_path(settings.cwd, cfg)
    store_kwargs = {} if error_fn is None else {"error_fn": error_fn}

    with EnvironmentStore(
        env_path, defaults=cfg.seed_entries, **store_kwargs
    ) as store:
        kernel = Cratchit(env_path=env_path, store=store, config=cfg)

        repl_kwargs = {}
        if read_fn is not None:
            repl_kwargs["read_fn"] = read_fn
        if write_fn is not None:
            repl_kwargs["write_fn"] = write_fn

        REPL(kernel, settings.command, **repl_kwargs).run()


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for Cratchit CLI."""
    args = sys.argv[1:] if argv is None else list(argv)

    cfg = config.load_system_config()
    settings = config.resolve_startup(args)

    unset = str(
        cfg.get_path("system.unset_display", config.DEFAULT_UNSET_DISPLAY)
    )

    # If user explicitly disables prompt_toolkit UI:
    if os.environ.get("CRATCHIT_LEGACY_UI") == "1" or not sys.stdin.isatty():
        sys.stdout.write("\nPATH=" + settings.path_display(unset))
        run_session(settings, cfg)
        sys.stdout.write("\n")
        sys.stdout.flush()
        return 0

    # Default: PromptToolkitUI (keeps terminal scrollback/copy/select)
    ui = PromptToolkitUI(cfg)
    ui.write("\nPATH=" + settings.path_display(unset))
    try:
        run_session(
            settings,
            cfg,
            read_fn=ui.read,
            write_fn=ui.write,
            error_fn=lambda text: ui.write(text + "\n"),
        )
    finally:
        ui.flush()
        ui.write("\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
