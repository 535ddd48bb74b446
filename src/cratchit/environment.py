# Cratchit — Message-Driven Command Interpreter
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Environment file storage for Cratchit.

File format, one entry per line:

    "<key>":"<value>"

Both fields are double-quoted. Inside a field every ``"`` and ``\\`` is
preceded by a backslash; on reading, a backslash makes the next character
literal. Lines starting with ``//`` are comments, blank lines are ignored.
Entries are written sorted by key, newline-joined, without a trailing
newline.

Persistence is best effort: I/O failures are reported through the error
channel and never raised past this module.
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterator, Mapping
from pathlib import Path
from types import TracebackType

Environment = dict[str, str]

QUOTE = '"'
ESCAPE = "\\"
SEPARATOR = ":"
COMMENT_MARKER = "//"


def _stderr_write(text: str) -> None:
    sys.stderr.write(text + "\n")


# ----------------------------------------------------------------
# Entry codec
# ----------------------------------------------------------------


def quote(text: str) -> str:
    """Quote text as a single environment field."""
    escaped = text.replace(ESCAPE, ESCAPE + ESCAPE).replace(
        QUOTE, ESCAPE + QUOTE
    )
    return QUOTE + escaped + QUOTE


def _read_quoted(line: str, pos: int) -> tuple[str, int] | None:
    """Read a quoted field starting at pos.

    Returns:
        (unescaped text, index just past the closing quote), or None if
        line[pos:] does not start with a complete quoted field.
    """
    if pos >= len(line) or line[pos] != QUOTE:
        return None

    chars: list[str] = []
    i = pos + 1
    while i < len(line):
        ch = line[i]
        if ch == ESCAPE:
            if i + 1 >= len(line):
                return None
            chars.append(line[i + 1])
            i += 2
            continue
        if ch == QUOTE:
            return ("".join(chars), i + 1)
        chars.append(ch)
        i += 1

    # Unterminated
    return None


def is_value_line(line: str) -> bool:
    """True for non-empty lines that are not comments."""
    return bool(line) and not line.startswith(COMMENT_MARKER)


def parse_entry(line: str) -> tuple[str, str] | None:
    """Parse a value line into (key, value), or None if malformed."""
    key_field = _read_quoted(line, 0)
    if key_field is None:
        return None
    key, pos = key_field

    if line[pos:pos + 1] != SEPARATOR:
        return None

    value_field = _read_quoted(line, pos + 1)
    if value_field is None:
        return None
    value, end = value_field

    if end != len(line):
        return None
    return (key, value)


def format_entry(key: str, value: str) -> str:
    """Format a single environment entry line."""
    return quote(key) + SEPARATOR + quote(value)


def serialize(environment: Mapping[str, str]) -> str:
    """Serialize an environment, sorted by key, without trailing newline."""
    return "\n".join(
        format_entry(key, environment[key]) for key in sorted(environment)
    )


# ----------------------------------------------------------------
# File operations
# ----------------------------------------------------------------


def load(
    path: Path,
    defaults: Mapping[str, str] | None = None,
    error_fn: Callable[[str], None] = _stderr_write,
) -> Environment:
    """Load an environment file.

    Args:
        path: Environment file path. A missing file is not an error.
        defaults: Entries pre-seeded before reading; file entries
            override them.
        error_fn: Error channel for read failures and skipped lines.

    Returns:
        Everything accumulated, even when reading fails part way.
    """
    # File entries replace seeds of the same key
    environment: Environment = dict(defaults or {})
    seen: set[str] = set()
    skipped = 0
    duplicates = 0

    try:
        with path.open("rb") as f:
            for raw in f:
                # Decode per line so one bad line cannot hide the rest
                try:
                    line = raw.decode("utf-8").rstrip("\r\n")
                except UnicodeDecodeError:
                    skipped += 1
                    continue
                if not is_value_line(line):
                    continue
                entry = parse_entry(line)
                if entry is None:
                    skipped += 1
                    continue
                key, value = entry
                # First occurrence in the file wins
                if key in seen:
                    duplicates += 1
                    continue
                seen.add(key)
                environment[key] = value
    except FileNotFoundError:
        pass
    except OSError as e:
        error_fn(f"[ERROR] Read from {path} failed: {e}")

    if skipped:
        error_fn(f"[WARN] Skipped {skipped} malformed line(s) in {path}")
    if duplicates:
        error_fn(f"[WARN] Ignored {duplicates} duplicate key(s) in {path}")

    return environment


def save(
    path: Path,
    environment: Mapping[str, str],
    error_fn: Callable[[str], None] = _stderr_write,
) -> None:
    """Overwrite the environment file with every entry.

    The content is encoded before the file is opened, so an unencodable
    entry leaves the previous file intact.
    """
    try:
        data = serialize(environment).encode("utf-8")
        with path.open("wb") as f:
            f.write(data)
    except (OSError, UnicodeEncodeError) as e:
        error_fn(f"[ERROR] Write to {path} failed: {e}")


# ----------------------------------------------------------------
# Scoped store
# ----------------------------------------------------------------


class EnvironmentStore:
    """Session-owned environment, loaded on enter and saved on exit.

    Use as a context manager so the environment is written back on every
    exit path, including exceptions:

        with EnvironmentStore(path) as store:
            ...
    """

    def __init__(
        self,
        path: Path,
        defaults: Mapping[str, str] | None = None,
        error_fn: Callable[[str], None] = _stderr_write,
    ):
        self.path = path
        self.defaults = dict(defaults or {})
        self.error_fn = error_fn
        self.environment: Environment = {}
        self.is_open = False

    def open(self) -> EnvironmentStore:
        self.environment = load(self.path, self.defaults, self.error_fn)
        self.is_open = True
        return self

    def close(self) -> None:
        if not self.is_open:
            return
        self.flush()
        self.is_open = False

    def flush(self) -> None:
        save(self.path, self.environment, self.error_fn)

    def __enter__(self) -> EnvironmentStore:
        return self.open()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # -----------------------
    # Entry access
    # -----------------------

    def get(self, key: str, default: str | None = None) -> str | None:
        return self.environment.get(key, default)

    def set(self, key: str, value: str) -> None:
        self.environment[key] = value

    def remove(self, key: str) -> None:
        self.environment.pop(key, None)

    def items(self) -> list[tuple[str, str]]:
        """Entries sorted by key."""
        return sorted(self.environment.items())

    def __contains__(self, key: object) -> bool:
        return key in self.environment

    def __len__(self) -> int:
        return len(self.environment)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self.environment))
