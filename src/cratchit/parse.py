# Cratchit — Message-Driven Command Interpreter
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Parser primitives for Cratchit command input.

A parser is any callable taking the remaining input text and returning
either ``(result, remainder)`` or ``None`` when nothing could be parsed.
Parsers compose by feeding the remainder of one into the next.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, TypeVar

P = TypeVar("P", covariant=True)

DELIMITERS = " ,.;:="


class Parser(Protocol[P]):
    """Protocol for parser combinators."""

    def __call__(self, text: str) -> tuple[P, str] | None:
        ...


@dataclass(frozen=True)
class WordParser:
    """Parse the next delimiter-bounded word.

    Leading delimiters are skipped. The word ends at the next delimiter or
    at end of input; that delimiter stays in the remainder. An empty word
    is a failure, so ``None`` means there is nothing left to parse.
    """

    delimiters: str = DELIMITERS

    def __call__(self, text: str) -> tuple[str, str] | None:
        i = 0
        n = len(text)
        while i < n and text[i] in self.delimiters:
            i += 1
        start = i
        while i < n and text[i] not in self.delimiters:
            i += 1
        word = text[start:i]
        if not word:
            return None
        return (word, text[i:])


WORD = WordParser()


def parse(parser: Parser[P], text: str) -> tuple[P, str] | None:
    """Apply a parser to text."""
    return parser(text)


def parse_words(text: str, parser: Parser[str] = WORD) -> list[str]:
    """Split text into all words the parser can extract, in order."""
    words: list[str] = []
    remainder = text
    while True:
        result = parse(parser, remainder)
        if result is None:
            return words
        word, remainder = result
        words.append(word)


def split(text: str, delim: str) -> tuple[str, str]:
    """Split text on the first occurrence of delim.

    Returns:
        (before, after). When delim is not found the split fails and
        ``("", text)`` is returned.
    """
    pos = text.find(delim)
    if pos < 0:
        return ("", text)
    return (text[:pos], text[pos + len(delim):])
