"""Reading input for parsers and writing results to files or standard output."""

from __future__ import annotations

import json
import sys
from collections.abc import Callable
from typing import Any, TypeVar

T = TypeVar("T")

_EXCERPT_LENGTH = 160


class ParseError(ValueError):
    """A parser could not make sense of its input at a given position."""

    def __init__(self, message: str, text: str = "", pos: int = 0) -> None:
        self.message = message
        self.text = text
        self.pos = pos
        super().__init__(str(self))

    @property
    def remainder(self) -> str:
        """The input from the failing position onwards."""
        return self.text[self.pos:]

    @property
    def excerpt(self) -> str:
        """The start of the remaining input, cut to a readable length."""
        return self.remainder[:_EXCERPT_LENGTH]

    @property
    def line(self) -> int:
        return self.text.count("\n", 0, self.pos) + 1

    @property
    def column(self) -> int:
        return self.pos - (self.text.rfind("\n", 0, self.pos) + 1) + 1

    def __str__(self) -> str:
        if not self.text:
            return self.message
        return f"{self.message} at line {self.line}, column {self.column}: {self.excerpt!r}"


def parse_with(text: str, parser: Callable[[str], T]) -> T:
    """Run a parser over a whole text and return what it produced."""
    try:
        return parser(text)
    except ParseError as err:
        if err.text:
            raise
        raise ParseError(err.message, text, err.pos) from err


def parse_file(name: str, parser: Callable[[str], T]) -> T:
    """Read a file as text and parse it."""
    with open(name, encoding="utf-8") as handle:
        text = handle.read()
    return parse_with(text, parser)


def parse_stdin(parser: Callable[[str], T]) -> T:
    """Read all of standard input and parse it."""
    return parse_with(sys.stdin.read(), parser)


def write_file(path: str, content: Any) -> None:
    """Write the string form of ``content`` to a file, replacing it."""
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(str(content))


def write_stdout(content: Any) -> None:
    """Write the string form of ``content`` to standard output."""
    sys.stdout.write(str(content))
    sys.stdout.flush()


def read_json(path: str) -> Any:
    """Load a JSON document from a file."""
    with open(path, encoding="utf-8") as handle:
        return json.load(handle)