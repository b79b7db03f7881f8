"""Quoted string literals with JSON-like escapes."""

from __future__ import annotations

import re

from kiops.parsing import ParseError

_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "b": "\b",
    "f": "\f",
    "\\": "\\",
    "/": "/",
    '"': '"',
}

_LITERAL = re.compile(r'[^"\\]+')
_ESCAPED_WHITESPACE = re.compile(r"\\[ \t\r\n]+")


def parse_string(text: str, pos: int = 0) -> tuple[str, int]:
    """Parse a double-quoted string starting at ``pos``.

    Returns the decoded value and the position just past the closing quote.
    A backslash followed by whitespace drops that whitespace.
    """
    if not text.startswith('"', pos):
        raise ParseError("expected '\"'", text, pos)
    parts: list[str] = []
    i = pos + 1
    while True:
        literal = _LITERAL.match(text, i)
        if literal:
            parts.append(literal.group())
            i = literal.end()
            continue
        if text.startswith("\\", i):
            escape = text[i + 1:i + 2]
            if escape and escape in _ESCAPES:
                parts.append(_ESCAPES[escape])
                i += 2
                continue
            skipped = _ESCAPED_WHITESPACE.match(text, i)
            if skipped:
                i = skipped.end()
                continue
        break
    if not text.startswith('"', i):
        raise ParseError("expected closing '\"'", text, i)
    return "".join(parts), i + 1