"""Parser for S-expression text."""

from __future__ import annotations

import re
import uuid

from kiops.parsing import ParseError
from kiops.sexpr import Atom, Constant, Expr, SList
from kiops.strings import parse_string

_MAX_BITS = 2**64 - 1
_SPACE = re.compile(r"[ \t\r\n]*")
_BARE_WORD = re.compile(r"[^ \t\r\n)(]+")
_UUID = re.compile(
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
)
_BITS = re.compile(r"0x([0-9a-fA-F_]+)")
_FLOAT = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_FLOAT_WORDS = {"nan", "inf", "infinity"}


def _scalar(word: str) -> Atom:
    """Classify a bare word, most specific kind first."""
    if _UUID.fullmatch(word):
        return Atom.of(uuid.UUID(word))
    bits = _BITS.fullmatch(word)
    if bits:
        digits = bits.group(1).replace("_", "")
        if digits:
            number = int(digits, 16)
            if number <= _MAX_BITS:
                return Atom.of(number)
    if _FLOAT.fullmatch(word) or word.lower() in _FLOAT_WORDS:
        return Atom.of(float(word))
    if word == "true":
        return Atom.of(True)
    if word == "false":
        return Atom.of(False)
    return Atom.symbol(word)


def _skip_space(text: str, pos: int) -> int:
    return _SPACE.match(text, pos).end()


def _expr(text: str, pos: int) -> tuple[Expr, int]:
    if text.startswith("(", pos):
        return _list(text, pos)
    if text.startswith('"', pos):
        try:
            value, end = parse_string(text, pos)
            return Constant(Atom.of(value)), end
        except ParseError:
            pass
    word = _BARE_WORD.match(text, pos)
    if not word:
        raise ParseError("expected an expression", text, pos)
    return Constant(_scalar(word.group())), word.end()


def _bare_list(text: str, pos: int) -> tuple[list[Expr], int]:
    items: list[Expr] = []
    pos = _skip_space(text, pos)
    while pos < len(text) and text[pos] != ")":
        item, pos = _expr(text, pos)
        items.append(item)
        pos = _skip_space(text, pos)
    return items, pos


def _list(text: str, pos: int) -> tuple[Expr, int]:
    items, pos = _bare_list(text, pos + 1)
    if not text.startswith(")", pos):
        raise ParseError("expected closing paren", text, pos)
    return SList(tuple(items)), pos + 1


def _expect_end(text: str, pos: int) -> None:
    if pos < len(text):
        raise ParseError("expected end of input", text, pos)


def parse_s_expr(text: str) -> Expr:
    """Parse exactly one expression, usually a bracketed list."""
    expr, pos = _expr(text, _skip_space(text, 0))
    _expect_end(text, _skip_space(text, pos))
    return expr


def parse_s_exprs(text: str) -> Expr:
    """Parse zero or more expressions; a single one is returned unwrapped."""
    items, pos = _bare_list(text, 0)
    _expect_end(text, pos)
    if len(items) == 1:
        return items[0]
    return Expr.list(items)