"""S-expression atoms and expressions."""

from __future__ import annotations

import math
import json
import uuid
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum, auto
from typing import Any

_MAX_BITS = 2**64 - 1


class AtomKind(Enum):
    SYMBOL = auto()
    STR = auto()
    NUM = auto()
    BITS = auto()
    BOOL = auto()
    UUID = auto()


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value.is_integer():
        sign = "-" if value == 0 and math.copysign(1.0, value) < 0 else ""
        return sign + str(int(value))
    text = repr(value)
    if "e" in text or "E" in text:
        text = format(Decimal(text), "f")
    return text


@dataclass(frozen=True)
class Atom:
    """An indivisible value in an S-expression."""

    kind: AtomKind
    value: Any

    @staticmethod
    def of(value: Any) -> Atom:
        """Wrap a Python value: str, float, int, bool or UUID."""
        if isinstance(value, Atom):
            return value
        if isinstance(value, bool):
            return Atom(AtomKind.BOOL, value)
        if isinstance(value, str):
            return Atom(AtomKind.STR, value)
        if isinstance(value, float):
            return Atom(AtomKind.NUM, value)
        if isinstance(value, int):
            if not 0 <= value <= _MAX_BITS:
                raise ValueError(f"bits value out of range: {value}")
            return Atom(AtomKind.BITS, value)
        if isinstance(value, uuid.UUID):
            return Atom(AtomKind.UUID, value)
        raise TypeError(f"cannot make an atom from {type(value).__name__}")

    @staticmethod
    def symbol(name: str) -> Atom:
        return Atom(AtomKind.SYMBOL, name)

    def _get(self, kind: AtomKind) -> Any:
        return self.value if self.kind is kind else None

    def as_string(self) -> str | None:
        return self._get(AtomKind.STR)

    def as_symbol(self) -> str | None:
        return self._get(AtomKind.SYMBOL)

    def as_num(self) -> float | None:
        return self._get(AtomKind.NUM)

    def as_bits(self) -> int | None:
        return self._get(AtomKind.BITS)

    def as_boolean(self) -> bool | None:
        return self._get(AtomKind.BOOL)

    def as_uuid(self) -> uuid.UUID | None:
        return self._get(AtomKind.UUID)

    def __str__(self) -> str:
        if self.kind is AtomKind.STR:
            return json.dumps(self.value, ensure_ascii=False)
        if self.kind is AtomKind.NUM:
            return _format_float(self.value)
        if self.kind is AtomKind.BITS:
            return f"0x{self.value:x}"
        if self.kind is AtomKind.BOOL:
            return "true" if self.value else "false"
        return str(self.value)


class Expr:
    """An S-expression: either a Constant or an SList."""

    @staticmethod
    def key(name: str) -> Expr:
        return Constant(Atom.symbol(name))

    @staticmethod
    def list(values: Iterable[Expr]) -> Expr:
        return SList(tuple(values))

    @staticmethod
    def empty() -> Expr:
        return SList(())

    @staticmethod
    def of(value: Any) -> Expr:
        return Constant(Atom.of(value))

    def as_atom(self) -> Atom | None:
        return None

    def as_list(self) -> tuple[Expr, ...] | None:
        return None

    def is_empty(self) -> bool:
        return False

    def extract(self, simplifier: Any) -> Expr | None:
        return simplifier.simplify(self)

    def __str__(self) -> str:
        return _format_expr(self, 0)


@dataclass(frozen=True)
class Constant(Expr):
    """An expression holding a single atom."""

    atom: Atom

    def as_atom(self) -> Atom | None:
        return self.atom


@dataclass(frozen=True)
class SList(Expr):
    """A bracketed list of expressions."""

    items: tuple[Expr, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))

    def as_list(self) -> tuple[Expr, ...] | None:
        return self.items

    def is_empty(self) -> bool:
        return not self.items


def _format_expr(expr: Expr, indent: int) -> str:
    atom = expr.as_atom()
    if atom is not None:
        return str(atom)
    items = expr.as_list() or ()
    if not items:
        return "()"
    head, *rest = items
    parts = ["(", _format_expr(head, indent)]
    if len(items) <= 4:
        for item in rest:
            parts += [" ", _format_expr(item, indent)]
    else:
        inner = indent + 2
        for item in rest:
            parts += ["\n", " " * inner, _format_expr(item, inner)]
    parts.append(")")
    return "".join(parts)