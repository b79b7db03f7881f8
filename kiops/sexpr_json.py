"""Conversion of S-expressions to JSON-ready values."""

from __future__ import annotations

import math
from collections.abc import Iterable
from typing import Any

from kiops.sexpr import AtomKind, Expr

_PROPERTY = "property"
_FREE = "free"


def _atom_value(expr: Expr) -> Any:
    atom = expr.as_atom()
    if atom.kind is AtomKind.NUM:
        return atom.value if math.isfinite(atom.value) else None
    if atom.kind is AtomKind.UUID:
        return str(atom.value)
    return atom.value


def _particle(expr: Expr) -> tuple[str, Any]:
    """Classify as ("property", (name, value)) or ("free", value)."""
    items = expr.as_list()
    if items is None:
        return _FREE, _atom_value(expr)
    if items:
        head = items[0].as_atom()
        if head is not None and head.kind is AtomKind.SYMBOL:
            return _PROPERTY, (head.value, _gather(items[1:]))
    return _FREE, _gather(items)


def _gather(exprs: Iterable[Expr]) -> Any:
    properties: dict[str, list[Any]] = {}
    free: list[Any] = []
    for expr in exprs:
        kind, payload = _particle(expr)
        if kind == _PROPERTY:
            name, value = payload
            properties.setdefault(name, []).append(value)
        else:
            free.append(payload)
    obj = {
        name: values[0] if len(values) == 1 else values
        for name, values in sorted(properties.items())
    }
    if not obj:
        return free[0] if len(free) == 1 else free
    if not free:
        return obj
    return free + [obj]


def expr_to_json_value(expr: Expr) -> Any:
    """Convert an expression to JSON data.

    A list headed by a symbol becomes a property; properties in a list are
    gathered into an object and other items into an array.
    """
    kind, payload = _particle(expr)
    if kind == _PROPERTY:
        name, value = payload
        return {name: value}
    return payload