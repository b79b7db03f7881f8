"""Editing of symbol properties in a schematic from a table of values."""

from __future__ import annotations

from typing import Any

from kiops.sexpr import Atom, Constant, Expr, SList
from kiops.simplifier import Anything, Cons, Discard, Filter, Find, Head, Or, Simplifier

REFERENCE = "Reference"
"""The name of the property that identifies a placed symbol."""

Key = tuple[str, str]
"""A symbol reference and a property name."""


def _to_atom(value: Any) -> Atom | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return Atom.of(float(value))
        except OverflowError:
            return None
    if isinstance(value, str):
        return Atom.of(value)
    return None


def extract_props(json_value: Any) -> dict[Key, Atom] | None:
    """Read an array of records into a map keyed by (reference, property).

    Each record must hold a string ``Reference`` member; its other members
    that are numbers or strings become entries. None if the value is not
    an array.
    """
    if not isinstance(json_value, list):
        return None
    props: dict[Key, Atom] = {}
    for record in json_value:
        if not isinstance(record, dict):
            continue
        reference = record.get(REFERENCE)
        if not isinstance(reference, str):
            continue
        for name, value in record.items():
            if name == REFERENCE:
                continue
            atom = _to_atom(value)
            if atom is not None:
                props[(reference, name)] = atom
    return dict(sorted(props.items()))


def editor(props: dict[Key, Atom]) -> Simplifier:
    """A pattern that rewrites property values of placed symbols in a schematic."""
    props = dict(props)
    reference = Find(
        Cons(Discard("property"), Cons(Discard(Atom.of(REFERENCE)), Head(Anything())))
    )

    def property_for(sym_name: str) -> Simplifier:
        def body(expr: Expr) -> Expr | None:
            elems = expr.as_list()
            if not elems or len(elems) < 2:
                return None
            atom = elems[0].as_atom()
            prop_name = None if atom is None else atom.as_string()
            if prop_name is None:
                return None
            value = props.get((sym_name, prop_name))
            if value is None:
                return None
            return SList((elems[0], Constant(value), *elems[2:]))

        return Cons("property", Or(body, Anything()))

    def symbol_body(expr: Expr) -> Expr | None:
        found = reference.simplify(expr)
        atom = None if found is None else found.as_atom()
        sym_name = None if atom is None else atom.as_string()
        if sym_name is None:
            return None
        return Filter(Or(property_for(sym_name), Anything())).simplify(expr)

    symbol = Cons("symbol", symbol_body)
    return Cons("kicad_sch", Filter(Or(symbol, Anything())))