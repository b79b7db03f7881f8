"""Patterns that extract footprints, symbols and sheets from design files."""

from __future__ import annotations

from kiops.sexpr import Expr
from kiops.simplifier import (
    And,
    AnyNum,
    AnyStr,
    Anything,
    Cons,
    Discard,
    Filter,
    Find,
    LabelAs,
    Not,
    Nothing,
    Or,
    Simplifier,
    as_simplifier,
)


def _string(expr: Expr) -> str | None:
    atom = expr.as_atom()
    return None if atom is None else atom.as_string()


def trim(x: Expr) -> Expr | None:
    """A string atom with surrounding whitespace removed."""
    text = _string(x)
    return None if text is None else Expr.of(text.strip())


def named_property(name: str) -> Simplifier:
    """A property with the given name, matched case-insensitively, as (name value)."""
    lowered = name.lower()

    def key(x: Expr) -> Expr | None:
        text = _string(x)
        if text is not None and text.lower() == lowered:
            return Expr.key(name)
        return None

    return Cons(Discard("property"), Cons(key, Cons(trim, Discard(Anything()))))


def any_property() -> Simplifier:
    """Any property, as (name value)."""

    def string_as_symbol(x: Expr) -> Expr | None:
        text = _string(x)
        return None if text is None else Expr.key(text)

    return Cons(Discard("property"), Cons(string_as_symbol, Cons(trim, Discard(Anything()))))


def footprints() -> Simplifier:
    """Footprints of a board, or a single footprint file, with position and model."""
    at = Cons("at", Cons(AnyNum(), Cons(AnyNum(), Or(Cons(AnyNum(), Nothing()), Nothing()))))
    model = Cons("model", Cons(AnyStr(), Discard(Anything())))
    reference = Cons(Discard("fp_text"), Cons("reference", Cons(AnyStr(), Discard(Anything()))))
    details = reference.or_(at).or_(named_property("description")).or_(model)
    footprint = Cons(Discard("footprint"), Cons(And(AnyStr(), LabelAs("library")), Filter(details)))
    board = Cons(Discard("kicad_pcb"), Filter(footprint))
    return board.or_(footprint.and_(lambda e: Expr.list([e])))


def symbols() -> Simplifier:
    """Placed symbols with their attributes and properties, power symbols left out."""

    def is_power_id(x: Expr) -> Expr | None:
        text = _string(x)
        return x if text is not None and text.startswith("power:") else None

    is_power_symbol = Cons("lib_id", Cons(is_power_id, Nothing()))
    attribs = (
        Cons("in_bom", Anything())
        .or_(Cons("unit", Anything()))
        .or_(Cons("dnp", Anything()))
        .or_(Cons("uuid", Anything()))
        .or_(Cons("lib_id", Anything()))
    )
    symbol = Cons(
        Discard("symbol"),
        Filter(attribs.or_(any_property())).and_(Not(Find(is_power_symbol))),
    )
    heading = as_simplifier("kicad_sch").or_("kicad_symbol_lib")
    return Cons(Discard(heading), Filter(symbol))


def sheets() -> Simplifier:
    """Sub-sheets of a schematic with their names and files."""
    properties = (
        named_property("sheetname")
        .or_(named_property("sheetfile"))
        .or_(named_property("sheet file"))
    )
    sheet = Cons(Discard("sheet"), Filter(properties))
    return Cons(Discard("kicad_sch"), Filter(sheet))