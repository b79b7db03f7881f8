"""Merging and splitting of symbol libraries."""

from __future__ import annotations

from collections.abc import Iterable

from kiops.sexpr import Expr
from kiops.simplifier import Anything, Cons, Discard, Filter, Find, Head

HEADING = "kicad_symbol_lib"
GENERATOR = "generator"
VERSION = "version"
SYMBOL = "symbol"


def merge(input1: Expr, input2: Expr) -> Expr | None:
    """Combine the symbols of two libraries with the same version and generator.

    Where names clash the second library's symbol wins. None if the
    libraries are malformed or do not agree.
    """
    version = attr_in(VERSION, input1)
    generator = attr_in(GENERATOR, input1)
    if version is None or generator is None:
        return None
    if version != attr_in(VERSION, input2) or generator != attr_in(GENERATOR, input2):
        return None
    s1 = symbols_in(input1)
    s2 = symbols_in(input2)
    if s1 is None or s2 is None:
        return None
    return symlib(version, generator, unique(s1 + s2))


def split(input_: Expr) -> list[tuple[str, Expr]] | None:
    """One library per symbol, as (name, library) pairs sorted by name."""
    found = symbols_in(input_)
    if found is None:
        return None
    version = attr_in(VERSION, input_)
    generator = attr_in(GENERATOR, input_)
    if version is None or generator is None:
        return None
    return [(name, symlib(version, generator, [sym])) for name, sym in group(found).items()]


def unique(symbols: Iterable[Expr]) -> list[Expr]:
    """One symbol per name, in name order; the last of each name wins."""
    return list(group(symbols).values())


def group(symbols: Iterable[Expr]) -> dict[str, Expr]:
    """Named symbols keyed by name, in name order; unnamed ones are dropped."""
    named: dict[str, Expr] = {}
    for sym in symbols:
        name = name_in(sym)
        if name is not None:
            named[name] = sym
    return dict(sorted(named.items()))


def attr_in(name: str, library: Expr) -> Expr | None:
    """The value of a top level attribute of a library."""
    pattern = Cons(Discard(HEADING), Find(Cons(Discard(name), Head(Anything()))))
    return pattern.simplify(library)


def symbols_in(library: Expr) -> list[Expr] | None:
    """The symbols of a library, or None if it is not one."""
    pattern = Cons(Discard(HEADING), Filter(Cons(SYMBOL, Anything())))
    result = pattern.simplify(library)
    if result is None:
        return None
    items = result.as_list()
    return None if items is None else list(items)


def name_in(symbol: Expr) -> str | None:
    """The quoted name that follows a symbol's heading."""
    items = symbol.as_list()
    if items is None or len(items) < 2:
        return None
    atom = items[1].as_atom()
    return None if atom is None else atom.as_string()


def make_list(name: str, values: Iterable[Expr]) -> Expr:
    return Expr.list([Expr.key(name), *values])


def attr(name: str, value: Expr) -> list[Expr]:
    return [make_list(name, [value])]


def symlib(version: Expr, generator: Expr, symbols: Iterable[Expr]) -> Expr:
    """A library holding the given symbols."""
    return make_list(HEADING, [*attr(VERSION, version), *attr(GENERATOR, generator), *symbols])