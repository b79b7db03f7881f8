"""Composable patterns that match S-expressions and rebuild them."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from kiops.sexpr import Atom, Expr, SList


class Simplifier:
    """A pattern: returns a simplified expression, or None when it does not match."""

    def simplify(self, subject: Expr) -> Expr | None:
        raise NotImplementedError

    def or_(self, other: Any) -> Simplifier:
        return Or(self, other)

    def and_(self, other: Any) -> Simplifier:
        return And(self, other)


class _Function(Simplifier):
    def __init__(self, func: Callable[[Expr], Expr | None]) -> None:
        self.func = func

    def simplify(self, subject: Expr) -> Expr | None:
        return self.func(subject)


class _AtomMatch(Simplifier):
    def __init__(self, atom: Atom) -> None:
        self.atom = atom

    def simplify(self, subject: Expr) -> Expr | None:
        return subject if subject.as_atom() == self.atom else None


class _SymbolMatch(Simplifier):
    def __init__(self, name: str) -> None:
        self.name = name

    def simplify(self, subject: Expr) -> Expr | None:
        atom = subject.as_atom()
        if atom is not None and atom.as_symbol() == self.name:
            return subject
        return None


def as_simplifier(value: Any) -> Simplifier:
    """Accept a Simplifier, a symbol name, an Atom or a function."""
    if isinstance(value, Simplifier):
        return value
    if isinstance(value, str):
        return _SymbolMatch(value)
    if isinstance(value, Atom):
        return _AtomMatch(value)
    if callable(value):
        return _Function(value)
    raise TypeError(f"cannot use {type(value).__name__} as a simplifier")


class AnyNum(Simplifier):
    """Matches a numeric atom."""

    def simplify(self, subject: Expr) -> Expr | None:
        atom = subject.as_atom()
        return subject if atom is not None and atom.as_num() is not None else None


class AnyStr(Simplifier):
    """Matches a quoted string atom."""

    def simplify(self, subject: Expr) -> Expr | None:
        atom = subject.as_atom()
        return subject if atom is not None and atom.as_string() is not None else None


class Anything(Simplifier):
    """Matches anything unchanged."""

    def simplify(self, subject: Expr) -> Expr | None:
        return subject


class Nothing(Simplifier):
    """Matches only the empty list."""

    def simplify(self, subject: Expr) -> Expr | None:
        return subject if subject.is_empty() else None


class _Binary(Simplifier):
    def __init__(self, first: Any, second: Any) -> None:
        self.first = as_simplifier(first)
        self.second = as_simplifier(second)


class _Unary(Simplifier):
    def __init__(self, inner: Any) -> None:
        self.inner = as_simplifier(inner)


class Cons(_Binary):
    """Match the head of a list with one pattern and the tail with another.

    An empty result for the head drops it from the output.
    """

    def simplify(self, subject: Expr) -> Expr | None:
        elems = subject.as_list()
        if not elems:
            return None
        head = self.first.simplify(elems[0])
        if head is None:
            return None
        tail = self.second.simplify(SList(elems[1:]))
        if tail is None:
            return None
        if head.is_empty():
            return tail
        rest = tail.as_list()
        if rest is None:
            return None
        return SList((head,) + rest)


class Head(_Unary):
    """Apply a pattern to the first element of a list."""

    def simplify(self, subject: Expr) -> Expr | None:
        elems = subject.as_list()
        if not elems:
            return None
        return self.inner.simplify(elems[0])


class Or(_Binary):
    """The first pattern's result, else the second's."""

    def simplify(self, subject: Expr) -> Expr | None:
        result = self.first.simplify(subject)
        return result if result is not None else self.second.simplify(subject)


class And(_Binary):
    """Apply the second pattern to the first pattern's result."""

    def simplify(self, subject: Expr) -> Expr | None:
        result = self.first.simplify(subject)
        return None if result is None else self.second.simplify(result)


class Filter(_Unary):
    """Keep the results of elements of a list that match."""

    def simplify(self, subject: Expr) -> Expr | None:
        elems = subject.as_list()
        if elems is None:
            return None
        results = (self.inner.simplify(elem) for elem in elems)
        return Expr.list(r for r in results if r is not None)


class Find(_Unary):
    """The result for the first element of a list that matches."""

    def simplify(self, subject: Expr) -> Expr | None:
        for elem in subject.as_list() or ():
            result = self.inner.simplify(elem)
            if result is not None:
                return result
        return None


class Discard(_Unary):
    """An empty list where the pattern matches."""

    def simplify(self, subject: Expr) -> Expr | None:
        return Expr.empty() if self.inner.simplify(subject) is not None else None


class Ensure(_Unary):
    """The subject unchanged where the pattern matches."""

    def simplify(self, subject: Expr) -> Expr | None:
        return subject if self.inner.simplify(subject) is not None else None


class Not(_Unary):
    """The subject unchanged where the pattern does not match."""

    def simplify(self, subject: Expr) -> Expr | None:
        return subject if self.inner.simplify(subject) is None else None


class LabelAs(Simplifier):
    """Wrap the subject in a list headed by a symbol."""

    def __init__(self, name: str) -> None:
        self.name = name

    def simplify(self, subject: Expr) -> Expr | None:
        return Expr.list([Expr.key(self.name), subject])