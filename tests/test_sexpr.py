import uuid

import pytest

from kiops.sexpr import Atom, AtomKind, Constant, Expr, SList


@pytest.mark.parametrize(
    "value, kind",
    [
        ("text", AtomKind.STR),
        (1.5, AtomKind.NUM),
        (7, AtomKind.BITS),
        (True, AtomKind.BOOL),
        (uuid.UUID(int=5), AtomKind.UUID),
    ],
)
def test_atom_of_kinds(value, kind):
    atom = Atom.of(value)
    assert atom.kind is kind
    assert atom.value == value


def test_atom_of_rejects():
    with pytest.raises(ValueError):
        Atom.of(-1)
    with pytest.raises(TypeError):
        Atom.of([1])


def test_accessors():
    atom = Atom.of("s")
    assert atom.as_string() == "s"
    assert atom.as_symbol() is None
    assert Atom.symbol("k").as_symbol() == "k"
    assert Atom.symbol("k").as_string() is None
    assert Atom.of(2.5).as_num() == 2.5
    assert Atom.of(2.5).as_bits() is None
    assert Atom.of(3).as_bits() == 3
    assert Atom.of(False).as_boolean() is False
    ident = uuid.UUID(int=9)
    assert Atom.of(ident).as_uuid() == ident
    assert Atom.of(3).as_uuid() is None


def test_num_and_bits_differ():
    assert Atom.of(1.0) != Atom.of(1)


def test_display_string_is_quoted_and_escaped():
    assert str(Atom.of('a"b')) == '"a\\"b"'


def test_display_bits_hex():
    assert str(Atom.of(255)) == "0xff"


def test_display_bool_and_uuid():
    ident = uuid.UUID(int=42)
    assert str(Atom.of(True)) == "true"
    assert str(Atom.of(ident)) == str(ident)


def test_display_integral_float():
    assert str(Atom.of(1.0)) == "1"


@pytest.mark.parametrize("value", [0.5, -8.89, 1.016, 1e20, 1e-7, 123456.25])
def test_display_float_round_trips(value):
    shown = str(Atom.of(value))
    assert "e" not in shown
    assert float(shown) == value


def test_expr_constructors():
    key = Expr.key("a")
    assert key.as_atom() == Atom.symbol("a")
    assert Expr.of(2.0) == Constant(Atom.of(2.0))
    assert Expr.empty().is_empty()
    assert Expr.empty() == SList()
    assert not key.is_empty()
    assert key.as_list() is None


def test_expr_list():
    items = [Expr.key("a"), Expr.of("b")]
    expr = Expr.list(items)
    assert expr.as_list() == tuple(items)
    assert expr.as_atom() is None
    assert not expr.is_empty()
    assert expr == Expr.list(iter(items))


def test_short_list_display_on_one_line():
    expr = Expr.list([Expr.key("at"), Expr.of(1.0), Expr.of(2.0), Expr.of(3.0)])
    shown = str(expr)
    assert "\n" not in shown
    assert shown == " ".join(["(at", str(Atom.of(1.0)), str(Atom.of(2.0)), str(Atom.of(3.0)) + ")"])


def test_long_list_display_indents():
    inner = Expr.list([Expr.key(name) for name in "abcde"])
    outer = Expr.list([Expr.key("top"), inner, Expr.key("x"), Expr.key("y"), Expr.key("z")])
    lines = str(outer).split("\n")
    assert lines[0] == "(top"
    assert lines[1] == "  (a"
    assert all(line.startswith("    ") for line in lines[2:6])
    assert lines[-1] == "  z)"


def test_empty_list_display():
    assert str(Expr.empty()) == "()"


def test_extract_uses_simplifier():
    class FirstItem:
        def simplify(self, subject):
            items = subject.as_list()
            return items[0] if items else None

    expr = Expr.list([Expr.key("head"), Expr.of("tail")])
    assert expr.extract(FirstItem()) == Expr.key("head")
    assert Expr.empty().extract(FirstItem()) is None