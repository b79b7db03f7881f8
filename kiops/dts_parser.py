"""Parser for device tree source text."""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any, NoReturn

from kiops.dts_model import Address, Node, NodeName, Prop, Value, ValueKind
from kiops.parsing import ParseError
from kiops.strings import parse_string

_MAX_ADDRESS = 2**64 - 1
_WHITESPACE = re.compile(r"[ \t\r\n]+")
_REST_OF_LINE = re.compile(r"[^\r\n]*")
_HEX_DIGITS = re.compile(r"[0-9a-fA-F]+")
_DEC_DIGITS = re.compile(r"[0-9]+")
_MULTI_OPERATORS = ("||", "&&", "<<")
_SINGLE_OPERATORS = "|&^*/+-%"


class _Backtrack(Exception):
    """A recoverable failure: the caller may try another alternative."""

    def __init__(self, pos: int, message: str) -> None:
        super().__init__(message)
        self.pos = pos
        self.message = message


def _symbol_initial(c: str) -> bool:
    return c.isalpha() or c in "_$#"


def _symbol_char(c: str) -> bool:
    return c.isalnum() or c in "_$-.,"


def _ident_initial(c: str) -> bool:
    return c.isalpha() or c in "_$"


def _ident_char(c: str) -> bool:
    return c.isalnum() or c in "_$"


class _Parser:
    """Recursive descent over a text; each rule returns (value, next position)."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.furthest: tuple[int, str] = (0, "nothing recognised")

    def _fail(self, pos: int, message: str) -> NoReturn:
        if pos >= self.furthest[0]:
            self.furthest = (pos, message)
        raise _Backtrack(pos, message)

    # -- low level -----------------------------------------------------

    def tag(self, pos: int, token: str) -> int:
        if self.text.startswith(token, pos):
            return pos + len(token)
        self._fail(pos, f"expected {token!r}")

    def spacing(self, pos: int) -> int:
        """Skip whitespace, comments and preprocessor lines."""
        text = self.text
        while True:
            if text.startswith("#include", pos) or text.startswith("# ", pos):
                pos = _REST_OF_LINE.match(text, pos).end()
            elif text.startswith("/*", pos) and text.find("*/", pos + 2) >= 0:
                pos = text.find("*/", pos + 2) + 2
            elif text.startswith("//", pos):
                pos = _REST_OF_LINE.match(text, pos).end()
            else:
                match = _WHITESPACE.match(text, pos)
                if not match:
                    return pos
                pos = match.end()

    def spaced(self, pos: int, item: Callable[[int], tuple[Any, int]]) -> tuple[Any, int]:
        value, pos = item(self.spacing(pos))
        return value, self.spacing(pos)

    def spaced_tag(self, pos: int, token: str) -> int:
        return self.spacing(self.tag(self.spacing(pos), token))

    def many(self, pos: int, item: Callable[[int], tuple[Any, int]]) -> tuple[list[Any], int]:
        values = []
        while True:
            try:
                value, pos = item(pos)
            except _Backtrack:
                return values, pos
            values.append(value)

    def spaced_list(self, pos: int, item: Callable[[int], tuple[Any, int]]) -> tuple[list[Any], int]:
        return self.many(pos, lambda p: self.spaced(p, item))

    def word(self, pos: int, initial: Callable[[str], bool], rest: Callable[[str], bool], what: str) -> tuple[str, int]:
        text = self.text
        if pos >= len(text) or not initial(text[pos]):
            self._fail(pos, f"expected {what}")
        end = pos + 1
        while end < len(text) and rest(text[end]):
            end += 1
        return text[pos:end], end

    def symbol(self, pos: int) -> tuple[str, int]:
        return self.word(pos, _symbol_initial, _symbol_char, "a symbol")

    def identifier(self, pos: int) -> tuple[str, int]:
        return self.word(pos, _ident_initial, _ident_char, "an identifier")

    def label(self, pos: int) -> tuple[str, int]:
        name, pos = self.identifier(pos)
        return name, self.tag(pos, ":")

    def reference(self, pos: int) -> tuple[str, int]:
        return self.identifier(self.tag(pos, "&"))

    def _number(self, pos: int, pattern: re.Pattern[str], base: int, what: str) -> tuple[Address, int]:
        match = pattern.match(self.text, pos)
        if not match:
            self._fail(pos, f"expected {what}")
        number = int(match.group(), base)
        if number > _MAX_ADDRESS:
            self._fail(pos, "number too large")
        return Address(number), match.end()

    def hex(self, pos: int) -> tuple[Address, int]:
        return self._number(pos, _HEX_DIGITS, 16, "hex digits")

    def dec(self, pos: int) -> tuple[Address, int]:
        return self._number(pos, _DEC_DIGITS, 10, "digits")

    def literal(self, pos: int) -> tuple[Address, int]:
        if self.text.startswith("0x", pos):
            try:
                return self.hex(pos + 2)
            except _Backtrack:
                pass
        return self.dec(pos)

    # -- structure -----------------------------------------------------

    def tree(self, pos: int) -> tuple[list[Node], int]:
        items, pos = self.spaced_list(pos, self.tree_item)
        return [item for item in items if item is not None], pos

    def tree_item(self, pos: int) -> tuple[Node | None, int]:
        try:
            return self.node(pos)
        except _Backtrack:
            pass
        return None, self.tag(pos, "/dts-v1/;")

    def nodes(self, pos: int) -> tuple[list[Node], int]:
        return self.spaced_list(pos, self.node)

    def props(self, pos: int) -> tuple[list[Prop], int]:
        return self.spaced_list(pos, self.prop)

    def node(self, pos: int) -> tuple[Node, int]:
        labels: list[str] = []
        try:
            label, after = self.label(pos)
            labels, pos = [label], after
        except _Backtrack:
            pass
        name, pos = self.spaced(pos, self.node_name)
        (props, children), pos = self.spaced(pos, self.block)
        return Node(name, labels, props, children), pos

    def node_name(self, pos: int) -> tuple[NodeName, int]:
        if self.text.startswith("/", pos):
            return NodeName.symbol(""), pos + 1
        try:
            name, pos = self.symbol(pos)
        except _Backtrack:
            label, pos = self.reference(pos)
            return NodeName.reference(label), pos
        address = None
        if self.text.startswith("@", pos):
            try:
                address, pos = self.hex(pos + 1)
            except _Backtrack:
                pass
        return NodeName.symbol(name, address), pos

    def block(self, pos: int) -> tuple[tuple[list[Prop], list[Node]], int]:
        pos = self.tag(pos, "{")
        props, pos = self.props(pos)
        children, pos = self.nodes(pos)
        if not self.text.startswith("}", pos):
            raise ParseError("expected '}'", self.text, pos)
        pos = self.spaced_tag(pos + 1, ";")
        return (props, children), pos

    def prop(self, pos: int) -> tuple[Prop, int]:
        name, pos = self.symbol(pos)
        try:
            values, after = self.prop_values(self.spaced_tag(pos, "="))
        except _Backtrack:
            values, after = [], pos
        return Prop(name, values), self.spaced_tag(after, ";")

    def prop_values(self, pos: int) -> tuple[list[Value], int]:
        first, pos = self.prop_value(pos)
        values = [first]
        while True:
            try:
                value, after = self.prop_value(self.spaced_tag(pos, ","))
            except _Backtrack:
                return values, pos
            values.append(value)
            pos = after

    def prop_value(self, pos: int) -> tuple[Value, int]:
        if self.text.startswith('"', pos):
            try:
                text, end = parse_string(self.text, pos)
                return Value(ValueKind.TEXT, text), end
            except ParseError:
                pass
        try:
            return self.simple_value(pos)
        except _Backtrack:
            pass
        items, pos = self.array(pos)
        return Value(ValueKind.ARRAY, items), pos

    def simple_value(self, pos: int) -> tuple[Value, int]:
        try:
            name, end = self.identifier(pos)
            return Value(ValueKind.SYMBOL, name), end
        except _Backtrack:
            pass
        try:
            address, end = self.literal(pos)
            return Value(ValueKind.ADDRESS, address), end
        except _Backtrack:
            pass
        try:
            label, end = self.reference(pos)
            return Value(ValueKind.REFERENCE, label), end
        except _Backtrack:
            pass
        symbols, end = self.expr_in_brackets(pos)
        return Value(ValueKind.EXPR, symbols), end

    def array(self, pos: int) -> tuple[list[Value], int]:
        pos = self.tag(pos, "<")
        items, pos = self.spaced_list(pos, self.simple_value)
        return items, self.tag(pos, ">")

    def expr_in_brackets(self, pos: int) -> tuple[list[str], int]:
        pos = self.tag(pos, "(")
        symbols, pos = self.spaced(pos, self.expr)
        return symbols, self.tag(pos, ")")

    def term(self, pos: int) -> tuple[list[str], int]:
        value, pos = self.simple_value(pos)
        if value.kind in (ValueKind.SYMBOL, ValueKind.REFERENCE):
            return [value.data], pos
        if value.kind is ValueKind.EXPR:
            return list(value.data), pos
        return [], pos

    def operator(self, pos: int) -> int:
        for token in _MULTI_OPERATORS:
            if self.text.startswith(token, pos):
                return pos + len(token)
        if pos < len(self.text) and self.text[pos] in _SINGLE_OPERATORS:
            return pos + 1
        self._fail(pos, "expected an operator")

    def expr_tail(self, pos: int) -> tuple[list[str], int]:
        try:
            return self.spaced(self.operator(pos), self.term)
        except _Backtrack:
            return self.expr_in_brackets(pos)

    def expr(self, pos: int) -> tuple[list[str], int]:
        symbols, pos = self.term(pos)
        tails, pos = self.spaced_list(pos, self.expr_tail)
        return symbols + [symbol for tail in tails for symbol in tail], pos


def _run(text: str, rule: Callable[[_Parser, int], tuple[Any, int]]) -> Any:
    parser = _Parser(text)
    try:
        value, pos = rule(parser, 0)
    except _Backtrack as err:
        raise ParseError(err.message, text, err.pos) from None
    if pos < len(text):
        fail_pos, message = parser.furthest
        if fail_pos < pos:
            fail_pos, message = pos, "expected end of input"
        raise ParseError(message, text, fail_pos)
    return value


def tree(text: str) -> list[Node]:
    """Parse a device tree source as a forest of top level nodes.

    At most one is the root; the others refer to labelled nodes.
    """
    return _run(text, _Parser.tree)


def parse_prop(text: str) -> Prop:
    """Parse exactly one property, terminated by ';'."""
    return _run(text, _Parser.prop)


def parse_props(text: str) -> list[Prop]:
    """Parse a sequence of properties."""
    return _run(text, _Parser.props)


def parse_nodes(text: str) -> list[Node]:
    """Parse a sequence of nodes."""
    return _run(text, _Parser.nodes)