"""Device tree source data: names, paths, values, properties and nodes."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from functools import total_ordering
from typing import Any


def format_delimited(elems: Iterable[Any], open_: str, sep: str, close: str) -> str:
    """Join the string forms of ``elems`` with ``sep`` between brackets."""
    return open_ + sep.join(str(elem) for elem in elems) + close


@dataclass(frozen=True, order=True)
class Address:
    """A numeric literal or unit address."""

    value: int

    def __str__(self) -> str:
        return f"0x{self.value:x}"


@total_ordering
@dataclass(frozen=True)
class NodeName:
    """A node name, optionally with a unit address, or a label reference."""

    name: str
    address: Address | None = None
    ref: bool = False

    @staticmethod
    def symbol(name: str, address: Address | None = None) -> NodeName:
        return NodeName(name, address, False)

    @staticmethod
    def reference(label: str) -> NodeName:
        return NodeName(label, None, True)

    def is_root(self) -> bool:
        return not self.ref and self.name == "" and self.address is None

    def is_reference(self) -> bool:
        return self.ref

    def _sort_key(self) -> tuple:
        address = () if self.address is None else (self.address.value,)
        return (self.ref, self.name, address)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, NodeName):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def to_json(self) -> dict[str, Any]:
        if self.ref:
            return {"Reference": self.name}
        address = None if self.address is None else self.address.value
        return {"Symbol": [self.name, address]}

    def __str__(self) -> str:
        if self.ref:
            return f"&{self.name}"
        if self.address is None:
            return self.name
        return f"{self.name}@{self.address}"


@dataclass(frozen=True, order=True)
class Path:
    """A sequence of node names from the root or from a label reference."""

    names: tuple[NodeName, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "names", tuple(self.names))

    @staticmethod
    def root() -> Path:
        return Path((NodeName.symbol(""),))

    @staticmethod
    def reference(label: str) -> Path:
        return Path((NodeName.reference(label),))

    def join(self, relpath: Iterable[NodeName]) -> Path:
        """Append names; a root or reference name restarts the path."""
        names = list(self.names)
        for name in relpath:
            if name.is_reference() or name.is_root():
                names = []
            names.append(name)
        return Path(tuple(names))

    def is_root(self) -> bool:
        return len(self.names) == 1 and self.names[0].is_root()

    def is_reference(self) -> bool:
        return bool(self.names) and self.names[0].is_reference()

    def split(self) -> tuple[NodeName, tuple[NodeName, ...]]:
        """The first name and the names after it; an empty path counts as root."""
        names = self.names or Path.root().names
        return names[0], names[1:]

    def parent(self) -> Path:
        if len(self.names) > 1:
            return Path(self.names[:-1])
        return self

    def __len__(self) -> int:
        return len(self.names)

    def __iter__(self) -> Iterator[NodeName]:
        return iter(self.names)

    def __str__(self) -> str:
        if self.is_root():
            return "/"
        return format_delimited(self.names, "", "/", "")


class ValueKind(Enum):
    SYMBOL = "Symbol"
    REFERENCE = "Reference"
    ADDRESS = "Address"
    TEXT = "Text"
    ARRAY = "Array"
    EXPR = "Expr"


@dataclass(frozen=True)
class Value:
    """A property value.

    ``data`` is a str for symbols, references and text, an Address for
    addresses, a tuple of Values for arrays and a tuple of str for expressions.
    """

    kind: ValueKind
    data: Any

    def __post_init__(self) -> None:
        if self.kind in (ValueKind.ARRAY, ValueKind.EXPR):
            object.__setattr__(self, "data", tuple(self.data))

    def to_json(self) -> dict[str, Any]:
        if self.kind is ValueKind.ADDRESS:
            payload: Any = self.data.value
        elif self.kind is ValueKind.ARRAY:
            payload = [value.to_json() for value in self.data]
        elif self.kind is ValueKind.EXPR:
            payload = list(self.data)
        else:
            payload = self.data
        return {self.kind.value: payload}

    def __str__(self) -> str:
        if self.kind is ValueKind.REFERENCE:
            return f"&{self.data}"
        if self.kind is ValueKind.TEXT:
            return f'"{self.data}"'
        if self.kind is ValueKind.ARRAY:
            return format_delimited(self.data, "<", " ", ">")
        if self.kind is ValueKind.EXPR:
            return format_delimited(self.data, "(", ", ", ")")
        return str(self.data)


@dataclass(frozen=True)
class Prop:
    """A named property with zero or more values."""

    name: str
    value: tuple[Value, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", tuple(self.value))

    def to_json(self) -> dict[str, Any]:
        return {"name": self.name, "value": [value.to_json() for value in self.value]}

    def __str__(self) -> str:
        if not self.value:
            shown = "true"
        elif len(self.value) == 1:
            shown = str(self.value[0])
        else:
            shown = format_delimited(self.value, "[", ", ", "]")
        return f"{self.name} = {shown}"


@dataclass
class Node:
    """A device tree node with its labels, properties and child nodes."""

    name: NodeName
    labels: list[str] = field(default_factory=list)
    props: list[Prop] = field(default_factory=list)
    nodes: list[Node] = field(default_factory=list)

    def to_json(self) -> dict[str, Any]:
        return {
            "labels": list(self.labels),
            "name": self.name.to_json(),
            "props": [prop.to_json() for prop in self.props],
            "nodes": [node.to_json() for node in self.nodes],
        }