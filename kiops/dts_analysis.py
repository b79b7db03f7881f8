"""Path names, labels, dependents and symbols for a set of device tree nodes."""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field

from kiops.dts_model import Node, Path, Value, ValueKind, format_delimited


def _symbols_in_value(value: Value) -> list[str]:
    if value.kind is ValueKind.SYMBOL:
        return [value.data]
    if value.kind is ValueKind.ARRAY:
        return [s for item in value.data for s in _symbols_in_value(item)]
    if value.kind is ValueKind.EXPR:
        return list(value.data)
    return []


def _refs_in_value(value: Value) -> list[str]:
    if value.kind is ValueKind.REFERENCE:
        return [value.data]
    if value.kind is ValueKind.ARRAY:
        return [s for item in value.data for s in _refs_in_value(item)]
    return []


def _symbols_in_node(node: Node) -> list[str]:
    return [s for prop in node.props for value in prop.value for s in _symbols_in_value(value)]


def _refs_in_node(node: Node) -> list[str]:
    return [s for prop in node.props for value in prop.value for s in _refs_in_value(value)]


def format_path_node(indent: str, path: Path, node: Node) -> str:
    """Render a path followed by the node's labels and properties."""
    lines = [f"{indent}{path}\n"]
    if node.labels:
        lines.append(indent + format_delimited(node.labels, "  ", ", ", ":") + "\n")
    lines.extend(f"{indent}    {prop}\n" for prop in node.props)
    return "".join(lines)


class Analysis:
    """Nodes registered by absolute path, with label, dependent and symbol indexes."""

    def __init__(self, nodes: Iterable[Node] = ()) -> None:
        self.paths: dict[Path, Node] = {}
        self.labels: dict[str, Path] = {}
        self.reverse: dict[Path, list[Path]] = {}
        self.symbols: dict[str, list[Path]] = {}
        self._gather(Path.root(), nodes)
        self._merge()
        self.paths = dict(sorted(self.paths.items(), key=lambda item: item[0]))
        self.labels = dict(sorted(self.labels.items()))
        self._keys = list(self.paths)
        self._index()
        self._index_symbols()

    def _gather(self, parent: Path, nodes: Iterable[Node]) -> None:
        for original in nodes:
            path = parent.join([original.name])
            node = Node(original.name, list(original.labels), list(original.props))
            for label in node.labels:
                conflict = self.labels.get(label)
                self.labels[label] = path
                if conflict is not None and self.absolute(conflict) != self.absolute(path):
                    print(f"Conflict: label {label} refers to {path} and {conflict}")
            self._upsert(path, node)
            self._gather(path, original.nodes)

    def _merge(self) -> None:
        for path in sorted(p for p in self.paths if p.is_reference()):
            node = self.paths.pop(path, None)
            if node is not None:
                self._upsert(self.absolute(path), node)

    def _index(self) -> None:
        for path, node in self.paths.items():
            for refer in _refs_in_node(node):
                target = self.absolute(Path.reference(refer))
                self.reverse.setdefault(target, []).append(path)

    def _index_symbols(self) -> None:
        symbols: dict[str, list[Path]] = {}
        for path, node in self.paths.items():
            for symbol in _symbols_in_node(node):
                symbols.setdefault(symbol, []).append(path)
        self.symbols = dict(sorted(symbols.items()))

    def _upsert(self, key: Path, node: Node) -> None:
        extant = self.paths.get(key)
        if extant is None:
            self.paths[key] = node
        else:
            extant.labels.extend(node.labels)
            extant.props.extend(node.props)

    def node_at(self, path: Path) -> Node | None:
        """The node at a path, which may start with a label reference."""
        return self.paths.get(self.absolute(path))

    def children(self, path: Path) -> Iterator[tuple[Path, Node]]:
        """The paths and nodes that follow ``path`` and lie below it."""
        if path not in self.paths:
            return
        base = len(path)
        for key in self._keys[bisect_right(self._keys, path):]:
            if len(key) <= base:
                return
            yield key, self.paths[key]

    def dependents(self, start: Path) -> list[Path]:
        """All dependents of a node, deepest generation first."""
        direct = self.reverse.get(start, [])
        deeper = [path for dep in direct for path in self.dependents(dep)]
        return deeper + list(direct)

    def absolute(self, path: Path) -> Path:
        """Resolve a path that starts with a label reference to one from the root."""
        first, rest = path.split()
        if not first.is_reference():
            return path
        target = self.labels.get(first.name)
        if target is None:
            print(f"Undefined label: {first.name}")
            return path
        return self.absolute(target.join(rest))

    def __str__(self) -> str:
        parts = ["Nodes\n"]
        parts.extend(format_path_node("", path, node) for path, node in self.paths.items())
        parts.append("Labels\n")
        parts.extend(f"{label}: {path}\n" for label, path in self.labels.items())
        parts.append("Dependents\n")
        for path in self.paths:
            deps = self.reverse.get(path)
            if deps is not None:
                parts.append(f"{path}\n")
                parts.extend(f"    {dep}\n" for dep in deps)
        parts.append("Symbols\n")
        for symbol, paths in self.symbols.items():
            parts.append(symbol + format_delimited(paths, " => ", ", ", "\n"))
        return "".join(parts)


class LabelView:
    """A label oriented, markdown view of an analysis."""

    def __init__(self, analysis: Analysis) -> None:
        self.analysis = analysis

    def __str__(self) -> str:
        parts = []
        for label, path in self.analysis.labels.items():
            parts.append(f"## {label}\n")
            node = self.analysis.node_at(path)
            if node is None:
                continue
            parts.append(format_path_node("", path, node))
            for child_path, child in self.analysis.children(path):
                if not child.labels:
                    parts.append(format_path_node("", child_path, child))
                else:
                    links = "".join(
                        f"[&{name}](#{name.replace('_', '')})" for name in child.labels
                    )
                    parts.append(f"{child_path} {links}\n")
        return "".join(parts)


@dataclass
class SymbolAssoc:
    """A node together with the sorted, distinct symbols it uses."""

    first: str
    others: list[str]
    path: Path
    node: Node = field(repr=False)

    def __str__(self) -> str:
        head = self.first
        if self.others:
            head += format_delimited(self.others, ", ", ", ", "")
        return head + "\n" + format_path_node("    ", self.path, self.node)


class Xref:
    """A cross reference from symbols to the nodes that use them."""

    def __init__(self, analysis: Analysis, pred: Callable[[str], bool]) -> None:
        assocs = []
        for path, node in analysis.paths.items():
            symbols = sorted({s for s in _symbols_in_node(node) if pred(s)})
            if symbols:
                assocs.append(SymbolAssoc(symbols[0], symbols[1:], path, node))
        assocs.sort(key=lambda assoc: assoc.first)
        self.assocs: list[SymbolAssoc] = assocs

    def __iter__(self) -> Iterator[SymbolAssoc]:
        return iter(self.assocs)

    def __len__(self) -> int:
        return len(self.assocs)

    def __str__(self) -> str:
        return "".join(f"{assoc}\n" for assoc in self.assocs)