"""Command line entry points."""

from __future__ import annotations

import json
import re
import sys
from collections.abc import Callable, Sequence
from typing import Any

from kiops.dts_analysis import Analysis, LabelView, Xref
from kiops.dts_parser import tree
from kiops.edit import editor, extract_props
from kiops.kicad_analysis import footprints, sheets, symbols
from kiops.parsing import parse_file, parse_stdin, read_json, write_file, write_stdout
from kiops.sexpr import Expr
from kiops.sexpr_json import expr_to_json_value
from kiops.sexpr_parser import parse_s_expr
from kiops.simplifier import Anything, Simplifier
from kiops.symlib import merge, split

SAMA5D27_SOURCES = (
    "data/linux/arch/arm/boot/dts/sama5d2.dtsi",
    "data/linux/arch/arm/boot/dts/at91-sama5d27_wlsom1.dtsi",
    "data/linux/arch/arm/boot/dts/at91-sama5d27_wlsom1_ek.dts",
)
SAMA5D27_ANALYSIS = "results/sama5d27-analysis.log"
SAMA5D27_XREF = "results/sama5d27-xref.log"
SAMA5D27_LABELS = "results/sama5d27-labels.md"

_ILLEGAL = re.compile(r'[/?<>\\:*|"]')
_CONTROL = re.compile(r"[\x00-\x1f\x80-\x9f]")
_RESERVED = re.compile(r"^\.+$")
_MAX_NAME_BYTES = 255

_ANALYSES: dict[str, Callable[[], Simplifier]] = {
    "footprints": footprints,
    "symbols": symbols,
    "sheets": sheets,
    "format": Anything,
}


class CommandError(Exception):
    """A command could not do its work."""


def sanitize_filename(name: str) -> str:
    """Remove characters and names that cannot stand in a file name."""
    name = _ILLEGAL.sub("", name)
    name = _CONTROL.sub("", name)
    name = _RESERVED.sub("", name)
    encoded = name.encode("utf-8")
    if len(encoded) > _MAX_NAME_BYTES:
        name = encoded[:_MAX_NAME_BYTES].decode("utf-8", errors="ignore")
    return name


def _run(body: Callable[[list[str]], None], argv: Sequence[str] | None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    try:
        body(args)
    except (CommandError, OSError, ValueError) as err:
        print(f"Error: {err}", file=sys.stderr)
        return 1
    return 0


def _arg(args: list[str], index: int, usage: str) -> str:
    if index >= len(args):
        raise CommandError(usage)
    return args[index]


def _json_text(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def _dts_parse(args: list[str]) -> None:
    nodes = parse_stdin(tree)
    write_stdout(_json_text([node.to_json() for node in nodes]))


def _dts_parse_sama5d27(args: list[str]) -> None:
    all_nodes = []
    for source in SAMA5D27_SOURCES:
        all_nodes.extend(parse_file(source, tree))
    analysis = Analysis(all_nodes)
    write_file(SAMA5D27_ANALYSIS, analysis)
    write_file(SAMA5D27_XREF, Xref(analysis, lambda s: s.startswith("PIN_")))
    write_file(SAMA5D27_LABELS, LabelView(analysis))


def _ki_edit(args: list[str]) -> None:
    fname = _arg(args, 0, "usage: ki_edit symbol_props_file")
    props = extract_props(read_json(fname))
    if props is None:
        raise CommandError("invalid symbol properties")
    source = parse_stdin(parse_s_expr)
    output = editor(props).simplify(source)
    if output is None:
        raise CommandError("unrecognised input file contents")
    write_stdout(output)


def _ki_merge(args: list[str]) -> None:
    path = _arg(args, 0, "usage: ki_merge input")
    input1 = parse_stdin(parse_s_expr)
    input2 = parse_file(path, parse_s_expr)
    output = merge(input1, input2)
    if output is None:
        raise CommandError("library version mismatch")
    write_stdout(output)


def _ki_parse(args: list[str]) -> None:
    command = _arg(args, 0, "ki_parse: command [-s]")
    want_sexpr = len(args) > 1 and args[1] == "-s"
    factory = _ANALYSES.get(command)
    if factory is None:
        raise CommandError("argument not recognised")
    source = parse_stdin(parse_s_expr)
    output: Expr | None = factory().simplify(source)
    if output is None:
        raise CommandError("unrecognised file contents")
    if want_sexpr:
        write_stdout(output)
    else:
        write_stdout(_json_text(expr_to_json_value(output)))


def _ki_split(args: list[str]) -> None:
    output = _arg(args, 0, "usage: ki_split output_dir")
    source = parse_stdin(parse_s_expr)
    parts = split(source)
    if parts is None:
        raise CommandError("problem with symbol library contents")
    for name, content in parts:
        write_file(f"{output}/{sanitize_filename(name)}.kicad_sym", content)


def dts_parse(argv: Sequence[str] | None = None) -> int:
    """Parse device tree source from standard input and print it as JSON."""
    return _run(_dts_parse, argv)


def dts_parse_sama5d27(argv: Sequence[str] | None = None) -> int:
    """Analyse the SAMA5D27 device tree sources and write reports."""
    return _run(_dts_parse_sama5d27, argv)


def ki_edit(argv: Sequence[str] | None = None) -> int:
    """Apply symbol properties from a JSON file to a schematic on standard input."""
    return _run(_ki_edit, argv)


def ki_merge(argv: Sequence[str] | None = None) -> int:
    """Merge a symbol library on standard input with one in a file."""
    return _run(_ki_merge, argv)


def ki_parse(argv: Sequence[str] | None = None) -> int:
    """Extract footprints, symbols or sheets, or reformat, a design file."""
    return _run(_ki_parse, argv)


def ki_split(argv: Sequence[str] | None = None) -> int:
    """Split a symbol library into one file per symbol."""
    return _run(_ki_split, argv)