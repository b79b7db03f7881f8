# kiops

Command-line tools and a small library for KiCad s-expression files
(schematics, boards, footprints, symbol libraries) and device tree
sources. It has no dependencies outside the standard library.

## Installation

```
pip install .
```

With the `test` extra, pytest is installed as well:

```
pip install ".[test]"
```

## Commands

Each command returns exit status 0 on success. On failure it prints
`Error: <message>` to standard error and returns 1; this covers
missing arguments (the message is the usage line), unreadable files
and input that cannot be parsed.

### ki_parse

Read a KiCad file from standard input and extract one kind of
information:

```
ki_parse footprints < board.kicad_pcb
ki_parse symbols    < design.kicad_sch
ki_parse sheets     < design.kicad_sch
ki_parse format     < design.kicad_sch
```

- `footprints`: every footprint of a board, or a single footprint
  file, with its library name, reference, position, description and
  3D model.
- `symbols`: placed symbols of a schematic, or the symbols of a symbol
  library, with `in_bom`, `unit`, `dnp`, `uuid`, `lib_id` and all
  properties. Power symbols (`lib_id` starting with `power:`) are
  left out.
- `sheets`: the sub-sheets of a schematic with their sheet name and
  file.
- `format`: the whole file unchanged.

The result is printed as JSON. A list headed by a symbol becomes a
JSON member; repeated members become arrays. Give `-s` after the
command to print an s-expression instead:

```
ki_parse symbols -s < design.kicad_sch
```

### ki_edit

Set property values of placed symbols in a schematic. The values come
from a JSON file holding an array of objects. Each object names a
symbol by its `Reference` member; its other members that are strings
or numbers give new property values:

```json
[{"Reference": "J8", "Footprint": "Lib:other_footprint"}]
```

```
ki_edit props.json < design.kicad_sch > edited.kicad_sch
```

Only properties that already exist on the symbol are changed; the
rest of the file is written back as it was read.

### ki_merge

Merge two symbol libraries. Their `version` and `generator` must be
the same. The output holds the symbols of both in name order; where
both have a symbol of the same name, the one from the file given as
the argument is kept:

```
ki_merge other.kicad_sym < first.kicad_sym > merged.kicad_sym
```

### ki_split

Split a symbol library into one `.kicad_sym` file per symbol, named
after the symbol with characters that cannot appear in a file name
removed. The output directory must already exist:

```
ki_split out_dir < library.kicad_sym
```

### dts_parse

Parse a device tree source from standard input and print its top
level nodes, with their labels, properties and children, as JSON:

```
dts_parse < board.dts
```

Comments, `#include` lines and `/dts-v1/;` are skipped.

### dts_parse_sama5d27

Analyse a fixed set of SAMA5D27 device tree files, read from
`data/linux/arch/arm/boot/dts/` under the current directory, and write
three reports into an existing `results/` directory:

- `sama5d27-analysis.log`: nodes by absolute path, labels, dependents
  and symbols;
- `sama5d27-xref.log`: nodes grouped by the `PIN_` symbols they use;
- `sama5d27-labels.md`: a markdown view of each label and its node.

```
dts_parse_sama5d27
```

## Library use

S-expressions are parsed with `kiops.sexpr_parser.parse_s_expr` into
`Expr` values (`Constant` or `SList`, in `kiops.sexpr`); `str()` of an
expression gives s-expression text. Patterns in `kiops.simplifier`
(`Cons`, `Filter`, `Find`, `Or`, `And`, `Discard`, ...) match and
rebuild expressions; `simplify` returns `None` when a pattern does not
match.

```python
from kiops.kicad_analysis import symbols
from kiops.sexpr_json import expr_to_json_value
from kiops.sexpr_parser import parse_s_expr

with open("design.kicad_sch", encoding="utf-8") as handle:
    expr = parse_s_expr(handle.read())

found = symbols().simplify(expr)
if found is not None:
    print(expr_to_json_value(found))
```

`kiops.symlib` has `merge` and `split` for symbol libraries, and
`kiops.edit` has `extract_props` and `editor` for property edits.

Device trees:

```python
from kiops.dts_analysis import Analysis, LabelView, Xref
from kiops.dts_parser import tree

with open("board.dts", encoding="utf-8") as handle:
    analysis = Analysis(tree(handle.read()))

print(analysis)
print(Xref(analysis, lambda name: name.startswith("PIN_")))
print(LabelView(analysis))
```

Parse failures raise `kiops.parsing.ParseError`, which reports the
line, column and the start of the remaining input.

## Limits

- Device tree sources are parsed and reported on, never written back;
  `#include` lines are skipped, not followed.
- The only command that analyses device trees works on the fixed
  SAMA5D27 file set; other sources can be analysed through
  `Analysis` from Python.