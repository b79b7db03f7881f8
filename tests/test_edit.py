from kiops.edit import editor, extract_props
from kiops.parsing import parse_with
from kiops.sexpr import Atom, Expr
from kiops.sexpr_parser import parse_s_expr

SCHEMATIC_BEFORE = """
(kicad_sch (version 20250114) (generator "eeschema")
  (uuid "00000000-0000-4000-8000-000000000001")
  (paper "A4")
  (title_block (title "Sample Board") (rev "2") (comment 1 "example.com"))
  (lib_symbols
    (symbol "Demo:CONN_3"
      (in_bom yes)
      (property "Reference" "J" (at -5.08 6.35 0) (effects (font (size 1.27 1.27))))
      (property "Footprint" "Demo:CONN_3_TH" (at 0 0 0) (effects (hide yes)))))
  (symbol (lib_id "Demo:CONN_3") (at 40.64 101.6 0) (unit 1) (in_bom yes)
    (uuid "00000000-0000-4000-8000-000000000002")
    (property "Reference" "J8" (at 40.64 93.98 0))
    (property "Value" "Header" (at 40.64 96.52 0))
    (property "Footprint" "Demo:CONN_3_SMD" (at 40.64 101.6 0) (effects (hide yes)))
    (property "Datasheet" "" (at 40.64 101.6 0)))
  (embedded_fonts no))
"""

SCHEMATIC_AFTER = SCHEMATIC_BEFORE.replace(
    '"Demo:CONN_3_SMD"', '"Demo:other_footprint"'
)


def schematic_before() -> Expr:
    return parse_with(SCHEMATIC_BEFORE, parse_s_expr)


def schematic_after() -> Expr:
    return parse_with(SCHEMATIC_AFTER, parse_s_expr)


def test_extract():
    value = [
        {"Reference": "a", "Footprint": "b"},
        {"Reference": "c", "Footprint": "d"},
        {},
        {"Footprint": "e"},
    ]
    m = extract_props(value)
    assert m[("a", "Footprint")] == Atom.of("b")
    assert m[("c", "Footprint")] == Atom.of("d")
    assert len(m) == 2


def test_extract_numbers_become_floats():
    m = extract_props([{"Reference": "R1", "Value": 47, "Flag": True, "List": [1]}])
    assert m == {("R1", "Value"): Atom.of(47.0)}


def test_extract_rejects_non_array():
    assert extract_props({"Reference": "a"}) is None


def test_no_edits():
    m = {("", ""): Atom.of("")}
    s = editor(m).simplify(schematic_before())
    assert s == schematic_before()


def test_edits():
    m = {("J8", "Footprint"): Atom.of("Demo:other_footprint")}
    s = editor(m).simplify(schematic_before())
    assert s == schematic_after()


def test_edits_change_the_schematic():
    m = {("J8", "Footprint"): Atom.of("Demo:other_footprint")}
    s = editor(m).simplify(schematic_before())
    assert s != schematic_before()
    assert s == schematic_after()


def test_library_symbols_are_left_alone():
    m = {("J", "Footprint"): Atom.of("changed")}
    s = editor(m).simplify(schematic_before())
    assert s == schematic_before()


def test_edit_with_number():
    text = '(kicad_sch (symbol (property "Reference" "R1") (property "Value" "10k")))'
    m = extract_props([{"Reference": "R1", "Value": 4.7}])
    s = editor(m).simplify(parse_s_expr(text))
    assert s == parse_s_expr('(kicad_sch (symbol (property "Reference" "R1") (property "Value" 4.7)))')


def test_editor_rejects_other_files():
    assert editor({}).simplify(parse_s_expr("(kicad_pcb (version 1))")) is None