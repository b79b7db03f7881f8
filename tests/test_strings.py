import pytest

from kiops.parsing import ParseError
from kiops.strings import parse_string


def test_plain_string():
    text = '"hello world"'
    value, pos = parse_string(text, 0)
    assert value == "hello world"
    assert pos == len(text)


def test_empty_string():
    value, pos = parse_string('""', 0)
    assert value == ""
    assert pos == 2


@pytest.mark.parametrize(
    "escape, expected",
    [
        ("\\n", "\n"),
        ("\\r", "\r"),
        ("\\t", "\t"),
        ("\\b", "\b"),
        ("\\f", "\f"),
        ("\\\\", "\\"),
        ("\\/", "/"),
        ('\\"', '"'),
    ],
)
def test_escapes(escape, expected):
    value, _ = parse_string(f'"a{escape}b"', 0)
    assert value == f"a{expected}b"


def test_escaped_whitespace_is_dropped():
    value, _ = parse_string('"a\\   \n   b"', 0)
    assert value == "ab"


def test_raw_newline_kept():
    value, _ = parse_string('"line1\nline2"', 0)
    assert value == "line1\nline2"


def test_start_position_and_rest():
    text = 'xx"q"yy'
    value, pos = parse_string(text, 2)
    assert value == "q"
    assert text[pos:] == "yy"


def test_not_a_string():
    with pytest.raises(ParseError) as info:
        parse_string("abc", 0)
    assert info.value.pos == 0


def test_unterminated():
    with pytest.raises(ParseError):
        parse_string('"abc', 0)


def test_unknown_escape():
    with pytest.raises(ParseError) as info:
        parse_string('"a\\qb"', 0)
    assert info.value.remainder.startswith("\\q")