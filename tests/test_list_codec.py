import pytest
from hypothesis import given, strategies as st

from tickle.errors import TickleSyntaxError
from tickle.reader.backslash import backslash_subst
from tickle.reader.list_codec import format_element, format_list, parse_list
from tickle.types.value import Value


def strings(values):
    return [v.as_string() for v in values]

# -----------------------------------------------------
# Parsing
# -----------------------------------------------------

@pytest.mark.parametrize("text,expected", [
    ("", []),
    ("   ", []),
    ("a", ["a"]),
    ("a b c", ["a", "b", "c"]),
    ("  a \t b\n c  ", ["a", "b", "c"]),
    ("a {b c} d", ["a", "b c", "d"]),
    ("{a {b c}} d", ["a {b c}", "d"]),
    ("{} x", ["", "x"]),
    ('"a b" c', ["a b", "c"]),
    ('"a\\tb"', ["a\tb"]),
    ("{a\\tb}", ["a\\tb"]),
    ("a\\ b c", ["a b", "c"]),
    ("\\{ x", ["{", "x"]),
    ("a\\x41", ["aA"]),
    ("\\u00e9", ["é"]),
    ("\\101", ["A"]),
])
def test_parse_list(text, expected):
    assert strings(parse_list(text)) == expected


@pytest.mark.parametrize("text,message", [
    ("{a b", "unmatched open brace in list"),
    ('"a b', "unmatched open quote in list"),
    ("{a}b c", 'list element in braces followed by "b" instead of space'),
    ('"a"bc d', 'list element in quotes followed by "bc" instead of space'),
    ("a\\", "trailing backslash in list"),
])
def test_parse_list_errors(text, message):
    with pytest.raises(TickleSyntaxError) as exc:
        parse_list(text)
    assert str(exc.value) == message

# -----------------------------------------------------
# Formatting
# -----------------------------------------------------

@pytest.mark.parametrize("element,expected", [
    ("abc", "abc"),
    ("", "{}"),
    ("a b", "{a b}"),
    ("a{b}c", "{a{b}c}"),
    ("#x", "{#x}"),
    ("a$b", "{a$b}"),
    ("a}b", "a\\}b"),
    ("{", "\\{"),
    ("a\\", "a\\\\"),
])
def test_format_element(element, expected):
    assert format_element(element) == expected


def test_format_list():
    assert format_list([Value("a"), Value("b c"), Value("")]) == "a {b c} {}"
    assert format_list(["x", "y"]) == "x y"
    assert format_list([]) == ""


def test_format_escapes_control_characters_when_braces_cannot_be_used():
    text = format_element("}\n")
    assert text == "\\}\\n"
    assert strings(parse_list(text)) == ["}\n"]

# -----------------------------------------------------
# Backslash sequences
# -----------------------------------------------------

@pytest.mark.parametrize("text,expected", [
    ("\\n", ("\n", 2)),
    ("\\t", ("\t", 2)),
    ("\\\\", ("\\", 2)),
    ("\\q", ("q", 2)),
    ("\\x4a", ("J", 4)),
    ("\\xg", ("x", 2)),
    ("\\\n   z", (" ", 5)),
    ("\\", ("\\", 1)),
])
def test_backslash_subst(text, expected):
    assert backslash_subst(text, 0) == expected

# -----------------------------------------------------
# Round trip
# -----------------------------------------------------

element_strat = st.text(
    alphabet=st.sampled_from(list("ab #{}[]$;\"\\ \t\n")) | st.characters(max_codepoint=0x2ff),
    max_size=8,
)


@given(st.lists(element_strat, max_size=6))
def test_format_then_parse_round_trips(elements):
    assert strings(parse_list(format_list(elements))) == elements


@given(st.lists(st.lists(element_strat, max_size=3), max_size=3))
def test_nested_lists_round_trip(nested):
    outer = format_list(format_list(inner) for inner in nested)
    parsed = [strings(parse_list(item.as_string())) for item in parse_list(outer)]
    assert parsed == nested
