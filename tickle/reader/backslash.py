"""Backslash sequences shared by the script parser and the list codec."""

from __future__ import annotations

SIMPLE_ESCAPES: dict[str, str] = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
}

# Characters treated as blanks by the list codec and the script parser.
LIST_WHITESPACE = " \t\n\r\v\f"
INLINE_WHITESPACE = " \t\v\f\r"

_HEX = "0123456789abcdefABCDEF"
_OCT = "01234567"


def _take(text: str, pos: int, alphabet: str, limit: int) -> int:
    end = pos
    while end < len(text) and end - pos < limit and text[end] in alphabet:
        end += 1
    return end


def backslash_subst(text: str, pos: int) -> tuple[str, int]:
    """Decode the backslash sequence starting at text[pos] (which is a backslash).

    Returns the substituted text and the position just past the sequence. A
    backslash at the very end of the text stands for itself.
    """
    start = pos + 1
    if start >= len(text):
        return "\\", start
    c = text[start]
    if c in SIMPLE_ESCAPES:
        return SIMPLE_ESCAPES[c], start + 1
    if c == "\n":
        # Backslash-newline plus any leading blanks on the next line is one space.
        end = start + 1
        while end < len(text) and text[end] in " \t":
            end += 1
        return " ", end
    if c == "x":
        end = _take(text, start + 1, _HEX, 2)
        if end > start + 1:
            return chr(int(text[start + 1:end], 16)), end
        return "x", start + 1
    if c == "u":
        end = _take(text, start + 1, _HEX, 4)
        if end > start + 1:
            return chr(int(text[start + 1:end], 16)), end
        return "u", start + 1
    if c in _OCT:
        end = _take(text, start, _OCT, 3)
        return chr(int(text[start:end], 8) & 0xFF), end
    return c, start + 1


def skip_braced(text: str, pos: int) -> int | None:
    """Given text[pos] == '{', return the index of the matching close brace.

    A backslash hides the character after it from brace counting. Returns None
    when the braces never balance.
    """
    depth = 0
    i = pos
    n = len(text)
    while i < n:
        c = text[i]
        if c == "\\":
            i += 2
            continue
        if c == "{":
            depth += 1
        elif c == "}":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return None
