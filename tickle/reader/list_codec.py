"""List codec: the textual list syntax used by Tickle.

A list is a sequence of elements separated by blanks. An element may be

- braced: ``{a b}`` taken verbatim, braces nest and must balance;
- quoted: ``"a b"`` with backslash sequences decoded;
- bare: ``abc`` with backslash sequences decoded.

``format_list`` always produces text that ``parse_list`` reads back as the
same elements, choosing the lightest of the three forms for each element.
"""

from __future__ import annotations

from typing import Iterable

from tickle.errors import TickleSyntaxError
from tickle.reader.backslash import LIST_WHITESPACE, backslash_subst, skip_braced
from tickle.types.value import Value

# Characters that stop an element from being written bare.
SPECIAL_CHARS = frozenset(LIST_WHITESPACE + '{}"\\$[];')

_ESCAPES: dict[str, str] = {
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
    "\v": "\\v",
    "\f": "\\f",
}


# -------------------------------
# Parsing
# -------------------------------
def _check_separator(text: str, pos: int, what: str) -> None:
    if pos < len(text) and text[pos] not in LIST_WHITESPACE:
        end = pos
        while end < len(text) and text[end] not in LIST_WHITESPACE:
            end += 1
        raise TickleSyntaxError(
            f'list element in {what} followed by "{text[pos:end]}" instead of space'
        )


def iter_list_elements(text: str) -> Iterable[str]:
    """Yield the element strings of a list, in order."""
    pos = 0
    n = len(text)
    while True:
        while pos < n and text[pos] in LIST_WHITESPACE:
            pos += 1
        if pos >= n:
            return

        c = text[pos]
        if c == "{":
            end = skip_braced(text, pos)
            if end is None:
                raise TickleSyntaxError("unmatched open brace in list")
            yield text[pos + 1:end]
            pos = end + 1
            _check_separator(text, pos, "braces")

        elif c == '"':
            pos += 1
            buf: list[str] = []
            while True:
                if pos >= n:
                    raise TickleSyntaxError("unmatched open quote in list")
                c = text[pos]
                if c == '"':
                    pos += 1
                    break
                if c == "\\":
                    s, pos = backslash_subst(text, pos)
                    buf.append(s)
                else:
                    buf.append(c)
                    pos += 1
            yield "".join(buf)
            _check_separator(text, pos, "quotes")

        else:
            buf = []
            while pos < n and text[pos] not in LIST_WHITESPACE:
                c = text[pos]
                if c == "\\":
                    if pos + 1 >= n:
                        raise TickleSyntaxError("trailing backslash in list")
                    s, pos = backslash_subst(text, pos)
                    buf.append(s)
                else:
                    buf.append(c)
                    pos += 1
            yield "".join(buf)


def parse_list(text: str) -> list[Value]:
    """Split list text into its elements; raises TickleSyntaxError if malformed."""
    return [Value(s) for s in iter_list_elements(text)]


# -------------------------------
# Formatting
# -------------------------------
def _can_brace(s: str) -> bool:
    """True if s survives being wrapped in braces: balanced, no dangling backslash."""
    depth = 0
    i = 0
    n = len(s)
    while i < n:
        c = s[i]
        if c == "\\":
            if i + 1 >= n:
                return False
            i += 2
            continue
        if c == "{":
            depth += 1
        elif c == "}":
            depth -= 1
            if depth < 0:
                return False
        i += 1
    return depth == 0


def _escape(s: str) -> str:
    out: list[str] = []
    for i, c in enumerate(s):
        if c in _ESCAPES:
            out.append(_ESCAPES[c])
        elif c in SPECIAL_CHARS or (i == 0 and c == "#"):
            out.append("\\" + c)
        else:
            out.append(c)
    return "".join(out)


def format_element(s: str) -> str:
    if not s:
        return "{}"
    if s[0] != "#" and not any(c in SPECIAL_CHARS for c in s):
        return s
    if _can_brace(s):
        return "{" + s + "}"
    return _escape(s)


def format_list(items: Iterable[Value | str]) -> str:
    """Format elements as list text."""
    return " ".join(
        format_element(item.as_string() if isinstance(item, Value) else item) for item in items
    )
