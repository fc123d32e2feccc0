"""Script values for Tickle.

Every Value is, semantically, a string. Numeric, boolean and list readings are
computed on demand from the canonical string and cached in a single slot, so a
value that looks like a number behaves like one in numeric contexts and as
plain text everywhere else. Values are never changed after construction; the
cache only ever holds a reading that is consistent with the string.
"""

from __future__ import annotations

import functools
import math
import re
from typing import Iterable, Union

from tickle.errors import TickleRuntimeError, TickleTypeError

Primitive = Union[str, int, float, bool, "Value", list, tuple]

_INT_RE = re.compile(
    r"\s*([+-]?)(0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+|[0-9]+)\s*\Z", re.ASCII
)
_FLOAT_RE = re.compile(
    r"\s*[+-]?(?:[0-9]+\.?[0-9]*(?:[eE][+-]?[0-9]+)?|\.[0-9]+(?:[eE][+-]?[0-9]+)?"
    r"|inf(?:inity)?|nan)\s*\Z",
    re.ASCII | re.IGNORECASE,
)

TRUE_WORDS = frozenset({"true", "yes", "on"})
FALSE_WORDS = frozenset({"false", "no", "off"})


def parse_int(text: str) -> int | None:
    """Parse an integer literal (decimal, 0x, 0o, 0b); None if it is not one."""
    m = _INT_RE.match(text)
    if m is None:
        return None
    sign, digits = m.groups()
    try:
        if len(digits) > 2 and digits[1] in "xXoObB":
            n = int(digits, 0)
        else:
            n = int(digits, 10)
    except ValueError:
        # Past the interpreter's int/str conversion limit.
        raise TickleRuntimeError("integer value too large to represent") from None
    return -n if sign == "-" else n


def parse_float(text: str) -> float | None:
    if _FLOAT_RE.match(text) is None:
        return None
    return float(text.strip())


def format_float(f: float) -> str:
    if math.isnan(f):
        return "NaN"
    if math.isinf(f):
        return "Inf" if f > 0 else "-Inf"
    return repr(f)


@functools.total_ordering
class Value:
    """An immutable script datum with a canonical string form."""

    __slots__ = ("_string", "_rep")

    def __init__(self, data: Primitive = ""):
        if isinstance(data, Value):
            self._string = data._string
            self._rep = data._rep
        elif isinstance(data, str):
            self._string = data
            self._rep = None
        elif isinstance(data, bool):
            self._string = "1" if data else "0"
            self._rep = data
        elif isinstance(data, int):
            try:
                self._string = str(data)
            except ValueError:
                raise TickleRuntimeError("integer value too large to represent") from None
            self._rep = data
        elif isinstance(data, float):
            self._string = format_float(data)
            self._rep = data
        elif isinstance(data, (list, tuple)):
            # The string form of a list is formatted lazily.
            self._string = None
            self._rep = tuple(item if isinstance(item, Value) else Value(item) for item in data)
        else:
            raise TypeError(f"cannot make a Value from {type(data).__name__}")

    @classmethod
    def from_list(cls, items: Iterable[Primitive]) -> Value:
        return cls(tuple(items))

    # --- Canonical form ---
    def as_string(self) -> str:
        if self._string is None:
            from tickle.reader.list_codec import format_list
            self._string = format_list(self._rep)
        return self._string

    def is_empty(self) -> bool:
        return self.as_string() == ""

    # --- Typed readings ---
    def as_int(self) -> int:
        rep = self._rep
        if type(rep) is int:
            return rep
        text = self.as_string()
        n = parse_int(text)
        if n is None:
            raise TickleTypeError(f'expected integer but got "{text}"')
        self._rep = n
        return n

    def as_float(self) -> float:
        n = self.as_number()
        if n is None:
            raise TickleTypeError(f'expected floating-point number but got "{self.as_string()}"')
        return float(n)

    def as_number(self) -> int | float | None:
        """Return the int or float reading of this value, or None.

        Integers are preferred, so "5" reads as 5 and never as 5.0.
        """
        rep = self._rep
        if type(rep) is int or type(rep) is float:
            return rep
        text = self.as_string()
        n = parse_int(text)
        if n is None:
            n = parse_float(text)
        if n is not None:
            self._rep = n
        return n

    def as_bool(self) -> bool:
        rep = self._rep
        if type(rep) is bool:
            return rep
        n = self.as_number()
        if n is not None:
            return n != 0
        text = self.as_string()
        word = text.strip().lower()
        if word in TRUE_WORDS:
            result = True
        elif word in FALSE_WORDS:
            result = False
        else:
            raise TickleTypeError(f'expected boolean value but got "{text}"')
        self._rep = result
        return result

    def as_list(self) -> list[Value]:
        """Return the elements of this value read as a list (a fresh list each call)."""
        rep = self._rep
        if isinstance(rep, tuple):
            return list(rep)
        from tickle.reader.list_codec import parse_list
        items = tuple(parse_list(self.as_string()))
        self._rep = items
        return list(items)

    # --- Comparison ---
    def _numeric_cache(self) -> int | float | None:
        rep = self._rep
        if type(rep) is int or type(rep) is float:
            return rep
        return None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        a, b = self._numeric_cache(), other._numeric_cache()
        if a is not None and b is not None:
            return a == b
        return self.as_string() == other.as_string()

    def __lt__(self, other: Value) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        a, b = self._numeric_cache(), other._numeric_cache()
        if a is not None and b is not None:
            return a < b
        return self.as_string() < other.as_string()

    # Equal values may have different strings ("1" and "1.0"), so no hash.
    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return self.as_string()

    def __repr__(self) -> str:
        return f"Value({self.as_string()!r})"


EMPTY = Value("")
