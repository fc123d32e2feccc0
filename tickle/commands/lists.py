"""List commands: list, llength, lindex, lappend and join."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from tickle.errors import TickleTypeError
from tickle.types.signal import ControlSignal, Ok
from tickle.types.value import EMPTY, Value, parse_int

if TYPE_CHECKING:
    from tickle.interpreter import Interp

_END_RE = re.compile(r"end(?:([+-])([0-9]+))?\Z", re.ASCII)


def resolve_index(index: Value, length: int) -> int:
    """Turn an index (integer, "end", "end-N" or "end+N") into a position.

    The result may be out of range; callers decide what that means.
    """
    text = index.as_string().strip()
    m = _END_RE.match(text)
    if m is not None:
        sign, digits = m.groups()
        offset = int(digits) if digits else 0
        return length - 1 + (offset if sign == "+" else -offset)
    n = parse_int(text)
    if n is None:
        raise TickleTypeError(
            f'bad index "{text}": must be integer?[+-]integer? or end?[+-]integer?'
        )
    return n


def list_command(interp: Interp, argv: list[Value]) -> ControlSignal:
    return Ok(Value.from_list(argv[1:]))


def llength_command(interp: Interp, argv: list[Value]) -> ControlSignal:
    return Ok(Value(len(argv[1].as_list())))


def lindex_command(interp: Interp, argv: list[Value]) -> ControlSignal:
    """lindex list ?index ...?

    Each index selects into the element chosen by the previous one; any index
    outside its list gives the empty string.
    """
    value = argv[1]
    for index in argv[2:]:
        items = value.as_list()
        i = resolve_index(index, len(items))
        if not 0 <= i < len(items):
            return Ok(EMPTY)
        value = items[i]
    return Ok(value)


def lappend_command(interp: Interp, argv: list[Value]) -> ControlSignal:
    name = argv[1].as_string()
    current = interp.scope.get(name)
    items = current.as_list() if current is not None else []
    items.extend(argv[2:])
    value = Value.from_list(items)
    interp.scope.set(name, value)
    return Ok(value)


def join_command(interp: Interp, argv: list[Value]) -> ControlSignal:
    separator = argv[2].as_string() if len(argv) == 3 else " "
    return Ok(Value(separator.join(v.as_string() for v in argv[1].as_list())))
