"""Variable commands: set, unset, incr, append, global and upvar."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tickle.errors import TickleNameError
from tickle.types.signal import ControlSignal, Error, Ok
from tickle.types.value import EMPTY, Value

if TYPE_CHECKING:
    from tickle.interpreter import Interp


def set_command(interp: Interp, argv: list[Value]) -> ControlSignal:
    name = argv[1].as_string()
    if len(argv) == 3:
        interp.scope.set(name, argv[2])
        return Ok(argv[2])
    value = interp.scope.get(name)
    if value is None:
        return Error(f'can\'t read "{name}": no such variable', kind="NameError")
    return Ok(value)


def unset_command(interp: Interp, argv: list[Value]) -> ControlSignal:
    # A missing variable is silently ignored.
    interp.scope.unset(argv[1].as_string())
    return Ok()


def incr_command(interp: Interp, argv: list[Value]) -> ControlSignal:
    """incr varName ?increment?; an unset variable counts from 0."""
    name = argv[1].as_string()
    increment = argv[2].as_int() if len(argv) == 3 else 1
    current = interp.scope.get(name)
    start = current.as_int() if current is not None else 0
    value = Value(start + increment)
    interp.scope.set(name, value)
    return Ok(value)


def append_command(interp: Interp, argv: list[Value]) -> ControlSignal:
    name = argv[1].as_string()
    current = interp.scope.get(name)
    if current is None:
        current = EMPTY
    elif len(argv) == 2:
        return Ok(current)
    value = Value(current.as_string() + "".join(v.as_string() for v in argv[2:]))
    interp.scope.set(name, value)
    return Ok(value)


# -------------------------------
# Links to other frames
# -------------------------------
def global_command(interp: Interp, argv: list[Value]) -> ControlSignal:
    """Link each named local to the global of the same name; no-op at level 0."""
    scope = interp.scope
    if scope.level == 0:
        return Ok()
    for v in argv[1:]:
        name = v.as_string()
        scope.link(name, 0, name)
    return Ok()


def upvar_command(interp: Interp, argv: list[Value]) -> ControlSignal:
    """upvar ?level? otherVar localVar ?otherVar localVar ...?

    The level is present exactly when the argument count after the command
    name is odd; it defaults to 1, the caller's frame.
    """
    scope = interp.scope
    pairs = argv[1:]
    level_text = "1"
    if len(pairs) % 2 == 1:
        level_text = pairs[0].as_string()
        pairs = pairs[1:]

    index = scope.resolve_level(level_text)
    if index is None or not 0 <= index <= scope.level:
        raise TickleNameError(f'bad level "{level_text}"')

    for i in range(0, len(pairs), 2):
        scope.link(pairs[i + 1].as_string(), index, pairs[i].as_string())
    return Ok()
