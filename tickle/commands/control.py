"""Control-flow commands: if, while, for, foreach, break, continue, return,
error, catch, expr and assert_eq.

Bodies are evaluated through the interpreter and their signals inspected
here: loops consume Break and Continue, everything else that is not Ok is
handed back to the caller unchanged.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from tickle.types.signal import (
    RESULT_CODES,
    Break,
    ControlSignal,
    Continue,
    Error,
    Ok,
    Return,
)
from tickle.types.value import EMPTY, Value

if TYPE_CHECKING:
    from tickle.interpreter import Interp


def _test(interp: Interp, condition: Value) -> bool | ControlSignal:
    """Evaluate a loop or if condition as a boolean, or hand back the signal that stopped it."""
    result = interp.expr(condition)
    if not isinstance(result, Ok):
        return result
    return result.value.as_bool()


# -------------------------------
# if
# -------------------------------
def if_command(interp: Interp, argv: list[Value]) -> ControlSignal:
    """if expr1 ?then? body1 elseif expr2 ?then? body2 ... ?else? ?bodyN?"""
    i = 1
    while True:
        if i >= len(argv):
            return Error(
                f'wrong # args: no expression after "{argv[i - 1]}" argument',
                kind="ArgumentError",
            )
        truth = _test(interp, argv[i])
        if not isinstance(truth, bool):
            return truth
        i += 1
        if i < len(argv) and argv[i].as_string() == "then":
            i += 1
        if i >= len(argv):
            return Error(
                f'wrong # args: no script following after "{argv[i - 1]}" argument',
                kind="ArgumentError",
            )
        if truth:
            return interp.eval(argv[i])
        i += 1

        if i >= len(argv):
            return Ok()
        match argv[i].as_string():
            case "elseif":
                i += 1
            case "else":
                i += 1
                if i >= len(argv):
                    return Error(
                        'wrong # args: no script following after "else" argument',
                        kind="ArgumentError",
                    )
                return _else_body(interp, argv, i)
            case _:
                return _else_body(interp, argv, i)


def _else_body(interp: Interp, argv: list[Value], i: int) -> ControlSignal:
    if i != len(argv) - 1:
        return Error('wrong # args: extra words after "else" clause in "if" command',
                     kind="ArgumentError")
    return interp.eval(argv[i])


# -------------------------------
# Loops
# -------------------------------
def while_command(interp: Interp, argv: list[Value]) -> ControlSignal:
    test, body = argv[1], argv[2]
    while True:
        truth = _test(interp, test)
        if not isinstance(truth, bool):
            return truth
        if not truth:
            return Ok()
        result = interp.eval(body)
        match result:
            case Break():
                return Ok()
            case Ok() | Continue():
                continue
            case _:
                return result


def for_command(interp: Interp, argv: list[Value]) -> ControlSignal:
    start, test, step, body = argv[1:5]
    result = interp.eval(start)
    if not isinstance(result, Ok):
        return result
    while True:
        truth = _test(interp, test)
        if not isinstance(truth, bool):
            return truth
        if not truth:
            return Ok()
        result = interp.eval(body)
        match result:
            case Break():
                return Ok()
            case Ok() | Continue():
                pass
            case _:
                return result
        result = interp.eval(step)
        if not isinstance(result, Ok):
            return result


def foreach_command(interp: Interp, argv: list[Value]) -> ControlSignal:
    """foreach varList list body

    Walks the list varList-length items at a time; variables left over on the
    final pass are set to the empty string.
    """
    names = [v.as_string() for v in argv[1].as_list()]
    if not names:
        return Error("foreach varlist is empty")
    items = argv[2].as_list()
    body = argv[3]
    stride = len(names)

    for start in range(0, len(items), stride):
        for offset, name in enumerate(names):
            index = start + offset
            interp.scope.set(name, items[index] if index < len(items) else EMPTY)
        result = interp.eval(body)
        match result:
            case Break():
                break
            case Ok() | Continue():
                continue
            case _:
                return result
    return Ok()


def break_command(interp: Interp, argv: list[Value]) -> ControlSignal:
    return Break()


def continue_command(interp: Interp, argv: list[Value]) -> ControlSignal:
    return Continue()


# -------------------------------
# Results and errors
# -------------------------------
def return_command(interp: Interp, argv: list[Value]) -> ControlSignal:
    return Return(argv[1] if len(argv) == 2 else EMPTY)


def error_command(interp: Interp, argv: list[Value]) -> ControlSignal:
    return Error(argv[1].as_string())


def catch_command(interp: Interp, argv: list[Value]) -> ControlSignal:
    """catch script ?resultVarName?

    Returns the numeric code of the script's outcome (0 ok, 1 error,
    2 return, 3 break, 4 continue) and optionally stores its value or
    error message in resultVarName.
    """
    result = interp.eval(argv[1])
    match result:
        case Ok(value) | Return(value):
            outcome = value
        case Error(message):
            outcome = Value(message)
        case _:
            outcome = EMPTY
    if len(argv) == 3:
        interp.scope.set(argv[2].as_string(), outcome)
    return Ok(Value(RESULT_CODES[type(result)]))


def expr_command(interp: Interp, argv: list[Value]) -> ControlSignal:
    if len(argv) == 2:
        return interp.expr(argv[1])
    return interp.expr(" ".join(v.as_string() for v in argv[1:]))


def assert_eq_command(interp: Interp, argv: list[Value]) -> ControlSignal:
    received, expected = argv[1], argv[2]
    if received.as_string() == expected.as_string():
        return Ok()
    return Error(f'assertion failed: received "{received}", expected "{expected}"')
