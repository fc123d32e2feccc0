"""Procedure and introspection commands: proc, rename and info."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from tickle.errors import TickleNameError
from tickle.reader.parser import is_complete
from tickle.types.command import Procedure, check_args
from tickle.types.signal import ControlSignal, Error, Ok
from tickle.types.value import Value

if TYPE_CHECKING:
    from tickle.interpreter import Interp

logger = logging.getLogger(__name__)


def proc_command(interp: Interp, argv: list[Value]) -> ControlSignal:
    """proc name args body

    Procedures check their own arguments, so they are registered with no
    bounds of their own.
    """
    name = argv[1].as_string()
    procedure = Procedure.define(argv[2], argv[3])
    interp.commands.register(name, 1, 0, "", procedure)
    logger.debug("defined procedure %s %s", name, argv[2])
    return Ok()


def rename_command(interp: Interp, argv: list[Value]) -> ControlSignal:
    interp.commands.rename(argv[1].as_string(), argv[2].as_string())
    return Ok()


# -------------------------------
# info
# -------------------------------
def _procedure(interp: Interp, name: Value) -> Procedure:
    spec = interp.commands.lookup(name.as_string())
    if spec is None or not spec.is_procedure:
        raise TickleNameError(f'"{name}" isn\'t a procedure')
    return spec.handler


def info_args(interp: Interp, argv: list[Value]) -> ControlSignal:
    checked = check_args(2, argv, 3, 3, "procname")
    if not checked.is_ok:
        return checked
    procedure = _procedure(interp, argv[2])
    return Ok(Value.from_list(name for name, _ in procedure.params))


def info_body(interp: Interp, argv: list[Value]) -> ControlSignal:
    checked = check_args(2, argv, 3, 3, "procname")
    if not checked.is_ok:
        return checked
    return Ok(_procedure(interp, argv[2]).body)


def info_commands(interp: Interp, argv: list[Value]) -> ControlSignal:
    checked = check_args(2, argv, 2, 2, "")
    if not checked.is_ok:
        return checked
    return Ok(Value.from_list(interp.commands.names()))


def info_complete(interp: Interp, argv: list[Value]) -> ControlSignal:
    checked = check_args(2, argv, 3, 3, "command")
    if not checked.is_ok:
        return checked
    return Ok(Value(is_complete(argv[2].as_string())))


def info_exists(interp: Interp, argv: list[Value]) -> ControlSignal:
    checked = check_args(2, argv, 3, 3, "varName")
    if not checked.is_ok:
        return checked
    return Ok(Value(interp.scope.exists(argv[2].as_string())))


def info_globals(interp: Interp, argv: list[Value]) -> ControlSignal:
    checked = check_args(2, argv, 2, 2, "")
    if not checked.is_ok:
        return checked
    return Ok(Value.from_list(interp.scope.frames[0].vars))


def info_level(interp: Interp, argv: list[Value]) -> ControlSignal:
    checked = check_args(2, argv, 2, 2, "")
    if not checked.is_ok:
        return checked
    return Ok(Value(interp.scope.level))


def info_procs(interp: Interp, argv: list[Value]) -> ControlSignal:
    checked = check_args(2, argv, 2, 2, "")
    if not checked.is_ok:
        return checked
    return Ok(Value.from_list(spec.name for spec in interp.commands if spec.is_procedure))


def info_vars(interp: Interp, argv: list[Value]) -> ControlSignal:
    checked = check_args(2, argv, 2, 2, "")
    if not checked.is_ok:
        return checked
    return Ok(Value.from_list(interp.scope.names()))


INFO_SUBCOMMANDS: dict[str, Callable[[Interp, list[Value]], ControlSignal]] = {
    "args": info_args,
    "body": info_body,
    "commands": info_commands,
    "complete": info_complete,
    "exists": info_exists,
    "globals": info_globals,
    "level": info_level,
    "procs": info_procs,
    "vars": info_vars,
}


def _subcommand_choices() -> str:
    names = list(INFO_SUBCOMMANDS)
    return ", ".join(names[:-1]) + ", or " + names[-1]


def info_command(interp: Interp, argv: list[Value]) -> ControlSignal:
    """info subcommand ?arg ...?; any unique prefix names a subcommand."""
    sub = argv[1].as_string()
    handler = INFO_SUBCOMMANDS.get(sub)
    if handler is None:
        matches = [name for name in INFO_SUBCOMMANDS if sub and name.startswith(sub)]
        if len(matches) != 1:
            return Error(
                f'unknown or ambiguous subcommand "{sub}": must be {_subcommand_choices()}'
            )
        handler = INFO_SUBCOMMANDS[matches[0]]
    return handler(interp, argv)
