"""Command table: name -> handler registry, argument checking and procedures.

A handler is any callable taking ``(interp, argv)`` and returning a
ControlSignal, where ``argv[0]`` is the command name as invoked. Native Python
functions and user-defined procedures are the two kinds of handler; both are
held in the same table and reached through the same dispatch path.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterator, Sequence

from tickle.errors import TickleNameError, TickleSyntaxError
from tickle.types.signal import ControlSignal, Error, Ok, Return
from tickle.types.value import Value

if TYPE_CHECKING:
    from tickle.interpreter import Interp

logger = logging.getLogger(__name__)

Handler = Callable[["Interp", list[Value]], ControlSignal]


def check_args(
    namec: int,
    argv: Sequence[Value],
    min_args: int,
    max_args: int,
    usage: str,
) -> Ok | Error:
    """Check that argv holds between min_args and max_args entries.

    argv[0] is the command name and is included in the count, so min_args is
    at least 1; max_args == 0 means there is no upper bound. The first namec
    entries of argv are printed as the command name in the error message,
    which lets two-word commands such as "info vars" report themselves.
    """
    if namec < 1 or min_args < 1 or not argv:
        raise ValueError("check_args needs namec >= 1, min_args >= 1 and a non-empty argv")

    if len(argv) < min_args or (max_args > 0 and len(argv) > max_args):
        name = " ".join(str(v) for v in argv[:namec])
        return Error(f'wrong # args: should be "{name} {usage}"', kind="ArgumentError")
    return Ok()


@dataclass(frozen=True)
class CommandSpec:
    name: str
    min_args: int
    max_args: int
    usage: str
    handler: Handler

    @property
    def is_procedure(self) -> bool:
        return isinstance(self.handler, Procedure)


class CommandTable:
    """Registry of commands keyed by name."""

    __slots__ = ("_commands",)

    def __init__(self):
        self._commands: dict[str, CommandSpec] = {}

    def register(
        self, name: str, min_args: int, max_args: int, usage: str, handler: Handler
    ) -> CommandSpec:
        """Insert or replace the command `name`."""
        spec = CommandSpec(name, min_args, max_args, usage, handler)
        self._commands[name] = spec
        return spec

    def lookup(self, name: str) -> CommandSpec | None:
        return self._commands.get(name)

    def remove(self, name: str) -> bool:
        return self._commands.pop(name, None) is not None

    def rename(self, old: str, new: str) -> None:
        """Rename a command; an empty new name deletes it."""
        spec = self._commands.get(old)
        if spec is None:
            raise TickleNameError(f'can\'t rename "{old}": command doesn\'t exist')
        if not new:
            del self._commands[old]
            logger.debug("deleted command %s", old)
            return
        if new in self._commands:
            raise TickleNameError(f'can\'t rename to "{new}": command already exists')
        del self._commands[old]
        self._commands[new] = CommandSpec(new, spec.min_args, spec.max_args, spec.usage, spec.handler)
        logger.debug("renamed command %s to %s", old, new)

    def names(self) -> list[str]:
        return list(self._commands)

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def __iter__(self) -> Iterator[CommandSpec]:
        return iter(list(self._commands.values()))

    def __len__(self) -> int:
        return len(self._commands)


# -------------------------------
# User-defined procedures
# -------------------------------
class Procedure:
    """A procedure defined by `proc`: parameter specs plus a body script.

    Each parameter is a (name, default) pair; default is None for required
    parameters. A final parameter called "args" collects any remaining
    arguments as a list.
    """

    __slots__ = ("params", "body")

    def __init__(self, params: list[tuple[str, Value | None]], body: Value):
        self.params = params
        self.body = body

    @classmethod
    def define(cls, arg_list: Value, body: Value) -> Procedure:
        """Build a procedure from `proc`'s argument list; raises on malformed specs."""
        params: list[tuple[str, Value | None]] = []
        for spec in arg_list.as_list():
            fields = spec.as_list()
            if not fields or fields[0].is_empty():
                raise TickleSyntaxError("argument with no name")
            if len(fields) > 2:
                raise TickleSyntaxError(
                    f'too many fields in argument specifier "{spec.as_string()}"'
                )
            default = fields[1] if len(fields) == 2 else None
            params.append((fields[0].as_string(), default))
        return cls(params, body)

    @property
    def has_varargs(self) -> bool:
        return bool(self.params) and self.params[-1][0] == "args"

    def usage(self, name: str) -> str:
        parts = [name]
        last = len(self.params) - 1
        for i, (param, default) in enumerate(self.params):
            if i == last and param == "args":
                parts.append("?arg ...?")
            elif default is not None:
                parts.append(f"?{param}?")
            else:
                parts.append(param)
        return " ".join(parts)

    def bind(self, argv: Sequence[Value]) -> list[tuple[str, Value]] | Error:
        """Match call arguments to parameters."""
        args = list(argv[1:])
        bindings: list[tuple[str, Value]] = []
        last = len(self.params) - 1
        for i, (param, default) in enumerate(self.params):
            if i == last and param == "args":
                bindings.append((param, Value.from_list(args)))
                args = []
            elif args:
                bindings.append((param, args.pop(0)))
            elif default is not None:
                bindings.append((param, default))
            else:
                return self._wrong_args(argv)
        if args:
            return self._wrong_args(argv)
        return bindings

    def _wrong_args(self, argv: Sequence[Value]) -> Error:
        return Error(
            f'wrong # args: should be "{self.usage(argv[0].as_string())}"', kind="ArgumentError"
        )

    def __call__(self, interp: Interp, argv: list[Value]) -> ControlSignal:
        bindings = self.bind(argv)
        if isinstance(bindings, Error):
            return bindings

        scope = interp.scope
        scope.push_frame()
        try:
            for name, value in bindings:
                scope.set(name, value)
            result = interp.eval(self.body)
        finally:
            scope.pop_frame()

        match result:
            case Return(value):
                return Ok(value)
            case Error():
                return result.with_trail(f'    (procedure "{argv[0]}")')
            case _:
                return result
