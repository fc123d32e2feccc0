from __future__ import annotations

import logging
import sys
import time
from typing import Any, Iterator, TextIO

from tickle.config import InterpConfig
from tickle.errors import TickleError
from tickle.evaluation.expr import expr as evaluate_expr
from tickle.reader.parser import CommandSub, Literal, ParsedCommand, Parser, VariableRef, Word
from tickle.types.command import CommandSpec, CommandTable, Handler, check_args
from tickle.types.scope import Scope
from tickle.types.signal import ControlSignal, Error, Ok, Return
from tickle.types.value import Value

logger = logging.getLogger(__name__)

_MAX_TRAIL_TEXT = 150


def _trail_text(text: str) -> str:
    if len(text) > _MAX_TRAIL_TEXT:
        return text[:_MAX_TRAIL_TEXT] + "..."
    return text


class Interp:
    """
    Evaluates Tickle scripts: splits them into commands, substitutes each
    word and dispatches the resulting argument vector through the command
    table. Owns one Scope and one CommandTable; not safe for concurrent use.
    """

    def __init__(
        self,
        config: InterpConfig | None = None,
        *,
        builtins: bool = True,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ):
        self.config: InterpConfig = config if config is not None else InterpConfig()
        self.scope: Scope = Scope()
        self.commands: CommandTable = CommandTable()
        # Free-form storage for extensions (the test harness keeps its tallies here).
        self.context: dict[str, Any] = {}
        self._stdout = stdout
        self._stderr = stderr

        self._nesting = 0
        self._command_count = 0
        self._deadline: float | None = None

        if builtins:
            # Lazy import to avoid circular imports
            from tickle.commands import register
            register(self)

    # --- Host streams (resolved late so redirected sys streams are honoured) ---
    @property
    def stdout(self) -> TextIO:
        return self._stdout if self._stdout is not None else sys.stdout

    @stdout.setter
    def stdout(self, stream: TextIO | None) -> None:
        self._stdout = stream

    @property
    def stderr(self) -> TextIO:
        return self._stderr if self._stderr is not None else sys.stderr

    @stderr.setter
    def stderr(self, stream: TextIO | None) -> None:
        self._stderr = stream

    # --- Host API ---
    def eval(self, script: str | Value) -> ControlSignal:
        """Evaluate a script and return the signal of its last command."""
        text = script.as_string() if isinstance(script, Value) else script
        commands = Parser(text).parse_commands()
        if self._nesting > 0:
            return self._run(commands)

        self._command_count = 0
        limit = self.config.time_limit
        self._deadline = time.monotonic() + limit if limit > 0 else None
        try:
            return self._run(commands)
        except RecursionError:
            logger.warning("host recursion limit reached while evaluating a script")
            return Error("too many nested evaluations", kind="RuntimeError")

    def expr(self, text: str | Value) -> ControlSignal:
        """Evaluate expression text; Ok(value) or Error."""
        return evaluate_expr(self, text.as_string() if isinstance(text, Value) else text)

    def set_var(self, name: str, value: Value | str | int | float | bool | list | tuple) -> Value:
        value = value if isinstance(value, Value) else Value(value)
        self.scope.set(name, value)
        return value

    def get_var(self, name: str) -> Value | None:
        return self.scope.get(name)

    def register_command(
        self, name: str, min_args: int, max_args: int, usage: str, handler: Handler
    ) -> CommandSpec:
        return self.commands.register(name, min_args, max_args, usage, handler)

    check_args = staticmethod(check_args)

    # --- Dispatch ---
    def dispatch(self, argv: list[Value]) -> ControlSignal:
        """Invoke the command named by argv[0] with the whole argument vector."""
        self._command_count += 1
        limit = self.config.command_limit
        if limit and self._command_count > limit:
            logger.warning("command limit of %d exceeded", limit)
            return Error("command limit exceeded", kind="RuntimeError")
        if self._deadline is not None and time.monotonic() > self._deadline:
            logger.warning("time limit of %ss exceeded", self.config.time_limit)
            return Error("time limit exceeded", kind="RuntimeError")

        name = argv[0].as_string()
        spec = self.commands.lookup(name)
        if spec is None:
            return Error(f'invalid command name "{name}"', kind="NameError")
        checked = check_args(1, argv, spec.min_args, spec.max_args, spec.usage)
        if not checked.is_ok:
            return checked
        try:
            return spec.handler(self, argv)
        except TickleError as exc:
            return Error.from_exception(exc)

    def _run(self, commands: Iterator[ParsedCommand]) -> ControlSignal:
        """Run commands in order, stopping at the first non-Ok signal."""
        if self._nesting >= self.config.max_nesting:
            logger.warning("nesting limit of %d reached", self.config.max_nesting)
            return Error("too many nested evaluations", kind="RuntimeError")

        self._nesting += 1
        try:
            result: ControlSignal = Ok()
            while True:
                try:
                    command = next(commands, None)
                except TickleError as exc:
                    return Error.from_exception(exc)
                if command is None:
                    return result
                result = self._execute(command)
                if not isinstance(result, Ok):
                    return result
        finally:
            self._nesting -= 1

    def _execute(self, command: ParsedCommand) -> ControlSignal:
        argv: list[Value] = []
        for word in command.words:
            result = self.substitute_word(word)
            if not isinstance(result, Ok):
                return self._annotate(result, command)
            argv.append(result.value)
        if not argv:
            return Ok()
        return self._annotate(self.dispatch(argv), command)

    @staticmethod
    def _annotate(result: ControlSignal, command: ParsedCommand) -> ControlSignal:
        if not isinstance(result, Error):
            return result
        lead = "    invoked from within" if result.trail else "    while executing"
        return result.with_trail(f'{lead}\n"{_trail_text(command.text)}"')

    # --- Substitution ---
    def substitute_word(self, word: Word) -> ControlSignal:
        """Substitute one parsed word into a Value.

        A word made of a single substitution passes the substituted Value
        through untouched, keeping whatever reading it has cached.
        """
        if len(word) == 1:
            return self._substitute_part(word[0])
        pieces: list[str] = []
        for part in word:
            result = self._substitute_part(part)
            if not isinstance(result, Ok):
                return result
            pieces.append(result.value.as_string())
        return Ok(Value("".join(pieces)))

    def _substitute_part(self, part: Literal | VariableRef | CommandSub) -> ControlSignal:
        match part:
            case Literal(text):
                return Ok(Value(text))

            case VariableRef(name, index):
                if index is not None:
                    result = self.substitute_word(index)
                    if not isinstance(result, Ok):
                        return result
                    name = f"{name}({result.value.as_string()})"
                value = self.scope.get(name)
                if value is None:
                    return Error(f'can\'t read "{name}": no such variable', kind="NameError")
                return Ok(value)

            case CommandSub(commands):
                result = self._run(iter(commands))
                if isinstance(result, Return):
                    return Ok(result.value)
                return result

        raise TypeError(f"not a word part: {part!r}")

    def __repr__(self) -> str:
        return f"<Interp commands={len(self.commands)} level={self.scope.level}>"
