"""Control signals: the outcome of every evaluation step.

A signal is a plain return value. Error, Break and Continue travel back up
through every evaluation layer until a construct that handles them is reached:
loops consume Break and Continue, procedure calls turn Return into Ok.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from tickle.errors import TickleError
from tickle.types.value import EMPTY, Value


class ControlSignal:
    __slots__ = ()

    @property
    def is_ok(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class Ok(ControlSignal):
    value: Value = field(default_factory=lambda: EMPTY)

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Error(ControlSignal):
    message: str
    trail: tuple[str, ...] = field(default=(), compare=False)
    kind: str = field(default="Error", compare=False)

    @classmethod
    def from_exception(cls, exc: TickleError) -> Error:
        return cls(exc.message, kind=exc.kind)

    def with_trail(self, line: str) -> Error:
        return replace(self, trail=self.trail + (line,))

    @property
    def error_info(self) -> str:
        """The message followed by the diagnostic trail, one entry per line."""
        return "\n".join((self.message, *self.trail))


@dataclass(frozen=True, slots=True)
class Return(ControlSignal):
    value: Value = field(default_factory=lambda: EMPTY)


@dataclass(frozen=True, slots=True)
class Break(ControlSignal):
    pass


@dataclass(frozen=True, slots=True)
class Continue(ControlSignal):
    pass


def ok(value: Value | str | int | float | bool | list | tuple = EMPTY) -> Ok:
    """Wrap a primitive or Value as an Ok signal."""
    return Ok(value if isinstance(value, Value) else Value(value))


def error(message: str, kind: str = "Error") -> Error:
    return Error(message, kind=kind)


# Result codes as reported by `catch`.
RESULT_CODES: dict[type, int] = {Ok: 0, Error: 1, Return: 2, Break: 3, Continue: 4}
