"""Variable scopes for Tickle.

A Scope is a stack of frames. Frame 0 holds the global variables; a new frame
is pushed for every procedure call. Besides its own variables a frame may hold
alias records that make a local name stand for a variable in another frame
(as `global` and `upvar` do). An alias is stored as a (frame index, name) pair,
resolved once when the link is made and read through on every access.
"""

from __future__ import annotations

from io import StringIO

from tickle.errors import TickleNameError, TickleRuntimeError
from tickle.types.value import Value


class Frame:
    """Bindings for one active call: local variables plus alias records."""

    __slots__ = ("vars", "aliases")

    def __init__(self):
        self.vars: dict[str, Value] = {}
        self.aliases: dict[str, tuple[int, str]] = {}

    def _write_vars(self, buffer: StringIO) -> None:
        buffer.write("{")
        first = True
        for k, v in self.vars.items():
            if not first:
                buffer.write(", ")
            buffer.write(f"{k}: {v!r}")
            first = False
        for k, (level, target) in self.aliases.items():
            if not first:
                buffer.write(", ")
            buffer.write(f"{k} -> #{level}:{target}")
            first = False
        buffer.write("}")

    def __repr__(self) -> str:
        with StringIO() as buffer:
            self._write_vars(buffer)
            return buffer.getvalue()


class Scope:
    """Stack of variable frames with alias support."""

    __slots__ = ("frames",)

    def __init__(self):
        self.frames: list[Frame] = [Frame()]

    # --- Frame stack ---
    @property
    def depth(self) -> int:
        """Number of frames, including the global frame."""
        return len(self.frames)

    @property
    def level(self) -> int:
        """Index of the current frame (0 at global level)."""
        return len(self.frames) - 1

    @property
    def current(self) -> Frame:
        return self.frames[-1]

    def push_frame(self) -> None:
        self.frames.append(Frame())

    def pop_frame(self) -> None:
        if len(self.frames) == 1:
            raise TickleRuntimeError("can't pop the global frame")
        self.frames.pop()

    def resolve_level(self, spec: str) -> int | None:
        """Turn an upvar-style level ("1", "#0") into a frame index.

        Relative levels count up from the current frame. Returns None when the
        text is not a level at all.
        """
        spec = spec.strip()
        absolute = spec.startswith("#")
        digits = spec[1:] if absolute else spec
        if not digits.isdigit() or not digits.isascii():
            return None
        n = int(digits)
        return n if absolute else self.level - n

    # --- Variable access ---
    def _target(self, name: str) -> tuple[Frame, str]:
        frame = self.frames[-1]
        alias = frame.aliases.get(name)
        if alias is not None:
            index, target = alias
            return self.frames[index], target
        return frame, name

    def get(self, name: str) -> Value | None:
        frame, target = self._target(name)
        return frame.vars.get(target)

    def set(self, name: str, value: Value) -> None:
        frame, target = self._target(name)
        frame.vars[target] = value

    def unset(self, name: str) -> None:
        frame, target = self._target(name)
        frame.vars.pop(target, None)

    def exists(self, name: str) -> bool:
        return self.get(name) is not None

    def names(self) -> list[str]:
        """Names visible in the current frame: locals first, then aliases."""
        frame = self.frames[-1]
        return list(frame.vars) + [name for name in frame.aliases if name not in frame.vars]

    def link(self, name: str, target_frame_index: int, target_name: str) -> None:
        """Make `name` in the current frame an alias for a variable in another frame."""
        if not 0 <= target_frame_index < len(self.frames):
            raise TickleNameError(f'bad level "{target_frame_index}"')

        # Resolve through an existing alias now, so aliases never form chains.
        target_frame = self.frames[target_frame_index]
        index, target = target_frame.aliases.get(target_name, (target_frame_index, target_name))

        current = self.frames[-1]
        if index == len(self.frames) - 1 and target == name:
            raise TickleNameError("can't upvar from variable to itself")
        if name in current.vars:
            raise TickleNameError(f'variable "{name}" already exists')
        current.aliases[name] = (index, target)

    def __repr__(self) -> str:
        return "<Scope " + " -> ".join(repr(f) for f in self.frames) + ">"
