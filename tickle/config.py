from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path


# Defaults
_DEFAULT_MAX_NESTING = 100
_DEFAULT_PROMPT = "% "


def int_from_env(var: str, default: int) -> int:
    raw = os.environ.get(var)
    if not raw or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        raise ValueError(f"{var} must be an integer, got {raw!r}") from None


def float_from_env(var: str, default: float) -> float:
    raw = os.environ.get(var)
    if not raw or not raw.strip():
        return default
    try:
        return float(raw.strip())
    except ValueError:
        raise ValueError(f"{var} must be a number, got {raw!r}") from None


def get_prompt() -> str:
    return os.environ.get('TICKLE_PROMPT', _DEFAULT_PROMPT)


def get_history_file() -> Path | None:
    raw = os.environ.get('TICKLE_HISTORY_FILE')
    return Path(raw).expanduser() if raw else None


@dataclass(frozen=True)
class InterpConfig:
    """Evaluation limits for one interpreter.

    max_nesting bounds nested script evaluations (procedure bodies, command
    substitutions, loop bodies). command_limit and time_limit bound a single
    top-level eval; 0 disables them.
    """
    max_nesting: int = _DEFAULT_MAX_NESTING
    command_limit: int = 0
    time_limit: float = 0.0

    @classmethod
    def from_env(cls) -> InterpConfig:
        return cls(
            max_nesting=int_from_env('TICKLE_MAX_NESTING', _DEFAULT_MAX_NESTING),
            command_limit=int_from_env('TICKLE_COMMAND_LIMIT', 0),
            time_limit=float_from_env('TICKLE_TIME_LIMIT', 0.0),
        )
