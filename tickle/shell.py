"""Interactive and file-driven front ends for an interpreter."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Sequence

from tickle.config import get_history_file
from tickle.types.signal import Break, ControlSignal, Continue, Error, Ok, Return
from tickle.types.value import Value

if TYPE_CHECKING:
    from tickle.interpreter import Interp

try:
    import readline
except ImportError:  # not available on every platform
    readline = None

logger = logging.getLogger(__name__)


def _stray(result: ControlSignal) -> str | None:
    match result:
        case Break():
            return 'invoked "break" outside of a loop'
        case Continue():
            return 'invoked "continue" outside of a loop'
    return None


def _load_history(path: Path | None) -> None:
    if readline is None or path is None:
        return
    try:
        readline.read_history_file(path)
    except OSError:
        logger.debug("no history file at %s", path)


def _save_history(path: Path | None) -> None:
    if readline is None or path is None:
        return
    try:
        readline.write_history_file(path)
    except OSError as exc:
        logger.warning("could not write history file %s: %s", path, exc)


def repl(interp: Interp, prompt: str = "% ") -> None:
    """Read-eval-print loop; returns on end of input or Ctrl-C.

    Non-empty results are printed to the interpreter's stdout, error messages
    as well. Entering `exit` usually ends the host process.
    """
    history = get_history_file()
    _load_history(history)
    out = interp.stdout
    try:
        while True:
            try:
                line = input(prompt)
            except KeyboardInterrupt:
                out.write("^C\n")
                break
            except EOFError:
                break

            line = line.strip()
            if not line:
                continue

            result = interp.eval(line)
            match result:
                case Ok(value) | Return(value):
                    if not value.is_empty():
                        out.write(f"{value}\n")
                case Error(message):
                    out.write(f"{message}\n")
                case _:
                    out.write(f"{_stray(result)}\n")
    finally:
        _save_history(history)


def script(interp: Interp, args: Sequence[str]) -> int:
    """Run the script file args[0], passing it the remaining args; returns an exit status.

    The script sees its own path in `arg0` and the remaining arguments as a
    list in `argv`.
    """
    arg0 = args[0]
    try:
        text = Path(arg0).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        interp.stderr.write(f"couldn't read file \"{arg0}\": {getattr(exc, 'strerror', None) or exc}\n")
        return 1

    interp.set_var("arg0", arg0)
    interp.set_var("argv", Value.from_list(args[1:]))

    result = interp.eval(text)
    match result:
        case Ok() | Return():
            return 0
        case Error():
            logger.debug("script %s failed:\n%s", arg0, result.error_info)
            interp.stderr.write(f"{result.message}\n")
            return 1
        case _:
            interp.stderr.write(f"{_stray(result)}\n")
            return 1
