"""Commands that reach the host: puts, source and exit."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from tickle.types.signal import ControlSignal, Error, Ok, Return
from tickle.types.value import Value

if TYPE_CHECKING:
    from tickle.interpreter import Interp

logger = logging.getLogger(__name__)

PUTS_USAGE = "?-nonewline? ?channelId? string"


def puts_command(interp: Interp, argv: list[Value]) -> ControlSignal:
    """puts ?-nonewline? ?channelId? string"""
    args = [v.as_string() for v in argv[1:]]
    newline = True
    if len(args) > 1 and args[0] == "-nonewline":
        newline = False
        args = args[1:]

    match args:
        case [text]:
            channel = "stdout"
        case [channel, text]:
            pass
        case _:
            return Error(f'wrong # args: should be "puts {PUTS_USAGE}"', kind="ArgumentError")

    if channel == "stdout":
        stream = interp.stdout
    elif channel == "stderr":
        stream = interp.stderr
    else:
        return Error(f'can not find channel named "{channel}"', kind="NameError")
    stream.write(text + "\n" if newline else text)
    return Ok()


def source_command(interp: Interp, argv: list[Value]) -> ControlSignal:
    """Evaluate the named file as a script; a return ends it early."""
    path = Path(argv[1].as_string())
    try:
        script = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        return Error(f'couldn\'t read file "{path}": {getattr(exc, "strerror", None) or exc}')
    logger.debug("sourcing %s", path)
    result = interp.eval(script)
    if isinstance(result, Return):
        return Ok(result.value)
    return result


def exit_command(interp: Interp, argv: list[Value]) -> ControlSignal:
    """exit ?returnCode?; leaves the host process through SystemExit."""
    code = argv[1].as_int() if len(argv) == 2 else 0
    logger.debug("exit %d", code)
    raise SystemExit(code)
