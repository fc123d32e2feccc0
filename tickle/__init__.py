# Public API of the Tickle interpreter.
#
# A host creates an Interp, optionally registers its own commands, and
# evaluates scripts with Interp.eval. Every evaluation returns a control
# signal (Ok, Error, Return, Break or Continue) rather than raising.

from tickle.config import InterpConfig
from tickle.errors import TickleError
from tickle.interpreter import Interp
from tickle.reader.list_codec import format_list, parse_list
from tickle.types.command import check_args
from tickle.types.signal import Break, ControlSignal, Continue, Error, Ok, Return
from tickle.types.value import Value

__all__ = [
    "Break",
    "Continue",
    "ControlSignal",
    "Error",
    "Interp",
    "InterpConfig",
    "Ok",
    "Return",
    "TickleError",
    "Value",
    "check_args",
    "format_list",
    "parse_list",
]
