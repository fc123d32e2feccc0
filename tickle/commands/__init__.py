"""Registry of builtin commands.

Maps each command name to its argument bounds, usage text and handler. The
interpreter checks argument counts against these bounds before calling the
handler, so handlers only validate what the count alone cannot tell.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from tickle.commands.control import (
    assert_eq_command,
    break_command,
    catch_command,
    continue_command,
    error_command,
    expr_command,
    for_command,
    foreach_command,
    if_command,
    return_command,
    while_command,
)
from tickle.commands.lists import (
    join_command,
    lappend_command,
    lindex_command,
    list_command,
    llength_command,
)
from tickle.commands.procs import info_command, proc_command, rename_command
from tickle.commands.system import PUTS_USAGE, exit_command, puts_command, source_command
from tickle.commands.variables import (
    append_command,
    global_command,
    incr_command,
    set_command,
    unset_command,
    upvar_command,
)
from tickle.types.command import Handler

if TYPE_CHECKING:
    from tickle.interpreter import Interp

# name: (min_args, max_args, usage, handler); max_args 0 means unbounded.
BUILTIN_COMMANDS: dict[str, tuple[int, int, str, Handler]] = {
    "append": (2, 0, "varName ?value ...?", append_command),
    "assert_eq": (3, 3, "received expected", assert_eq_command),
    "break": (1, 1, "", break_command),
    "catch": (2, 3, "script ?resultVarName?", catch_command),
    "continue": (1, 1, "", continue_command),
    "error": (2, 2, "message", error_command),
    "exit": (1, 2, "?returnCode?", exit_command),
    "expr": (2, 0, "arg ?arg ...?", expr_command),
    "for": (5, 5, "start test next command", for_command),
    "foreach": (4, 4, "varList list body", foreach_command),
    "global": (1, 0, "?varName ...?", global_command),
    "if": (1, 0, "", if_command),
    "incr": (2, 3, "varName ?increment?", incr_command),
    "info": (2, 0, "subcommand ?arg ...?", info_command),
    "join": (2, 3, "list ?joinString?", join_command),
    "lappend": (2, 0, "varName ?value ...?", lappend_command),
    "lindex": (2, 0, "list ?index ...?", lindex_command),
    "list": (1, 0, "?arg ...?", list_command),
    "llength": (2, 2, "list", llength_command),
    "proc": (4, 4, "name args body", proc_command),
    "puts": (2, 4, PUTS_USAGE, puts_command),
    "rename": (3, 3, "oldName newName", rename_command),
    "return": (1, 2, "?value?", return_command),
    "set": (2, 3, "varName ?newValue?", set_command),
    "source": (2, 2, "fileName", source_command),
    "unset": (2, 2, "varName", unset_command),
    "upvar": (3, 0, "?level? otherVar localVar ?otherVar localVar ...?", upvar_command),
    "while": (3, 3, "test command", while_command),
}


def register(interp: Interp) -> None:
    """Register all builtin commands with the given interpreter."""
    for name, (min_args, max_args, usage, handler) in BUILTIN_COMMANDS.items():
        interp.register_command(name, min_args, max_args, usage, handler)
