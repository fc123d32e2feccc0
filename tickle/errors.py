
class TickleError(Exception):
    """ Base class for all Tickle errors"""
    kind = "Error"

    @property
    def message(self) -> str:
        return str(self)

class TickleSyntaxError(TickleError):
    """ Raised when list, script or expression text is malformed"""
    kind = "SyntaxError"

class TickleIncompleteError(TickleSyntaxError):
    """ Raised when a brace, quote or bracket is never closed"""

class TickleNameError(TickleError):
    """ Raised for unknown commands and variables, or a bad alias target"""
    kind = "NameError"

class TickleArgumentError(TickleError):
    """ Raised when a command is called with the wrong number of arguments"""
    kind = "ArgumentError"

class TickleTypeError(TickleError):
    """ Raised when a value cannot be read as the type an operation needs"""
    kind = "TypeError"

class TickleRuntimeError(TickleError):
    """ Raised for division by zero and exceeded evaluation limits"""
    kind = "RuntimeError"
