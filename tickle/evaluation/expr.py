"""Expression evaluator for `expr`, `if`, `while` and `for`.

The expression text is first parsed into a small tree by precedence climbing,
then evaluated. Operands that need substitution ($var, [script], "quoted")
are kept as unevaluated words in the tree and substituted only when reached,
so `&&`, `||` and `?:` do not evaluate the branch they skip.

Type policy: two integers give integer arithmetic, any float gives floating
point, and non-numeric operands are only accepted by the equality operators.
"""

from __future__ import annotations

import functools
import math
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Union

from tickle.errors import (
    TickleError,
    TickleNameError,
    TickleRuntimeError,
    TickleSyntaxError,
    TickleTypeError,
)
from tickle.reader.backslash import LIST_WHITESPACE
from tickle.reader.parser import Literal, Parser, Word
from tickle.types.signal import ControlSignal, Error, Ok
from tickle.types.value import FALSE_WORDS, TRUE_WORDS, Value, parse_float, parse_int

if TYPE_CHECKING:
    from tickle.interpreter import Interp


# -------------------------------
# Expression tree
# -------------------------------
@dataclass(frozen=True, slots=True)
class Const:
    value: Value


@dataclass(frozen=True, slots=True)
class Subst:
    word: Word


@dataclass(frozen=True, slots=True)
class Unary:
    op: str
    operand: Node


@dataclass(frozen=True, slots=True)
class Binary:
    op: str
    left: Node
    right: Node


@dataclass(frozen=True, slots=True)
class Ternary:
    condition: Node
    if_true: Node
    if_false: Node


@dataclass(frozen=True, slots=True)
class Call:
    name: str
    args: tuple[Node, ...]


Node = Union[Const, Subst, Unary, Binary, Ternary, Call]

BINARY_PRECEDENCE: dict[str, int] = {
    "||": 1,
    "&&": 2,
    "|": 3,
    "^": 4,
    "&": 5,
    "eq": 6,
    "ne": 6,
    "in": 6,
    "ni": 6,
    "==": 7,
    "!=": 7,
    "<": 8,
    ">": 8,
    "<=": 8,
    ">=": 8,
    "<<": 9,
    ">>": 9,
    "+": 10,
    "-": 10,
    "*": 11,
    "/": 11,
    "%": 11,
    "**": 12,
}
RIGHT_ASSOCIATIVE = frozenset({"**"})
UNARY_OPERATORS = frozenset({"-", "+", "!", "~"})
WORD_OPERATORS = frozenset({"eq", "ne", "in", "ni"})

# Longest first, so "**" wins over "*".
_SYMBOL_OPERATORS = (
    "**", "<<", ">>", "<=", ">=", "==", "!=", "&&", "||",
    "+", "-", "*", "/", "%", "<", ">", "&", "^", "|", "!", "~",
    "?", ":", "(", ")", ",",
)

_NUMBER_RE = re.compile(
    r"0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
)
_WORD_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


# -------------------------------
# Parsing
# -------------------------------
class _ExprParser:
    """Precedence-climbing parser over expression text."""

    def __init__(self, text: str):
        self.text = text
        self.cursor = Parser(text)
        self.kind = ""
        self.payload: object = None
        self._advance()

    def _fail(self, detail: str) -> TickleSyntaxError:
        return TickleSyntaxError(f'syntax error in expression "{self.text}": {detail}')

    # --- Tokens ---
    def _advance(self) -> None:
        cursor, text = self.cursor, self.text
        while not cursor.at_end() and cursor.peek() in LIST_WHITESPACE:
            cursor.pos += 1
        if cursor.at_end():
            self.kind, self.payload = "end", None
            return

        c = cursor.peek()
        if c.isdigit() or (c == "." and cursor.peek(1).isdigit()):
            m = _NUMBER_RE.match(text, cursor.pos)
            literal = m.group(0)
            number = parse_int(literal)
            if number is None:
                number = parse_float(literal)
            if number is None:
                raise self._fail(f'bad number "{literal}"')
            cursor.pos = m.end()
            self.kind, self.payload = "operand", Const(Value(number))
        elif c == "$":
            part = cursor.parse_variable()
            if isinstance(part, Literal):
                raise self._fail('"$" without a variable name')
            self.kind, self.payload = "operand", Subst((part,))
        elif c == "[":
            self.kind, self.payload = "operand", Subst((cursor.parse_bracket(),))
        elif c == '"':
            parts = cursor.parse_quoted()
            if all(isinstance(p, Literal) for p in parts):
                node: Node = Const(Value("".join(p.text for p in parts)))
            else:
                node = Subst(parts)
            self.kind, self.payload = "operand", node
        elif c == "{":
            self.kind, self.payload = "operand", Const(Value(cursor.parse_braced()))
        elif c.isalpha() or c == "_":
            m = _WORD_RE.match(text, cursor.pos)
            word = m.group(0)
            cursor.pos = m.end()
            self.kind, self.payload = ("op", word) if word in WORD_OPERATORS else ("word", word)
        else:
            for op in _SYMBOL_OPERATORS:
                if text.startswith(op, cursor.pos):
                    cursor.pos += len(op)
                    self.kind, self.payload = "op", op
                    return
            raise self._fail(f'unexpected character "{c}"')

    def _is_op(self, op: str) -> bool:
        return self.kind == "op" and self.payload == op

    def _expect(self, op: str) -> None:
        if not self._is_op(op):
            raise self._fail(f'expected "{op}"')
        self._advance()

    # --- Grammar ---
    def parse(self) -> Node:
        if self.kind == "end":
            raise TickleSyntaxError("empty expression")
        node = self._parse_ternary()
        if self.kind != "end":
            raise self._fail(f'unexpected "{self.payload}"' if self.kind in ("op", "word") else "extra tokens")
        return node

    def _parse_ternary(self) -> Node:
        condition = self._parse_binary(1)
        if not self._is_op("?"):
            return condition
        self._advance()
        if_true = self._parse_ternary()
        self._expect(":")
        if_false = self._parse_ternary()
        return Ternary(condition, if_true, if_false)

    def _parse_binary(self, min_prec: int) -> Node:
        left = self._parse_unary()
        while self.kind == "op":
            op = self.payload
            prec = BINARY_PRECEDENCE.get(op)
            if prec is None or prec < min_prec:
                break
            self._advance()
            right = self._parse_binary(prec if op in RIGHT_ASSOCIATIVE else prec + 1)
            left = Binary(op, left, right)
        return left

    def _parse_unary(self) -> Node:
        if self.kind == "op" and self.payload in UNARY_OPERATORS:
            op = self.payload
            self._advance()
            return Unary(op, self._parse_unary())
        return self._parse_primary()

    def _parse_primary(self) -> Node:
        kind, payload = self.kind, self.payload
        if kind == "operand":
            self._advance()
            return payload
        if kind == "op" and payload == "(":
            self._advance()
            node = self._parse_ternary()
            if not self._is_op(")"):
                raise self._fail("missing close parenthesis")
            self._advance()
            return node
        if kind == "word":
            self._advance()
            if self._is_op("("):
                return self._parse_call(payload)
            if payload.lower() in TRUE_WORDS or payload.lower() in FALSE_WORDS:
                return Const(Value(payload))
            raise self._fail(f'invalid bareword "{payload}"')
        if kind == "end":
            raise self._fail("missing operand")
        raise self._fail(f'unexpected "{payload}"')

    def _parse_call(self, name: str) -> Node:
        self._advance()
        args: list[Node] = []
        if not self._is_op(")"):
            while True:
                args.append(self._parse_ternary())
                if self._is_op(","):
                    self._advance()
                    continue
                break
        if not self._is_op(")"):
            raise self._fail("missing close parenthesis")
        self._advance()
        return Call(name, tuple(args))


@functools.lru_cache(maxsize=512)
def parse_expression(text: str) -> Node:
    """Parse expression text into a tree; raises TickleSyntaxError."""
    return _ExprParser(text).parse()


# -------------------------------
# Operand helpers
# -------------------------------
def _number(op: str, v: Value) -> int | float:
    n = v.as_number()
    if n is None:
        if v.is_empty():
            raise TickleTypeError(f'can\'t use empty string as operand of "{op}"')
        raise TickleTypeError(f'can\'t use non-numeric string "{v}" as operand of "{op}"')
    return n


def _integer(op: str, v: Value) -> int:
    n = _number(op, v)
    if isinstance(n, float):
        raise TickleTypeError(f'can\'t use floating-point value "{v}" as operand of "{op}"')
    return n


def _pair(op: str, a: Value, b: Value) -> tuple[int | float, int | float]:
    x, y = _number(op, a), _number(op, b)
    if isinstance(x, float) or isinstance(y, float):
        return float(x), float(y)
    return x, y


def _float_op(fn: Callable[..., float], *args: float) -> float:
    try:
        result = fn(*args)
    except (ValueError, ZeroDivisionError):
        raise TickleRuntimeError("domain error: argument not in valid range") from None
    except OverflowError:
        raise TickleRuntimeError("floating-point value too large to represent") from None
    if isinstance(result, complex):
        raise TickleRuntimeError("domain error: argument not in valid range")
    return result


# Largest integer result expr produces, in bits.
_MAX_INT_BITS = 4096


def _bounded(n: int) -> int:
    if n.bit_length() > _MAX_INT_BITS:
        raise TickleRuntimeError("integer value too large to represent")
    return n


def _int_power(x: int, y: int) -> int:
    if y >= 0:
        if abs(x) > 1 and (abs(x).bit_length() - 1) * y > _MAX_INT_BITS:
            raise TickleRuntimeError("exponent too large")
        return _bounded(x ** y)
    if x == 0:
        raise TickleRuntimeError("exponentiation of zero by negative power")
    if x == 1:
        return 1
    if x == -1:
        return 1 if y % 2 == 0 else -1
    return 0


def _equal(a: Value, b: Value) -> bool:
    x, y = a.as_number(), b.as_number()
    if x is not None and y is not None:
        return x == y
    return a.as_string() == b.as_string()


def _flag(b: bool) -> Value:
    return Value(1 if b else 0)


def apply_unary(op: str, v: Value) -> Value:
    if op == "!":
        return _flag(not v.as_bool())
    if op == "~":
        return Value(~_integer(op, v))
    n = _number(op, v)
    return Value(-n if op == "-" else n)


def apply_binary(op: str, a: Value, b: Value) -> Value:
    """Apply a non-short-circuit binary operator to two values."""
    match op:
        case "eq":
            return _flag(a.as_string() == b.as_string())
        case "ne":
            return _flag(a.as_string() != b.as_string())
        case "in":
            return _flag(any(item.as_string() == a.as_string() for item in b.as_list()))
        case "ni":
            return _flag(all(item.as_string() != a.as_string() for item in b.as_list()))
        case "==":
            return _flag(_equal(a, b))
        case "!=":
            return _flag(not _equal(a, b))

    if op in ("&", "|", "^", "<<", ">>", "%"):
        x, y = _integer(op, a), _integer(op, b)
        match op:
            case "&":
                return Value(x & y)
            case "|":
                return Value(x | y)
            case "^":
                return Value(x ^ y)
            case "%":
                if y == 0:
                    raise TickleRuntimeError("divide by zero")
                return Value(x % y)
        if y < 0:
            raise TickleRuntimeError("negative shift argument")
        if op == ">>":
            return Value(x >> y)
        if x and x.bit_length() + y > _MAX_INT_BITS:
            raise TickleRuntimeError("integer value too large to represent")
        return Value(x << y)

    x, y = _pair(op, a, b)
    match op:
        case "<":
            return _flag(x < y)
        case ">":
            return _flag(x > y)
        case "<=":
            return _flag(x <= y)
        case ">=":
            return _flag(x >= y)
        case "+":
            return Value(_bounded(x + y) if isinstance(x, int) else x + y)
        case "-":
            return Value(_bounded(x - y) if isinstance(x, int) else x - y)
        case "*":
            return Value(_bounded(x * y) if isinstance(x, int) else x * y)
        case "/":
            if y == 0:
                raise TickleRuntimeError("divide by zero")
            if isinstance(x, int) and isinstance(y, int):
                return Value(x // y)
            return Value(x / y)
        case "**":
            if isinstance(x, int) and isinstance(y, int):
                return Value(_int_power(x, y))
            return Value(_float_op(math.pow, x, y))
    raise TickleSyntaxError(f'unknown operator "{op}"')


# -------------------------------
# Math functions
# -------------------------------
def _round(x: int | float) -> int:
    if isinstance(x, int):
        return x
    if math.isinf(x) or math.isnan(x):
        raise TickleRuntimeError("integer value too large to represent")
    return int(math.floor(x + 0.5)) if x >= 0 else -int(math.floor(-x + 0.5))


def _to_int(x: int | float) -> int:
    if isinstance(x, int):
        return x
    if math.isinf(x) or math.isnan(x):
        raise TickleRuntimeError("integer value too large to represent")
    return int(x)


def _extreme(pick: Callable, *args: int | float) -> int | float:
    if any(isinstance(a, float) for a in args):
        return pick(float(a) for a in args)
    return pick(args)


# name -> (min args, max args (0 = any), implementation over numbers)
MATH_FUNCTIONS: dict[str, tuple[int, int, Callable[..., int | float]]] = {
    "abs": (1, 1, abs),
    "ceil": (1, 1, lambda x: _float_op(lambda v: float(math.ceil(v)), x)),
    "cos": (1, 1, lambda x: _float_op(math.cos, x)),
    "double": (1, 1, float),
    "exp": (1, 1, lambda x: _float_op(math.exp, x)),
    "floor": (1, 1, lambda x: _float_op(lambda v: float(math.floor(v)), x)),
    "fmod": (2, 2, lambda x, y: _float_op(math.fmod, x, y)),
    "hypot": (2, 2, lambda x, y: _float_op(math.hypot, x, y)),
    "int": (1, 1, _to_int),
    "log": (1, 1, lambda x: _float_op(math.log, x)),
    "log10": (1, 1, lambda x: _float_op(math.log10, x)),
    "max": (1, 0, lambda *xs: _extreme(max, *xs)),
    "min": (1, 0, lambda *xs: _extreme(min, *xs)),
    "pow": (2, 2, lambda x, y: _float_op(math.pow, x, y)),
    "round": (1, 1, _round),
    "sin": (1, 1, lambda x: _float_op(math.sin, x)),
    "sqrt": (1, 1, lambda x: _float_op(math.sqrt, x)),
    "tan": (1, 1, lambda x: _float_op(math.tan, x)),
}


def call_function(name: str, args: list[Value]) -> Value:
    entry = MATH_FUNCTIONS.get(name)
    if entry is None:
        raise TickleNameError(f'unknown math function "{name}"')
    min_args, max_args, fn = entry
    if len(args) < min_args:
        raise TickleSyntaxError(f'too few arguments for math function "{name}"')
    if max_args and len(args) > max_args:
        raise TickleSyntaxError(f'too many arguments for math function "{name}"')
    return Value(fn(*(_number(name, a) for a in args)))


# -------------------------------
# Evaluation
# -------------------------------
def evaluate(interp: Interp, node: Node) -> ControlSignal:
    """Evaluate a parsed expression; substitution errors come back as signals."""
    match node:
        case Const(value):
            return Ok(value)

        case Subst(word):
            return interp.substitute_word(word)

        case Unary(op, operand):
            result = evaluate(interp, operand)
            if not isinstance(result, Ok):
                return result
            return Ok(apply_unary(op, result.value))

        case Binary(("&&" | "||") as op, left, right):
            result = evaluate(interp, left)
            if not isinstance(result, Ok):
                return result
            decided = result.value.as_bool()
            if decided == (op == "||"):
                return Ok(_flag(decided))
            result = evaluate(interp, right)
            if not isinstance(result, Ok):
                return result
            return Ok(_flag(result.value.as_bool()))

        case Binary(op, left, right):
            lhs = evaluate(interp, left)
            if not isinstance(lhs, Ok):
                return lhs
            rhs = evaluate(interp, right)
            if not isinstance(rhs, Ok):
                return rhs
            return Ok(apply_binary(op, lhs.value, rhs.value))

        case Ternary(condition, if_true, if_false):
            result = evaluate(interp, condition)
            if not isinstance(result, Ok):
                return result
            return evaluate(interp, if_true if result.value.as_bool() else if_false)

        case Call(name, args):
            values: list[Value] = []
            for arg in args:
                result = evaluate(interp, arg)
                if not isinstance(result, Ok):
                    return result
                values.append(result.value)
            return Ok(call_function(name, values))

    raise TypeError(f"not an expression node: {node!r}")


def expr(interp: Interp, text: str) -> ControlSignal:
    """Parse and evaluate expression text, returning Ok(value) or Error."""
    try:
        return evaluate(interp, parse_expression(text))
    except TickleError as exc:
        return Error.from_exception(exc)
