"""
  Script Reader

- Streaming, lazy parsing: commands are produced one at a time, so a script
  runs up to the first malformed command before the error is reported.
- Emits small immutable records instead of strings:

    - a command -> ParsedCommand(words, text)
    - a word -> tuple of parts
    - literal text -> Literal
    - $name, ${name}, $name(index) -> VariableRef
    - [script] -> CommandSub (the nested script, parsed eagerly)

No substitution happens here; the interpreter substitutes parts when it
evaluates a command.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Union

from tickle.errors import TickleIncompleteError, TickleSyntaxError
from tickle.reader.backslash import INLINE_WHITESPACE, LIST_WHITESPACE, backslash_subst, skip_braced


@dataclass(frozen=True, slots=True)
class Literal:
    text: str


@dataclass(frozen=True, slots=True)
class VariableRef:
    name: str
    index: tuple[Part, ...] | None = None


@dataclass(frozen=True, slots=True)
class CommandSub:
    commands: tuple[ParsedCommand, ...]


Part = Union[Literal, VariableRef, CommandSub]
Word = tuple[Part, ...]


@dataclass(frozen=True, slots=True)
class ParsedCommand:
    words: tuple[Word, ...]
    text: str


def _is_name_char(c: str) -> bool:
    return c.isascii() and (c.isalnum() or c == "_")


def _fold_brace_newlines(content: str) -> str:
    """Replace backslash-newline (plus following blanks) in braced text with a space."""
    if "\\\n" not in content:
        return content
    out: list[str] = []
    i = 0
    n = len(content)
    while i < n:
        c = content[i]
        if c == "\\" and i + 1 < n:
            if content[i + 1] == "\n":
                i += 2
                while i < n and content[i] in " \t":
                    i += 1
                out.append(" ")
                continue
            out.append(content[i:i + 2])
            i += 2
            continue
        out.append(c)
        i += 1
    return "".join(out)


class _PartBuilder:
    """Collects word parts, merging adjacent literal text."""

    __slots__ = ("parts", "_buf")

    def __init__(self):
        self.parts: list[Part] = []
        self._buf: list[str] = []

    def text(self, s: str) -> None:
        self._buf.append(s)

    def part(self, p: Part) -> None:
        if isinstance(p, Literal):
            self._buf.append(p.text)
            return
        self._flush()
        self.parts.append(p)

    def _flush(self) -> None:
        if self._buf:
            self.parts.append(Literal("".join(self._buf)))
            self._buf = []

    def build(self) -> tuple[Part, ...]:
        self._flush()
        return tuple(self.parts)


class Parser:
    """Character-level parser over one piece of script text."""

    __slots__ = ("text", "pos")

    def __init__(self, text: str, pos: int = 0):
        self.text = text
        self.pos = pos

    # --- Cursor helpers ---
    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self, offset: int = 0) -> str:
        i = self.pos + offset
        return self.text[i] if i < len(self.text) else ""

    def _skip_inline_whitespace(self) -> None:
        text, n = self.text, len(self.text)
        while self.pos < n:
            c = text[self.pos]
            if c in INLINE_WHITESPACE:
                self.pos += 1
            elif c == "\\" and self.pos + 1 < n and text[self.pos + 1] == "\n":
                self.pos += 2
            else:
                break

    def _skip_comment(self) -> None:
        text, n = self.text, len(self.text)
        while self.pos < n and text[self.pos] != "\n":
            self.pos += 2 if text[self.pos] == "\\" else 1

    def _at_word_end(self, bracketed: bool) -> bool:
        c = self.peek()
        return c == "" or c in LIST_WHITESPACE or c == ";" or (bracketed and c == "]")

    # --- Commands ---
    def next_command(self, bracketed: bool = False) -> ParsedCommand | None:
        """Parse the next command, or return None at the end of the script.

        In bracketed mode the script ends at an unmatched "]", which is left
        for the caller to consume.
        """
        while True:
            while not self.at_end() and (self.peek() in LIST_WHITESPACE or self.peek() == ";"):
                self.pos += 1
            if self.at_end():
                if bracketed:
                    raise TickleIncompleteError("missing close-bracket")
                return None
            c = self.peek()
            if bracketed and c == "]":
                return None
            if c == "#":
                self._skip_comment()
                continue
            break

        start = self.pos
        words: list[Word] = []
        while True:
            self._skip_inline_whitespace()
            if self.at_end():
                break
            c = self.peek()
            if c in "\n;":
                break
            if bracketed and c == "]":
                break
            words.append(self.parse_word(bracketed))
        text = self.text[start:self.pos].strip()
        if not self.at_end() and self.peek() in "\n;":
            self.pos += 1
        return ParsedCommand(tuple(words), text)

    def parse_commands(self, bracketed: bool = False) -> Iterator[ParsedCommand]:
        while (command := self.next_command(bracketed)) is not None:
            yield command

    # --- Words ---
    def parse_word(self, bracketed: bool = False) -> Word:
        c = self.peek()
        if c == "{":
            content = self.parse_braced()
            if not self._at_word_end(bracketed):
                raise TickleSyntaxError("extra characters after close-brace")
            return (Literal(content),)
        if c == '"':
            parts = self.parse_quoted()
            if not self._at_word_end(bracketed):
                raise TickleSyntaxError("extra characters after close-quote")
            return parts
        return self._parse_bare(bracketed)

    def parse_braced(self) -> str:
        """Read a {braced} group at the cursor and return its content."""
        end = skip_braced(self.text, self.pos)
        if end is None:
            raise TickleIncompleteError("missing close-brace")
        content = self.text[self.pos + 1:end]
        self.pos = end + 1
        return _fold_brace_newlines(content)

    def parse_quoted(self) -> Word:
        """Read a "quoted" group at the cursor, returning its parts."""
        self.pos += 1
        builder = _PartBuilder()
        while True:
            if self.at_end():
                raise TickleIncompleteError('missing "')
            c = self.peek()
            if c == '"':
                self.pos += 1
                return builder.build()
            self._parse_part(builder)

    def _parse_bare(self, bracketed: bool) -> Word:
        builder = _PartBuilder()
        while not self._at_word_end(bracketed):
            if self.peek() == "\\" and self.peek(1) == "\n":
                break
            self._parse_part(builder)
        return builder.build()

    def _parse_part(self, builder: _PartBuilder) -> None:
        c = self.peek()
        if c == "$":
            builder.part(self.parse_variable())
        elif c == "[":
            builder.part(self.parse_bracket())
        elif c == "\\":
            s, self.pos = backslash_subst(self.text, self.pos)
            builder.text(s)
        else:
            builder.text(c)
            self.pos += 1

    # --- Substitutions ---
    def parse_variable(self) -> Part:
        """Read a variable reference at a "$"; a lone "$" is literal text."""
        text, n = self.text, len(self.text)
        self.pos += 1
        if self.pos < n and text[self.pos] == "{":
            end = text.find("}", self.pos)
            if end < 0:
                raise TickleIncompleteError("missing close-brace for variable name")
            name = text[self.pos + 1:end]
            self.pos = end + 1
            return VariableRef(name)

        start = self.pos
        while self.pos < n:
            if _is_name_char(text[self.pos]):
                self.pos += 1
            elif text.startswith("::", self.pos):
                self.pos += 2
            else:
                break
        if self.pos == start:
            return Literal("$")
        name = text[start:self.pos]

        if self.pos < n and text[self.pos] == "(":
            self.pos += 1
            builder = _PartBuilder()
            while True:
                if self.at_end():
                    raise TickleIncompleteError("missing )")
                if self.peek() == ")":
                    self.pos += 1
                    break
                self._parse_part(builder)
            return VariableRef(name, builder.build())
        return VariableRef(name)

    def parse_bracket(self) -> CommandSub:
        """Read a [script] at the cursor; the nested script is parsed in full."""
        self.pos += 1
        commands = tuple(self.parse_commands(bracketed=True))
        # next_command stops at the closing bracket without consuming it.
        self.pos += 1
        return CommandSub(commands)


def parse_script(text: str) -> Iterator[ParsedCommand]:
    """Lazily yield the commands of a script."""
    return Parser(text).parse_commands()


def is_complete(text: str) -> bool:
    """True unless the script ends inside an open brace, quote or bracket."""
    try:
        for _ in parse_script(text):
            pass
    except TickleIncompleteError:
        return False
    except TickleSyntaxError:
        return True
    return True
