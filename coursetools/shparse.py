"""Tokenizer and parser for a small shell command language.

The language has words, redirections (``<``, ``>``, ``>>``), pipes (``|``),
command lists (``;``), background commands (``&``) and parenthesised blocks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, NamedTuple, Optional, Union

MAXARGS = 10
WHITESPACE = " \t\r\n\v"
SYMBOLS = "<|>&;()"
WORD = "word"


class ShellSyntaxError(ValueError):
    """Raised when a command line cannot be parsed."""

    def __init__(self, message: str, leftovers: Optional[str] = None) -> None:
        super().__init__(message if leftovers is None else f"{message}: leftovers: {leftovers}")
        self.leftovers = leftovers


class RedirMode(Enum):
    """How a redirected file is opened."""

    READ = "<"
    WRITE = ">"
    APPEND = ">>"

    @property
    def fd(self) -> int:
        """The descriptor the redirection replaces."""
        return 0 if self is RedirMode.READ else 1


@dataclass
class ExecCmd:
    """A program and its arguments."""

    argv: list[str] = field(default_factory=list)


@dataclass
class RedirCmd:
    """A command run with one descriptor redirected to a file."""

    cmd: "Cmd"
    file: str
    mode: RedirMode
    fd: int


@dataclass
class PipeCmd:
    """Two commands joined by a pipe."""

    left: "Cmd"
    right: "Cmd"


@dataclass
class ListCmd:
    """Two commands run one after the other."""

    left: "Cmd"
    right: "Cmd"


@dataclass
class BackCmd:
    """A command run in the background."""

    cmd: "Cmd"


Cmd = Union[ExecCmd, RedirCmd, PipeCmd, ListCmd, BackCmd]


class _Token(NamedTuple):
    kind: str
    text: str
    start: int


def _scan(text: str) -> Iterator[_Token]:
    pos = 0
    size = len(text)
    while True:
        while pos < size and text[pos] in WHITESPACE:
            pos += 1
        if pos >= size:
            return
        start = pos
        char = text[pos]
        if char in "|();&<":
            pos += 1
            kind = char
        elif char == ">":
            pos += 1
            if pos < size and text[pos] == ">":
                pos += 1
                kind = ">>"
            else:
                kind = ">"
        else:
            while pos < size and text[pos] not in WHITESPACE and text[pos] not in SYMBOLS:
                pos += 1
            kind = WORD
        yield _Token(kind, text[start:pos], start)


def tokenize(text: str) -> list[_Token]:
    """Split a command line into tokens of kind ``word`` or a symbol (``>>`` for append)."""
    return list(_scan(text))


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.tokens = tokenize(text)
        self.pos = 0

    def _current(self) -> Optional[_Token]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def peek(self, symbols: str) -> bool:
        token = self._current()
        return token is not None and token.text[0] in symbols

    def take(self) -> Optional[_Token]:
        token = self._current()
        if token is not None:
            self.pos += 1
        return token

    def parse(self) -> Cmd:
        cmd = self.parse_line()
        rest = self._current()
        if rest is not None:
            raise ShellSyntaxError("syntax", leftovers=self.text[rest.start:])
        return cmd

    def parse_line(self) -> Cmd:
        cmd = self.parse_pipe()
        while self.peek("&"):
            self.take()
            cmd = BackCmd(cmd)
        if self.peek(";"):
            self.take()
            cmd = ListCmd(cmd, self.parse_line())
        return cmd

    def parse_pipe(self) -> Cmd:
        cmd = self.parse_exec()
        if self.peek("|"):
            self.take()
            cmd = PipeCmd(cmd, self.parse_pipe())
        return cmd

    def parse_redirs(self, cmd: Cmd) -> Cmd:
        while self.peek("<>"):
            operator = self.take()
            target = self.take()
            if operator is None or target is None or target.kind != WORD:
                raise ShellSyntaxError("missing file for redirection")
            mode = RedirMode(operator.kind)
            cmd = RedirCmd(cmd, target.text, mode, mode.fd)
        return cmd

    def parse_block(self) -> Cmd:
        if not self.peek("("):
            raise ShellSyntaxError("parseblock")
        self.take()
        cmd = self.parse_line()
        if not self.peek(")"):
            raise ShellSyntaxError("syntax - missing )")
        self.take()
        return self.parse_redirs(cmd)

    def parse_exec(self) -> Cmd:
        if self.peek("("):
            return self.parse_block()
        exec_cmd = ExecCmd()
        cmd: Cmd = self.parse_redirs(exec_cmd)
        while not self.peek("|)&;"):
            token = self.take()
            if token is None:
                break
            if token.kind != WORD:
                raise ShellSyntaxError("syntax")
            exec_cmd.argv.append(token.text)
            if len(exec_cmd.argv) >= MAXARGS:
                raise ShellSyntaxError("too many args")
            cmd = self.parse_redirs(cmd)
        return cmd


def parse(text: str) -> Cmd:
    """Parse a command line into a command tree; raises ShellSyntaxError."""
    return _Parser(text).parse()