"""A small grep supporting the ``^``, ``.``, ``*`` and ``$`` operators."""

from __future__ import annotations

import sys
from typing import Iterator, Optional, Sequence, TextIO

_BUF_SIZE = 1024


def _match_here(pattern: str, text: str) -> bool:
    """Search for ``pattern`` at the beginning of ``text``."""
    while True:
        if not pattern:
            return True
        if len(pattern) >= 2 and pattern[1] == "*":
            return _match_star(pattern[0], pattern[2:], text)
        if pattern == "$":
            return not text
        if text and (pattern[0] == "." or pattern[0] == text[0]):
            pattern, text = pattern[1:], text[1:]
            continue
        return False


def _match_star(char: str, pattern: str, text: str) -> bool:
    """Search for ``char*`` followed by ``pattern`` at the beginning of ``text``."""
    pos = 0
    while True:
        if _match_here(pattern, text[pos:]):
            return True
        if pos < len(text) and (text[pos] == char or char == "."):
            pos += 1
        else:
            return False


def match(pattern: str, text: str) -> bool:
    """Return whether ``pattern`` matches anywhere in ``text``."""
    if pattern.startswith("^"):
        return _match_here(pattern[1:], text)
    return any(_match_here(pattern, text[start:]) for start in range(len(text) + 1))


def grep_lines(pattern: str, stream: TextIO) -> Iterator[str]:
    """Yield the newline-terminated lines of ``stream`` that match ``pattern``.

    A final line without a newline is never reported, and reading stops once a
    line grows past the buffer without ending.
    """
    pending = ""
    while True:
        chunk = stream.read(_BUF_SIZE - len(pending) - 1)
        if not chunk:
            return
        pending += chunk
        *lines, pending = pending.split("\n")
        for line in lines:
            if match(pattern, line):
                yield line + "\n"


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Print the lines of the named files (or standard input) that match a pattern."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        sys.stderr.write("usage: grep pattern [file ...]\n")
        return 1
    pattern, paths = args[0], args[1:]

    if not paths:
        for line in grep_lines(pattern, sys.stdin):
            sys.stdout.write(line)
        return 0

    for path in paths:
        try:
            handle = open(path, encoding="latin-1", newline="")
        except OSError:
            sys.stdout.write(f"grep: cannot open {path}\n")
            return 1
        with handle:
            for line in grep_lines(pattern, handle):
                sys.stdout.write(line)
    return 0