"""Small text tools: word counting, echo, cat and directory-entry name formatting."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import BinaryIO, Iterable, Optional, Sequence

DIRSIZ = 14
_BUF_SIZE = 512
_WHITESPACE = frozenset(b" \r\t\n\v\0")


@dataclass(frozen=True)
class WordCount:
    """Line, word and byte counts of some data."""

    lines: int
    words: int
    chars: int


def count(data: bytes) -> WordCount:
    """Count newlines, words and bytes; words are split by space, CR, tab, LF, VT and NUL."""
    lines = words = 0
    in_word = False
    for byte in data:
        if byte == 0x0A:
            lines += 1
        if byte in _WHITESPACE:
            in_word = False
        elif not in_word:
            words += 1
            in_word = True
    return WordCount(lines, words, len(data))


def echo_line(args: Sequence[str]) -> str:
    """Join arguments with spaces and end with a newline; nothing for no arguments."""
    return " ".join(args) + "\n" if args else ""


def cat_streams(streams: Iterable[BinaryIO], out: BinaryIO) -> None:
    """Copy each stream, in order, to ``out``."""
    for stream in streams:
        while True:
            chunk = stream.read(_BUF_SIZE)
            if not chunk:
                break
            out.write(chunk)


def fmtname(path: str) -> str:
    """Last path component, padded with blanks to the directory-entry width."""
    name = path[path.rfind("/") + 1 :]
    if len(name) >= DIRSIZ:
        return name
    return name.ljust(DIRSIZ)


def _args(argv: Optional[Sequence[str]]) -> list[str]:
    return list(sys.argv[1:] if argv is None else argv)


def wc_main(argv: Optional[Sequence[str]] = None) -> int:
    """Print line, word and byte counts for each named file or for standard input."""
    paths = _args(argv)
    if not paths:
        try:
            result = count(sys.stdin.buffer.read())
        except OSError:
            print("wc: read error")
            return 1
        print(f"{result.lines} {result.words} {result.chars} ")
        return 0
    for path in paths:
        try:
            handle = open(path, "rb")
        except OSError:
            print(f"wc: cannot open {path}")
            return 1
        with handle:
            try:
                result = count(handle.read())
            except OSError:
                print("wc: read error")
                return 1
        print(f"{result.lines} {result.words} {result.chars} {path}")
    return 0


def cat_main(argv: Optional[Sequence[str]] = None) -> int:
    """Copy the named files, or standard input, to standard output."""
    paths = _args(argv)
    sys.stdout.flush()
    out = sys.stdout.buffer
    try:
        if not paths:
            cat_streams([sys.stdin.buffer], out)
            out.flush()
            return 0
        for path in paths:
            try:
                handle = open(path, "rb")
            except OSError:
                sys.stderr.write(f"cat: cannot open {path}\n")
                return 1
            with handle:
                cat_streams([handle], out)
    except OSError:
        sys.stderr.write("cat: read error\n")
        return 1
    out.flush()
    return 0


def echo_main(argv: Optional[Sequence[str]] = None) -> int:
    """Print the arguments separated by spaces."""
    sys.stdout.write(echo_line(_args(argv)))
    return 0