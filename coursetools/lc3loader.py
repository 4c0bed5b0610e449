"""Object and symbol file loading, symbol lookup and address parsing for the LC-3 simulator."""

from __future__ import annotations

import re
from typing import Iterable, NamedTuple, Optional, Sequence

BAD_ADDRESS = "Addresses must be labels or values in the range x0000 to xFFFF."
MAX_LABEL_LEN = 80
_SYMBOL_TABLE_RULE = "------------"

_DECIMAL = re.compile(r"\s*[+-]?\d+\s*")
_HEX = re.compile(r"\s*[+-]?(?:0[xX])?[0-9a-fA-F]+\s*")
_HEX_PREFIX = re.compile(r"\s*([+-]?)(?:0[xX](?=[0-9a-fA-F]))?([0-9a-fA-F]+)")


class AddressError(ValueError):
    """Raised when an address, label or range cannot be parsed."""

    def __init__(self, message: str = BAD_ADDRESS) -> None:
        super().__init__(message)


class AddressRange(NamedTuple):
    """A parsed address range; ``excess`` marks ignored extra arguments."""

    start: int
    end: int
    excess: bool = False


class SymbolTable:
    """Labels by name and by address."""

    def __init__(self) -> None:
        self._by_name: dict[str, int] = {}
        self._by_addr: dict[int, list[str]] = {}

    def __len__(self) -> int:
        return len(self._by_name)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def add(self, name: str, addr: int) -> None:
        """Define ``name`` at ``addr``, replacing any earlier definition of it."""
        addr &= 0xFFFF
        old = self._by_name.get(name)
        if old is not None:
            self._unlink(name, old)
        self._by_name[name] = addr
        self._by_addr.setdefault(addr, []).append(name)

    def _unlink(self, name: str, addr: int) -> None:
        names = self._by_addr.get(addr)
        if names is None:
            return
        if name in names:
            names.remove(name)
        if not names:
            del self._by_addr[addr]

    def find(self, name: str) -> Optional[int]:
        """Return the address of ``name``, or None if it is not defined."""
        return self._by_name.get(name)

    def name_at(self, addr: int) -> Optional[str]:
        """Return the label shown for ``addr``, or None if there is none."""
        names = self._by_addr.get(addr & 0xFFFF)
        return names[-1] if names else None

    def remove_at(self, addr: int) -> None:
        """Forget every label defined at ``addr``."""
        for name in self._by_addr.pop(addr & 0xFFFF, []):
            del self._by_name[name]

    def squash(self, start: int, end: int) -> None:
        """Forget labels from ``start`` up to, not including, ``end`` (wrapping)."""
        start &= 0xFFFF
        end &= 0xFFFF
        while start != end:
            self.remove_at(start)
            start = (start + 1) & 0xFFFF


def read_obj(data: bytes) -> tuple[int, list[int]]:
    """Split an object image into its start address and its big-endian words."""
    if len(data) < 2:
        raise ValueError("object file is too short to hold a start address")
    start = int.from_bytes(data[:2], "big")
    body = data[2:]
    words = [int.from_bytes(body[i : i + 2], "big") for i in range(0, len(body) - 1, 2)]
    return start, words


def _scan_words(text: str, widths: Sequence[Optional[int]]) -> tuple[list[str], str]:
    """Read whitespace-separated words, each limited to its width; return them and the rest."""
    words: list[str] = []
    pos = 0
    for width in widths:
        while pos < len(text) and text[pos].isspace():
            pos += 1
        if pos >= len(text):
            break
        end = pos
        while end < len(text) and not text[end].isspace() and (width is None or end - pos < width):
            end += 1
        words.append(text[pos:end])
        pos = end
    return words, text[pos:]


def _scan_hex(text: str) -> Optional[int]:
    found = _HEX_PREFIX.match(text)
    if found is None:
        return None
    value = int(found.group(2), 16)
    return -value if found.group(1) == "-" else value


def read_sym_lines(lines: Iterable[str], table: SymbolTable) -> int:
    """Add the symbols listed in a symbol file to ``table``; return how many were added."""
    adding = False
    added = 0
    for line in lines:
        if not adding:
            words, _ = _scan_words(line, [None, None, MAX_LABEL_LEN])
            if len(words) == 3 and words[2] == _SYMBOL_TABLE_RULE:
                adding = True
            continue
        words, rest = _scan_words(line, [None, MAX_LABEL_LEN])
        if len(words) < 2:
            break
        addr = _scan_hex(rest)
        if addr is None:
            break
        table.add(words[1], addr)
        added += 1
    return added


def parse_address(text: str, symbols: SymbolTable) -> int:
    """Turn a label, ``#decimal``, ``xhex`` or bare hex value into a 16-bit address."""
    negated = text.startswith("-")
    if negated:
        text = text[1:]
    value = symbols.find(text)
    if value is None:
        if text.startswith("#"):
            pattern, digits, base = _DECIMAL, text[1:], 10
        elif text.startswith("x"):
            pattern, digits, base = _HEX, text[1:], 16
        elif text.startswith("X"):
            raise AddressError()
        else:
            pattern, digits, base = _HEX, text, 16
        if pattern.fullmatch(digits) is None:
            raise AddressError()
        value = int(digits.strip(), base)
        if value > 0xFFFF or (negated and value < 0) or (not negated and value < -0xFFFF):
            raise AddressError()
    if negated:
        value = -value
    if value < 0:
        value += 0x10000
    return value


def parse_range(
    args: str, pc: int, last_end: int, scale: int, symbols: SymbolTable
) -> AddressRange:
    """Parse the arguments of a range command.

    With a negative ``scale`` both ends must be given and the end is taken as is;
    otherwise missing ends are found by scaling around the PC or the start, and
    a given end is made inclusive.
    """
    words, _ = _scan_words(args, [MAX_LABEL_LEN, MAX_LABEL_LEN, 1])
    count = len(words)

    if scale < 0 and count < 2:
        raise AddressError()

    if count < 1:
        return AddressRange((pc + 0x10000 - scale) & 0xFFFF, (pc + scale) & 0xFFFF)

    if last_end >= 0 and words[0].lower() == "more":
        return AddressRange(last_end, (last_end + 2 * scale) & 0xFFFF, count > 1)

    start = parse_address(words[0], symbols)
    if count < 2:
        return AddressRange(start, (start + 2 * scale) & 0xFFFF)

    end = parse_address(words[1], symbols)
    if scale >= 0:
        end = (end + 1) & 0xFFFF
    return AddressRange(start, end, count > 2)