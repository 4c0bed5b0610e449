"""A minimal printf formatter (%d, %l, %x, %p, %s, %c, %%) and atoi."""

from __future__ import annotations

_DIGITS = "0123456789ABCDEF"
_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF


def _to_int32(value: int) -> int:
    value &= _MASK32
    return value - (1 << 32) if value & 0x80000000 else value


def format_int(value: int, base: int, signed: bool) -> str:
    """Format a 32-bit integer in ``base``; negative only when ``signed``."""
    if not 2 <= base <= len(_DIGITS):
        raise ValueError(f"unsupported base {base}")
    number = _to_int32(value)
    negative = signed and number < 0
    magnitude = (-number if negative else number) & _MASK32
    digits = []
    while True:
        digits.append(_DIGITS[magnitude % base])
        magnitude //= base
        if magnitude == 0:
            break
    if negative:
        digits.append("-")
    return "".join(reversed(digits))


def format_pointer(value: int) -> str:
    """Format a 64-bit value as ``0x`` and sixteen upper-case hex digits."""
    return "0x" + f"{value & _MASK64:016X}"


def xformat(fmt: str, *args: object) -> str:
    """Format ``args`` according to ``fmt``; unknown conversions are echoed."""
    out: list[str] = []
    remaining = iter(args)

    def take() -> object:
        try:
            return next(remaining)
        except StopIteration:
            raise TypeError("not enough arguments for format string") from None

    in_conversion = False
    for char in fmt:
        if not in_conversion:
            if char == "%":
                in_conversion = True
            else:
                out.append(char)
            continue
        in_conversion = False
        if char == "d":
            out.append(format_int(int(take()), 10, True))  # type: ignore[arg-type]
        elif char == "l":
            out.append(format_int(int(take()), 10, False))  # type: ignore[arg-type]
        elif char == "x":
            out.append(format_int(int(take()), 16, False))  # type: ignore[arg-type]
        elif char == "p":
            out.append(format_pointer(int(take())))  # type: ignore[arg-type]
        elif char == "s":
            text = take()
            out.append("(null)" if text is None else str(text))
        elif char == "c":
            out.append(chr(int(take()) & 0xFF))  # type: ignore[arg-type]
        elif char == "%":
            out.append("%")
        else:
            out.append("%" + char)
    return "".join(out)


def atoi(text: str) -> int:
    """Value of the leading decimal digits of ``text``; 0 if there are none."""
    number = 0
    for char in text:
        if not "0" <= char <= "9":
            break
        number = number * 10 + ord(char) - ord("0")
    return number