"""The Park-Miller minimal standard pseudo-random generator."""

from __future__ import annotations

from typing import Iterator

_MODULUS = 0x7FFFFFFF
_MULTIPLIER = 16807
_Q = 127773
_R = 2836
_STATE_MASK = 0xFFFFFFFFFFFFFFFF


def do_rand(state: int) -> int:
    """Next value after ``state``, in the range 0 to 0x7ffffffd.

    The returned value is also the generator's new state.
    """
    x = (state & _STATE_MASK) % 0x7FFFFFFE + 1
    hi, lo = divmod(x, _Q)
    x = _MULTIPLIER * lo - _R * hi
    if x < 0:
        x += _MODULUS
    return x - 1


class ParkMiller:
    """A stateful generator built on :func:`do_rand`."""

    def __init__(self, seed: int = 1) -> None:
        self.state = seed & _STATE_MASK

    def next(self) -> int:
        """Advance the generator and return the new value."""
        self.state = do_rand(self.state)
        return self.state

    def __iter__(self) -> Iterator[int]:
        while True:
            yield self.next()