"""A small LC-3 virtual machine that runs big-endian object images."""

from __future__ import annotations

import select
import sys
from contextlib import contextmanager
from typing import BinaryIO, Callable, Iterator, Optional, Sequence

try:
    import termios
except ImportError:  # pragma: no cover - non-POSIX platforms
    termios = None  # type: ignore[assignment]

MEMORY_SIZE = 1 << 16
PC_START = 0x3000

_FL_POS = 1 << 0
_FL_ZRO = 1 << 1
_FL_NEG = 1 << 2

_MR_KBSR = 0xFE00
_MR_KBDR = 0xFE02

_TRAP_GETC = 0x20
_TRAP_OUT = 0x21
_TRAP_PUTS = 0x22
_TRAP_IN = 0x23
_TRAP_PUTSP = 0x24
_TRAP_HALT = 0x25

_OP_BR, _OP_ADD, _OP_LD, _OP_ST, _OP_JSR, _OP_AND, _OP_LDR, _OP_STR = range(8)
_OP_RTI, _OP_NOT, _OP_LDI, _OP_STI, _OP_JMP, _OP_RES, _OP_LEA, _OP_TRAP = range(8, 16)


class IllegalOpcode(Exception):
    """Raised when the machine fetches a reserved or unused opcode."""

    def __init__(self, instruction: int, address: int) -> None:
        super().__init__(f"illegal opcode x{instruction:04X} at x{address:04X}")
        self.instruction = instruction
        self.address = address


def sign_extend(x: int, bit_count: int) -> int:
    """Sign-extend the low ``bit_count`` bits of ``x`` to a 16-bit value."""
    x &= 0xFFFF
    if (x >> (bit_count - 1)) & 1:
        x |= (0xFFFF << bit_count) & 0xFFFF
    return x


def swap16(x: int) -> int:
    """Swap the two bytes of a 16-bit word."""
    return ((x << 8) | (x >> 8)) & 0xFFFF


def _field(instr: int, shift: int) -> int:
    return (instr >> shift) & 0x7


class Lc3VM:
    """LC-3 machine state together with its console streams."""

    def __init__(
        self,
        stdin: Optional[BinaryIO] = None,
        stdout: Optional[BinaryIO] = None,
        key_ready: Optional[Callable[[], bool]] = None,
    ) -> None:
        self.stdin = stdin if stdin is not None else sys.stdin.buffer
        self.stdout = stdout if stdout is not None else sys.stdout.buffer
        self.key_ready = key_ready if key_ready is not None else self._poll_input
        self.memory = [0] * MEMORY_SIZE
        self.reg = [0] * 8
        self.pc = PC_START
        self.cond = _FL_ZRO
        self.running = True
        self._ops = {
            _OP_ADD: self._op_add,
            _OP_AND: self._op_and,
            _OP_NOT: self._op_not,
            _OP_BR: self._op_br,
            _OP_JMP: self._op_jmp,
            _OP_JSR: self._op_jsr,
            _OP_LD: self._op_ld,
            _OP_LDI: self._op_ldi,
            _OP_LDR: self._op_ldr,
            _OP_LEA: self._op_lea,
            _OP_ST: self._op_st,
            _OP_STI: self._op_sti,
            _OP_STR: self._op_str,
            _OP_TRAP: self._op_trap,
        }
        self._traps = {
            _TRAP_GETC: self._trap_getc,
            _TRAP_OUT: self._trap_out,
            _TRAP_PUTS: self._trap_puts,
            _TRAP_IN: self._trap_in,
            _TRAP_PUTSP: self._trap_putsp,
            _TRAP_HALT: self._trap_halt,
        }

    # -- images -----------------------------------------------------------

    def load_image_bytes(self, data: bytes) -> int:
        """Place an image (origin word followed by words) in memory; return the origin."""
        if len(data) < 2:
            raise ValueError("image is too short to hold an origin")
        origin = int.from_bytes(data[:2], "big")
        max_read = 0xFFFF - origin
        body = data[2:]
        count = min(len(body) // 2, max_read)
        for offset in range(count):
            word = body[2 * offset : 2 * offset + 2]
            self.memory[origin + offset] = int.from_bytes(word, "big")
        return origin

    def load_image(self, path: str) -> int:
        """Load an image file; raises OSError if it cannot be read."""
        with open(path, "rb") as handle:
            return self.load_image_bytes(handle.read())

    # -- memory -----------------------------------------------------------

    def _poll_input(self) -> bool:
        try:
            ready, _, _ = select.select([self.stdin], [], [], 0)
        except (AttributeError, OSError, ValueError, TypeError):
            return True
        return bool(ready)

    def _getchar(self) -> int:
        data = self.stdin.read(1)
        return data[0] if data else -1

    def mem_write(self, address: int, value: int) -> None:
        self.memory[address & 0xFFFF] = value & 0xFFFF

    def mem_read(self, address: int) -> int:
        address &= 0xFFFF
        if address == _MR_KBSR:
            if self.key_ready():
                self.memory[_MR_KBSR] = 1 << 15
                self.memory[_MR_KBDR] = self._getchar() & 0xFFFF
            else:
                self.memory[_MR_KBSR] = 0
        return self.memory[address]

    # -- execution --------------------------------------------------------

    def _set(self, r: int, value: int) -> None:
        value &= 0xFFFF
        self.reg[r] = value
        if value == 0:
            self.cond = _FL_ZRO
        elif value >> 15:
            self.cond = _FL_NEG
        else:
            self.cond = _FL_POS

    def _put(self, byte: int) -> None:
        self.stdout.write(bytes([byte & 0xFF]))

    def step(self) -> bool:
        """Execute one instruction; return whether the machine is still running."""
        address = self.pc
        instr = self.mem_read(self.pc)
        self.pc = (self.pc + 1) & 0xFFFF
        handler = self._ops.get(instr >> 12)
        if handler is None:
            raise IllegalOpcode(instr, address)
        handler(instr)
        return self.running

    def run(self) -> None:
        """Execute instructions until the program halts."""
        while self.step():
            pass

    def _op_add(self, instr: int) -> None:
        r1 = self.reg[_field(instr, 6)]
        if (instr >> 5) & 1:
            operand = sign_extend(instr & 0x1F, 5)
        else:
            operand = self.reg[instr & 0x7]
        self._set(_field(instr, 9), r1 + operand)

    def _op_and(self, instr: int) -> None:
        r1 = self.reg[_field(instr, 6)]
        if (instr >> 5) & 1:
            operand = sign_extend(instr & 0x1F, 5)
        else:
            operand = self.reg[instr & 0x7]
        self._set(_field(instr, 9), r1 & operand)

    def _op_not(self, instr: int) -> None:
        self._set(_field(instr, 9), ~self.reg[_field(instr, 6)])

    def _op_br(self, instr: int) -> None:
        if _field(instr, 9) & self.cond:
            self.pc = (self.pc + sign_extend(instr & 0x1FF, 9)) & 0xFFFF

    def _op_jmp(self, instr: int) -> None:
        self.pc = self.reg[_field(instr, 6)]

    def _op_jsr(self, instr: int) -> None:
        self.reg[7] = self.pc
        if (instr >> 11) & 1:
            self.pc = (self.pc + sign_extend(instr & 0x7FF, 11)) & 0xFFFF
        else:
            self.pc = self.reg[_field(instr, 6)]

    def _pc_relative(self, instr: int) -> int:
        return (self.pc + sign_extend(instr & 0x1FF, 9)) & 0xFFFF

    def _base_relative(self, instr: int) -> int:
        return (self.reg[_field(instr, 6)] + sign_extend(instr & 0x3F, 6)) & 0xFFFF

    def _op_ld(self, instr: int) -> None:
        self._set(_field(instr, 9), self.mem_read(self._pc_relative(instr)))

    def _op_ldi(self, instr: int) -> None:
        pointer = self.mem_read(self._pc_relative(instr))
        self._set(_field(instr, 9), self.mem_read(pointer))

    def _op_ldr(self, instr: int) -> None:
        self._set(_field(instr, 9), self.mem_read(self._base_relative(instr)))

    def _op_lea(self, instr: int) -> None:
        self._set(_field(instr, 9), self._pc_relative(instr))

    def _op_st(self, instr: int) -> None:
        self.mem_write(self._pc_relative(instr), self.reg[_field(instr, 9)])

    def _op_sti(self, instr: int) -> None:
        target = self.mem_read(self._pc_relative(instr))
        self.mem_write(target, self.reg[_field(instr, 9)])

    def _op_str(self, instr: int) -> None:
        self.mem_write(self._base_relative(instr), self.reg[_field(instr, 9)])

    def _op_trap(self, instr: int) -> None:
        trap = self._traps.get(instr & 0xFF)
        if trap is not None:
            trap()

    def _trap_getc(self) -> None:
        self._set(0, self._getchar())

    def _trap_out(self) -> None:
        self._put(self.reg[0])
        self.stdout.flush()

    def _words_from(self, start: int) -> Iterator[int]:
        for address in range(start, MEMORY_SIZE):
            word = self.memory[address]
            if not word:
                return
            yield word

    def _trap_puts(self) -> None:
        for word in self._words_from(self.reg[0]):
            self._put(word)
        self.stdout.flush()

    def _trap_in(self) -> None:
        self.stdout.write(b"Enter a character: ")
        char = self._getchar() & 0xFF
        self._put(char)
        self.stdout.flush()
        self._set(0, sign_extend(char, 8))

    def _trap_putsp(self) -> None:
        for word in self._words_from(self.reg[0]):
            self._put(word & 0xFF)
            high = word >> 8
            if high:
                self._put(high)
        self.stdout.flush()

    def _trap_halt(self) -> None:
        self.stdout.write(b"HALT\n")
        self.stdout.flush()
        self.running = False


@contextmanager
def _unbuffered_input(stream: BinaryIO) -> Iterator[None]:
    """Turn off canonical mode and echo on a terminal for the duration."""
    if termios is None:
        yield
        return
    try:
        fd = stream.fileno()
        original = termios.tcgetattr(fd)
    except (AttributeError, OSError, ValueError, termios.error):
        yield
        return
    changed = list(original)
    changed[3] &= ~(termios.ICANON | termios.ECHO)
    termios.tcsetattr(fd, termios.TCSANOW, changed)
    try:
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSANOW, original)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Load the given images and run the machine from x3000."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        print("lc3 [image-file1] ...")
        return 2

    vm = Lc3VM()
    for path in args:
        try:
            vm.load_image(path)
        except (OSError, ValueError):
            print(f"failed to load image: {path}")
            return 1

    sys.stdout.flush()
    with _unbuffered_input(vm.stdin):
        try:
            vm.run()
        except KeyboardInterrupt:
            vm.stdout.flush()
            print()
            return -2
    vm.stdout.flush()
    return 0