# coursetools

A small collection of teaching tools in plain Python, with no
third-party dependencies:

- `coursetools.lc3vm` — an LC-3 virtual machine that runs object images;
- `coursetools.lc3loader` — LC-3 object and symbol file reading, a
  symbol table, and parsing of addresses and address ranges;
- `coursetools.grep` — a grep that understands `^`, `.`, `*` and `$`;
- `coursetools.textutils` — `cat`, `echo` and `wc`, plus `fmtname` for
  blank-padded directory-entry names;
- `coursetools.xprintf` — a minimal `printf` formatter and `atoi`;
- `coursetools.prng` — the Park–Miller minimal standard generator;
- `coursetools.shparse` — a tokenizer and parser for a small shell
  command language.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Running LC-3 programs

An image file starts with a big-endian origin word, followed by
big-endian words placed in memory from that origin onwards. Several
images can be given at once; execution starts at `x3000`.

```
lc3vm program.obj
```

With no arguments the command prints a usage line and exits with
status 2; an image that cannot be read gives `failed to load image:`
and status 1. On a terminal, line buffering and echo are turned off
while the program runs. The `HALT` trap prints `HALT` and stops the
machine; Ctrl-C stops it with status -2.

From Python:

```python
import io
from coursetools.lc3vm import Lc3VM

out = io.BytesIO()
vm = Lc3VM(stdin=io.BytesIO(), stdout=out, key_ready=lambda: False)
vm.load_image("program.obj")
vm.run()
```

`Lc3VM.load_image_bytes` loads an image held in memory and returns its
origin, `Lc3VM.step` executes a single instruction and returns whether
the machine is still running, and `mem_read` / `mem_write` give access
to memory (reading `xFE00` polls the keyboard). Fetching a reserved or
unused opcode raises `IllegalOpcode`. `sign_extend` and `swap16` are
available as plain functions.

## Object files, symbols and addresses

```python
from coursetools.lc3loader import SymbolTable, parse_address, parse_range, read_obj

symbols = SymbolTable()
symbols.add("START", 0x3000)
parse_address("START", symbols)   # 0x3000
parse_address("x3010", symbols)   # 0x3010
parse_address("3010", symbols)    # 0x3010 (bare hex)
parse_address("#16", symbols)     # 16
parse_address("-#1", symbols)     # 0xFFFF

start, words = read_obj(b"\x30\x00\xf0\x25")   # (0x3000, [0xF025])
```

`parse_address` raises `AddressError` for anything it cannot read.
`parse_range` turns command arguments into an `AddressRange` (start,
end and whether extra arguments were ignored), scaling around the PC
or the start when ends are missing and accepting `more` to continue
from a previous end. `read_sym_lines` adds the entries of a symbol
listing (the lines after its `------------` rule) to a `SymbolTable`;
`SymbolTable.squash` forgets the labels in a range of addresses.

## Text utilities

```
ct-grep 'ab*c$' notes.txt
ct-cat a.txt b.txt
ct-echo hello world
ct-wc notes.txt
```

Without file arguments, `ct-grep`, `ct-cat` and `ct-wc` read standard
input. `ct-wc` prints line, word and byte counts followed by the file
name. `ct-grep` reports only newline-terminated lines.

The same work is available from Python:

```python
from coursetools.grep import match
from coursetools.textutils import count, echo_line
from coursetools.xprintf import xformat, atoi
from coursetools.prng import ParkMiller

match("^a.c", "abcd")             # True
count(b"two words\n")             # WordCount(lines=1, words=2, chars=10)
echo_line(["a", "b"])             # 'a b\n'
xformat("%d and %x\n", -5, 255)   # '-5 and FF\n'
atoi("42abc")                     # 42
ParkMiller(1).next()              # next value of the sequence seeded with 1
```

## Shell parsing

```python
from coursetools.shparse import parse

tree = parse("cat < in.txt | grep x > out.txt; echo done &")
```

`parse` returns a tree of `ExecCmd`, `RedirCmd`, `PipeCmd`, `ListCmd`
and `BackCmd` nodes and raises `ShellSyntaxError` on malformed input;
`tokenize` returns the tokens of a line.

## What this package does not do

There is no interactive LC-3 debugger: no command prompt, breakpoints,
single-stepping commands, disassembly listing or memory dump display,
and no LC-3 operating system image is bundled. The shell parser builds
command trees but runs nothing.