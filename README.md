# nachos

A small toolkit for an operating-systems course, in plain Python with no
runtime dependencies. It holds:

- **Data-structure examples**: a singly linked integer list
  (`nachos.intlist.IntList`), an abstract `Stack` with two implementations
  (`ArrayStack` and `ListStack` in `nachos.stacks`), and a fixed-capacity
  `BoundedStack` for values of any type (`nachos.bounded`).
- **MIPS object-file tools**: a reader for little-endian MIPS COFF files and
  NOFF headers (`nachos.coff`), a COFF-to-NOFF converter
  (`nachos.coff2noff`), a flat-image builder (`nachos.coff2flat`) and a
  disassembler (`nachos.disasm`, `nachos.disasmtool`).
- **A MIPS user-mode interpreter**: memory (`nachos.memory.Memory`), a
  register machine (`nachos.machine.Machine`) and a small set of system calls
  served by the host (`nachos.syscalls.SyscallHandler`), tied together by
  `nachos.interp`.
- **A directory table** (`nachos.directory.Directory`): a fixed-size table
  of file names and header sector numbers.

## Installation

```
pip install .
```

Add the `test` extra to run the test suite:

```
pip install ".[test]"
pytest
```

## Commands

Convert a COFF executable to NOFF. The file must be an OMAGIC MIPSEL COFF
file whose sections are `.text`, `.data` or `.rdata` (not both), and
`.bss`/`.sbss`:

```
nachos-coff2noff program.coff program.noff
```

Build a flat memory image, with 1024 bytes of stack after the highest
section and a blank word marking its end:

```
nachos-coff2flat program.coff program.flat
```

Disassemble the text section of a COFF file (defaults to `a.out`). A notice
is printed for each standard section that is missing:

```
nachos-disasm program.coff
```

Run a COFF program in the interpreter (defaults to `a.out`); the command
exits with the program's exit code. `-t` traces each instruction, `-r` adds
a register dump to the trace and `-T` traces system calls. `-m` takes four
further arguments (cache parameters) which are accepted and ignored:

```
nachos-interp -t program.coff
```

Run the stack demonstrations, which push a run of values and print them as
they come back off:

```
nachos-stacks
nachos-bounded
```

## Library use

```python
from nachos.stacks import ArrayStack, ListStack, StackFullError

stack = ArrayStack(2)
stack.push(1)
stack.push(2)
stack.is_full()          # True
try:
    stack.push(3)
except StackFullError:
    pass
stack.pop()              # 2

unbounded = ListStack()
unbounded.push(7)
unbounded.pop()          # 7
```

```python
from nachos.coff2noff import convert
from nachos.disasm import format_instruction

with open("program.coff", "rb") as source:
    noff_image = convert(source.read())

format_instruction(0x00000000, 0x10000000, show_address=False)  # "\tnop"
```

```python
from nachos.directory import Directory

directory = Directory(10)
directory.add("notes", 5)
directory.find("notes")  # 5
directory.list()         # ["notes"]
directory.remove("notes")
```

File names in a directory are truncated to nine characters, and a directory
never grows beyond the size it was created with. `add` raises
`FileExistsError` for a name already present and `OSError` when the table is
full; `remove` raises `FileNotFoundError` for a missing name.

## What this package does not do

- The directory table stands alone: there is no simulated disk, no file
  headers, no free-sector map and no open-file layer. `Directory.fetch_from`
  and `Directory.write_back` read and write any binary file object.
- The interpreter has no coprocessor or floating-point support, and the
  `swl` and `swr` instructions are not implemented; meeting one stops the
  program. Only the system calls exit, read, write, open, close, sbrk,
  lseek, ioctl, fstat and getpagesize are handled.