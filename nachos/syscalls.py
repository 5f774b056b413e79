"""System calls made by simulated programs, served by the host."""

from __future__ import annotations

import mmap
import os
import sys
from typing import TextIO

from nachos.machine import Machine, ProgramExit

SYS_EXIT = 1
SYS_READ = 3
SYS_WRITE = 4
SYS_OPEN = 5
SYS_CLOSE = 6
SYS_SBRK = 17
SYS_LSEEK = 19
SYS_IOCTL = 54
SYS_FSTAT = 62
SYS_GETPAGESIZE = 64

_MASK = 0xFFFFFFFF


def _s32(value: int) -> int:
    value &= _MASK
    return value - (1 << 32) if value & 0x80000000 else value


class SyscallHandler:
    """Carries out the system call whose number is in register 2."""

    def __init__(self, trace: bool = False, out: TextIO | None = None) -> None:
        self.trace = trace
        self._out = out

    @property
    def out(self) -> TextIO:
        return self._out if self._out is not None else sys.stdout

    def breakpoint(self, machine: Machine) -> None:
        """Handle a BREAK instruction as a system call."""
        if self.trace:
            self.out.write("**breakpoint ")
        self.handle(machine)

    def handle(self, machine: Machine) -> None:
        """Perform the call; its result goes to register 1."""
        regs = machine.registers
        if self.trace:
            self.out.write(f"**System call {regs[2]}\n")
            self.out.write(machine.dump_registers())
        number, a0, a1, a2 = regs[2], regs[4], regs[5], regs[6]
        mem = machine.memory

        if number == SYS_EXIT:
            self.out.flush()
            raise ProgramExit(0)
        if number == SYS_READ:
            result = self._host(lambda: self._read(mem, a0, a1, a2))
        elif number == SYS_WRITE:
            result = self._host(lambda: os.write(a0, mem.read_bytes(a1, a2)))
        elif number == SYS_OPEN:
            path = mem.read_cstring(a0).decode("latin-1")
            result = self._host(lambda: os.open(path, a1, a2))
        elif number == SYS_CLOSE:
            result = 0
        elif number == SYS_SBRK:
            pages = abs(a0) // 8192 * (-1 if a0 < 0 else 1)
            result = (pages + 1) * 8192
        elif number == SYS_LSEEK:
            result = self._host(lambda: os.lseek(a0, a1, a2))
        elif number == SYS_IOCTL:
            result = 0
        elif number == SYS_FSTAT:
            result = self._host(lambda: (os.fstat(a1), 0)[1])
        elif number == SYS_GETPAGESIZE:
            result = mmap.PAGESIZE
        else:
            self.out.write(f"Unknown System call {number}\n")
            if not self.trace:
                self.out.write(machine.dump_registers())
            raise ProgramExit(2)
        regs[1] = _s32(result)

        if self.trace:
            self.out.write("**Afterwards:\n")
            self.out.write(machine.dump_registers())

    @staticmethod
    def _read(mem, fd: int, addr: int, count: int) -> int:
        data = os.read(fd, max(count, 0))
        mem.load(addr, data)
        return len(data)

    @staticmethod
    def _host(call) -> int:
        try:
            return call()
        except OSError:
            return -1