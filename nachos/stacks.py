"""Two interchangeable implementations of a stack of integers."""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod

from nachos.intlist import IntList


class StackFullError(OverflowError):
    """Raised when pushing onto a stack that has no more room."""


class StackEmptyError(IndexError):
    """Raised when popping from a stack that holds nothing."""


class Stack(ABC):
    """An abstract last-in, first-out stack of integers."""

    @abstractmethod
    def push(self, value: int) -> None:
        """Put an integer on top of the stack."""

    @abstractmethod
    def pop(self) -> int:
        """Remove the integer on top of the stack and return it."""

    @abstractmethod
    def is_full(self) -> bool:
        """Return True if the stack has no more room."""

    @abstractmethod
    def is_empty(self) -> bool:
        """Return True if the stack holds nothing."""

    def self_test(self, num_to_push: int) -> None:
        """Push ``num_to_push`` numbers starting at 17, then pop them all.

        Every push and pop is reported on standard output.
        """
        count = 17
        for _ in range(num_to_push):
            if self.is_full():
                raise StackFullError("stack filled up during self test")
            print(f"pushing {count}")
            self.push(count)
            count += 1
        while not self.is_empty():
            print(f"popping {self.pop()}")


class ArrayStack(Stack):
    """A stack with a fixed maximum capacity."""

    def __init__(self, size: int) -> None:
        if size < 1:
            raise ValueError("stack size must be at least 1")
        self._size = size
        self._items: list[int] = []

    def push(self, value: int) -> None:
        if self.is_full():
            raise StackFullError("push onto a full stack")
        self._items.append(value)

    def pop(self) -> int:
        if self.is_empty():
            raise StackEmptyError("pop from an empty stack")
        return self._items.pop()

    def is_full(self) -> bool:
        return len(self._items) == self._size

    def is_empty(self) -> bool:
        return not self._items


class ListStack(Stack):
    """A stack backed by a linked list; it never overflows."""

    def __init__(self) -> None:
        self._items = IntList()

    def push(self, value: int) -> None:
        self._items.prepend(value)

    def pop(self) -> int:
        if self.is_empty():
            raise StackEmptyError("pop from an empty stack")
        return self._items.remove()

    def is_full(self) -> bool:
        return False

    def is_empty(self) -> bool:
        return self._items.is_empty()


def main(argv: list[str] | None = None) -> int:
    """Run the self test on both stack implementations."""
    del argv  # no options are accepted
    array_stack: Stack = ArrayStack(10)
    list_stack: Stack = ListStack()

    print("Testing ArrayStack")
    array_stack.self_test(10)

    print("Testing ListStack")
    list_stack.self_test(10)
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())