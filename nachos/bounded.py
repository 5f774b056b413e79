"""A fixed-capacity last-in, first-out stack of arbitrary items."""

from __future__ import annotations

import sys
from typing import Any, Generic, TypeVar

from nachos.stacks import StackEmptyError, StackFullError

T = TypeVar("T")


def _successor(value: Any) -> Any:
    """Return the value that follows ``value``.

    Single characters step to the next character; anything else is
    incremented by one.
    """
    if isinstance(value, str) and len(value) == 1:
        return chr(ord(value) + 1)
    return value + 1


class BoundedStack(Generic[T]):
    """A stack that holds at most ``size`` items."""

    def __init__(self, size: int) -> None:
        if size < 1:
            raise ValueError("stack size must be at least 1")
        self._size = size
        self._items: list[T] = []

    @property
    def size(self) -> int:
        """The maximum number of items the stack can hold."""
        return self._size

    def push(self, value: T) -> None:
        """Put ``value`` on top of the stack."""
        if self.is_full():
            raise StackFullError("push onto a full stack")
        self._items.append(value)

    def pop(self) -> T:
        """Remove the item on top of the stack and return it."""
        if self.is_empty():
            raise StackEmptyError("pop from an empty stack")
        return self._items.pop()

    def is_full(self) -> bool:
        """Return True if the stack has no more room."""
        return len(self._items) == self._size

    def is_empty(self) -> bool:
        """Return True if the stack holds nothing."""
        return not self._items

    def __len__(self) -> int:
        return len(self._items)

    def self_test(self, start: T) -> None:
        """Fill the stack with successive values from ``start``, then empty it.

        Every push and pop is reported on standard output.
        """
        count = start
        while not self.is_full():
            print(f"pushing {count}")
            self.push(count)
            count = _successor(count)
        while not self.is_empty():
            print(f"popping {self.pop()}")


def main(argv: list[str] | None = None) -> int:
    """Run the self test on a stack of integers and a stack of characters."""
    del argv  # no options are accepted
    int_stack: BoundedStack[int] = BoundedStack(10)
    char_stack: BoundedStack[str] = BoundedStack(10)

    print("Testing Stack<int>")
    int_stack.self_test(17)

    print("Testing Stack<char>")
    char_stack.self_test("a")
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())