"""A last-in, first-out list of integers with access at the front only."""

from __future__ import annotations

from collections.abc import Iterator


class IntList:
    """A singly linked list of integers, manipulated at its front."""

    __slots__ = ("_items",)

    def __init__(self) -> None:
        # The front of the list is kept at the end of the Python list so
        # that both operations are constant time.
        self._items: list[int] = []

    def prepend(self, value: int) -> None:
        """Put ``value`` at the beginning of the list."""
        self._items.append(value)

    def remove(self) -> int:
        """Take the first item off the list and return it.

        Raises IndexError if the list is empty.
        """
        if not self._items:
            raise IndexError("remove from an empty list")
        return self._items.pop()

    def is_empty(self) -> bool:
        """Return True if the list holds no items."""
        return not self._items

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __iter__(self) -> Iterator[int]:
        """Iterate from the front of the list to the back."""
        return reversed(self._items)

    def __repr__(self) -> str:
        return f"IntList({list(self)!r})"