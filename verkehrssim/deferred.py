"""A list whose modifications are queued and applied on demand."""

from __future__ import annotations

from collections import deque
from enum import Enum, auto
from typing import Deque, Generic, Iterator, Tuple, TypeVar

T = TypeVar("T")


class _Op(Enum):
    PUSH_BACK = auto()
    PUSH_FRONT = auto()
    ERASE = auto()


class DeferredList(Generic[T]):
    """Sequence whose writes become visible only after :meth:`update`.

    Reading and iterating always see the committed contents, so it is safe to
    schedule insertions and removals while iterating over the list.
    """

    def __init__(self) -> None:
        self._items: Deque[T] = deque()
        self._pending: Deque[Tuple[_Op, T]] = deque()

    def push_back(self, item: T) -> None:
        """Schedule appending *item* at the end."""
        self._pending.append((_Op.PUSH_BACK, item))

    def push_front(self, item: T) -> None:
        """Schedule inserting *item* at the front."""
        self._pending.append((_Op.PUSH_FRONT, item))

    def erase(self, item: T) -> None:
        """Schedule removing the first element equal to *item*."""
        self._pending.append((_Op.ERASE, item))

    @property
    def pending(self) -> int:
        """Number of scheduled, not yet applied changes."""
        return len(self._pending)

    def update(self) -> None:
        """Apply all scheduled changes in the order they were made.

        Raises ValueError if a scheduled removal names an element that is not
        in the list; changes queued after it stay pending.
        """
        while self._pending:
            op, item = self._pending.popleft()
            if op is _Op.PUSH_BACK:
                self._items.append(item)
            elif op is _Op.PUSH_FRONT:
                self._items.appendleft(item)
            else:
                try:
                    self._items.remove(item)
                except ValueError:
                    raise ValueError(f"cannot erase {item!r}: not in list") from None

    def clear(self) -> None:
        """Apply pending changes, then remove every element."""
        self.update()
        self._items.clear()

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item: object) -> bool:
        return item in self._items

    def __repr__(self) -> str:
        return f"DeferredList({list(self._items)!r}, pending={len(self._pending)})"