# heap.py
# SPDX-License-Identifier: MIT
"""Array-backed binary min-heap used for bounded top-k selection.

The heap is 0-indexed: the children of slot ``i`` live at ``2i + 1`` and
``2i + 2`` and its parent at ``(i - 1) // 2``. Ordering is natural (``<``)
unless a comparator is supplied, in which case ``comparator(a, b) < 0``
means ``a`` sorts before ``b``. A max-heap is a min-heap over a negated
comparator.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from functools import cmp_to_key
from typing import Any, Generic, TypeVar

__all__ = ["Comparator", "MinHeap"]

T = TypeVar("T")

Comparator = Callable[[Any, Any], int]


def _parent(i: int) -> int:
    return (i - 1) >> 1


def _left(i: int) -> int:
    return (i << 1) + 1


class MinHeap(Generic[T]):
    """Binary min-heap with an optional three-way comparator.

    Args:
        items (Iterable[T] | None): Initial elements, inserted in order.
        comparator (Comparator | None): Three-way comparison function. When
            omitted, elements are compared with ``<``.
    """

    __slots__ = ("_arr", "_comparator")

    def __init__(
        self,
        items: Iterable[T] | None = None,
        *,
        comparator: Comparator | None = None,
    ) -> None:
        self._arr: list[T] = []
        self._comparator = comparator
        if items is not None:
            for item in items:
                self.insert(item)

    @property
    def comparator(self) -> Comparator | None:
        return self._comparator

    def precedes(self, a: T, b: T) -> bool:
        """Return True when ``a`` sorts strictly before ``b`` in this heap."""
        if self._comparator is None:
            return a < b  # type: ignore[operator]
        return self._comparator(a, b) < 0

    def __len__(self) -> int:
        return len(self._arr)

    def __bool__(self) -> bool:
        return bool(self._arr)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(size={len(self._arr)})"

    def count(self) -> int:
        """Return the number of stored elements."""
        return len(self._arr)

    def peek_min(self) -> T | None:
        """Return the root without removing it, or None when empty."""
        return self._arr[0] if self._arr else None

    def insert(self, item: T) -> None:
        """Append ``item`` and sift it up to its place. O(log n)."""
        self._arr.append(item)
        self._sift_up(len(self._arr) - 1)

    def extract_min(self) -> T | None:
        """Remove and return the minimum, or None when empty. O(log n)."""
        arr = self._arr
        if not arr:
            return None
        if len(arr) == 1:
            return arr.pop()
        smallest = arr[0]
        arr[0] = arr.pop()
        self._sift_down(0)
        return smallest

    def extract_and_insert(self, item: T) -> T | None:
        """Replace the root with ``item`` if ``item`` outranks it.

        On an empty heap this is a plain :meth:`insert` and returns None.
        Otherwise the current root is returned; the heap only changes when
        ``item`` is strictly greater than that root, in which case ``item``
        takes its place. An item that would not survive is discarded without
        touching the heap.
        """
        arr = self._arr
        if not arr:
            self.insert(item)
            return None
        smallest = arr[0]
        if self.precedes(smallest, item):
            arr[0] = item
            self._sift_down(0)
        return smallest

    def drain_sorted(self) -> list[T]:
        """Extract every element in ascending order, leaving the heap empty."""
        out: list[T] = []
        while self._arr:
            out.append(self.extract_min())  # type: ignore[arg-type]
        return out

    def __iter__(self) -> Iterator[T]:
        # Storage order is not sorted; iterate over a sorted copy instead.
        if self._comparator is None:
            ordered = sorted(self._arr)  # type: ignore[type-var]
        else:
            ordered = sorted(self._arr, key=cmp_to_key(self._comparator))
        return iter(ordered)

    def _sift_up(self, index: int) -> None:
        arr = self._arr
        while index > 0:
            parent = _parent(index)
            if not self.precedes(arr[index], arr[parent]):
                break
            arr[parent], arr[index] = arr[index], arr[parent]
            index = parent

    def _sift_down(self, index: int) -> None:
        arr = self._arr
        size = len(arr)
        while True:
            left = _left(index)
            right = left + 1
            smallest = index
            if left < size and self.precedes(arr[left], arr[smallest]):
                smallest = left
            # Equal children: the left one wins.
            if right < size and self.precedes(arr[right], arr[smallest]):
                smallest = right
            if smallest == index:
                return
            arr[index], arr[smallest] = arr[smallest], arr[index]
            index = smallest
