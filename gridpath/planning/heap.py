"""
Indexed Binary Heap
Fixed-capacity priority queue for the A* open set. Every element stores its
own slot in ``heap_index`` so membership tests are O(1) and an element whose
priority improved can be re-sifted in place (decrease-key).
"""

import logging
from typing import Generic, List, Optional, TypeVar

from gridpath.planning.node import NOT_QUEUED, HeapItem

T = TypeVar("T", bound=HeapItem)


class HeapCapacityError(OverflowError):
    """Insert attempted on a heap that already holds ``max_size`` items."""


class HeapUnderflowError(IndexError):
    """Extract attempted on an empty heap."""


class IndexedHeap(Generic[T]):
    """
    Binary heap ordered by the items' ``<`` operator, where ``a < b`` means
    ``a`` is extracted before ``b``.

    Invariant: ``items[i].heap_index == i`` for every live slot ``i``; removed
    items are left with ``heap_index == -1``.
    """

    def __init__(self, max_size: int):
        if max_size < 0:
            raise ValueError(f"max_size must be non-negative, got {max_size}")

        self.max_size = max_size
        self._items: List[Optional[T]] = [None] * max_size
        self._count = 0

        self.logger = logging.getLogger(__name__)

    @property
    def count(self) -> int:
        return self._count

    def add(self, item: T):
        """
        Insert an item and sift it toward the root.

        Raises:
            HeapCapacityError: if the heap is already full
        """
        if self._count >= self.max_size:
            self.logger.error(f"Heap full ({self.max_size} items), cannot add {item!r}")
            raise HeapCapacityError(
                f"Heap capacity {self.max_size} exceeded inserting {item!r}"
            )

        item.heap_index = self._count
        self._items[self._count] = item
        self._count += 1

        self._sort_up(item)

    def remove_first(self) -> T:
        """
        Remove and return the highest-priority item.

        Raises:
            HeapUnderflowError: if the heap is empty
        """
        if self._count == 0:
            raise HeapUnderflowError("remove_first from an empty heap")

        first = self._items[0]
        self._count -= 1

        if self._count > 0:
            last = self._items[self._count]
            self._items[0] = last
            last.heap_index = 0
            self._items[self._count] = None
            self._sort_down(last)
        else:
            self._items[0] = None

        first.heap_index = NOT_QUEUED
        return first

    def peek(self) -> T:
        if self._count == 0:
            raise HeapUnderflowError("peek on an empty heap")
        return self._items[0]

    def update_item(self, item: T):
        """
        Restore order after an item's priority improved.

        Only sifts upward: callers never lower an item's priority.
        """
        self._sort_up(item)

    def contains(self, item: T) -> bool:
        index = item.heap_index
        return 0 <= index < self._count and self._items[index] is item

    def clear(self):
        for index in range(self._count):
            self._items[index].heap_index = NOT_QUEUED
            self._items[index] = None
        self._count = 0

    def _sort_up(self, item: T):
        while item.heap_index > 0:
            parent = self._items[(item.heap_index - 1) // 2]

            if item < parent:
                self._swap(item, parent)
            else:
                break

    def _sort_down(self, item: T):
        while True:
            left = item.heap_index * 2 + 1
            right = left + 1

            if left >= self._count:
                return

            swap_index = left
            if right < self._count and self._items[right] < self._items[left]:
                swap_index = right

            if self._items[swap_index] < item:
                self._swap(item, self._items[swap_index])
            else:
                return

    def _swap(self, item_a: T, item_b: T):
        index_a, index_b = item_a.heap_index, item_b.heap_index

        self._items[index_a] = item_b
        self._items[index_b] = item_a

        item_a.heap_index = index_b
        item_b.heap_index = index_a

    def __len__(self) -> int:
        return self._count

    def __bool__(self) -> bool:
        return self._count > 0

    def __contains__(self, item) -> bool:
        return self.contains(item)

    def __repr__(self) -> str:
        return f"IndexedHeap(count={self._count}, max_size={self.max_size})"
