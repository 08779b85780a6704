"""
Grid Node
Per-cell state used by the A* search: fixed coordinates, walkability and
the scratch costs, back-pointer and heap slot written by each search run.
"""

from typing import Optional, Protocol, Tuple

NOT_QUEUED = -1


class HeapItem(Protocol):
    """Capability required by IndexedHeap: a priority order and a mutable slot."""

    heap_index: int

    def __lt__(self, other) -> bool:
        ...


class Node:
    """
    Single addressable grid location.

    Coordinates are fixed at construction and identify the node within its
    grid. ``g_cost``, ``h_cost``, ``previous_node`` and ``heap_index`` are
    working state owned by whichever search is currently running.
    """

    def __init__(self, x: int, y: int, z: int, walkable: bool = True):
        self._position = (int(x), int(y), int(z))
        self.walkable = walkable

        self.g_cost: float = 0.0
        self.h_cost: float = 0.0
        self.previous_node: Optional["Node"] = None
        self.heap_index: int = NOT_QUEUED

    @property
    def x(self) -> int:
        return self._position[0]

    @property
    def y(self) -> int:
        return self._position[1]

    @property
    def z(self) -> int:
        return self._position[2]

    @property
    def position(self) -> Tuple[int, int, int]:
        return self._position

    @property
    def f_cost(self) -> float:
        return self.g_cost + self.h_cost

    def reset_search_state(self):
        """Clear costs, back-pointer and heap slot left by a previous search."""
        self.g_cost = 0.0
        self.h_cost = 0.0
        self.previous_node = None
        self.heap_index = NOT_QUEUED

    def compare_to(self, other: "Node") -> int:
        """
        Priority comparison against another node.

        Returns:
            1 if this node should be expanded before ``other``, -1 if after,
            0 if both f and h costs are equal
        """
        if self.f_cost != other.f_cost:
            return 1 if self.f_cost < other.f_cost else -1

        # Tie-break on the heuristic: prefer the node closer to the target
        if self.h_cost != other.h_cost:
            return 1 if self.h_cost < other.h_cost else -1

        return 0

    def __lt__(self, other: "Node") -> bool:
        return self.compare_to(other) > 0

    def __repr__(self) -> str:
        return (f"Node({self.x}, {self.y}, {self.z}, walkable={self.walkable}, "
                f"g={self.g_cost:g}, h={self.h_cost:g})")
