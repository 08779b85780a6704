"""
Node Grid
Owns the 3D array of nodes and resolves the neighbours reachable from a node
in one step. With more than one layer (max_y > 1) the search also steps up
and down single ledges; diagonal and ledge moves are rejected when they would
clip a blocked or missing cell.
"""

import logging
import operator
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from gridpath.planning.node import Node


@dataclass
class GridInfo:

    dimensions: Tuple[int, int, int]
    total_cells: int
    walkable_cells: int
    blocked_cells: int
    vertical_search: bool


class NodeGrid:
    """
    Fixed-size grid of walkable/unwalkable nodes addressed by (x, y, z).
    y is the vertical axis; x and z span the ground plane.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        config = config or {}
        self.config = config
        self.logger = logging.getLogger(__name__)

        self.max_x = self._validate_dimension("max_x", config.get("max_x", 3))
        self.max_y = self._validate_dimension("max_y", config.get("max_y", 3))
        self.max_z = self._validate_dimension("max_z", config.get("max_z", 3))

        self.dimensions = (self.max_x, self.max_y, self.max_z)

        # Single-layer grids only search the x/z plane
        self.vertical_search = self.max_y > 1

        self.neighbourhood = self._create_neighbourhood()

        # Search scratch state lives on the nodes: one search per grid at a time
        self.search_lock = threading.Lock()

        self.grid = self._create_grid()

        self.logger.info(f"Node grid created: {self.dimensions} = {self.max_size} nodes")
        self.logger.debug(f"Vertical search: {self.vertical_search}, "
                          f"{len(self.neighbourhood)}-neighbourhood")

    @staticmethod
    def _validate_dimension(name: str, value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise ValueError(f"{name} must be an integer, got {value!r}")
        if value < 1:
            raise ValueError(f"{name} must be at least 1, got {value}")
        return int(value)

    @property
    def max_size(self) -> int:
        return self.max_x * self.max_y * self.max_z

    def _create_neighbourhood(self) -> List[Tuple[int, int, int]]:
        """
        Offsets searched around a node, in x, y, z order from -1 to 1.
        Without vertical search the y offset is forced to 0 (8 planar moves).
        """
        neighbourhood = []
        y_offsets = [-1, 0, 1] if self.vertical_search else [0]

        for dx in [-1, 0, 1]:
            for dy in y_offsets:
                for dz in [-1, 0, 1]:
                    if dx == 0 and dy == 0 and dz == 0:
                        continue
                    neighbourhood.append((dx, dy, dz))

        return neighbourhood

    def _create_grid(self) -> np.ndarray:
        grid = np.empty(self.dimensions, dtype=object)

        for x in range(self.max_x):
            for y in range(self.max_y):
                for z in range(self.max_z):
                    grid[x, y, z] = Node(x, y, z)

        return grid

    def in_bounds(self, x: int, y: int, z: int) -> bool:
        return (0 <= x < self.max_x and
                0 <= y < self.max_y and
                0 <= z < self.max_z)

    @staticmethod
    def _as_index(value: Any) -> int:
        try:
            return operator.index(value)
        except TypeError:
            if isinstance(value, float) and value.is_integer():
                return int(value)
            raise ValueError(f"Grid coordinate must be integral, got {value!r}") from None

    def get_node(self, x: int, y: int, z: int) -> Optional[Node]:
        """
        Node at the given coordinates, or None outside the grid.

        Integral floats such as 1.0 are accepted; 1.5 raises ValueError.
        """
        x, y, z = self._as_index(x), self._as_index(y), self._as_index(z)

        if not self.in_bounds(x, y, z):
            return None
        return self.grid[x, y, z]

    def get_node_at_position(self, position: Sequence[float]) -> Optional[Node]:
        """
        Node nearest to a world position on the 1x1 lattice.

        Args:
            position: (x, y, z) floats; each is rounded half-to-even

        Returns:
            Node or None if the rounded coordinates are outside the grid
        """
        x, y, z = (int(round(float(value))) for value in position)
        return self.get_node(x, y, z)

    def set_walkable(self, x: int, y: int, z: int, walkable: bool) -> bool:
        node = self.get_node(x, y, z)

        if node is None:
            self.logger.warning(f"Cannot set walkability outside grid: {(x, y, z)}")
            return False

        node.walkable = bool(walkable)
        return True

    def is_walkable(self, x: int, y: int, z: int) -> bool:
        node = self.get_node(x, y, z)
        return node is not None and node.walkable

    def walkable_mask(self) -> np.ndarray:
        mask = np.zeros(self.dimensions, dtype=bool)
        for node in self.grid.flat:
            mask[node.position] = node.walkable
        return mask

    def set_walkable_mask(self, mask: np.ndarray) -> bool:
        """
        Apply a boolean walkability array shaped like the grid.

        Returns:
            False (and leaves the grid untouched) on a shape mismatch
        """
        mask = np.asarray(mask, dtype=bool)

        if mask.shape != self.dimensions:
            self.logger.error(f"Walkable mask shape mismatch: {mask.shape} vs {self.dimensions}")
            return False

        for node in self.grid.flat:
            node.walkable = bool(mask[node.position])

        self.logger.debug(f"Walkable mask applied: {int(mask.sum())} walkable nodes")
        return True

    def get_neighbours(self, node: Node) -> List[Node]:
        """
        Nodes reachable from ``node`` in one step.

        Returns:
            Unique neighbours in neighbourhood order, never ``node`` itself
        """
        neighbours = []
        seen = {node.position}

        for offset in self.neighbourhood:
            neighbour = self._get_neighbour_node(node, offset)

            if neighbour is not None and neighbour.position not in seen:
                seen.add(neighbour.position)
                neighbours.append(neighbour)

        return neighbours

    def _get_neighbour_node(self, current: Node,
                            offset: Tuple[int, int, int]) -> Optional[Node]:
        x = current.x + offset[0]
        y = current.y + offset[1]
        z = current.z + offset[2]

        candidate = self.get_node(x, y, z)

        if candidate is None or not candidate.walkable:
            candidate = None

            if self.vertical_search:
                # Ledge: try one level below, then one level above
                below = self.get_node(x, y - 1, z)
                if below is not None and below.walkable:
                    candidate = below
                else:
                    above = self.get_node(x, y + 1, z)
                    if above is not None and above.walkable:
                        candidate = above

        if candidate is None or not self._is_valid_move(current, candidate):
            return None

        return candidate

    def _is_valid_move(self, current: Node, candidate: Node) -> bool:
        """
        Reject diagonal and ledge moves that would clip a blocked or missing
        cell on the current node's level.
        """
        dx = candidate.x - current.x
        dy = candidate.y - current.y
        dz = candidate.z - current.z

        diagonal = abs(dx) == 1 and abs(dz) == 1

        if diagonal:
            if not self.is_walkable(current.x + dx, current.y, current.z):
                return False
            if not self.is_walkable(current.x, current.y, current.z + dz):
                return False

        if dy != 0:
            if diagonal:
                # Cell underneath/above the ascent point
                if not self.is_walkable(current.x + dx, current.y, current.z + dz):
                    return False
            elif abs(dx) == 1 or abs(dz) == 1:
                if not self.is_walkable(current.x + dx, current.y, current.z):
                    return False
                if not self.is_walkable(current.x, current.y, current.z + dz):
                    return False

        return True

    def reset_search_state(self):
        for node in self.grid.flat:
            node.reset_search_state()

    def get_info(self) -> GridInfo:
        walkable_cells = sum(1 for node in self.grid.flat if node.walkable)

        return GridInfo(
            dimensions=self.dimensions,
            total_cells=self.max_size,
            walkable_cells=walkable_cells,
            blocked_cells=self.max_size - walkable_cells,
            vertical_search=self.vertical_search,
        )

    def __iter__(self):
        return iter(self.grid.flat)


def build_grid(max_x: int, max_y: int, max_z: int) -> NodeGrid:
    """Fully walkable grid covering [0, max_x) x [0, max_y) x [0, max_z)."""
    return NodeGrid({"max_x": max_x, "max_y": max_y, "max_z": max_z})


def set_walkable(grid: NodeGrid, x: int, y: int, z: int, walkable: bool) -> bool:
    return grid.set_walkable(x, y, z, walkable)
