"""
Grid Heuristics
Integer-scaled step cost and A* heuristic for the node grid. Planar moves
use octile distance on the x/z plane; vertical moves cost one orthogonal
step per level.
"""

import logging
from typing import Any, Dict, Optional, Sequence, Tuple, Union

from gridpath.planning.node import Node

ORTHOGONAL_COST = 10
DIAGONAL_COST = 14  # ~10 * sqrt(2)

Position = Union[Node, Tuple[int, int, int]]


def _as_position(point: Position) -> Tuple[int, int, int]:
    if isinstance(point, Node):
        return point.position
    return point


class GridHeuristics:
    """Distance metric shared by the heuristic and the per-step cost."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        config = config or {}
        self.logger = logging.getLogger(__name__)

        self.orthogonal_cost = config.get("orthogonal_cost", ORTHOGONAL_COST)
        self.diagonal_cost = config.get("diagonal_cost", DIAGONAL_COST)

        if not self.is_consistent(self.orthogonal_cost, self.diagonal_cost):
            self.logger.warning(
                f"Inconsistent step costs orthogonal={self.orthogonal_cost}, "
                f"diagonal={self.diagonal_cost}, using "
                f"{ORTHOGONAL_COST}/{DIAGONAL_COST}"
            )
            self.orthogonal_cost = ORTHOGONAL_COST
            self.diagonal_cost = DIAGONAL_COST

        self.logger.debug(
            f"Grid heuristics: orthogonal={self.orthogonal_cost}, "
            f"diagonal={self.diagonal_cost}"
        )

    @staticmethod
    def is_consistent(orthogonal_cost: float, diagonal_cost: float) -> bool:
        """
        A diagonal step must cost at least one orthogonal step and no more
        than two, otherwise the metric overestimates some real move.
        """
        if orthogonal_cost <= 0:
            return False
        return orthogonal_cost <= diagonal_cost <= 2 * orthogonal_cost

    def compute_heuristic(self, current: Position, goal: Position) -> float:
        """
        Distance between two cells.

        Args:
            current: Node or (x, y, z) grid coordinates
            goal: Node or (x, y, z) grid coordinates

        Returns:
            diagonal * min(dx, dz) + orthogonal * (|dx - dz| + dy)
        """
        ax, ay, az = _as_position(current)
        bx, by, bz = _as_position(goal)

        dist_x = abs(ax - bx)
        dist_y = abs(ay - by)
        dist_z = abs(az - bz)

        greater, lesser = max(dist_x, dist_z), min(dist_x, dist_z)

        return (self.diagonal_cost * lesser
                + self.orthogonal_cost * (greater - lesser)
                + self.orthogonal_cost * dist_y)

    def movement_cost(self, from_node: Position, to_node: Position) -> float:
        return self.compute_heuristic(from_node, to_node)

    def path_cost(self, path: Sequence[Position]) -> float:
        """Sum of step costs over consecutive path entries."""
        return sum(
            self.movement_cost(path[i - 1], path[i]) for i in range(1, len(path))
        )

    def get_heuristic_info(self) -> Dict[str, Any]:
        return {
            "heuristic_type": "octile_xz_plus_vertical",
            "parameters": {
                "orthogonal_cost": self.orthogonal_cost,
                "diagonal_cost": self.diagonal_cost,
            },
            "properties": {
                "admissible": True,
                "consistent": True,
            },
        }
