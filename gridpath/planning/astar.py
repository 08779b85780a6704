"""
A* Pathfinding
Finds the lowest-cost path between two nodes of a NodeGrid. The open set is
an IndexedHeap sized to the grid volume; the closed set holds finalised
nodes. Costs and back-pointers are written onto the grid's nodes, so the grid
is locked for the duration of each search.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple, Union

from gridpath.planning.heap import IndexedHeap
from gridpath.planning.heuristics import GridHeuristics
from gridpath.planning.node import Node
from gridpath.planning.node_grid import NodeGrid

Endpoint = Union[Node, Tuple[int, int, int]]


@dataclass
class PlanningResult:
    """Result of an A* search."""
    path: List[Node] = field(default_factory=list)       # start -> target, inclusive
    grid_path: List[Tuple[int, int, int]] = field(default_factory=list)
    total_cost: float = float('inf')
    planning_time: float = 0.0                          # seconds
    nodes_expanded: int = 0
    success: bool = False
    vertical_transitions: int = 0


class AStarPathfinding:
    """
    A* search over a NodeGrid.

    The grid is passed in rather than looked up globally; a pathfinder with
    no grid bound reports "cannot run" by returning None from find_path.
    """

    def __init__(self, grid: Optional[NodeGrid] = None,
                 config: Optional[Dict[str, Any]] = None):
        self.config = config or {}
        self.logger = logging.getLogger(__name__)

        self.grid = grid
        self.heuristics = GridHeuristics(self.config)

        self.planning_statistics = {
            'total_plans': 0,
            'successful_plans': 0,
            'average_planning_time': 0.0,
            'average_nodes_expanded': 0.0,
            'average_path_length': 0.0
        }

        if grid is not None:
            self.logger.debug(f"A* pathfinding bound to grid {grid.dimensions}")

    def find_path(self, start: Endpoint, target: Endpoint) -> Optional[List[Node]]:
        """
        Ordered list of nodes from start to target.

        Args:
            start: Start node or (x, y, z) grid coordinates
            target: Target node or (x, y, z) grid coordinates

        Returns:
            None if no grid is bound, [] if the target cannot be reached,
            otherwise the path including both start and target
        """
        if self.grid is None:
            self.logger.warning("No grid bound to pathfinder")
            return None

        return self.plan(start, target).path

    def plan(self, start: Endpoint, target: Endpoint) -> PlanningResult:
        """
        Run A* and collect timing and search statistics.

        Args:
            start: Start node or (x, y, z) grid coordinates
            target: Target node or (x, y, z) grid coordinates

        Returns:
            Planning result; ``success`` is False when no grid is bound, an
            endpoint lies outside the grid, or the target is unreachable
        """
        planning_start = time.perf_counter()

        if self.grid is None:
            self.logger.warning("No grid bound to pathfinder")
            return PlanningResult(planning_time=time.perf_counter() - planning_start)

        start_node = self._resolve_endpoint(start)
        target_node = self._resolve_endpoint(target)

        if start_node is None or target_node is None:
            self.logger.warning(f"Endpoint outside grid {self.grid.dimensions}: "
                                f"{self._describe(start)} -> {self._describe(target)}")
            result = PlanningResult(planning_time=time.perf_counter() - planning_start)
            self._update_statistics(result)
            return result

        self.logger.debug(f"Planning A* path: {start_node.position} -> {target_node.position}")

        with self.grid.search_lock:
            result = self._astar_search(start_node, target_node)

        result.planning_time = time.perf_counter() - planning_start
        self._update_statistics(result)

        if result.success:
            self.logger.info(f"Path found in {result.planning_time * 1000.0:.0f}ms "
                             f"({len(result.path)} nodes, cost {result.total_cost:g}, "
                             f"{result.nodes_expanded} expanded)")
        else:
            self.logger.info(f"No path from {start_node.position} to {target_node.position} "
                             f"after expanding {result.nodes_expanded} nodes")

        return result

    def _resolve_endpoint(self, endpoint: Endpoint) -> Optional[Node]:
        if isinstance(endpoint, Node):
            # Only nodes owned by the bound grid can be searched from
            return self.grid.get_node(*endpoint.position)
        return self.grid.get_node(*endpoint)

    @staticmethod
    def _describe(endpoint: Endpoint):
        return endpoint.position if isinstance(endpoint, Node) else tuple(endpoint)

    def _astar_search(self, start: Node, target: Node) -> PlanningResult:
        """
        Core A* loop.

        Args:
            start: Start node owned by the grid
            target: Target node owned by the grid

        Returns:
            Planning result without timing
        """
        self.grid.reset_search_state()

        open_set: IndexedHeap[Node] = IndexedHeap(self.grid.max_size)
        closed_set: Set[Node] = set()

        start.g_cost = 0.0
        start.h_cost = self.heuristics.compute_heuristic(start, target)
        open_set.add(start)

        nodes_expanded = 0

        while open_set.count > 0:
            current = open_set.remove_first()
            closed_set.add(current)

            if current.position == target.position:
                path = self._retrace_path(start, current)
                return PlanningResult(
                    path=path,
                    grid_path=[node.position for node in path],
                    total_cost=current.g_cost,
                    nodes_expanded=nodes_expanded,
                    success=True,
                    vertical_transitions=self._count_vertical_transitions(path)
                )

            nodes_expanded += 1

            for neighbour in self.grid.get_neighbours(current):
                if neighbour in closed_set:
                    continue

                tentative_g_cost = current.g_cost + self.heuristics.movement_cost(current, neighbour)
                queued = open_set.contains(neighbour)

                if tentative_g_cost < neighbour.g_cost or not queued:
                    neighbour.g_cost = tentative_g_cost
                    neighbour.h_cost = self.heuristics.compute_heuristic(neighbour, target)
                    neighbour.previous_node = current

                    if not queued:
                        open_set.add(neighbour)
                    else:
                        open_set.update_item(neighbour)

        return PlanningResult(nodes_expanded=nodes_expanded)

    def _retrace_path(self, start: Node, end: Node) -> List[Node]:
        """Follow back-pointers from end to start, then reverse."""
        path = []
        current = end

        while current is not start:
            path.append(current)
            current = current.previous_node

        path.append(start)
        path.reverse()
        return path

    def _count_vertical_transitions(self, path: List[Node]) -> int:
        """Number of steps that change level (y)."""
        return sum(1 for i in range(1, len(path)) if path[i].y != path[i - 1].y)

    def _update_statistics(self, result: PlanningResult):
        self.planning_statistics['total_plans'] += 1

        if result.success:
            self.planning_statistics['successful_plans'] += 1

            # Running averages
            n = self.planning_statistics['successful_plans']

            self.planning_statistics['average_planning_time'] = (
                (n - 1) * self.planning_statistics['average_planning_time'] + result.planning_time
            ) / n

            self.planning_statistics['average_nodes_expanded'] = (
                (n - 1) * self.planning_statistics['average_nodes_expanded'] + result.nodes_expanded
            ) / n

            self.planning_statistics['average_path_length'] = (
                (n - 1) * self.planning_statistics['average_path_length'] + len(result.path)
            ) / n

    def get_statistics(self) -> Dict[str, Any]:
        """Get planning statistics."""
        stats = self.planning_statistics.copy()

        if stats['total_plans'] > 0:
            stats['success_rate'] = stats['successful_plans'] / stats['total_plans']
        else:
            stats['success_rate'] = 0.0

        if self.grid is not None:
            stats['grid_info'] = self.grid.get_info()

        stats['heuristics'] = self.heuristics.get_heuristic_info()

        return stats


def find_path(grid: Optional[NodeGrid], start: Endpoint,
              target: Endpoint) -> Optional[List[Node]]:
    """Search ``grid`` once; see AStarPathfinding.find_path."""
    return AStarPathfinding(grid).find_path(start, target)
