"""
Grid pathfinding module using A* algorithm.
Node model, indexed heap, node grid and search driver.
"""

from gridpath.planning.astar import AStarPathfinding, PlanningResult, find_path
from gridpath.planning.heap import HeapCapacityError, HeapUnderflowError, IndexedHeap
from gridpath.planning.heuristics import GridHeuristics
from gridpath.planning.node import HeapItem, Node
from gridpath.planning.node_grid import GridInfo, NodeGrid, build_grid, set_walkable

__all__ = [
    "AStarPathfinding",
    "PlanningResult",
    "find_path",
    "IndexedHeap",
    "HeapCapacityError",
    "HeapUnderflowError",
    "GridHeuristics",
    "HeapItem",
    "Node",
    "GridInfo",
    "NodeGrid",
    "build_grid",
    "set_walkable",
]
