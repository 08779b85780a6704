"""
Scenario Runner
Builds a grid from configuration, marks the configured obstacles and runs a
single A* search between the configured start and target positions.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from gridpath.planning.astar import AStarPathfinding, PlanningResult
from gridpath.planning.node_grid import NodeGrid
from gridpath.utils.config_loader import SystemConfig
from gridpath.utils.logger import log_exceptions

Vector3 = Tuple[float, float, float]


@dataclass
class ScenarioConfig:
    start: Vector3 = (0.0, 0.0, 0.0)
    target: Vector3 = (0.0, 0.0, 0.0)
    unwalkable_nodes: List[Vector3] = field(default_factory=list)

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "ScenarioConfig":
        return cls(
            start=tuple(config.get("start", (0.0, 0.0, 0.0))),
            target=tuple(config.get("target", (0.0, 0.0, 0.0))),
            unwalkable_nodes=[tuple(p) for p in config.get("unwalkable_nodes", []) or []],
        )


class ScenarioRunner:

    def __init__(self, config: SystemConfig):
        self.config = config
        self.logger = logging.getLogger(__name__)

        self.scenario = ScenarioConfig.from_dict(config.scenario)

        self.grid = self.build_grid()
        self.pathfinding = AStarPathfinding(self.grid, config.pathfinding)

    def build_grid(self) -> NodeGrid:
        grid = NodeGrid(self.config.grid)

        blocked = 0
        for position in self.scenario.unwalkable_nodes:
            # Obstacles truncate toward zero; endpoints round to nearest
            node = grid.get_node(*(int(float(value)) for value in position))

            if node is None:
                self.logger.warning(f"Unwalkable node {position} is outside the grid")
                continue

            node.walkable = False
            blocked += 1

        self.logger.info(f"Scenario grid {grid.dimensions}: {blocked} unwalkable nodes")
        return grid

    @log_exceptions("gridpath.planning")
    def run(self, start: Optional[Sequence[float]] = None,
            target: Optional[Sequence[float]] = None) -> PlanningResult:
        """
        Search between the given positions, defaulting to the configured ones.

        Positions are rounded to the nearest grid node; a position outside the
        grid yields an unsuccessful result.
        """
        start = start if start is not None else self.scenario.start
        target = target if target is not None else self.scenario.target

        return self.pathfinding.plan(self._round_position(start),
                                     self._round_position(target))

    @staticmethod
    def _round_position(position: Sequence[float]) -> Tuple[int, int, int]:
        x, y, z = (int(round(float(value))) for value in position)
        return x, y, z

    def render_layer(self, result: PlanningResult, y: int = 0) -> str:
        """
        Text view of one grid layer: ``#`` unwalkable, ``S``/``T`` endpoints,
        ``*`` path, ``.`` free. Rows are z (top = highest z), columns are x.
        """
        path_cells = set(result.grid_path)
        start = result.grid_path[0] if result.grid_path else None
        target = result.grid_path[-1] if result.grid_path else None

        rows = []
        for z in reversed(range(self.grid.max_z)):
            row = []
            for x in range(self.grid.max_x):
                position = (x, y, z)
                if position == start:
                    row.append("S")
                elif position == target:
                    row.append("T")
                elif position in path_cells:
                    row.append("*")
                elif not self.grid.is_walkable(x, y, z):
                    row.append("#")
                else:
                    row.append(".")
            rows.append("".join(row))

        return "\n".join(rows)
