"""
gridpath: A* pathfinding on 2D/3D tile and voxel grids.
Main package initialization.

Use direct imports from submodules:
    from gridpath.planning.node_grid import NodeGrid, build_grid
    from gridpath.planning.astar import AStarPathfinding, find_path
"""

import logging
import sys

# Package version
__version__ = "1.0.0"
__description__ = "A* pathfinding on 2D/3D grids with ledge and corner rules"

# Setup basic logging
if not logging.getLogger().handlers:
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )

# Package logger
logger = logging.getLogger(__name__)

__all__ = ['__version__', '__description__']
