import argparse
import logging
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from gridpath.planning.scenario import ScenarioRunner
from gridpath.utils import load_config, setup_logging, validate_config


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run an A* grid pathfinding scenario")
    parser.add_argument(
        "--config", type=str, default="config/main_config.yaml",
        help="Path to YAML/JSON configuration"
    )
    parser.add_argument(
        "--start", type=float, nargs=3, metavar=("X", "Y", "Z"),
        help="Override configured start position"
    )
    parser.add_argument(
        "--target", type=float, nargs=3, metavar=("X", "Y", "Z"),
        help="Override configured target position"
    )
    parser.add_argument(
        "--layer", type=int, default=None,
        help="Print this y layer of the grid with the path overlaid"
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    config = load_config(args.config)
    system_logger = setup_logging(config.logging)
    logger = logging.getLogger(__name__)

    errors = validate_config(config)
    if errors:
        for section, messages in errors.items():
            for message in messages:
                logger.error(f"[{section}] {message}")
        return 2

    runner = ScenarioRunner(config)
    result = runner.run(args.start, args.target)

    system_logger.log_performance_metrics("gridpath.planning", {
        "planning_time_ms": result.planning_time * 1000.0,
        "nodes_expanded": result.nodes_expanded,
        "path_length": len(result.path),
    })

    if not result.success:
        print("No path found")
        return 1

    print(f"Path ({len(result.grid_path)} nodes, cost {result.total_cost:g}, "
          f"{result.planning_time * 1000.0:.2f}ms):")
    for position in result.grid_path:
        print(f"  {position}")

    if args.layer is not None:
        print()
        print(runner.render_layer(result, args.layer))

    return 0


if __name__ == "__main__":
    sys.exit(main())
