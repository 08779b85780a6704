"""
Configuration Management
Loads grid, pathfinding, scenario and logging settings from YAML or JSON,
with environment variable overrides.
"""

import copy
import json
import logging
import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml


@dataclass
class SystemConfig:
    """Complete system configuration."""

    grid: Dict[str, Any] = field(default_factory=dict)
    pathfinding: Dict[str, Any] = field(default_factory=dict)
    scenario: Dict[str, Any] = field(default_factory=dict)
    logging: Dict[str, Any] = field(default_factory=dict)


class ConfigManager:
    """
    Configuration loader with caching and environment overrides.

    Environment variables named ``GRIDPATH_<SECTION>__<KEY>`` override the
    matching key, e.g. ``GRIDPATH_GRID__MAX_X=10``. Double underscores
    separate nesting levels so keys may contain single underscores.
    """

    def __init__(self, config_dir: str = "config"):
        self.config_dir = Path(config_dir)
        self.logger = logging.getLogger(__name__)

        # Configuration cache
        self._config_cache: Dict[str, SystemConfig] = {}

        # Default configuration paths
        self.default_configs = {
            "main": self.config_dir / "main_config.yaml",
        }

        # Environment variable prefix
        self.env_prefix = "GRIDPATH_"

        self.logger.debug(f"Config Manager initialized: {config_dir}")

    def load_config(self, config_name: str = "main") -> SystemConfig:
        """
        Load configuration from file with environment overrides.

        Args:
            config_name: Configuration name to load

        Returns:
            Loaded system configuration
        """
        if config_name in self._config_cache:
            return self._config_cache[config_name]

        config_path = self.default_configs.get(
            config_name, self.config_dir / f"{config_name}_config.yaml"
        )

        if not config_path.exists():
            self.logger.warning(f"Config file not found: {config_path}")
            return self.build_config(self._apply_env_overrides({}))

        system_config = self.load_file(config_path)

        self._config_cache[config_name] = system_config

        self.logger.info(f"Configuration loaded: {config_name}")
        return system_config

    def load_file(self, config_path: Path) -> SystemConfig:
        config_data = self._load_config_file(Path(config_path))
        config_data = self._apply_env_overrides(config_data)
        return self.build_config(config_data)

    def build_config(self, config_data: Dict[str, Any]) -> SystemConfig:
        """Create a SystemConfig, dropping sections it does not define."""
        known = {f.name for f in fields(SystemConfig)}
        unknown = sorted(set(config_data) - known)

        if unknown:
            self.logger.warning(f"Ignoring unknown config sections: {unknown}")

        return SystemConfig(**{k: v or {} for k, v in config_data.items() if k in known})

    def _load_config_file(self, config_path: Path) -> Dict[str, Any]:
        """Load configuration from YAML or JSON file."""
        try:
            with open(config_path, "r") as f:
                if config_path.suffix.lower() in [".yaml", ".yml"]:
                    data = yaml.safe_load(f)
                elif config_path.suffix.lower() == ".json":
                    data = json.load(f)
                else:
                    raise ValueError(f"Unsupported config format: {config_path.suffix}")

        except (OSError, ValueError, yaml.YAMLError) as e:
            self.logger.error(f"Failed to load config {config_path}: {e}")
            return {}

        if not isinstance(data, dict):
            self.logger.error(f"Config {config_path} is not a mapping")
            return {}

        return data

    def _apply_env_overrides(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides."""
        overrides: Dict[str, Any] = {}

        for key, value in os.environ.items():
            if key.startswith(self.env_prefix):
                config_key = key[len(self.env_prefix):].lower()
                config_path = [part for part in config_key.split("__") if part]

                if not config_path:
                    continue

                self._set_nested_value(overrides, config_path, self._parse_env_value(value))

        if overrides:
            config_data = self._merge_configs(config_data, overrides)
            self.logger.info(f"Applied {len(overrides)} environment overrides")

        return config_data

    def _parse_env_value(self, value: str) -> Any:
        """Parse environment variable value to appropriate type."""
        # Try boolean
        if value.lower() in ["true", "false"]:
            return value.lower() == "true"

        # Try integer
        try:
            return int(value)
        except ValueError:
            pass

        # Try float
        try:
            return float(value)
        except ValueError:
            pass

        # Try JSON for complex types
        try:
            return json.loads(value)
        except ValueError:
            pass

        return value

    def _set_nested_value(self, config: Dict[str, Any], path: List[str], value: Any):
        """Set value in nested dictionary."""
        current = config
        for key in path[:-1]:
            if key not in current:
                current[key] = {}
            current = current[key]

        current[path[-1]] = value

    def _merge_configs(
        self, base_config: Dict[str, Any], override_config: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Recursively merge configuration dictionaries."""
        result = copy.deepcopy(base_config)

        for key, value in override_config.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value

        return result

    def save_config(self, config: SystemConfig, output_path: str):
        """Save configuration to file."""
        output_path = Path(output_path)

        config_dict = asdict(config)

        with open(output_path, "w") as f:
            if output_path.suffix.lower() in [".yaml", ".yml"]:
                yaml.safe_dump(config_dict, f, default_flow_style=False, indent=2)
            else:
                json.dump(config_dict, f, indent=2)

        self.logger.info(f"Configuration saved to {output_path}")


# Convenience functions
def load_config(config_path: Optional[str] = None) -> SystemConfig:
    """Load system configuration."""
    if config_path:
        custom_path = Path(config_path)
        manager = ConfigManager(str(custom_path.parent))
        if custom_path.exists():
            return manager.load_file(custom_path)
        manager.logger.warning(f"Config file not found: {custom_path}")
        return manager.build_config(manager._apply_env_overrides({}))

    return ConfigManager().load_config("main")


def _is_coordinate(value: Any) -> bool:
    return (
        isinstance(value, (list, tuple))
        and len(value) == 3
        and all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in value)
    )


def validate_config(config: SystemConfig) -> Dict[str, List[str]]:
    """
    Validate system configuration.

    Returns:
        Dictionary of validation errors by section
    """
    errors = {}

    # Grid dimensions
    grid_errors = []
    dimensions = []
    for key in ("max_x", "max_y", "max_z"):
        value = config.grid.get(key, 3)
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            grid_errors.append(f"{key} must be a positive integer, got {value!r}")
        dimensions.append(value)

    if grid_errors:
        errors["grid"] = grid_errors

    # Step costs
    pathfinding_errors = []
    for key in ("orthogonal_cost", "diagonal_cost"):
        if key in config.pathfinding:
            value = config.pathfinding[key]
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                pathfinding_errors.append(f"{key} must be positive, got {value!r}")

    if pathfinding_errors:
        errors["pathfinding"] = pathfinding_errors

    # Scenario endpoints and obstacles
    scenario_errors = []
    for key in ("start", "target"):
        if key in config.scenario and not _is_coordinate(config.scenario[key]):
            scenario_errors.append(f"{key} must be an [x, y, z] triple")

    for entry in config.scenario.get("unwalkable_nodes", []) or []:
        if not _is_coordinate(entry):
            scenario_errors.append(f"unwalkable node {entry!r} must be an [x, y, z] triple")

    if not grid_errors:
        for key in ("start", "target"):
            point = config.scenario.get(key)
            if _is_coordinate(point) and not all(
                0 <= round(p) < d for p, d in zip(point, dimensions)
            ):
                scenario_errors.append(f"{key} {list(point)} is outside grid {tuple(dimensions)}")

    if scenario_errors:
        errors["scenario"] = scenario_errors

    return errors
