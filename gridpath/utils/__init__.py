"""
Core Utilities Module
Configuration loading and logging setup.
"""

from gridpath.utils.config_loader import ConfigManager, SystemConfig, load_config, validate_config
from gridpath.utils.logger import SystemLogger, get_logger, log_exceptions, setup_logging

__all__ = [
    # Config
    "ConfigManager",
    "SystemConfig",
    "load_config",
    "validate_config",
    # Logging
    "SystemLogger",
    "setup_logging",
    "get_logger",
    "log_exceptions",
]
