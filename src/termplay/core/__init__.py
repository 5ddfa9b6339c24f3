"""Core infrastructure layer - no business logic dependencies.

This module provides foundation-level services:
- Configuration management (TOML)
- Logging and user-facing output (Loguru)
- Console management (Rich)
"""

from .config import (
    Config,
    LibraryConfig,
    LoggingConfig,
    PlayerConfig,
    create_default_config,
    get_config_dir,
    get_config_path,
    get_data_dir,
    load_config,
)
from .console import get_console, get_error_console, print_error, safe_print
from .exceptions import TermplayError
from .output import log, setup_loguru

__all__ = [
    # Config
    "Config",
    "LibraryConfig",
    "LoggingConfig",
    "PlayerConfig",
    "create_default_config",
    "get_config_dir",
    "get_config_path",
    "get_data_dir",
    "load_config",
    # Console
    "get_console",
    "get_error_console",
    "print_error",
    "safe_print",
    # Errors
    "TermplayError",
    # Output
    "log",
    "setup_loguru",
]
