"""
Configuration management for termplay
"""

import os
import tempfile
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from loguru import logger

from .console import print_error


@dataclass
class PlayerConfig:
    """Configuration for the mpv audio engine."""

    mpv_socket_path: Optional[str] = None
    volume_max: int = 300  # mpv --volume-max, must cover the 3.0 gain ceiling
    poll_interval: float = 0.1  # Seconds between end-of-item checks
    startup_timeout: float = 5.0

    def socket_path(self) -> str:
        """Socket path to hand to mpv, unique per process unless configured."""
        if self.mpv_socket_path:
            return self.mpv_socket_path
        return str(Path(tempfile.gettempdir()) / f"termplay-mpv-{os.getpid()}")


@dataclass
class LibraryConfig:
    """Configuration for turning files and directories into songs."""

    supported_formats: List[str] = field(default_factory=list)  # Empty = any file
    scan_recursive: bool = False

    def accepts(self, path: Path) -> bool:
        """Check whether a scanned file should become a song."""
        if not self.supported_formats:
            return True
        return path.suffix.lower() in {f.lower() for f in self.supported_formats}


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file: Optional[str] = None  # Default: ~/.local/share/termplay/termplay.log
    max_file_size_mb: int = 10
    backup_count: int = 5

    def log_file_path(self) -> Path:
        if self.log_file:
            return Path(self.log_file).expanduser()
        return get_data_dir() / "termplay.log"


@dataclass
class Config:
    """Main configuration object."""

    player: PlayerConfig = field(default_factory=PlayerConfig)
    library: LibraryConfig = field(default_factory=LibraryConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "termplay"
    return Path.home() / ".config" / "termplay"


def get_data_dir() -> Path:
    """Get the data directory path."""
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / "termplay"
    return Path.home() / ".local" / "share" / "termplay"


def get_config_path() -> Path:
    """Get the main configuration file path.

    Checks for config.toml in the following order:
    1. Current working directory
    2. XDG_CONFIG_HOME/termplay (or ~/.config/termplay)
    """
    local_config = Path.cwd() / "config.toml"
    if local_config.exists():
        return local_config

    return get_config_dir() / "config.toml"


def create_default_config() -> str:
    """Create a default configuration TOML content."""
    return """
# termplay configuration

[player]
# Path for mpv socket (a per-process temp path if not specified)
# mpv_socket_path = "/tmp/termplay-mpv"

# Highest volume mpv accepts, in percent (300 = 3.0x gain)
volume_max = 300

# Seconds between checks whether the current song has finished
poll_interval = 0.1

# Seconds to wait for mpv to come up
startup_timeout = 5.0

[library]
# File extensions to pick up when scanning a directory (empty = every file)
supported_formats = []

# Also scan subdirectories
scan_recursive = false

[logging]
# Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
level = "INFO"

# Custom log file path (default: ~/.local/share/termplay/termplay.log)
# log_file = "/path/to/termplay.log"

# Maximum log file size in MB before rotation
max_file_size_mb = 10

# Number of backup log files to keep
backup_count = 5
""".strip()


def parse_config(toml_data: dict) -> Config:
    """Build a Config from parsed TOML, falling back to defaults per key."""
    config = Config()

    if "player" in toml_data:
        player_data = toml_data["player"]
        config.player = PlayerConfig(
            mpv_socket_path=player_data.get("mpv_socket_path"),
            volume_max=int(player_data.get("volume_max", config.player.volume_max)),
            poll_interval=float(
                player_data.get("poll_interval", config.player.poll_interval)
            ),
            startup_timeout=float(
                player_data.get("startup_timeout", config.player.startup_timeout)
            ),
        )

    if "library" in toml_data:
        library_data = toml_data["library"]
        config.library = LibraryConfig(
            supported_formats=list(
                library_data.get("supported_formats", config.library.supported_formats)
            ),
            scan_recursive=library_data.get(
                "scan_recursive", config.library.scan_recursive
            ),
        )

    if "logging" in toml_data:
        logging_data = toml_data["logging"]
        log_file = logging_data.get("log_file")
        if log_file:
            log_file = str(Path(log_file).expanduser())
        config.logging = LoggingConfig(
            level=logging_data.get("level", config.logging.level).upper(),
            log_file=log_file,
            max_file_size_mb=logging_data.get(
                "max_file_size_mb", config.logging.max_file_size_mb
            ),
            backup_count=logging_data.get("backup_count", config.logging.backup_count),
        )

    return config


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from file or create default."""
    config_path = config_path or get_config_path()

    if not config_path.exists():
        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(config_path, "w", encoding="utf-8") as f:
                f.write(create_default_config() + "\n")
            logger.info(f"Created default configuration at: {config_path}")
        except OSError as e:
            logger.warning(f"Could not write default configuration: {e}")
        return Config()

    try:
        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)
        return parse_config(toml_data)

    except (OSError, tomllib.TOMLDecodeError, TypeError, ValueError) as e:
        logger.error(f"Error loading configuration from {config_path}: {e}")
        print_error(f"Error loading configuration from {config_path}: {e}")
        print_error("Using default configuration.")
        return Config()
