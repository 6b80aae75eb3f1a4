"""Configuration loading from environment variables and netmap.toml."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

APP_NAME = "my-network-mcp"
_CONFIG_FILENAME = "netmap.toml"
_MAP_FILENAME = "network-map.json"


def config_dir() -> Path:
    """Per-user application directory, e.g. ~/.config/my-network-mcp."""
    return Path.home() / ".config" / APP_NAME


def default_map_path() -> Path:
    return config_dir() / _MAP_FILENAME


@dataclass
class NetmapConfig:
    """Top-level configuration."""

    map_path: Path = field(default_factory=default_map_path)
    log_level: str = "INFO"


def load_config(config_path: Path | None = None, map_path: Path | None = None) -> NetmapConfig:
    """Load configuration from environment variables and optional netmap.toml.

    Priority: explicit ``map_path`` > environment variables > netmap.toml > defaults.
    """
    file_data: dict = {}
    if config_path and config_path.exists():
        file_data = tomllib.loads(config_path.read_text())
    else:
        # Search current dir and ~/.config/my-network-mcp/
        for candidate in [Path.cwd() / _CONFIG_FILENAME, config_dir() / _CONFIG_FILENAME]:
            if candidate.exists():
                file_data = tomllib.loads(candidate.read_text())
                break

    if map_path is None:
        map_path = Path(
            os.getenv("NETWORK_MAP_PATH") or file_data.get("map_path") or default_map_path()
        )

    return NetmapConfig(
        map_path=map_path.expanduser(),
        log_level=os.getenv("NETMAP_LOG_LEVEL", file_data.get("log_level", "INFO")),
    )
