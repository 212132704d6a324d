"""Configuration loading for rpglemap."""

from settings.config import (
    CONFIG_FILENAME,
    ConfigError,
    RpgleMapConfig,
    load_config,
    resolve_output_dir,
)

__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "RpgleMapConfig",
    "load_config",
    "resolve_output_dir",
]
