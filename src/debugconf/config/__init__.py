"""Configuration management for debugconf."""

from .parser import (
    BuildSettings,
    DebugConfSettings,
    DebugSettings,
    LoggingSettings,
    find_config_file,
    get_project_path,
    load_config,
)

__all__ = [
    "BuildSettings",
    "DebugConfSettings",
    "DebugSettings",
    "LoggingSettings",
    "find_config_file",
    "get_project_path",
    "load_config",
]
