"""Configuration file parser for debugconf."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # Fallback for Python 3.10

CONFIG_FILE_NAME = ".debugconf.toml"

# Environment overrides (also read from a .env file if present)
ENV_LOG_LEVEL = "DEBUGCONF_LOG_LEVEL"
ENV_PROJECT_PATH = "DEBUGCONF_PROJECT_PATH"


@dataclass
class DebugSettings:
    """Settings for generated and resolved debug configurations."""

    type: str = "coreclr"
    placeholder: str = "${workspaceFolder}"
    console_options: str = "openOnSessionStart"
    # Return the fallback pair (instead of nothing) for a mismatched folder
    fallback_on_workspace_mismatch: bool = True


@dataclass
class BuildSettings:
    """Settings for the generated build task."""

    command: str = "dotnet"
    task_label: str = "build"
    configuration: str = "Debug"
    write_tasks_json: bool = False


@dataclass
class LoggingSettings:
    level: str = "INFO"


@dataclass
class DebugConfSettings:
    """Complete debugconf configuration."""

    debug: DebugSettings = field(default_factory=DebugSettings)
    build: BuildSettings = field(default_factory=BuildSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    # Project root for resolving paths
    project_root: Path = field(default_factory=Path.cwd)

    def resolve_path(self, path_template: str) -> str:
        """Resolve template variables in paths.

        Supports:
            ${PROJECT_ROOT} - absolute path to project root
            ${workspaceFolder} - same as ${PROJECT_ROOT}
        """
        result = path_template.replace("${PROJECT_ROOT}", str(self.project_root))
        return result.replace(self.debug.placeholder, str(self.project_root))


def find_config_file(project_path: Path) -> Optional[Path]:
    """Find .debugconf.toml in project root.

    Args:
        project_path: Root path of the project

    Returns:
        Path to .debugconf.toml if found, None otherwise
    """
    config_file = project_path / CONFIG_FILE_NAME
    if config_file.exists():
        return config_file
    return None


def get_project_path() -> str:
    """Project path from the environment (or .env), falling back to cwd."""
    load_dotenv()
    return os.getenv(ENV_PROJECT_PATH) or os.getcwd()


def load_config(project_path: Path) -> DebugConfSettings:
    """Load configuration from .debugconf.toml or use defaults.

    Args:
        project_path: Root path of the project

    Returns:
        DebugConfSettings with loaded or default configuration
    """
    load_dotenv()
    config = DebugConfSettings(project_root=Path(project_path))

    config_file = find_config_file(Path(project_path))
    data = {}
    if config_file:
        try:
            with open(config_file, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError):
            # If TOML parsing fails, use defaults
            data = {}

    if "debug" in data:
        debug_data = data["debug"]
        config.debug.type = debug_data.get("type", config.debug.type)
        config.debug.placeholder = debug_data.get(
            "placeholder", config.debug.placeholder
        )
        config.debug.console_options = debug_data.get(
            "console_options", config.debug.console_options
        )
        config.debug.fallback_on_workspace_mismatch = debug_data.get(
            "fallback_on_workspace_mismatch", True
        )

    if "build" in data:
        build_data = data["build"]
        config.build.command = build_data.get("command", config.build.command)
        config.build.task_label = build_data.get("task_label", config.build.task_label)
        config.build.configuration = build_data.get(
            "configuration", config.build.configuration
        )
        config.build.write_tasks_json = build_data.get("write_tasks_json", False)

    if "logging" in data:
        config.logging.level = data["logging"].get("level", config.logging.level)

    # Environment wins over the file
    env_level = os.getenv(ENV_LOG_LEVEL)
    if env_level:
        config.logging.level = env_level

    config.logging.level = config.logging.level.upper()
    return config
