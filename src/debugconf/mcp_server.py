"""MCP Server for debugconf.

Exposes debug configuration generation and resolution as MCP tools using FastMCP.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Optional

from mcp.server import FastMCP

from .config import get_project_path as _env_project_path
from .errors import DebugConfigError
from .server import DebugConfServer

logger = logging.getLogger(__name__)

# Global server instance and project path
_server: Optional[DebugConfServer] = None
_project_path: Optional[str] = None


mcp = FastMCP("debugconf")


def set_project_path(path: str) -> None:
    """Set the project path for the server."""
    global _project_path, _server
    _project_path = str(Path(path).resolve())
    _server = None


def get_project_path() -> str:
    """Get the current project path."""
    return _project_path or _env_project_path()


def get_server() -> DebugConfServer:
    """Get or create the server instance."""
    global _server
    if _server is None:
        _server = DebugConfServer(project_path=get_project_path())
    return _server


def _to_dict(obj: Any) -> Any:
    """Convert dataclass objects to dictionaries for JSON serialization."""
    if hasattr(obj, "__dataclass_fields__"):
        return asdict(obj)
    elif isinstance(obj, list):
        return [_to_dict(item) for item in obj]
    elif isinstance(obj, dict):
        return {k: _to_dict(v) for k, v in obj.items()}
    return obj


# ============================================================================
# Configuration Tools
# ============================================================================


@mcp.tool()
async def provide_debug_configurations(
    folder: str | None = None,
    startup_project: str | None = None,
) -> Dict[str, Any]:
    """Generate initial debug configurations for a workspace folder.

    Scans the folder for runnable .NET projects and returns a launch and an
    attach configuration. When no runnable project is found, minimal
    template configurations are returned instead.

    Args:
        folder: Workspace folder (defaults to the server's project path)
        startup_project: Project name or path to use when several projects
              are runnable. Without it, generation is cancelled in that case.

    Returns:
        - configurations: List of configuration documents (may be empty)
        - folder: The folder the configurations were generated for
    """
    server = get_server()
    target = folder or server.project_path
    configurations = await server.provide_debug_configurations(target, startup_project)
    return {"folder": target, "configurations": configurations}


@mcp.tool()
async def resolve_debug_configuration(
    configuration: Dict[str, Any],
    folder: str | None = None,
) -> Dict[str, Any]:
    """Complete a debug configuration before it is launched.

    - launch: fills in cwd and internalConsoleOptions, merges envFile into env
    - attach: resolves processCommand to exactly one processId

    Args:
        configuration: Configuration document as found in launch.json
        folder: Workspace folder (defaults to the server's project path)

    Returns:
        - configuration: The resolved configuration, or null when it must be
          edited by hand (e.g. it has no "type")
        - error: Message to show the user when resolution failed
    """
    server = get_server()
    try:
        resolved = await server.resolve_debug_configuration(configuration, folder)
    except DebugConfigError as e:
        return {"configuration": None, "error": str(e)}
    return {"configuration": resolved}


@mcp.tool()
async def list_attach_candidates() -> Dict[str, Any]:
    """List running processes that a debugger could attach to.

    Returns:
        - processes: List of {id, name, detail} where detail is the full
          command line matched by "processCommand"
    """
    server = get_server()
    try:
        items = await server.list_attach_candidates()
    except (RuntimeError, OSError) as e:
        return {"processes": [], "error": str(e)}
    return {"processes": _to_dict(items)}


@mcp.tool()
async def get_debugconf_config() -> Dict[str, Any]:
    """Get the current project path and effective settings.

    Settings come from .debugconf.toml in the project root, with
    DEBUGCONF_* environment variables taking precedence.
    """
    server = get_server()
    settings = server.settings
    return {
        "project_path": server.project_path,
        "project_name": Path(server.project_path).name,
        "debug": _to_dict(settings.debug),
        "build": _to_dict(settings.build),
        "logging": _to_dict(settings.logging),
    }


@mcp.resource("debugconf://docs/env-file")
async def get_env_file_guide() -> str:
    """Format of files referenced by a launch configuration's envFile."""
    return """# envFile Format

One variable per line:

```
# comments start with '#'
ASPNETCORE_URLS=http://localhost:5000
GREETING="hello world"
```

- Blank lines and comment lines are ignored
- One layer of surrounding single or double quotes is removed
- No escape sequences are processed
- Values already present in the configuration's "env" win over the file
- Lines without '=' are skipped and reported as a warning
"""


# ============================================================================
# Entry Point
# ============================================================================


def main():
    """Run the MCP server.

    The project path can be set via:
    1. First command line argument
    2. DEBUGCONF_PROJECT_PATH environment variable (or .env file)
    3. Current working directory (default)
    """
    # Allow setting project path from command line argument
    if len(sys.argv) > 1 and not sys.argv[1].startswith("-"):
        set_project_path(sys.argv[1])
        # Remove the argument so FastMCP doesn't see it
        sys.argv = [sys.argv[0]] + sys.argv[2:]

    server = get_server()

    # stdout is used for the MCP protocol
    logging.basicConfig(
        stream=sys.stderr,
        level=server.settings.logging.level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print("🚀 Starting debugconf MCP Server", file=sys.stderr)
    print(f"📂 Path: {server.project_path}", file=sys.stderr)
    print("", file=sys.stderr)

    mcp.run()


if __name__ == "__main__":
    main()
