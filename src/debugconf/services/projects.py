"""Default project-information service backed by MSBuild project files.

Used when no language server is available: scans the workspace for
``*.sln`` and ``*.csproj`` files and reads the few properties needed to
decide whether a project is runnable and whether it is a web project.
"""

from __future__ import annotations

import asyncio
import logging
import os
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List, Optional

from ..errors import ProjectInfoUnavailable
from ..models.configurations import ProjectInfo, ProjectRef

logger = logging.getLogger(__name__)

PROJECT_GLOB = "*.csproj"
SOLUTION_GLOB = "*.sln"
EXECUTABLE_OUTPUT_TYPES = {"exe", "winexe"}
WEB_SDKS = {"microsoft.net.sdk.web"}

# Directories never scanned for projects
IGNORED_DIRS = {".git", ".vs", ".vscode", "bin", "obj", "node_modules"}
MAX_DEPTH = 4


def _property(root: ET.Element, name: str) -> Optional[str]:
    # MSBuild files may or may not declare the legacy namespace
    for element in root.iter():
        if element.tag.rsplit("}", 1)[-1] == name and element.text:
            return element.text.strip()
    return None


def read_project(path: Path, configuration: str = "Debug") -> ProjectRef:
    """Read one ``.csproj`` file into a ProjectRef."""
    root = ET.parse(path).getroot()

    sdk = (root.get("Sdk") or "").strip().lower()
    output_type = (_property(root, "OutputType") or "").lower()
    framework = _property(root, "TargetFramework")
    if not framework:
        frameworks = _property(root, "TargetFrameworks")
        framework = frameworks.split(";")[0].strip() if frameworks else None
    assembly = _property(root, "AssemblyName") or path.stem

    is_web = sdk in WEB_SDKS
    target_path = None
    if framework:
        target_path = str(path.parent / "bin" / configuration / framework / f"{assembly}.dll")

    return ProjectRef(
        path=str(path),
        name=assembly,
        # Web SDK projects are executables even without an explicit OutputType
        is_executable=output_type in EXECUTABLE_OUTPUT_TYPES or is_web,
        is_web=is_web,
        target_framework=framework,
        target_path=target_path,
    )


def find_project_files(root: Path, pattern: str = PROJECT_GLOB) -> List[Path]:
    found: List[Path] = []
    root_depth = len(root.parts)
    for dirpath, dirs, _files in os.walk(root):
        current = Path(dirpath)
        if len(current.parts) - root_depth >= MAX_DEPTH:
            dirs.clear()
        dirs[:] = sorted(d for d in dirs if d not in IGNORED_DIRS)
        found.extend(sorted(current.glob(pattern)))
    return found


class MsBuildProjectInfoService:
    """Project-information service that reads project files from disk."""

    def __init__(self, root: str, configuration: str = "Debug") -> None:
        self.root = Path(root)
        self.configuration = configuration

    def is_running(self) -> bool:
        return self.root.is_dir()

    def get_solution_path_or_folder(self) -> Optional[str]:
        solutions = sorted(self.root.glob(SOLUTION_GLOB))
        if solutions:
            return str(solutions[0])
        return str(self.root)

    def _scan(self) -> ProjectInfo:
        projects = []
        for project_file in find_project_files(self.root):
            try:
                projects.append(read_project(project_file, self.configuration))
            except ET.ParseError as e:
                logger.warning("Skipping unreadable project %s: %s", project_file, e)
        solution = self.get_solution_path_or_folder()
        return ProjectInfo(projects=projects, solution_path=solution)

    async def request_workspace_information(self) -> ProjectInfo:
        try:
            return await asyncio.to_thread(self._scan)
        except OSError as e:
            raise ProjectInfoUnavailable(
                f"Cannot read projects under {self.root}: {e}"
            ) from e
