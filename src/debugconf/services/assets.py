"""Launch and build asset generation.

Turns project metadata for a workspace folder into default ``launch``
and ``attach`` configurations plus a build task.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import json5

from ..config import DebugConfSettings
from ..errors import DebugConfigError, NoRunnableProject, SelectionCancelled
from ..models.configurations import AssetSet, GenerationResult, ProjectInfo, ProjectRef
from ..utils.path import make_relative_to_workspace
from .protocols import ProjectSelector

logger = logging.getLogger(__name__)

TASKS_VERSION = "2.0.0"
VSCODE_FOLDER = ".vscode"
PICK_PROCESS = "${command:pickProcess}"
SERVER_READY_PATTERN = "\\bNow listening on:\\s+(https?://\\S+)"


def create_fallback_launch_configuration(
    settings: Optional[DebugConfSettings] = None,
) -> Dict[str, Any]:
    """Minimal console launch template used when generation is not possible."""
    settings = settings or DebugConfSettings()
    token = settings.debug.placeholder
    return {
        "name": ".NET Core Launch (console)",
        "type": settings.debug.type,
        "request": "launch",
        "preLaunchTask": settings.build.task_label,
        "program": f"{token}/bin/Debug/<insert-target-framework-here>/<insert-project-name-here>.dll",
        "args": [],
        "cwd": token,
        "console": "internalConsole",
        "stopAtEntry": False,
        "env": {},
    }


def create_attach_configuration(
    settings: Optional[DebugConfSettings] = None,
) -> Dict[str, Any]:
    settings = settings or DebugConfSettings()
    return {
        "name": ".NET Core Attach",
        "type": settings.debug.type,
        "request": "attach",
        "processId": PICK_PROCESS,
    }


def create_fallback_configurations(
    settings: Optional[DebugConfSettings] = None,
) -> List[Dict[str, Any]]:
    return [
        create_fallback_launch_configuration(settings),
        create_attach_configuration(settings),
    ]


def _is_equivalent_task(a: Dict[str, Any], b: Dict[str, Any]) -> bool:
    if a.get("label") and a.get("label") == b.get("label"):
        return True
    return (
        a.get("command") == b.get("command")
        and a.get("args") == b.get("args")
        and a.get("command") is not None
    )


def ensure_tasks_present(
    existing_tasks: Optional[Dict[str, Any]],
    new_task: Dict[str, Any],
) -> Dict[str, Any]:
    """Add ``new_task`` to a tasks document unless an equivalent task exists.

    Tasks are equivalent when they share a label, or the same command and
    arguments. Unrelated tasks and top-level fields are preserved.
    """
    document = dict(existing_tasks or {})
    document.setdefault("version", TASKS_VERSION)
    tasks = list(document.get("tasks") or [])

    if not any(_is_equivalent_task(task, new_task) for task in tasks):
        tasks.append(new_task)

    document["tasks"] = tasks
    return document


def _load_tasks_json(path: Path) -> Optional[Dict[str, Any]]:
    """Read an existing tasks document; comments and trailing commas are allowed.

    Raises:
        ValueError: The file is not decodable or not shaped like a tasks document
    """
    if not path.exists():
        return None
    document = json5.loads(path.read_text(encoding="utf-8"))
    if not isinstance(document, dict):
        raise ValueError("top-level value is not an object")
    tasks = document.get("tasks")
    if tasks is not None and not (
        isinstance(tasks, list) and all(isinstance(task, dict) for task in tasks)
    ):
        raise ValueError('"tasks" is not a list of objects')
    return document


def _write_tasks_json(path: Path, document: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(document, indent=4) + "\n", encoding="utf-8")


async def add_tasks_json_if_necessary(
    workspace_folder: Union[str, Path],
    build_task: Dict[str, Any],
) -> bool:
    """Merge the build task into ``.vscode/tasks.json``.

    Returns:
        True if the file was written, False if it already had the task
        or could not be parsed (it is never overwritten in that case).
    """
    tasks_path = Path(workspace_folder) / VSCODE_FOLDER / "tasks.json"
    try:
        existing = await asyncio.to_thread(_load_tasks_json, tasks_path)
    except ValueError as e:
        logger.warning("Not updating %s, it could not be read: %s", tasks_path, e)
        return False

    merged = ensure_tasks_present(existing, build_task)
    if existing is not None and merged["tasks"] == existing.get("tasks"):
        return False

    await asyncio.to_thread(_write_tasks_json, tasks_path, merged)
    logger.info("Wrote build task '%s' to %s", build_task.get("label"), tasks_path)
    return True


class AssetGenerator:
    """Generates launch/build assets for one workspace folder.

    Instances are created per call and hold no state shared between calls.
    """

    def __init__(
        self,
        project_info: ProjectInfo,
        workspace_folder: Union[str, Path],
        settings: Optional[DebugConfSettings] = None,
    ) -> None:
        self.project_info = project_info
        self.workspace_folder = Path(workspace_folder)
        self.settings = settings or DebugConfSettings(project_root=self.workspace_folder)
        self.startup_project: Optional[ProjectRef] = None

    def has_executable_projects(self) -> bool:
        return bool(self.project_info.executable_projects)

    async def select_startup_project(
        self, selector: Optional[ProjectSelector] = None
    ) -> ProjectRef:
        """Choose the project to launch.

        Raises:
            NoRunnableProject: No project is runnable
            SelectionCancelled: Several are runnable and the choice was declined
        """
        candidates = self.project_info.executable_projects
        if not candidates:
            raise NoRunnableProject(str(self.workspace_folder))

        if len(candidates) == 1:
            self.startup_project = candidates[0]
            return self.startup_project

        selected = await selector.select(candidates) if selector else None
        if selected is None:
            raise SelectionCancelled()

        self.startup_project = selected
        return selected

    def has_web_server_dependency(self) -> bool:
        return bool(self.startup_project and self.startup_project.is_web)

    def _require_startup_project(self) -> ProjectRef:
        if self.startup_project is None:
            raise NoRunnableProject(str(self.workspace_folder))
        return self.startup_project

    def _workspace_relative(self, path: Union[str, Path]) -> str:
        token = self.settings.debug.placeholder
        try:
            relative = make_relative_to_workspace(path, self.workspace_folder)
        except ValueError:
            return Path(path).as_posix()
        return f"{token}/{relative.as_posix()}"

    def compute_program_path(self) -> str:
        project = self._require_startup_project()
        if project.target_path:
            return self._workspace_relative(project.target_path)

        token = self.settings.debug.placeholder
        framework = project.target_framework or "<insert-target-framework-here>"
        return (
            f"{token}/bin/{self.settings.build.configuration}/"
            f"{framework}/{project.name}.dll"
        )

    def create_launch_configuration(self, is_web: bool) -> Dict[str, Any]:
        token = self.settings.debug.placeholder
        config: Dict[str, Any] = {
            "name": ".NET Core Launch (web)" if is_web else ".NET Core Launch (console)",
            "type": self.settings.debug.type,
            "request": "launch",
            "preLaunchTask": self.settings.build.task_label,
            "program": self.compute_program_path(),
            "args": [],
            "cwd": token,
            "stopAtEntry": False,
        }

        if is_web:
            config["serverReadyAction"] = {
                "action": "openExternally",
                "pattern": SERVER_READY_PATTERN,
            }
            config["env"] = {"ASPNETCORE_ENVIRONMENT": "Development"}
            config["sourceFileMap"] = {"/Views": f"{token}/Views"}
        else:
            config["console"] = "internalConsole"
            config["env"] = {}

        return config

    def create_launch_configurations(self, is_web: bool) -> List[Dict[str, Any]]:
        return [
            self.create_launch_configuration(is_web),
            create_attach_configuration(self.settings),
        ]

    def create_build_task(self) -> Dict[str, Any]:
        project = self._require_startup_project()
        return {
            "label": self.settings.build.task_label,
            "command": self.settings.build.command,
            "type": "process",
            "args": [
                "build",
                self._workspace_relative(project.path),
                "/property:GenerateFullPaths=true",
                "/consoleloggerparameters:NoSummary",
            ],
            "problemMatcher": "$msCompile",
        }

    async def generate(self, selector: Optional[ProjectSelector] = None) -> GenerationResult:
        """Build the full asset set.

        Soft failures (no runnable project, cancelled selection) are
        returned in the result instead of being raised.
        """
        if not self.has_executable_projects():
            return GenerationResult.failure(NoRunnableProject(str(self.workspace_folder)))

        try:
            project = await self.select_startup_project(selector)
        except DebugConfigError as e:
            return GenerationResult.failure(e)

        is_web = self.has_web_server_dependency()
        logger.info(
            "Generating %s configuration for %s",
            "web" if is_web else "console",
            project.name,
        )
        return GenerationResult.success(
            AssetSet(
                startup_project=project,
                launch_configurations=self.create_launch_configurations(is_web),
                build_task=self.create_build_task(),
                is_web=is_web,
            )
        )
