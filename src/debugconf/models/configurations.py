from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Union

from ..errors import MissingType

# Wire keys interpreted by the resolver; everything else rides in ``extra``.
_LAUNCH_KEYS = {
    "type",
    "request",
    "name",
    "cwd",
    "env",
    "envFile",
    "internalConsoleOptions",
    "pipeTransport",
}
_ATTACH_KEYS = {"type", "request", "name", "processCommand", "processId"}


# Project metadata
@dataclass
class ProjectRef:
    """A project unit reported by the project-information service."""

    path: str  # Project file (e.g. App.csproj) or directory
    name: str
    is_executable: bool = False
    is_web: bool = False  # Depends on a web-server framework
    target_framework: Optional[str] = None
    target_path: Optional[str] = None  # Absolute path of the build output


@dataclass
class ProjectInfo:
    """Projects discoverable under a workspace folder."""

    projects: List[ProjectRef] = field(default_factory=list)
    solution_path: Optional[str] = None

    @property
    def executable_projects(self) -> List[ProjectRef]:
        return [p for p in self.projects if p.is_executable]


# Attach
@dataclass
class AttachCandidate:
    id: str
    name: str
    detail: str  # Full command line, compared against processCommand


# Environment files
@dataclass
class EnvFileEntry:
    key: str
    value: str
    line: int


@dataclass
class EnvFileWarning:
    """A line that could not be parsed. Advisory only."""

    line: int
    text: str

    def __str__(self) -> str:
        return f"line {self.line}: {self.text!r}"


@dataclass
class ParsedEnvFile:
    entries: List[EnvFileEntry] = field(default_factory=list)
    warnings: List[EnvFileWarning] = field(default_factory=list)

    def as_dict(self) -> Dict[str, str]:
        # Later duplicates win, matching shell semantics
        return {entry.key: entry.value for entry in self.entries}

    def warning_message(self, path: str) -> Optional[str]:
        if not self.warnings:
            return None
        lines = ", ".join(str(w) for w in self.warnings)
        return f"Ignoring non-parseable lines in envFile {path}: {lines}."


# Debug configurations
@dataclass
class LaunchConfiguration:
    type: Optional[str]
    name: Optional[str] = None
    cwd: Optional[str] = None
    env: Optional[Dict[str, str]] = None
    env_file: Optional[str] = None
    internal_console_options: Optional[str] = None
    pipe_transport: Optional[Dict[str, Any]] = None
    extra: Dict[str, Any] = field(default_factory=dict)
    request: Literal["launch"] = "launch"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LaunchConfiguration":
        return cls(
            type=data.get("type"),
            name=data.get("name"),
            cwd=data.get("cwd"),
            env=dict(data["env"]) if data.get("env") is not None else None,
            env_file=data.get("envFile"),
            internal_console_options=data.get("internalConsoleOptions"),
            pipe_transport=data.get("pipeTransport"),
            extra={k: v for k, v in data.items() if k not in _LAUNCH_KEYS},
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"type": self.type, "request": self.request}
        if self.name is not None:
            result["name"] = self.name
        result.update(self.extra)
        if self.cwd is not None:
            result["cwd"] = self.cwd
        if self.pipe_transport is not None:
            result["pipeTransport"] = self.pipe_transport
        if self.internal_console_options is not None:
            result["internalConsoleOptions"] = self.internal_console_options
        if self.env is not None:
            result["env"] = dict(self.env)
        if self.env_file is not None:
            result["envFile"] = self.env_file
        return result


@dataclass
class AttachConfiguration:
    type: Optional[str]
    name: Optional[str] = None
    process_command: Optional[str] = None
    process_id: Optional[Union[str, int]] = None
    extra: Dict[str, Any] = field(default_factory=dict)
    request: Literal["attach"] = "attach"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AttachConfiguration":
        return cls(
            type=data.get("type"),
            name=data.get("name"),
            process_command=data.get("processCommand"),
            process_id=data.get("processId"),
            extra={k: v for k, v in data.items() if k not in _ATTACH_KEYS},
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"type": self.type, "request": self.request}
        if self.name is not None:
            result["name"] = self.name
        result.update(self.extra)
        if self.process_command is not None:
            result["processCommand"] = self.process_command
        if self.process_id is not None:
            result["processId"] = self.process_id
        return result


DebugConfiguration = Union[LaunchConfiguration, AttachConfiguration]


def parse_debug_configuration(data: Dict[str, Any]) -> Optional[DebugConfiguration]:
    """Build the typed variant for a configuration document.

    Returns None when ``request`` is neither ``launch`` nor ``attach``.

    Raises:
        MissingType: The document has no ``type`` tag
    """
    if not data.get("type"):
        raise MissingType()
    request = data.get("request")
    if request == "launch":
        return LaunchConfiguration.from_dict(data)
    if request == "attach":
        return AttachConfiguration.from_dict(data)
    return None


# Generated assets
@dataclass
class AssetSet:
    """Configurations and build task generated for one folder."""

    startup_project: ProjectRef
    launch_configurations: List[Dict[str, Any]]
    build_task: Dict[str, Any]
    is_web: bool = False


@dataclass
class GenerationResult:
    """Outcome of asset generation: either ``assets`` or ``error`` is set."""

    assets: Optional[AssetSet] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.assets is not None

    @classmethod
    def success(cls, assets: AssetSet) -> "GenerationResult":
        return cls(assets=assets)

    @classmethod
    def failure(cls, error: Exception) -> "GenerationResult":
        return cls(error=error)
