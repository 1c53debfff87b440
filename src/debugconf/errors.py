"""Error taxonomy for configuration generation and resolution.

Soft errors are caught by the orchestrator and turned into fallback
configurations or an empty result. Hard errors abort
``resolve_configuration`` and are surfaced verbatim to the user.
"""

from __future__ import annotations

from typing import Optional


class DebugConfigError(Exception):
    """Base class for every error raised by debugconf."""

    soft: bool = False


class WorkspaceMismatch(DebugConfigError):
    """Raised when the reported project location is not under the folder."""

    soft = True

    def __init__(self, folder: str, reported_location: Optional[str] = None):
        self.folder = folder
        self.reported_location = reported_location
        super().__init__(
            "Cannot create .NET debug configurations. "
            f"The active C# project is not within folder '{folder}'."
        )


class NoRunnableProject(DebugConfigError):
    """Raised when no discovered project produces an executable."""

    soft = True

    def __init__(self, folder: Optional[str] = None):
        self.folder = folder
        super().__init__("Does not contain .NET Core projects.")


class SelectionCancelled(DebugConfigError):
    """Raised when the user declines to pick a startup project."""

    soft = True

    def __init__(self) -> None:
        super().__init__("Startup project selection was cancelled.")


class ProjectInfoUnavailable(DebugConfigError):
    """Raised when the project-information service cannot answer."""

    soft = True


class MissingType(DebugConfigError):
    """Raised when a configuration has no ``type`` tag."""

    soft = True

    def __init__(self) -> None:
        super().__init__("Debug configuration is missing its 'type' field.")


class OperationCancelled(DebugConfigError):
    """Raised when the caller's cancellation signal was observed."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Operation '{operation}' was cancelled.")


class EnvFileUnreadable(DebugConfigError):
    """Raised when an environment-definition file cannot be read."""

    def __init__(self, path: str, reason: Exception):
        self.path = path
        self.reason = reason
        super().__init__(f"Can't parse envFile {path} because of {reason}")


class AttachNotFound(DebugConfigError):
    """Raised when no running process matches the process command."""

    def __init__(self, process_command: str):
        self.process_command = process_command
        super().__init__(
            f'Couldn\'t find a process with the command "{process_command}"'
        )


class AttachAmbiguous(DebugConfigError):
    """Raised when more than one running process matches."""

    def __init__(self, count: int, process_command: str):
        self.count = count
        self.process_command = process_command
        super().__init__(
            f'Found {count} processes with the command "{process_command}"'
        )


class PatternSubstitutionError(DebugConfigError):
    """Raised when a placeholder cannot be substituted (no workspace folder)."""

    def __init__(self, field_name: str, value: str):
        self.field_name = field_name
        self.value = value
        super().__init__(
            f"Cannot resolve '{field_name}' value \"{value}\": "
            "no workspace folder is open."
        )
