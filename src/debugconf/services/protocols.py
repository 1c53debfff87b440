"""Interfaces for the external collaborators of the resolver.

Each is injected through ``ConfigurationResolver.__init__`` so tests and
hosts can substitute their own implementations.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol, Sequence

from ..models.configurations import AttachCandidate, ProjectInfo, ProjectRef

logger = logging.getLogger(__name__)


class ProjectInfoService(Protocol):
    """The project-information service (usually a language server)."""

    def is_running(self) -> bool: ...

    def get_solution_path_or_folder(self) -> Optional[str]: ...

    async def request_workspace_information(self) -> ProjectInfo: ...


class AttachItemsProvider(Protocol):
    """Lists processes that can be attached to."""

    async def get_attach_items(self) -> List[AttachCandidate]: ...


class ProjectSelector(Protocol):
    """Picks one of several runnable projects. Returns None when cancelled."""

    async def select(self, projects: Sequence[ProjectRef]) -> Optional[ProjectRef]: ...


class Notifier(Protocol):
    """Delivers user-facing messages."""

    def error(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...


class LoggingNotifier:
    """Notifier that writes user-facing messages to the log."""

    def error(self, message: str) -> None:
        logger.error(message)

    def warning(self, message: str) -> None:
        logger.warning(message)


class FixedProjectSelector:
    """Selects the project whose name or path equals ``choice``.

    Without a choice, or when nothing matches, the selection is treated
    as cancelled.
    """

    def __init__(self, choice: Optional[str] = None) -> None:
        self.choice = choice

    async def select(self, projects: Sequence[ProjectRef]) -> Optional[ProjectRef]:
        if not self.choice:
            return None
        for project in projects:
            if self.choice in (project.name, project.path):
                return project
        logger.warning("No runnable project named %r", self.choice)
        return None
