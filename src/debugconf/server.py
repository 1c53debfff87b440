from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import DebugConfSettings, load_config
from .models.configurations import AttachCandidate
from .services.attach import PsAttachItemsProvider
from .services.projects import MsBuildProjectInfoService
from .services.protocols import (
    AttachItemsProvider,
    FixedProjectSelector,
    Notifier,
    ProjectInfoService,
)
from .services.resolver import ConfigurationResolver


class DebugConfServer:
    """Server facade wiring the resolver to its default collaborators.

    Project metadata comes from MSBuild files on disk and attach
    candidates from ``ps``; both can be replaced by passing other
    implementations.
    """

    def __init__(
        self,
        project_path: Optional[str] = None,
        project_info: Optional[ProjectInfoService] = None,
        attach_items_provider: Optional[AttachItemsProvider] = None,
        notifier: Optional[Notifier] = None,
        settings: Optional[DebugConfSettings] = None,
    ) -> None:
        self.project_path = project_path or os.getcwd()
        self.settings = settings or load_config(Path(self.project_path))
        self.project_info = project_info or MsBuildProjectInfoService(
            self.project_path, configuration=self.settings.build.configuration
        )
        self.attach_items_provider = attach_items_provider or PsAttachItemsProvider()
        self.notifier = notifier

    def _resolver(self, startup_project: Optional[str] = None) -> ConfigurationResolver:
        # Built per call; no resolver state survives between requests
        return ConfigurationResolver(
            server=self.project_info,
            attach_items_provider=self.attach_items_provider,
            selector=FixedProjectSelector(startup_project),
            notifier=self.notifier,
            settings=self.settings,
        )

    async def provide_debug_configurations(
        self,
        folder: Optional[str] = None,
        startup_project: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        return await self._resolver(startup_project).provide_initial_configurations(
            folder or self.project_path
        )

    async def resolve_debug_configuration(
        self,
        configuration: Dict[str, Any],
        folder: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        return await self._resolver().resolve_configuration(
            folder or self.project_path, dict(configuration)
        )

    async def list_attach_candidates(self) -> List[AttachCandidate]:
        return await self.attach_items_provider.get_attach_items()
