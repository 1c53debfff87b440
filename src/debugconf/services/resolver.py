from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..config import DebugConfSettings
from ..errors import (
    MissingType,
    NoRunnableProject,
    OperationCancelled,
    PatternSubstitutionError,
    ProjectInfoUnavailable,
    SelectionCancelled,
    WorkspaceMismatch,
)
from ..models.configurations import (
    AttachConfiguration,
    GenerationResult,
    LaunchConfiguration,
    parse_debug_configuration,
)
from ..utils.path import resolve_workspace_path, substitute_workspace_folder
from . import attach, env_file, workspace_matcher
from .assets import AssetGenerator, add_tasks_json_if_necessary, create_fallback_configurations
from .protocols import (
    AttachItemsProvider,
    LoggingNotifier,
    Notifier,
    ProjectInfoService,
    ProjectSelector,
)

logger = logging.getLogger(__name__)

Folder = Optional[Union[str, Path]]


def _check_cancelled(cancel_event: Optional[asyncio.Event], operation: str) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise OperationCancelled(operation)


class ConfigurationResolver:
    """Provides and resolves debug configurations for a workspace folder.

    Two public operations, each entered once per host call:

    - provide_initial_configurations: generate configurations for a folder,
      falling back to minimal templates when generation is not possible
    - resolve_configuration: complete a user configuration before launch

    All collaborators are injected so hosts and tests can substitute them.
    """

    def __init__(
        self,
        server: ProjectInfoService,
        attach_items_provider: AttachItemsProvider,
        selector: Optional[ProjectSelector] = None,
        notifier: Optional[Notifier] = None,
        settings: Optional[DebugConfSettings] = None,
    ) -> None:
        self.server = server
        self.attach_items_provider = attach_items_provider
        self.selector = selector
        self.notifier = notifier or LoggingNotifier()
        self.settings = settings or DebugConfSettings()

    @property
    def token(self) -> str:
        return self.settings.debug.placeholder

    async def generate_assets(
        self,
        folder: Union[str, Path],
        cancel_event: Optional[asyncio.Event] = None,
    ) -> GenerationResult:
        """Run the generation path, returning every soft failure as a result."""
        reported = self.server.get_solution_path_or_folder()
        if not workspace_matcher.matches(reported, folder):
            return GenerationResult.failure(WorkspaceMismatch(str(folder), reported))

        try:
            _check_cancelled(cancel_event, "provide_initial_configurations")
            info = await self.server.request_workspace_information()
            _check_cancelled(cancel_event, "provide_initial_configurations")
        except OperationCancelled as e:
            return GenerationResult.failure(e)
        except ProjectInfoUnavailable as e:
            return GenerationResult.failure(e)
        except OSError as e:
            return GenerationResult.failure(ProjectInfoUnavailable(str(e)))

        generator = AssetGenerator(info, folder, self.settings)
        return await generator.generate(self.selector)

    def _map_generation_error(
        self, error: Optional[Exception], folder: Union[str, Path]
    ) -> List[Dict[str, Any]]:
        fallback = create_fallback_configurations(self.settings)

        if isinstance(error, OperationCancelled):
            logger.info("%s", error)
            return []
        if isinstance(error, SelectionCancelled):
            logger.info("No startup project selected for %s", folder)
            return []
        if isinstance(error, WorkspaceMismatch):
            self.notifier.error(str(error))
            if self.settings.debug.fallback_on_workspace_mismatch:
                return fallback
            return []
        if isinstance(error, NoRunnableProject):
            logger.info("No runnable project in %s, providing default configurations", folder)
            return fallback
        if isinstance(error, ProjectInfoUnavailable):
            logger.warning("Project information unavailable: %s", error)
            return fallback

        # Any other generation error still yields usable templates
        logger.warning("Configuration generation failed: %s", error)
        return fallback

    async def provide_initial_configurations(
        self,
        folder: Folder,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> List[Dict[str, Any]]:
        """Return initial debug configurations for ``folder``.

        Never raises for soft errors: returns generated configurations,
        the fallback launch/attach pair, or an empty list after reporting
        the problem through the notifier.
        """
        if not folder:
            self.notifier.error(
                "Cannot create .NET debug configurations. No workspace folder was selected."
            )
            return []

        if not self.server.is_running():
            self.notifier.error(
                "Cannot create .NET debug configurations. "
                "The project information service is still initializing or has exited unexpectedly."
            )
            return []

        result = await self.generate_assets(folder, cancel_event)
        if not result.ok:
            return self._map_generation_error(result.error, folder)

        assets = result.assets
        if self.settings.build.write_tasks_json:
            try:
                await add_tasks_json_if_necessary(folder, assets.build_task)
            except OSError as e:
                self.notifier.warning(f"Unable to write tasks.json: {e}")

        return assets.launch_configurations

    def _substitute(self, field_name: str, value: str, folder: Folder) -> str:
        if self.token not in value:
            return value
        if not folder:
            raise PatternSubstitutionError(field_name, value)
        return substitute_workspace_folder(value, folder, self.token)

    async def _resolve_attach(
        self,
        config: AttachConfiguration,
        folder: Folder,
        cancel_event: Optional[asyncio.Event],
    ) -> AttachConfiguration:
        pattern = self._substitute("processCommand", config.process_command, folder)
        candidates = await self.attach_items_provider.get_attach_items()
        _check_cancelled(cancel_event, "resolve_configuration")

        config.process_id = attach.resolve(pattern, folder or "", candidates, self.token)
        config.process_command = None
        return config

    async def _resolve_launch(
        self,
        config: LaunchConfiguration,
        folder: Folder,
    ) -> LaunchConfiguration:
        if not config.cwd and not config.pipe_transport:
            config.cwd = self.token
        if not config.internal_console_options:
            config.internal_console_options = self.settings.debug.console_options

        if config.env_file:
            path = self._substitute("envFile", config.env_file, folder)
            if folder:
                path = str(resolve_workspace_path(path, folder))
            try:
                config.env, parsed = await env_file.resolve_env_file(path, config.env)
            finally:
                # envFile is not a runtime field
                config.env_file = None

            message = parsed.warning_message(path)
            if message:
                self.notifier.warning(message)

        return config

    async def resolve_configuration(
        self,
        folder: Folder,
        config: Dict[str, Any],
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Optional[Dict[str, Any]]:
        """Fill in the missing attributes of a configuration about to run.

        Returns:
            The resolved configuration, or None when the configuration
            cannot be completed and the user should edit it directly.

        Raises:
            AttachNotFound, AttachAmbiguous: processCommand is not exact
            EnvFileUnreadable: envFile cannot be read
            PatternSubstitutionError: a placeholder needs a missing folder
            OperationCancelled: the cancellation signal was observed
        """
        try:
            typed = parse_debug_configuration(config)
        except MissingType as e:
            # Not functional; ask the host to open the configuration file
            logger.info("%s", e)
            return None

        if typed is None:
            logger.warning("Unsupported request %r in configuration", config.get("request"))
            return None

        _check_cancelled(cancel_event, "resolve_configuration")

        if isinstance(typed, AttachConfiguration):
            if typed.process_command:
                typed = await self._resolve_attach(typed, folder, cancel_event)
            return typed.to_dict()

        typed = await self._resolve_launch(typed, folder)
        return typed.to_dict()

