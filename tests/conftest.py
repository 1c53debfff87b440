"""Pytest configuration and shared fixtures."""

import tempfile
from pathlib import Path
from typing import Generator
from unittest.mock import MagicMock

import pytest

from debugconf.config import DebugConfSettings
from debugconf.models.configurations import ProjectInfo
from tests.fixtures.msbuild_projects import CONSOLE_CSPROJ, LIBRARY_CSPROJ
from tests.helpers.fakes import (
    FakeAttachItemsProvider,
    FakeProjectInfoService,
    make_project,
)


@pytest.fixture
def workspace_dir() -> Generator[Path, None, None]:
    """Create an empty workspace folder."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def dotnet_workspace(workspace_dir: Path) -> Path:
    """Create a workspace with one console app and one class library.

    Creates:
        workspace/
            App.sln
            App/App.csproj          (runnable)
            Lib/Lib.csproj          (library)
            Lib/obj/Ignored.csproj  (build output, never scanned)
    """
    (workspace_dir / "App.sln").write_text("Microsoft Visual Studio Solution File\n")
    (workspace_dir / "App").mkdir()
    (workspace_dir / "App" / "App.csproj").write_text(CONSOLE_CSPROJ)
    (workspace_dir / "Lib" / "obj").mkdir(parents=True)
    (workspace_dir / "Lib" / "Lib.csproj").write_text(LIBRARY_CSPROJ)
    (workspace_dir / "Lib" / "obj" / "Ignored.csproj").write_text(CONSOLE_CSPROJ)
    return workspace_dir


@pytest.fixture
def settings(workspace_dir: Path) -> DebugConfSettings:
    return DebugConfSettings(project_root=workspace_dir)


@pytest.fixture
def notifier() -> MagicMock:
    return MagicMock()


@pytest.fixture
def console_info(workspace_dir: Path) -> ProjectInfo:
    return ProjectInfo(
        projects=[
            make_project(workspace_dir, "App"),
            make_project(workspace_dir, "Lib", executable=False),
        ],
        solution_path=str(workspace_dir),
    )


@pytest.fixture
def project_service(workspace_dir: Path, console_info: ProjectInfo) -> FakeProjectInfoService:
    return FakeProjectInfoService(info=console_info, solution_path=str(workspace_dir))


@pytest.fixture
def attach_provider() -> FakeAttachItemsProvider:
    return FakeAttachItemsProvider()
