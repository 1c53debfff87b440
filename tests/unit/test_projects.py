"""Unit tests for the MSBuild-backed project-information service."""

from pathlib import Path

import pytest

from debugconf.services.projects import MsBuildProjectInfoService, read_project
from tests.fixtures.msbuild_projects import WEB_CSPROJ


class TestReadProject:
    """Tests for read_project()."""

    def test_console_project(self, dotnet_workspace: Path):
        project = read_project(dotnet_workspace / "App" / "App.csproj")

        assert project.name == "App"
        assert project.is_executable is True
        assert project.is_web is False
        assert project.target_framework == "net8.0"
        assert project.target_path == str(
            dotnet_workspace / "App" / "bin" / "Debug" / "net8.0" / "App.dll"
        )

    def test_library_project(self, dotnet_workspace: Path):
        project = read_project(dotnet_workspace / "Lib" / "Lib.csproj")

        assert project.is_executable is False
        # First of several target frameworks
        assert project.target_framework == "net8.0"

    def test_web_project_uses_assembly_name(self, workspace_dir: Path):
        csproj = workspace_dir / "Web.csproj"
        csproj.write_text(WEB_CSPROJ)

        project = read_project(csproj, configuration="Release")

        assert project.is_web is True
        assert project.is_executable is True
        assert project.name == "Storefront"
        assert project.target_path.endswith(str(Path("Release", "net8.0", "Storefront.dll")))

    def test_legacy_namespace(self, workspace_dir: Path):
        csproj = workspace_dir / "Old.csproj"
        csproj.write_text(
            '<Project xmlns="http://schemas.microsoft.com/developer/msbuild/2003">'
            "<PropertyGroup><OutputType>WinExe</OutputType>"
            "<TargetFramework>net48</TargetFramework></PropertyGroup></Project>"
        )

        project = read_project(csproj)

        assert project.is_executable is True
        assert project.target_framework == "net48"


class TestMsBuildProjectInfoService:
    """Tests for MsBuildProjectInfoService."""

    def test_reports_solution_file(self, dotnet_workspace: Path):
        service = MsBuildProjectInfoService(str(dotnet_workspace))

        assert service.is_running()
        assert service.get_solution_path_or_folder() == str(dotnet_workspace / "App.sln")

    def test_reports_folder_without_solution(self, workspace_dir: Path):
        service = MsBuildProjectInfoService(str(workspace_dir))

        assert service.get_solution_path_or_folder() == str(workspace_dir)

    def test_not_running_for_missing_root(self, workspace_dir: Path):
        assert not MsBuildProjectInfoService(str(workspace_dir / "missing")).is_running()

    @pytest.mark.asyncio
    async def test_scans_projects(self, dotnet_workspace: Path):
        service = MsBuildProjectInfoService(str(dotnet_workspace))

        info = await service.request_workspace_information()

        assert sorted(p.name for p in info.projects) == ["App", "Lib"]
        assert [p.name for p in info.executable_projects] == ["App"]
        assert info.solution_path == str(dotnet_workspace / "App.sln")

    @pytest.mark.asyncio
    async def test_skips_malformed_project(self, dotnet_workspace: Path):
        (dotnet_workspace / "Broken").mkdir()
        (dotnet_workspace / "Broken" / "Broken.csproj").write_text("<Project>")

        info = await MsBuildProjectInfoService(str(dotnet_workspace)).request_workspace_information()

        assert "Broken" not in [p.name for p in info.projects]
