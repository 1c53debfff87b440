"""In-memory collaborators for resolver tests."""

from __future__ import annotations

from typing import List, Optional, Sequence

from debugconf.models.configurations import AttachCandidate, ProjectInfo, ProjectRef


class FakeProjectInfoService:
    """Project-information service returning canned data."""

    def __init__(
        self,
        info: Optional[ProjectInfo] = None,
        solution_path: Optional[str] = None,
        running: bool = True,
        error: Optional[Exception] = None,
    ) -> None:
        self.info = info or ProjectInfo()
        self.solution_path = solution_path
        self.running = running
        self.error = error
        self.requests = 0

    def is_running(self) -> bool:
        return self.running

    def get_solution_path_or_folder(self) -> Optional[str]:
        return self.solution_path

    async def request_workspace_information(self) -> ProjectInfo:
        self.requests += 1
        if self.error:
            raise self.error
        return self.info


class FakeAttachItemsProvider:
    def __init__(self, items: Optional[List[AttachCandidate]] = None) -> None:
        self.items = items or []

    async def get_attach_items(self) -> List[AttachCandidate]:
        return list(self.items)


class FakeSelector:
    """Selector that records the candidates and returns a fixed answer."""

    def __init__(self, answer: Optional[ProjectRef] = None) -> None:
        self.answer = answer
        self.offered: Sequence[ProjectRef] = ()

    async def select(self, projects: Sequence[ProjectRef]) -> Optional[ProjectRef]:
        self.offered = projects
        return self.answer


def make_project(folder, name: str, executable: bool = True, web: bool = False) -> ProjectRef:
    return ProjectRef(
        path=str(folder / name / f"{name}.csproj"),
        name=name,
        is_executable=executable,
        is_web=web,
        target_framework="net8.0",
        target_path=str(folder / name / "bin" / "Debug" / "net8.0" / f"{name}.dll"),
    )
