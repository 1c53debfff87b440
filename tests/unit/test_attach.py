"""Unit tests for attach target resolution."""

import os
from unittest.mock import AsyncMock, patch

import pytest

from debugconf.errors import AttachAmbiguous, AttachNotFound
from debugconf.models.configurations import AttachCandidate
from debugconf.services.attach import (
    COMM_COLUMN_WIDTH,
    PsAttachItemsProvider,
    parse_ps_output,
    resolve,
)


def _candidate(pid: str, detail: str) -> AttachCandidate:
    return AttachCandidate(id=pid, name=detail.split()[0], detail=detail)


class TestResolve:
    """Tests for resolve()."""

    def test_single_match(self):
        candidates = [_candidate("1", "node app.js"), _candidate("2", "dotnet App.dll")]

        assert resolve("node app.js", "/work", candidates) == "1"

    def test_ambiguous(self):
        candidates = [_candidate("1", "node app.js"), _candidate("2", "node app.js")]

        with pytest.raises(AttachAmbiguous) as exc_info:
            resolve("node app.js", "/work", candidates)

        assert exc_info.value.count == 2
        assert exc_info.value.process_command == "node app.js"
        assert "2 processes" in str(exc_info.value)

    def test_not_found(self):
        candidates = [_candidate("1", "node other.js")]

        with pytest.raises(AttachNotFound) as exc_info:
            resolve("node app.js", "/work", candidates)

        assert exc_info.value.process_command == "node app.js"

    def test_no_candidates(self):
        with pytest.raises(AttachNotFound):
            resolve("node app.js", "/work", [])

    def test_substitutes_every_placeholder(self, workspace_dir):
        folder = os.path.abspath(workspace_dir)
        detail = f"dotnet {folder}/bin/App.dll --root {folder}"
        candidates = [_candidate("42", detail)]

        pid = resolve(
            "dotnet ${workspaceFolder}/bin/App.dll --root ${workspaceFolder}",
            workspace_dir,
            candidates,
        )

        assert pid == "42"

    def test_not_found_names_substituted_pattern(self, workspace_dir):
        with pytest.raises(AttachNotFound) as exc_info:
            resolve("dotnet ${workspaceFolder}/App.dll", workspace_dir, [])

        assert "${workspaceFolder}" not in exc_info.value.process_command
        assert os.path.abspath(workspace_dir) in exc_info.value.process_command

    def test_no_partial_matching(self):
        candidates = [_candidate("1", "node app.js --verbose")]

        with pytest.raises(AttachNotFound):
            resolve("node app.js", "/work", candidates)


class TestPsOutput:
    """Tests for ps output parsing."""

    @staticmethod
    def _line(pid: str, comm: str, args: str = "") -> str:
        return f"{pid:>5} {comm.ljust(COMM_COLUMN_WIDTH)} {args}".rstrip()

    def test_parse_lines(self):
        output = "\n".join(
            [
                " " * 6 + "a" * COMM_COLUMN_WIDTH,
                self._line("1", "init", "/sbin/init splash"),
                self._line("312", "dotnet", "dotnet /work/bin/App.dll"),
                self._line("400", "kworker"),
            ]
        )

        items = parse_ps_output(output)

        assert [i.id for i in items] == ["1", "312", "400"]
        assert items[1].name == "dotnet"
        assert items[1].detail == "dotnet /work/bin/App.dll"
        assert items[2].detail == "kworker"

    def test_name_with_spaces_stays_out_of_detail(self):
        output = self._line(
            "42", "Web Content", "/usr/lib/firefox/firefox -contentproc"
        )

        items = parse_ps_output(output)

        assert items == [
            AttachCandidate(
                id="42",
                name="Web Content",
                detail="/usr/lib/firefox/firefox -contentproc",
            )
        ]
        assert resolve(
            "/usr/lib/firefox/firefox -contentproc", "/work", items
        ) == "42"

    def test_executable_path_with_spaces(self):
        output = self._line(
            "77",
            "/Applications/My App.app/Contents/MacOS/My App",
            "/Applications/My App.app/Contents/MacOS/My App --flag",
        )

        items = parse_ps_output(output)

        assert items[0].name == "My App"
        assert items[0].detail == "/Applications/My App.app/Contents/MacOS/My App --flag"

    def test_skips_garbage(self):
        assert parse_ps_output("PID COMMAND\n\n") == []

    @pytest.mark.asyncio
    async def test_provider_runs_ps(self):
        process = AsyncMock()
        line = self._line("7", "sleep", "sleep 100") + "\n"
        process.communicate.return_value = (line.encode(), b"")
        process.returncode = 0

        with patch(
            "asyncio.create_subprocess_exec", AsyncMock(return_value=process)
        ) as mock_exec:
            items = await PsAttachItemsProvider().get_attach_items()

        assert mock_exec.call_args.args[0] == "ps"
        assert f"comm={'a' * COMM_COLUMN_WIDTH}" in mock_exec.call_args.args[-1]
        assert items == [AttachCandidate(id="7", name="sleep", detail="sleep 100")]

    @pytest.mark.asyncio
    async def test_provider_failure_raises(self):
        process = AsyncMock()
        process.communicate.return_value = (b"", b"ps: illegal option")
        process.returncode = 1

        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=process)):
            with pytest.raises(RuntimeError, match="Failed to list processes"):
                await PsAttachItemsProvider().get_attach_items()
