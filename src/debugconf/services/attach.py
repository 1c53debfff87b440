"""Attach target resolution.

Matches a ``processCommand`` pattern against running processes. Exactly
one process must match; zero or several are errors.
"""

from __future__ import annotations

import asyncio
import logging
import re
import sys
from pathlib import Path
from typing import List, Sequence, Union

from ..errors import AttachAmbiguous, AttachNotFound
from ..models.configurations import AttachCandidate
from ..utils.path import WORKSPACE_FOLDER_TOKEN, substitute_workspace_folder

logger = logging.getLogger(__name__)

COMM_COLUMN_WIDTH = 50

_PS_LINE = re.compile(r"^\s*(\d+) (.*)$")


def resolve(
    process_command: str,
    workspace_folder: Union[str, Path],
    candidates: Sequence[AttachCandidate],
    token: str = WORKSPACE_FOLDER_TOKEN,
) -> str:
    """Resolve a process command pattern to a single process id.

    Args:
        process_command: Command line to look for; may contain the workspace token
        workspace_folder: Folder substituted for the token
        candidates: Currently running processes
        token: Workspace-folder placeholder

    Returns:
        The id of the only matching process

    Raises:
        AttachNotFound: No process has exactly this command line
        AttachAmbiguous: More than one process has this command line
    """
    command = substitute_workspace_folder(process_command, workspace_folder, token)
    found = [c for c in candidates if c.detail == command]

    if not found:
        raise AttachNotFound(command)
    if len(found) > 1:
        raise AttachAmbiguous(len(found), command)

    logger.debug("Resolved processCommand %r to pid %s", command, found[0].id)
    return found[0].id


class PsAttachItemsProvider:
    """Lists processes on POSIX systems using ``ps``."""

    # Wide output so long command lines are not truncated. The comm column
    # gets a fixed-width title so names containing spaces stay in their column.
    PS_ARGS = ["ps", "-axww", "-o", f"pid=,comm={'a' * COMM_COLUMN_WIDTH},args="]

    async def get_attach_items(self) -> List[AttachCandidate]:
        if sys.platform == "win32":
            raise RuntimeError("Process listing via ps is not available on Windows")

        process = await asyncio.create_subprocess_exec(
            *self.PS_ARGS,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await process.communicate()

        if process.returncode != 0:
            raise RuntimeError(
                f"Failed to list processes: {stderr.decode(errors='replace')[:200]}"
            )

        return parse_ps_output(stdout.decode(errors="replace"))


def parse_ps_output(output: str) -> List[AttachCandidate]:
    """Parse ``ps -o pid=,comm=<title>,args=`` output.

    ``comm`` is padded to ``COMM_COLUMN_WIDTH`` characters, so it is sliced
    by position; ``args`` is the remainder of the line. The header line and
    anything not starting with a pid are skipped.
    """
    items: List[AttachCandidate] = []
    for line in output.splitlines():
        match = _PS_LINE.match(line)
        if not match:
            continue
        pid, rest = match.group(1), match.group(2)
        comm = rest[:COMM_COLUMN_WIDTH].strip()
        args = rest[COMM_COLUMN_WIDTH + 1:].strip()
        if not comm and not args:
            continue
        detail = args or comm
        items.append(AttachCandidate(id=pid, name=Path(comm).name or comm, detail=detail))
    return items
