"""Path helpers for workspace folders and the ``${workspaceFolder}`` placeholder."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Union

WORKSPACE_FOLDER_TOKEN = "${workspaceFolder}"


def resolve_workspace_path(
    path: Union[str, Path],
    workspace_folder: Union[str, Path],
) -> Path:
    """Anchor a configuration path at the workspace folder.

    Used for values such as ``envFile`` after placeholder substitution: an
    absolute value is only canonicalized, a relative one is taken to be
    relative to the folder the configuration belongs to.

    Examples:
        >>> resolve_workspace_path("config/dev.env", "/work")
        Path("/work/config/dev.env")
    """
    path_obj = Path(path)
    if path_obj.is_absolute():
        return path_obj.resolve()
    return (Path(workspace_folder).resolve() / path_obj).resolve()


def make_relative_to_workspace(
    path: Union[str, Path],
    workspace_folder: Union[str, Path],
) -> Path:
    """Express a project artifact path relative to the workspace folder.

    The result is what follows the placeholder in generated payloads, e.g.
    ``${workspaceFolder}/App/bin/Debug/net8.0/App.dll``.

    Raises:
        ValueError: ``path`` lies outside the workspace folder, in which case
            callers keep the absolute path instead of using the placeholder
    """
    path_obj = Path(path).resolve()
    folder_obj = Path(workspace_folder).resolve()

    try:
        return path_obj.relative_to(folder_obj)
    except ValueError as e:
        raise ValueError(
            f"{path_obj} is outside workspace folder {folder_obj}"
        ) from e


def is_subfolder_of(parent: Union[str, Path], child: Union[str, Path]) -> bool:
    """Return True if ``child`` is ``parent`` or lies beneath it.

    Both paths are compared after normalization, component by component,
    so ``/work/app2`` is not considered a subfolder of ``/work/app``.
    """
    parent_parts = Path(os.path.normpath(parent)).parts
    child_parts = Path(os.path.normpath(child)).parts
    if os.name == "nt":
        parent_parts = tuple(p.lower() for p in parent_parts)
        child_parts = tuple(p.lower() for p in child_parts)
    return child_parts[: len(parent_parts)] == parent_parts


def substitute_workspace_folder(
    value: str,
    workspace_folder: Union[str, Path],
    token: str = WORKSPACE_FOLDER_TOKEN,
) -> str:
    """Replace every occurrence of the workspace-folder token in ``value``."""
    return value.replace(token, os.path.abspath(workspace_folder))
