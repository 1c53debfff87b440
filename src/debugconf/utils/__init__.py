"""Utility modules (path handling)."""

from .path import (
    is_subfolder_of,
    make_relative_to_workspace,
    resolve_workspace_path,
    substitute_workspace_folder,
)

__all__ = [
    "is_subfolder_of",
    "make_relative_to_workspace",
    "resolve_workspace_path",
    "substitute_workspace_folder",
]
