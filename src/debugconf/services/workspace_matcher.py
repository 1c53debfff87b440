from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, Union

from ..utils.path import is_subfolder_of

logger = logging.getLogger(__name__)


def matches(
    reported_location: Optional[Union[str, Path]],
    workspace_folder: Union[str, Path],
) -> bool:
    """Check that ``workspace_folder`` is covered by the reported project location.

    The project-information service may only report context for one folder
    of a multi-folder workspace, so configurations are only generated for
    folders equal to or nested under the reported location.

    Args:
        reported_location: Solution/project file or directory reported by the service
        workspace_folder: Folder the caller is asking about

    Returns:
        True if the folder is the server folder or one of its descendants.
        False for an empty location or a path that cannot be inspected.
    """
    if not reported_location or not workspace_folder:
        return False

    try:
        server_folder = Path(reported_location)
        # A .sln/.csproj file stands for the directory that contains it
        if server_folder.is_file():
            server_folder = server_folder.parent

        current_folder = os.path.abspath(workspace_folder)
        server_dir = os.path.abspath(server_folder)
    except (OSError, ValueError) as e:
        logger.debug("Cannot inspect reported location %s: %s", reported_location, e)
        return False

    return is_subfolder_of(server_dir, current_folder)
