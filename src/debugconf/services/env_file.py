"""Environment-definition file (envFile) parsing.

Format: UTF-8 text, one ``KEY=VALUE`` per line. Blank lines and lines
starting with ``#`` are ignored. One layer of matching single or double
quotes is stripped from the value; no escape sequences are processed.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from ..errors import EnvFileUnreadable
from ..models.configurations import EnvFileEntry, EnvFileWarning, ParsedEnvFile

logger = logging.getLogger(__name__)

COMMENT_MARKER = "#"
_BOM = "\ufeff"


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def parse(contents: str) -> ParsedEnvFile:
    """Parse envFile contents into ordered entries and per-line warnings.

    A malformed line (no ``=`` or an empty key) produces a warning and is
    skipped; it never discards the other lines.
    """
    result = ParsedEnvFile()
    if contents.startswith(_BOM):
        contents = contents[len(_BOM):]

    # Only "\n" ends a line; other Unicode line breaks belong to the value
    for line_number, raw in enumerate(contents.split("\n"), start=1):
        if raw.endswith("\r"):
            raw = raw[:-1]
        line = raw.strip()
        if not line or line.startswith(COMMENT_MARKER):
            continue

        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key:
            result.warnings.append(EnvFileWarning(line=line_number, text=raw))
            continue

        result.entries.append(
            EnvFileEntry(key=key, value=_strip_quotes(value.strip()), line=line_number)
        )

    return result


def merge_env(
    parsed: ParsedEnvFile,
    existing_env: Optional[Dict[str, str]] = None,
) -> Dict[str, str]:
    """Merge file entries under the caller's mapping.

    File entries have the lowest precedence: a key already present in
    ``existing_env`` is left untouched.
    """
    merged = parsed.as_dict()
    merged.update(existing_env or {})
    return merged


def _read_text(path: Path) -> str:
    # utf-8-sig drops a BOM written by Windows editors
    return path.read_text(encoding="utf-8-sig")


async def resolve_env_file(
    path: Union[str, Path],
    existing_env: Optional[Dict[str, str]] = None,
) -> Tuple[Dict[str, str], ParsedEnvFile]:
    """Read, parse and merge an envFile.

    Args:
        path: Absolute path of the envFile
        existing_env: Environment already present on the configuration

    Returns:
        Tuple of (merged environment, parsed file with warnings)

    Raises:
        EnvFileUnreadable: If the file is missing or cannot be read
    """
    env_path = Path(path)
    try:
        contents = await asyncio.to_thread(_read_text, env_path)
    except (OSError, UnicodeDecodeError) as e:
        raise EnvFileUnreadable(str(path), e) from e

    parsed = parse(contents)
    if parsed.warnings:
        logger.debug(
            "envFile %s: %d non-parseable line(s)", path, len(parsed.warnings)
        )
    return merge_env(parsed, existing_env), parsed
