# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Filesystem helpers: file identity, source enumeration, timestamps, module paths.

File identity is the absolute, symlink-resolved path, so that relative and
absolute spellings of the same file (or a path through /tmp -> /private/tmp)
compare equal everywhere the graph and cache key on it.
"""

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Union

from swift_context.errors import InvalidModuleError, SourceFileNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_EXTENSION = ".swift"


def canonical_path(path: Union[str, Path]) -> Path:
    """Return the canonical identity of a file (absolute, symlinks resolved)."""
    return Path(path).expanduser().resolve()


def is_hidden(path: Path) -> bool:
    return path.name.startswith(".")


def source_files(directory: Path, extension: str = DEFAULT_SOURCE_EXTENSION) -> List[Path]:
    """Recursively list source files under a directory, skipping hidden entries.

    Entries are visited in sorted order so the result is deterministic for a
    given tree.

    Args:
        directory: Root directory of the search.
        extension: Source file extension including the dot.

    Returns:
        Canonical paths of matching files. Empty if the directory does not exist.
    """
    if not directory.is_dir():
        logger.warning(f"Source directory not found: {directory}")
        return []

    results: List[Path] = []
    stack: List[Path] = [directory]
    while stack:
        current = stack.pop()
        try:
            entries = sorted(current.iterdir(), key=lambda p: p.name)
        except OSError as e:
            logger.warning(f"Cannot list directory {current}: {e}")
            continue

        subdirectories: List[Path] = []
        for entry in entries:
            if is_hidden(entry):
                continue
            if entry.is_dir():
                subdirectories.append(entry)
            elif entry.is_file() and entry.suffix == extension:
                results.append(canonical_path(entry))

        # Reversed so the stack pops subdirectories in sorted order
        stack.extend(reversed(subdirectories))

    return results


def modification_time(path: Path) -> float:
    """Return st_mtime of a file.

    Raises:
        SourceFileNotFoundError: If the file does not exist or cannot be stat'ed.
    """
    try:
        return os.stat(path).st_mtime
    except OSError as e:
        raise SourceFileNotFoundError(path) from e


def modification_date(path: Path) -> datetime:
    """Return the modification time of a file as a timezone-aware datetime."""
    return datetime.fromtimestamp(modification_time(path), tz=timezone.utc)


def read_source(path: Path) -> str:
    """Read a source file as UTF-8, falling back to latin-1.

    Raises:
        SourceFileNotFoundError: If the file is missing, a directory, or unreadable.
    """
    if not path.is_file():
        raise SourceFileNotFoundError(path)
    try:
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            logger.warning(f"File {path} is not UTF-8, using latin-1 fallback encoding")
            return path.read_text(encoding="latin-1")
    except OSError as e:
        raise SourceFileNotFoundError(path) from e


def determine_module(
    file: Path,
    project_root: Optional[Path] = None,
    sources_dir: str = "Sources",
) -> str:
    """Derive the owning module of a file from the `Sources/<Module>/` convention.

    The path is inspected relative to the project root when the file lies
    inside it, so a `Sources` directory above the project does not count. The
    module segment must be a directory: a file placed directly in `Sources/`
    has no module.

    Raises:
        InvalidModuleError: If no `<sources_dir>/<Module>/` segment is present.
    """
    parts = file.parts
    if project_root is not None:
        try:
            parts = file.relative_to(project_root).parts
        except ValueError:
            pass

    if sources_dir in parts:
        index = parts.index(sources_dir)
        # parts[-1] is the file name itself
        if index + 1 < len(parts) - 1:
            return parts[index + 1]

    raise InvalidModuleError(str(file))
