# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Maps identifiers (type or module names) to project source files.

Resolution matches the identifier exactly against each source file's base name
with the extension stripped: `Dependency` resolves to `.../Dependency.swift`.

Known precision limit: one name maps to at most one file. Types declared in a
file with a different name, extensions split across `Type+Feature.swift`
files, and several files sharing a base name in different modules are not
disambiguated. When base names collide, the first file in sorted traversal
order wins, so the result is deterministic for a given source tree.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

from swift_context.errors import DependencyNotFoundError
from swift_context.fs_utils import DEFAULT_SOURCE_EXTENSION, canonical_path, source_files

logger = logging.getLogger(__name__)


class IdentifierResolver:
    """Resolves identifiers against the source files of one project.

    The source tree is indexed on first use and reused for the lifetime of the
    resolver; source files are not expected to change during a run. Call
    refresh() to pick up added or removed files.
    """

    def __init__(
        self,
        project_root: Path,
        sources_dir: str = "Sources",
        extension: str = DEFAULT_SOURCE_EXTENSION,
    ) -> None:
        """Initialize resolver.

        Args:
            project_root: Root directory of the project.
            sources_dir: Directory under the root that is searched.
            extension: Source file extension including the dot.
        """
        self.project_root = canonical_path(project_root)
        self.sources_path = self.project_root / sources_dir
        self.extension = extension
        self._index: Optional[Dict[str, Path]] = None

    def _build_index(self) -> Dict[str, Path]:
        index: Dict[str, Path] = {}
        for path in source_files(self.sources_path, self.extension):
            stem = path.stem
            if stem in index:
                logger.debug(
                    f"Base name '{stem}' is ambiguous: keeping {index[stem]}, ignoring {path}"
                )
                continue
            index[stem] = path
        logger.debug(f"Indexed {len(index)} source files under {self.sources_path}")
        return index

    @property
    def index(self) -> Dict[str, Path]:
        if self._index is None:
            self._index = self._build_index()
        return self._index

    def refresh(self) -> None:
        """Drop the index so the next lookup re-enumerates the source tree."""
        self._index = None

    def candidates(self) -> List[Path]:
        """All indexed source files, in index order."""
        return list(self.index.values())

    def resolve(self, identifier: str) -> Optional[Path]:
        """Return the file whose base name equals the identifier, or None."""
        return self.index.get(identifier.strip())

    def require(self, identifier: str) -> Path:
        """Like resolve(), for callers that treat a miss as an error.

        Raises:
            DependencyNotFoundError: If no file matches the identifier.
        """
        path = self.resolve(identifier)
        if path is None:
            raise DependencyNotFoundError(identifier)
        return path
