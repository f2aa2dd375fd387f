# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Interface between dependency analysis and its consumers.

ContextGenerator and the MCP server depend only on DependencyAnalyzing, so a
test double (or another language's analyzer) can be injected at construction.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Set

from swift_context.fs_utils import canonical_path, determine_module, modification_date, read_source
from swift_context.models import FileContext, FrontMatter


class DependencyAnalyzing(ABC):
    """Abstract dependency analyzer.

    Only analyze() is required. The default file_context() reads the file
    afresh and lists every analyzed dependency in its front matter;
    implementations with a cache override it to return their snapshot.
    """

    @abstractmethod
    def analyze(self, file: Path) -> Set[Path]:
        """Return the canonical paths of the project files `file` depends on.

        Raises:
            SourceFileNotFoundError: If the file does not exist.
            SwiftSyntaxError: If the file cannot be parsed.
            InvalidModuleError: If the file is not under Sources/<Module>/.
        """
        pass

    def direct_dependencies(self, file: Path) -> Set[Path]:
        """Dependencies listed in a file's front matter."""
        return self.analyze(file)

    def file_context(self, file: Path) -> FileContext:
        """Content and front matter of one file."""
        path = canonical_path(file)
        front_matter = FrontMatter(
            file=path.name,
            module=determine_module(path),
            dependencies=[dependency.name for dependency in self.direct_dependencies(path)],
            updated_at=modification_date(path),
        )
        return FileContext(path=path, content=read_source(path), front_matter=front_matter)
