# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Context bundle generation.

A bundle is one block per file (front matter header, blank line, raw
content): the requested file first, then each of its transitive
dependencies in path order, joined by blank lines and fitted to the token
budget.
"""

import logging
from pathlib import Path
from typing import List

from swift_context.analyzers.base import DependencyAnalyzing
from swift_context.fs_utils import canonical_path
from swift_context.models import FileContext
from swift_context.optimizer import TokenOptimizing

logger = logging.getLogger(__name__)

BLOCK_SEPARATOR = "\n\n"


class ContextGenerator:
    """Builds the context bundle for a Swift file.

    Both collaborators are injected, so tests can substitute doubles for the
    analyzer and the optimizer.
    """

    def __init__(self, analyzer: DependencyAnalyzing, optimizer: TokenOptimizing):
        self.analyzer = analyzer
        self.optimizer = optimizer

    def collect_contexts(self, file: Path) -> List[FileContext]:
        """Per-file contexts for a file and its dependencies, in bundle order."""
        root = canonical_path(file)
        dependencies = self.analyzer.analyze(root)

        contexts = [self.analyzer.file_context(root)]
        for dependency in sorted(dependencies):
            contexts.append(self.analyzer.file_context(dependency))
        return contexts

    def generate_context(self, file: Path) -> str:
        """Generate the optimized context bundle for a file.

        Raises:
            SwiftContextError: Any analysis error for the file or one of its
                dependencies. No partial bundle is produced.
        """
        contexts = self.collect_contexts(file)
        combined = BLOCK_SEPARATOR.join(context.formatted_content for context in contexts)
        logger.info(
            f"Generated context for {Path(file).name}: {len(contexts)} files",
            extra={"swift_file": Path(file).name, "dependency_count": len(contexts) - 1},
        )
        return self.optimizer.optimize(combined)
