# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Dependency analyzer for Swift files.

This module implements the analysis pipeline for one file:
1. Cache check: reuse a valid cache entry without re-parsing
2. File reading: UTF-8 with latin-1 fallback
3. Parsing: tree-sitter Swift grammar via SwiftParser
4. Extraction: DependencyVisitor and TypeReferenceVisitor over the same tree
5. Resolution: non-system imports and referenced types mapped to project files
6. Graph update: one edge per resolved dependency
7. Caching: content and front matter snapshot keyed by file identity

analyze() runs that pipeline over the requested file and every file reachable
from it. Both cache hits and misses return the transitive closure, so callers
see the same result however warm the cache is. Edges are never removed; a
target that has since been deleted is left out of the closure.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

from swift_context.analyzers.base import DependencyAnalyzing
from swift_context.cache import ContextCache
from swift_context.config import Config
from swift_context.errors import DependencyNotFoundError, SourceFileNotFoundError
from swift_context.fs_utils import canonical_path, determine_module, modification_time, read_source
from swift_context.graph import DependencyGraph
from swift_context.models import CacheEntry, CacheStatistics, FileContext, FrontMatter
from swift_context.parser import SwiftParser
from swift_context.resolver import IdentifierResolver
from swift_context.visitors import VisitorContext, extract_references

logger = logging.getLogger(__name__)


class DependencyAnalyzer(DependencyAnalyzing):
    """Analyzes the type-level dependencies of Swift files within a project.

    The graph and cache are owned by the analyzer instance and live as long as
    it does. Analysis is single-threaded; share one analyzer per thread or
    serialize calls to it.

    Error handling:
    - Missing or unreadable file: SourceFileNotFoundError
    - Parser rejects content (strict_syntax): SwiftSyntaxError
    - Path outside Sources/<Module>/: InvalidModuleError
    - Unresolved identifier: no edge (DependencyNotFoundError for non-system
      imports when strict_imports is enabled)
    Errors abort analysis of the file and propagate; nothing is retried.
    """

    def __init__(
        self,
        project_root: Path,
        config: Optional[Config] = None,
        graph: Optional[DependencyGraph] = None,
        cache: Optional[ContextCache] = None,
        parser: Optional[SwiftParser] = None,
        resolver: Optional[IdentifierResolver] = None,
    ):
        """Initialize analyzer.

        Args:
            project_root: Root directory of the Swift package.
            config: Configuration. If None, loads .swift_context.yml from the project root.
            graph: Dependency graph to record edges in. If None, creates one.
            cache: Analysis cache. If None, creates one.
            parser: Swift parser. If None, creates one honoring config.strict_syntax.
            resolver: Identifier resolver. If None, indexes config.sources_dir.
        """
        self.project_root = canonical_path(project_root)
        self.config = config if config is not None else Config.for_project(self.project_root)
        self.graph = graph if graph is not None else DependencyGraph()
        self.cache = cache if cache is not None else ContextCache()
        self.parser = parser if parser is not None else SwiftParser(strict=self.config.strict_syntax)
        self.resolver = (
            resolver
            if resolver is not None
            else IdentifierResolver(
                self.project_root,
                sources_dir=self.config.sources_dir,
                extension=self.config.source_extension,
            )
        )

    def analyze(self, file: Path) -> Set[Path]:
        """Analyze a file and everything it reaches; return its transitive dependencies.

        Args:
            file: Path of the Swift file to analyze (relative or absolute).

        Returns:
            Canonical paths of every project file the file depends on, directly
            or indirectly. The file itself is never included.
        """
        root = canonical_path(file)
        if not root.is_file():
            raise SourceFileNotFoundError(root)

        pending: List[Path] = [root]
        seen: Set[Path] = {root}
        missing: Set[Path] = set()
        while pending:
            current = pending.pop()
            for dependency in self._analyze_file(current):
                if dependency in seen:
                    continue
                seen.add(dependency)
                # Edges outlive the files they point to
                if dependency.is_file():
                    pending.append(dependency)
                else:
                    missing.add(dependency)
                    logger.debug(f"Skipping {dependency}: no longer on disk")

        dependencies = seen - missing - {root}
        logger.info(
            f"Analyzed {root.name}: {len(dependencies)} dependencies",
            extra={"swift_file": root, "dependency_count": len(dependencies)},
        )
        return dependencies

    def direct_dependencies(self, file: Path) -> Set[Path]:
        """Files the given file depends on through exactly one edge, if still on disk."""
        path = canonical_path(file)
        self._analyze_file(path)
        return {dependency for dependency in self.graph.direct_edges(path) if dependency.is_file()}

    def file_context(self, file: Path) -> FileContext:
        """Cached content and front matter for a file, analyzing it if needed."""
        path = canonical_path(file)
        self._analyze_file(path)
        entry = self.cache.get(path)
        assert entry is not None
        return entry.context

    def get_statistics(self) -> CacheStatistics:
        return self.cache.get_statistics()

    def export_graph(self) -> Dict[str, Any]:
        """Export the dependency graph with paths relative to the project root."""
        return self.graph.export_to_dict(project_root=self.project_root)

    def _analyze_file(self, file: Path) -> Set[Path]:
        """Bring one file's graph node and cache entry up to date.

        Returns:
            The file's direct edges in the graph.
        """
        self.graph.add_node(file)

        if self.cache.get_valid(file) is not None:
            return self.graph.direct_edges(file)

        # Timestamp captured before the read so a concurrent edit reads as stale
        mtime = modification_time(file)
        content = read_source(file)
        module = determine_module(file, self.project_root, self.config.sources_dir)

        tree = self.parser.parse(content, filename=str(file))
        context = extract_references(tree)
        dependencies = self._resolve_dependencies(file, context)

        for dependency in dependencies:
            self.graph.add_edge(file, dependency)

        front_matter = FrontMatter(
            file=file.name,
            module=module,
            dependencies=sorted(dependency.name for dependency in dependencies),
            updated_at=datetime.fromtimestamp(mtime, tz=timezone.utc),
        )
        self.cache.store(
            CacheEntry(
                context=FileContext(path=file, content=content, front_matter=front_matter),
                mtime=mtime,
            )
        )

        logger.debug(
            f"Resolved {file.name}: {len(dependencies)} direct dependencies "
            f"from {len(context.all_referenced_types)} referenced types"
        )
        return self.graph.direct_edges(file)

    def _resolve_dependencies(self, file: Path, context: VisitorContext) -> Set[Path]:
        """Map non-system imports and referenced types to project files.

        Raises:
            DependencyNotFoundError: For an unresolved non-system import when
                strict_imports is enabled.
        """
        imports = context.filter_system_imports(self.config.system_modules)
        candidates = imports | context.all_referenced_types

        dependencies: Set[Path] = set()
        for identifier in sorted(candidates):
            match = self.resolver.resolve(identifier)
            if match is None:
                if identifier in imports and self.config.strict_imports:
                    raise DependencyNotFoundError(identifier)
                continue
            if match == file:
                continue
            dependencies.add(match)

        return dependencies
