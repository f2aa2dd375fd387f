# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Dependency graph over file identities.

Maintains two indices for efficient queries:
- dependencies: file -> files it directly depends on
- dependents: file -> files that directly depend on it

Edges are only ever added for the lifetime of a graph instance. Queries about
files the graph has never seen return empty sets rather than raising.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Set

logger = logging.getLogger(__name__)


class DependencyGraph:
    """Adjacency sets keyed by canonical file path.

    Thread Safety:
        NOT thread-safe. Owned by a single DependencyAnalyzer.
    """

    def __init__(self) -> None:
        """Initialize empty dependency graph."""
        self._dependencies: Dict[Path, Set[Path]] = {}
        self._dependents: Dict[Path, Set[Path]] = {}

    def add_node(self, file: Path) -> None:
        """Register a file with no edges (no-op if already present)."""
        self._dependencies.setdefault(file, set())
        self._dependents.setdefault(file, set())

    def add_edge(self, source: Path, target: Path) -> None:
        """Record that source depends on target. Idempotent; creates both nodes."""
        self.add_node(source)
        self.add_node(target)
        if target not in self._dependencies[source]:
            self._dependencies[source].add(target)
            self._dependents[target].add(source)
            logger.debug(f"Edge added: {source.name} -> {target.name}")

    def has_node(self, file: Path) -> bool:
        return file in self._dependencies

    def nodes(self) -> List[Path]:
        """All known files, sorted."""
        return sorted(self._dependencies)

    def direct_edges(self, file: Path) -> Set[Path]:
        """Files that `file` directly depends on (no traversal)."""
        return set(self._dependencies.get(file, set()))

    def direct_dependents(self, file: Path) -> Set[Path]:
        """Files that directly depend on `file`."""
        return set(self._dependents.get(file, set()))

    def transitive_dependencies(self, file: Path) -> Set[Path]:
        """Get all transitive dependencies of a file.

        Traverses with an explicit worklist and visited set, so cycles
        (A -> B -> A) terminate and each node is expanded at most once.

        Args:
            file: File to find dependencies for.

        Returns:
            Every file reachable by following one or more edges. The starting
            file is never part of the result, even when a cycle leads back to it.
        """
        visited: Set[Path] = {file}
        result: Set[Path] = set()
        worklist: List[Path] = [file]

        while worklist:
            current = worklist.pop()
            for dependency in self._dependencies.get(current, ()):
                if dependency not in visited:
                    visited.add(dependency)
                    result.add(dependency)
                    worklist.append(dependency)

        return result

    def edge_count(self) -> int:
        return sum(len(targets) for targets in self._dependencies.values())

    def export_to_dict(self, project_root: Optional[Path] = None) -> Dict[str, Any]:
        """Export graph to a JSON-compatible dict.

        Args:
            project_root: If given, paths are reported relative to it where possible.

        Returns:
            Dictionary containing:
            - metadata: timestamp, node and edge counts
            - files: sorted file paths
            - dependencies: {file: [direct dependencies]}
            - most_depended_on: files with the most dependents
        """

        def display(path: Path) -> str:
            if project_root is not None:
                try:
                    return str(path.relative_to(project_root))
                except ValueError:
                    pass
            return str(path)

        return {
            "metadata": {
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "project_root": str(project_root) if project_root is not None else None,
                "total_files": len(self._dependencies),
                "total_edges": self.edge_count(),
            },
            "files": [display(path) for path in self.nodes()],
            "dependencies": {
                display(source): sorted(display(target) for target in targets)
                for source, targets in sorted(self._dependencies.items())
            },
            "most_depended_on": self._most_depended_on(display),
        }

    def _most_depended_on(
        self, display: Callable[[Path], str], limit: int = 10
    ) -> List[Dict[str, Any]]:
        ranked = sorted(
            ((path, len(sources)) for path, sources in self._dependents.items() if sources),
            key=lambda item: (-item[1], str(item[0])),
        )
        return [{"file": display(path), "dependent_count": count} for path, count in ranked[:limit]]
