# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Core data models for swift-context.

This module defines the data structures shared by the analyzer, the cache and
the context generator:
- FrontMatter: Metadata header rendered in front of each file in a bundle
- FileContext: A file's captured content together with its front matter
- CacheEntry: Snapshot of an analyzed file kept by ContextCache
- CacheStatistics: Performance counters for the cache

The rendered front matter is a stable contract for downstream renderers:
fields appear in the fixed order file, module, dependencies, updated_at.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List

FRONT_MATTER_DELIMITER = "---"


def format_timestamp(moment: datetime) -> str:
    """Render a timestamp as sortable, timezone-aware ISO 8601 (UTC, seconds)."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass
class FrontMatter:
    """Metadata describing one file of a bundle."""

    file: str  # Base name of the file, e.g. "Main.swift"
    module: str  # Owning module, derived from Sources/<Module>/
    dependencies: List[str]  # Base names of direct dependencies
    updated_at: datetime  # Last-known modification time

    @property
    def formatted(self) -> str:
        """YAML-style header block, delimited by `---` lines."""
        lines = [
            FRONT_MATTER_DELIMITER,
            f"file: {self.file}",
            f"module: {self.module}",
        ]
        if self.dependencies:
            lines.append("dependencies:")
            lines.extend(f"  - {name}" for name in sorted(self.dependencies))
        else:
            lines.append("dependencies: []")
        lines.append(f"updated_at: {format_timestamp(self.updated_at)}")
        lines.append(FRONT_MATTER_DELIMITER)
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict."""
        return {
            "file": self.file,
            "module": self.module,
            "dependencies": sorted(self.dependencies),
            "updated_at": format_timestamp(self.updated_at),
        }


@dataclass
class FileContext:
    """A source file's content and its front matter."""

    path: Path
    content: str
    front_matter: FrontMatter

    @property
    def formatted_content(self) -> str:
        """Front matter, a blank line, then the raw file content."""
        return f"{self.front_matter.formatted}\n\n{self.content}"


@dataclass
class CacheEntry:
    """Cached analysis snapshot for one file.

    Valid (reusable without re-parsing) while the file's on-disk modification
    time is not newer than `mtime`.
    """

    context: FileContext
    mtime: float  # st_mtime captured before the file was read

    @property
    def path(self) -> Path:
        return self.context.path

    @property
    def content(self) -> str:
        return self.context.content


@dataclass
class CacheStatistics:
    """Statistics for the analysis cache."""

    hits: int = 0
    misses: int = 0
    staleness_refreshes: int = 0  # Entries replaced because the file changed on disk
    current_entry_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict."""
        return {
            "hits": self.hits,
            "misses": self.misses,
            "staleness_refreshes": self.staleness_refreshes,
            "current_entry_count": self.current_entry_count,
        }
