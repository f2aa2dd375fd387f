# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Analysis cache with modification-time staleness detection.

Stores one CacheEntry per file identity: the content captured at analysis
time and the front matter rendered from it. An entry is valid (reusable
without re-parsing) iff the file's current on-disk modification time is not
newer than the mtime recorded when the entry was created.

Design Decisions:
- Unbounded, no eviction: the cache lives for one analyzer instance and is
  discarded with it
- Demand-driven staleness detection (checked on lookup, no background watcher)

Thread Safety:
- A single _cache_lock serializes all mutations (single-writer discipline)
"""

import logging
import os
from pathlib import Path
from threading import Lock
from typing import Dict, Optional

from swift_context.models import CacheEntry, CacheStatistics

logger = logging.getLogger(__name__)


class ContextCache:
    """Per-file snapshots of analysis results.

    Usage:
        cache = ContextCache()
        cache.store(entry)
        entry = cache.get_valid(path)  # None if missing or stale
        stats = cache.get_statistics()
    """

    def __init__(self) -> None:
        """Initialize an empty cache."""
        self._cache: Dict[Path, CacheEntry] = {}
        self._stats = CacheStatistics()
        self._cache_lock = Lock()

    def store(self, entry: CacheEntry) -> None:
        """Insert or replace the entry for entry.path."""
        with self._cache_lock:
            replaced = entry.path in self._cache
            self._cache[entry.path] = entry
            self._stats.current_entry_count = len(self._cache)
            logger.debug(f"Cache {'update' if replaced else 'store'}: {entry.path}")

    def get(self, path: Path) -> Optional[CacheEntry]:
        """Return the stored entry for a file without checking validity."""
        with self._cache_lock:
            return self._cache.get(path)

    def get_valid(self, path: Path) -> Optional[CacheEntry]:
        """Return the entry for a file if it is still valid, else None.

        Counts a hit for a valid entry, a miss for an absent one, and a
        staleness refresh for an entry whose file changed on disk (or vanished).
        """
        with self._cache_lock:
            entry = self._cache.get(path)
            if entry is None:
                self._stats.misses += 1
                logger.debug(f"Cache miss: {path}")
                return None

            if self._is_stale(entry):
                self._stats.staleness_refreshes += 1
                logger.debug(f"Cache stale: {path}")
                return None

            self._stats.hits += 1
            logger.debug(f"Cache hit: {path}")
            return entry

    def _is_stale(self, entry: CacheEntry) -> bool:
        """Check if a file was modified after its entry was recorded."""
        try:
            current_mtime = os.path.getmtime(entry.path)
        except OSError:
            return True
        return current_mtime > entry.mtime

    def invalidate(self, path: Path) -> None:
        """Remove the entry for a file, if any."""
        with self._cache_lock:
            if self._cache.pop(path, None) is not None:
                logger.debug(f"Invalidated cache entry: {path}")
            self._stats.current_entry_count = len(self._cache)

    def clear(self) -> None:
        """Clear all cache entries."""
        with self._cache_lock:
            self._cache.clear()
            self._stats.current_entry_count = 0
            logger.debug("Cache cleared")

    def __contains__(self, path: object) -> bool:
        with self._cache_lock:
            return path in self._cache

    def __len__(self) -> int:
        with self._cache_lock:
            return len(self._cache)

    def get_statistics(self) -> CacheStatistics:
        """Get a copy of the cache statistics."""
        with self._cache_lock:
            return CacheStatistics(
                hits=self._stats.hits,
                misses=self._stats.misses,
                staleness_refreshes=self._stats.staleness_refreshes,
                current_entry_count=self._stats.current_entry_count,
            )

    def get_hit_rate(self) -> float:
        """Cache hit rate as a percentage (0.0-100.0), or 0.0 if no lookups."""
        with self._cache_lock:
            total = self._stats.hits + self._stats.misses + self._stats.staleness_refreshes
            if total == 0:
                return 0.0
            return (self._stats.hits / total) * 100.0
