# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Error kinds raised by dependency analysis and context generation.

All errors derive from SwiftContextError so callers (CLI, MCP server) can
report any analysis failure uniformly. Filesystem and parse failures abort the
analysis of the affected file; resolution misses are not errors unless a
caller opts into strict mode.
"""

from pathlib import Path
from typing import Union


class SwiftContextError(Exception):
    """Base class for all swift-context errors."""

    pass


class SourceFileNotFoundError(SwiftContextError, FileNotFoundError):
    """Raised when a target or dependency file does not exist or cannot be read."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        super().__init__(f"File not found: {self.path}")


class InvalidModuleError(SwiftContextError):
    """Raised when a file path lacks the `<sources_dir>/<Module>/` segment."""

    def __init__(self, path: Union[str, Path]):
        self.path = str(path)
        super().__init__(f"Invalid module name: {self.path}")


class SwiftSyntaxError(SwiftContextError):
    """Raised when the parser rejects file content."""

    def __init__(self, details: str):
        self.details = details
        super().__init__(f"Syntax error: {details}")


class DependencyNotFoundError(SwiftContextError):
    """Raised in strict mode when an identifier cannot be resolved to a file."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Dependency not found: {name}")


class TokenLimitExceededError(SwiftContextError):
    """Raised when the optimized bundle still exceeds the token budget."""

    def __init__(self, count: int, limit: int):
        self.count = count
        self.limit = limit
        super().__init__(f"Token limit exceeded: {count} tokens (limit {limit})")
