# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Dependency analyzers.

Components:
- DependencyAnalyzing: interface consumed by ContextGenerator and the MCP server
- DependencyAnalyzer: tree-sitter based analyzer for Swift packages
"""

from swift_context.analyzers.base import DependencyAnalyzing
from swift_context.analyzers.swift_analyzer import DependencyAnalyzer

__all__ = ["DependencyAnalyzing", "DependencyAnalyzer"]
