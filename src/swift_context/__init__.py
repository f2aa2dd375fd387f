# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Dependency-aware context bundles for Swift source files."""

from .analyzers import DependencyAnalyzer, DependencyAnalyzing
from .cache import ContextCache
from .config import Config, ConfigurationError
from .errors import (
    DependencyNotFoundError,
    InvalidModuleError,
    SourceFileNotFoundError,
    SwiftContextError,
    SwiftSyntaxError,
    TokenLimitExceededError,
)
from .generator import ContextGenerator
from .graph import DependencyGraph
from .models import CacheEntry, CacheStatistics, FileContext, FrontMatter
from .optimizer import TokenOptimizer, TokenOptimizing
from .parser import SwiftParser
from .resolver import IdentifierResolver
from .visitors import DependencyVisitor, TypeReferenceVisitor, VisitorContext, extract_references

__version__ = "0.1.0"

__all__ = [
    "CacheEntry",
    "CacheStatistics",
    "Config",
    "ConfigurationError",
    "ContextCache",
    "ContextGenerator",
    "DependencyAnalyzer",
    "DependencyAnalyzing",
    "DependencyGraph",
    "DependencyNotFoundError",
    "DependencyVisitor",
    "FileContext",
    "FrontMatter",
    "IdentifierResolver",
    "InvalidModuleError",
    "SourceFileNotFoundError",
    "SwiftContextError",
    "SwiftParser",
    "SwiftSyntaxError",
    "TokenLimitExceededError",
    "TokenOptimizer",
    "TokenOptimizing",
    "TypeReferenceVisitor",
    "VisitorContext",
    "extract_references",
]
