# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Syntax-tree visitors that extract identifier references from Swift files.

Components:
- SyntaxVisitor / VisitAction: per-node-kind dispatch with skip/descend policy
- DependencyVisitor: imports, type names, extension targets, protocols
- TypeReferenceVisitor: inherited, property, parameter and constraint types
- VisitorContext: the combined reference bag for one file
- extract_references: runs both visitors over one parsed tree
"""

from tree_sitter import Tree

from swift_context.visitors.base import SyntaxVisitor, VisitAction
from swift_context.visitors.context import DEFAULT_SYSTEM_MODULES, VisitorContext
from swift_context.visitors.dependency_visitor import DependencyVisitor
from swift_context.visitors.type_reference_visitor import TypeReferenceVisitor


def extract_references(tree: Tree) -> VisitorContext:
    """Walk a parsed tree with both visitors and return the reference bag."""
    dependency_visitor = DependencyVisitor()
    type_reference_visitor = TypeReferenceVisitor()

    dependency_visitor.walk(tree)
    type_reference_visitor.walk(tree)

    return VisitorContext.from_visitors(dependency_visitor, type_reference_visitor)


__all__ = [
    "DEFAULT_SYSTEM_MODULES",
    "DependencyVisitor",
    "SyntaxVisitor",
    "TypeReferenceVisitor",
    "VisitAction",
    "VisitorContext",
    "extract_references",
]
