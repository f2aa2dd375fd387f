# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Visitor collecting imports, type names, extension targets and protocols.

Extraction policy per node kind (tree-sitter-swift grammar):
- import_declaration: record the import path; skip children
- user_type: record each component name, except `Self` as the leading
  (identifier) component; descend into generic arguments
- class_declaration with the `extension` keyword: record the extended type
- protocol_declaration: record the protocol's own name
- typealias_declaration: record the right-hand side as a type reference

Everything except imports keeps descending, because nested type expressions
(generic arguments, members, bodies) may carry further references.
"""

import logging
from typing import Set

from tree_sitter import Node

from swift_context.parser import node_text
from swift_context.visitors.base import SyntaxVisitor, VisitAction

logger = logging.getLogger(__name__)

SELF_TYPE = "Self"

# Keywords allowed between `import` and the path, e.g. `import struct Foo.Bar`
IMPORT_KINDS = frozenset(
    ["typealias", "struct", "class", "enum", "protocol", "let", "var", "func", "actor"]
)


class DependencyVisitor(SyntaxVisitor):
    """Collects import paths and referenced type names from a Swift file."""

    def __init__(self) -> None:
        super().__init__()
        self.imports: Set[str] = set()
        self.type_references: Set[str] = set()
        self.extension_targets: Set[str] = set()
        self.protocols: Set[str] = set()

    def visit_import_declaration(self, node: Node) -> VisitAction:
        import_path = self._import_path(node)
        if import_path:
            self.imports.add(import_path)
        return VisitAction.SKIP_CHILDREN

    def visit_user_type(self, node: Node) -> VisitAction:
        # `Foo.Bar<Baz>` is one user_type with type_identifier children Foo and
        # Bar; the first is an identifier type, the rest are member types.
        components = [child for child in node.children if child.type == "type_identifier"]
        for index, component in enumerate(components):
            type_name = self.trimmed(component)
            if not type_name:
                continue
            if index == 0 and type_name == SELF_TYPE:
                continue
            self.type_references.add(type_name)
        return VisitAction.VISIT_CHILDREN

    def visit_class_declaration(self, node: Node) -> VisitAction:
        if self._is_extension(node):
            extended_type = node.child_by_field_name("name")
            if extended_type is None:
                extended_type = next(
                    (child for child in node.named_children if child.type == "user_type"), None
                )
            type_name = self.trimmed(extended_type)
            if type_name:
                self.extension_targets.add(type_name)
        return VisitAction.VISIT_CHILDREN

    def visit_protocol_declaration(self, node: Node) -> VisitAction:
        name = node.child_by_field_name("name")
        if name is None:
            name = next(
                (child for child in node.named_children if child.type == "type_identifier"), None
            )
        protocol_name = self.trimmed(name)
        if protocol_name:
            self.protocols.add(protocol_name)
        return VisitAction.VISIT_CHILDREN

    def visit_typealias_declaration(self, node: Node) -> VisitAction:
        value = node.child_by_field_name("value")
        type_name = self.trimmed(value) if value is not None else self.text_after(node, "=")
        if type_name:
            self.type_references.add(type_name)
        return VisitAction.VISIT_CHILDREN

    @staticmethod
    def _is_extension(node: Node) -> bool:
        kind = node.child_by_field_name("declaration_kind")
        if kind is not None:
            return node_text(kind) == "extension"
        return any(child.type == "extension" for child in node.children)

    @staticmethod
    def _import_path(node: Node) -> str:
        """Path of an import declaration without attributes or import kind.

        `@testable import struct Foundation.Date` yields `Foundation.Date`.
        """
        text = node_text(node)
        _, found, rest = text.partition("import")
        if not found:
            logger.debug(f"Import declaration without keyword: {text!r}")
            return ""

        words = rest.split()
        if words and words[0] in IMPORT_KINDS:
            words = words[1:]
        return "".join(words)
