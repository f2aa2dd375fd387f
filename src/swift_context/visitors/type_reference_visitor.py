# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Visitor collecting types from declarations: inheritance, properties, parameters, constraints."""

from typing import Set

from tree_sitter import Node

from swift_context.visitors.base import SyntaxVisitor, VisitAction


class TypeReferenceVisitor(SyntaxVisitor):
    """Collects the declared types a Swift file uses in declaration positions.

    - inheritance_specifier: inherited/conformed type; skip children
    - associatedtype_declaration: the `associatedtype A: P` requirement,
      recorded as an inherited type
    - property_declaration / protocol_property_declaration: each annotated
      binding's type; keep descending (initializers may nest further types)
    - parameter: declared parameter type; keep descending
    - inheritance_constraint / equality_constraint (`where T: P`,
      `where T == U`): right-hand type; skip children
    """

    def __init__(self) -> None:
        super().__init__()
        self.inherited_types: Set[str] = set()
        self.property_types: Set[str] = set()
        self.function_parameter_types: Set[str] = set()
        self.generic_constraints: Set[str] = set()

    def visit_inheritance_specifier(self, node: Node) -> VisitAction:
        inherited = node.child_by_field_name("inherits_from")
        type_name = self.trimmed(inherited if inherited is not None else node)
        if type_name:
            self.inherited_types.add(type_name)
        return VisitAction.SKIP_CHILDREN

    def visit_property_declaration(self, node: Node) -> VisitAction:
        for child in node.named_children:
            if child.type == "type_annotation":
                type_name = self.text_after(child, ":")
                if type_name:
                    self.property_types.add(type_name)
        return VisitAction.VISIT_CHILDREN

    visit_protocol_property_declaration = visit_property_declaration

    def visit_associatedtype_declaration(self, node: Node) -> VisitAction:
        required = node.child_by_field_name("must_inherit")
        if required is not None:
            type_name = self.trimmed(required)
        else:
            type_name = self.text_after(node, ":").split("=")[0].split(" where ")[0].strip()
        if type_name:
            self.inherited_types.add(type_name)
        return VisitAction.VISIT_CHILDREN

    def visit_parameter(self, node: Node) -> VisitAction:
        declared = node.child_by_field_name("type")
        type_name = self.trimmed(declared) if declared is not None else self.text_after(node, ":")
        if type_name:
            self.function_parameter_types.add(type_name)
        return VisitAction.VISIT_CHILDREN

    def visit_inheritance_constraint(self, node: Node) -> VisitAction:
        right = node.child_by_field_name("inherits_from")
        type_name = self.trimmed(right) if right is not None else self.text_after(node, ":")
        if type_name:
            self.generic_constraints.add(type_name)
        return VisitAction.SKIP_CHILDREN

    def visit_equality_constraint(self, node: Node) -> VisitAction:
        right = node.child_by_field_name("must_equal")
        if right is not None:
            type_name = self.trimmed(right)
        else:
            type_name = self.text_after(node, "==") or self.text_after(node, "=")
        if type_name:
            self.generic_constraints.add(type_name)
        return VisitAction.SKIP_CHILDREN
