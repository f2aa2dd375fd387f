# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Tests for the reference-extracting visitors.

Each visitor walks its own traversal of the same tree; a node kind skipped
by one visitor is still visited by the other.
"""

from typing import Tuple

import pytest

from swift_context.parser import SwiftParser
from swift_context.visitors import (
    DependencyVisitor,
    SyntaxVisitor,
    TypeReferenceVisitor,
    VisitAction,
    extract_references,
)


def walk(source: str) -> Tuple[DependencyVisitor, TypeReferenceVisitor]:
    tree = SwiftParser().parse(source)
    dependency_visitor = DependencyVisitor()
    type_reference_visitor = TypeReferenceVisitor()
    dependency_visitor.walk(tree)
    type_reference_visitor.walk(tree)
    return dependency_visitor, type_reference_visitor


class TestSyntaxVisitor:
    """Test dispatch and skip/descend behavior of the base walker."""

    def test_dispatches_by_node_kind_in_document_order(self):
        class Recorder(SyntaxVisitor):
            def __init__(self):
                super().__init__()
                self.names = []

            def visit_type_identifier(self, node):
                self.names.append(self.trimmed(node))
                return VisitAction.VISIT_CHILDREN

        recorder = Recorder()
        recorder.walk(SwiftParser().parse("struct A { let b: B\n let c: C }\n"))

        assert recorder.names[-2:] == ["B", "C"]

    def test_skip_children_prunes_subtree(self):
        class Pruning(SyntaxVisitor):
            def __init__(self):
                super().__init__()
                self.seen = []

            def visit_class_declaration(self, node):
                return VisitAction.SKIP_CHILDREN

            def visit_type_identifier(self, node):
                self.seen.append(self.trimmed(node))
                return VisitAction.VISIT_CHILDREN

        visitor = Pruning()
        visitor.walk(SwiftParser().parse("struct A { let b: B }\n"))

        assert visitor.seen == []

    def test_deep_nesting_does_not_recurse(self):
        depth = 1500
        source = "let x: " + "[" * depth + "Leaf" + "]" * depth + "\n"
        dependency_visitor = DependencyVisitor()
        dependency_visitor.walk(SwiftParser(strict=False).parse(source))

        assert "Leaf" in dependency_visitor.type_references


class TestDependencyVisitor:
    """Test imports, type references, extension targets and protocols."""

    def test_imports(self):
        visitor, _ = walk(
            "import Foundation\n"
            "import MyLibrary\n"
            "@testable import AppCore\n"
            "import struct Networking.Client\n"
        )

        assert visitor.imports == {"Foundation", "MyLibrary", "AppCore", "Networking.Client"}

    def test_import_children_are_not_visited(self):
        visitor, _ = walk("import struct Networking.Client\n")

        assert visitor.type_references == set()

    def test_identifier_types(self):
        visitor, _ = walk(
            "struct Main {\n"
            "    let dependency: Dependency\n"
            "    let items: [Item]\n"
            "    let cache: Dictionary<String, Model>\n"
            "    let maybe: Optional<Wrapped>?\n"
            "}\n"
        )

        assert {"Dependency", "Item", "Dictionary", "String", "Model", "Optional", "Wrapped"} <= (
            visitor.type_references
        )

    def test_member_types_record_each_component(self):
        visitor, _ = walk("struct Main {\n    let value: Outer.Inner\n}\n")

        assert {"Outer", "Inner"} <= visitor.type_references

    def test_leading_self_is_not_recorded(self):
        visitor, _ = walk(
            "protocol Copyable {\n"
            "    func copy() -> Self\n"
            "}\n"
        )

        assert "Self" not in visitor.type_references

    def test_extension_target(self):
        visitor, _ = walk("extension Dependency {\n    func helper() {}\n}\n")

        assert visitor.extension_targets == {"Dependency"}

    def test_struct_and_class_are_not_extension_targets(self):
        visitor, _ = walk("struct Main {}\nclass Service {}\nenum Kind { case a }\n")

        assert visitor.extension_targets == set()

    def test_protocol_declaration_records_own_name(self):
        visitor, _ = walk("protocol Repository {\n    func fetch()\n}\n")

        assert visitor.protocols == {"Repository"}

    def test_typealias_records_right_hand_side(self):
        visitor, _ = walk("typealias Handler = Callback\n")

        assert "Callback" in visitor.type_references


class TestTypeReferenceVisitor:
    """Test inherited, property, parameter and constraint types."""

    def test_inheritance_clause(self):
        _, visitor = walk(
            "class Child: Parent, Codable {}\n"
            "struct Value: Equatable {}\n"
            "protocol Store: Repository {}\n"
            "extension Dependency: Hashable {}\n"
        )

        assert visitor.inherited_types == {"Parent", "Codable", "Equatable", "Repository", "Hashable"}

    def test_property_types(self):
        _, visitor = walk(
            "struct Main {\n"
            "    let dependency: Dependency\n"
            "    var count: Int = 0\n"
            "    let inferred = 42\n"
            "}\n"
        )

        assert {"Dependency", "Int"} <= visitor.property_types
        assert len(visitor.property_types) == 2

    def test_protocol_property_requirements(self):
        _, visitor = walk("protocol Named {\n    var name: Label { get }\n}\n")

        assert "Label" in visitor.property_types

    def test_local_variables(self):
        _, visitor = walk(
            "func run() {\n"
            "    let service: Service = makeService()\n"
            "    print(service)\n"
            "}\n"
        )

        assert "Service" in visitor.property_types

    def test_function_parameters(self):
        _, visitor = walk(
            "struct Loader {\n"
            "    init(store: Store) {}\n"
            "    func load(from source: Source, count: Int) {}\n"
            "}\n"
        )

        assert {"Store", "Source", "Int"} <= visitor.function_parameter_types

    def test_generic_where_constraints(self):
        _, visitor = walk(
            "func merge<T, U>(_ a: T, _ b: U) where T: Mergeable, U == Payload {}\n"
        )

        assert {"Mergeable", "Payload"} <= visitor.generic_constraints

    def test_associatedtype_requirement_is_inherited(self):
        _, visitor = walk(
            "protocol Container {\n"
            "    associatedtype Item: Storable\n"
            "    associatedtype Index\n"
            "}\n"
        )

        assert "Storable" in visitor.inherited_types
        assert "Index" not in visitor.inherited_types


class TestExtractReferences:
    """Test the combined extraction pass."""

    @pytest.fixture
    def source(self):
        return (
            "import Foundation\n"
            "import Persistence\n"
            "\n"
            "protocol Loading {}\n"
            "\n"
            "class Main: Base {\n"
            "    let dependency: Dependency\n"
            "    func update(with model: Model) {}\n"
            "}\n"
            "\n"
            "extension Helper {}\n"
        )

    def test_all_categories_populated(self, source):
        context = extract_references(SwiftParser().parse(source))

        assert context.imports == {"Foundation", "Persistence"}
        assert context.protocols == {"Loading"}
        assert context.inherited_types == {"Base"}
        assert context.property_types == {"Dependency"}
        assert context.function_parameter_types == {"Model"}
        assert context.extension_targets == {"Helper"}

    def test_all_referenced_types_excludes_imports_and_protocols(self, source):
        context = extract_references(SwiftParser().parse(source))

        referenced = context.all_referenced_types
        assert {"Base", "Dependency", "Model", "Helper"} <= referenced
        assert "Foundation" not in referenced
        assert "Persistence" not in referenced
        assert "Loading" not in referenced
