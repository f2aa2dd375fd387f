# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Aggregated output of both visitors for one file (the reference bag)."""

from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, Optional

from swift_context.visitors.dependency_visitor import DependencyVisitor
from swift_context.visitors.type_reference_visitor import TypeReferenceVisitor

DEFAULT_SYSTEM_MODULES = frozenset(["Swift", "Foundation", "UIKit", "SwiftUI", "Combine"])


@dataclass(frozen=True)
class VisitorContext:
    """Categorized identifier references extracted from one syntax tree."""

    imports: FrozenSet[str]
    type_references: FrozenSet[str]
    extension_targets: FrozenSet[str]
    protocols: FrozenSet[str]
    inherited_types: FrozenSet[str]
    property_types: FrozenSet[str]
    function_parameter_types: FrozenSet[str]
    generic_constraints: FrozenSet[str]

    @classmethod
    def from_visitors(
        cls,
        dependency_visitor: DependencyVisitor,
        type_reference_visitor: TypeReferenceVisitor,
    ) -> "VisitorContext":
        """Snapshot the results of two completed walks."""
        return cls(
            imports=frozenset(dependency_visitor.imports),
            type_references=frozenset(dependency_visitor.type_references),
            extension_targets=frozenset(dependency_visitor.extension_targets),
            protocols=frozenset(dependency_visitor.protocols),
            inherited_types=frozenset(type_reference_visitor.inherited_types),
            property_types=frozenset(type_reference_visitor.property_types),
            function_parameter_types=frozenset(type_reference_visitor.function_parameter_types),
            generic_constraints=frozenset(type_reference_visitor.generic_constraints),
        )

    @property
    def all_referenced_types(self) -> FrozenSet[str]:
        """Every referenced type name; imports and declared protocols are not included."""
        return (
            self.type_references
            | self.extension_targets
            | self.inherited_types
            | self.property_types
            | self.function_parameter_types
            | self.generic_constraints
        )

    def filter_system_imports(self, system_modules: Optional[Iterable[str]] = None) -> FrozenSet[str]:
        """Imports that are not system-provided modules."""
        excluded = DEFAULT_SYSTEM_MODULES if system_modules is None else frozenset(system_modules)
        return frozenset(path for path in self.imports if path not in excluded)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict with sorted lists."""
        return {
            "imports": sorted(self.imports),
            "type_references": sorted(self.type_references),
            "extension_targets": sorted(self.extension_targets),
            "protocols": sorted(self.protocols),
            "inherited_types": sorted(self.inherited_types),
            "property_types": sorted(self.property_types),
            "function_parameter_types": sorted(self.function_parameter_types),
            "generic_constraints": sorted(self.generic_constraints),
        }
