# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Base class for syntax-tree visitors.

A visitor declares one `visit_<node_kind>` method per tree-sitter node kind it
cares about. Each method records what it needs and returns a VisitAction that
says whether the walk descends into that node's children. Node kinds without a
method are always descended into.

The "skip children" versus "visit children" decision per node kind is the
extraction policy; the walk itself is an explicit stack so deep trees do not
hit the interpreter's recursion limit.
"""

from enum import Enum
from typing import Callable, Dict, List, Optional, Union

from tree_sitter import Node, Tree

from swift_context.parser import node_text


class VisitAction(Enum):
    """Whether a walk descends into the children of a visited node."""

    VISIT_CHILDREN = "visit_children"
    SKIP_CHILDREN = "skip_children"


class SyntaxVisitor:
    """Walks a syntax tree once, dispatching on node kind.

    Subclasses implement `visit_<kind>(self, node) -> VisitAction` methods,
    e.g. `visit_import_declaration`. A visitor instance holds the results of a
    single walk.
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, Optional[Callable[[Node], VisitAction]]] = {}

    def walk(self, tree: Union[Tree, Node]) -> None:
        """Walk every node of a tree (or subtree) in document order."""
        root = tree.root_node if isinstance(tree, Tree) else tree
        stack: List[Node] = [root]
        while stack:
            node = stack.pop()
            handler = self._handler_for(node.type)
            action = handler(node) if handler is not None else VisitAction.VISIT_CHILDREN
            if action is VisitAction.VISIT_CHILDREN:
                stack.extend(reversed(node.named_children))

    def _handler_for(self, kind: str) -> Optional[Callable[[Node], VisitAction]]:
        if kind not in self._handlers:
            self._handlers[kind] = getattr(self, f"visit_{kind}", None)
        return self._handlers[kind]

    @staticmethod
    def trimmed(node: Optional[Node]) -> str:
        """Source text of a node with surrounding whitespace removed."""
        if node is None:
            return ""
        return node_text(node).strip()

    @staticmethod
    def text_after(node: Node, separator: str) -> str:
        """Trimmed text following the first occurrence of a separator.

        Used where a grammar field is absent, e.g. the type after `:` in a
        parameter or the right-hand side after `=` in a typealias.
        """
        text = node_text(node)
        _, found, rest = text.partition(separator)
        return rest.strip() if found else ""
