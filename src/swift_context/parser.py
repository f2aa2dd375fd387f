# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Swift parser adapter built on tree-sitter.

The dependency engine never parses text itself: it asks SwiftParser for a
syntax tree and walks it with the visitors in swift_context.visitors. Parsing
is a deterministic, pure function of the input text.

tree-sitter is error tolerant and always returns a tree; rejected input shows
up as ERROR or MISSING nodes. In strict mode such trees raise SwiftSyntaxError.
"""

import logging
from typing import Optional

import tree_sitter_swift
from tree_sitter import Language, Node, Parser, Tree

from swift_context.errors import SwiftSyntaxError

logger = logging.getLogger(__name__)

SWIFT_LANGUAGE = Language(tree_sitter_swift.language())


def node_text(node: Node) -> str:
    """Decoded source text of a node."""
    if node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def first_error(node: Node) -> Optional[Node]:
    """Return the first ERROR or MISSING node in document order, if any."""
    stack = [node]
    while stack:
        current = stack.pop()
        if current.is_error or current.is_missing:
            return current
        if current.has_error:
            stack.extend(reversed(current.children))
    return None


class SwiftParser:
    """Parses Swift source text into a tree-sitter syntax tree."""

    def __init__(self, strict: bool = True) -> None:
        """Initialize the parser.

        Args:
            strict: Raise SwiftSyntaxError when the tree contains error nodes.
                When False, such trees are returned and a warning is logged.
        """
        self.strict = strict
        self._parser = Parser(SWIFT_LANGUAGE)

    def parse(self, source: str, filename: str = "<source>") -> Tree:
        """Parse source text.

        Args:
            source: Swift source code.
            filename: Name used in error messages.

        Returns:
            The syntax tree.

        Raises:
            SwiftSyntaxError: In strict mode, if the source does not parse cleanly.
        """
        tree = self._parser.parse(source.encode("utf-8"))

        if tree.root_node.has_error:
            error_node = first_error(tree.root_node)
            if error_node is not None:
                line, column = error_node.start_point
                details = f"{filename}:{line + 1}:{column + 1}: unexpected input"
            else:
                details = f"{filename}: unexpected input"

            if self.strict:
                raise SwiftSyntaxError(details)
            logger.warning(f"Parsed {filename} with errors ({details}), continuing")

        return tree
