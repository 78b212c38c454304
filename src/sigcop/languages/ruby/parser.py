"""
Ruby parser.

Parses Ruby source with tree-sitter and folds the concrete tree into the
``SyntaxTree`` arena. Only the shapes the cops inspect get dedicated kinds;
everything else becomes ``OTHER`` with its named children kept so nested
definitions are still reachable. Comments are collected on the tree rather
than kept as children, so sibling lookups skip over them.
"""

import logging
import re
from pathlib import Path
from typing import Any

from sigcop.tree.buffer import TextBuffer
from sigcop.tree.node import NodeKind, SyntaxNode, SyntaxTree

logger = logging.getLogger(__name__)

BODY_TYPES = {"body_statement", "block_body"}
PARAMETER_LIST_TYPES = {"method_parameters", "parameters", "block_parameters", "lambda_parameters"}
SCOPE_TYPES = {"class": NodeKind.CLASS, "module": NodeKind.MODULE}

# tree-sitter parameter node -> (argument kind, field holding the name)
PARAMETER_TYPES = {
    "optional_parameter": ("positional", "name"),
    "keyword_parameter": ("keyword", "name"),
    "splat_parameter": ("rest", "name"),
    "hash_splat_parameter": ("rest", "name"),
    "block_parameter": ("block", "name"),
}


class RubySyntaxError(ValueError):
    """Raised when tree-sitter reports errors in the parsed source."""

    pass


def _same(a: Any, b: Any) -> bool:
    return (
        a is not None
        and b is not None
        and a.type == b.type
        and a.start_byte == b.start_byte
        and a.end_byte == b.end_byte
    )


class RubyParser:
    """Ruby front end using tree-sitter-ruby."""

    def __init__(self):
        self._parser = None

    def _get_parser(self):
        """Lazy initialization of tree-sitter parser."""
        if self._parser is None:
            try:
                import tree_sitter_ruby as tsruby
                from tree_sitter import Language, Parser

                RUBY_LANGUAGE = Language(tsruby.language())
                self._parser = Parser(RUBY_LANGUAGE)
            except ImportError:
                raise RuntimeError(
                    "tree-sitter-ruby not installed. Run: pip install tree-sitter-ruby"
                )
        return self._parser

    # =========================================================================
    # Entry points
    # =========================================================================

    def parse_file(self, file_path: Path) -> SyntaxTree:
        """Parse a Ruby file into a ``SyntaxTree``."""
        with open(file_path, "rb") as f:
            source = f.read()
        return self.parse_source(source, name=str(file_path))

    def parse_source(self, source: str | bytes, name: str = "(string)") -> SyntaxTree:
        """Parse Ruby source code into a ``SyntaxTree``."""
        buffer = TextBuffer(source, name=name)
        ts_tree = self._get_parser().parse(buffer.data)
        root = ts_tree.root_node
        if root.has_error:
            line = self._first_error_line(root)
            raise RubySyntaxError(f"Ruby syntax error in {name} near line {line}")

        tree = SyntaxTree(buffer)
        self._collect_comments(root, tree)
        program = tree.add_node(NodeKind.PROGRAM, 0, len(buffer))
        for child in root.named_children:
            self._convert(child, tree, program)
        logger.debug(f"Parsed {name}: {len(tree.nodes)} nodes, {len(tree.comments)} comments")
        return tree

    def _first_error_line(self, root: Any) -> int:
        stack = [root]
        while stack:
            node = stack.pop()
            if node.type == "ERROR" or node.is_missing:
                return node.start_point[0] + 1
            stack.extend(reversed(node.children))
        return root.start_point[0] + 1

    def _collect_comments(self, root: Any, tree: SyntaxTree) -> None:
        stack = [root]
        while stack:
            node = stack.pop()
            if node.type == "comment":
                tree.add_comment(node.start_byte, node.end_byte)
            stack.extend(reversed(node.children))
        tree.comments.sort()

    # =========================================================================
    # Conversion
    # =========================================================================

    def _convert(
        self, ts_node: Any, tree: SyntaxTree, parent: SyntaxNode, field_name: str | None = None
    ) -> SyntaxNode | None:
        kind = ts_node.type
        if kind == "comment":
            return None
        if kind in SCOPE_TYPES:
            return self._convert_scope(ts_node, tree, parent, SCOPE_TYPES[kind], field_name)
        if kind == "singleton_class":
            return self._convert_singleton_class(ts_node, tree, parent, field_name)
        if kind in ("method", "singleton_method"):
            return self._convert_method(ts_node, tree, parent, field_name)
        if kind == "call":
            return self._convert_call(ts_node, tree, parent, field_name)
        if kind in ("block", "do_block"):
            return self._convert_block(ts_node, tree, parent, field_name)
        if kind in PARAMETER_LIST_TYPES:
            return self._convert_parameters(ts_node, tree, parent, field_name)
        if kind == "constant":
            return self._leaf(ts_node, tree, parent, NodeKind.CONST, self._text(tree, ts_node), field_name)
        if kind == "scope_resolution":
            name = re.sub(r"\s+", "", self._text(tree, ts_node)).lstrip(":")
            return self._leaf(ts_node, tree, parent, NodeKind.CONST, name, field_name)
        if kind == "simple_symbol":
            return self._leaf(ts_node, tree, parent, NodeKind.SYMBOL, self._text(tree, ts_node)[1:], field_name)
        if kind in BODY_TYPES:
            return self._add_body(ts_node.named_children, tree, parent, field_name or "body")

        node = self._leaf(ts_node, tree, parent, NodeKind.OTHER, None, field_name, detail=kind)
        for child in ts_node.named_children:
            self._convert(child, tree, node)
        return node

    def _text(self, tree: SyntaxTree, ts_node: Any) -> str:
        return tree.buffer.slice(ts_node.start_byte, ts_node.end_byte)

    def _leaf(
        self,
        ts_node: Any,
        tree: SyntaxTree,
        parent: SyntaxNode,
        kind: NodeKind,
        name: str | None,
        field_name: str | None,
        detail: str | None = None,
    ) -> SyntaxNode:
        return tree.add_node(
            kind, ts_node.start_byte, ts_node.end_byte,
            parent=parent, name=name, detail=detail, field_name=field_name,
        )

    def _body_statements(self, ts_node: Any, exclude: list[Any]) -> list[Any]:
        """Statements of a scope/method body, across grammar versions.

        Newer grammars wrap them in a ``body`` field; older ones list them
        as direct children after the header nodes.
        """
        body = ts_node.child_by_field_name("body")
        if body is not None:
            return body.named_children if body.type in BODY_TYPES else [body]
        return [
            child for child in ts_node.named_children
            if not any(_same(child, header) for header in exclude)
        ]

    def _add_body(
        self, statements: list[Any], tree: SyntaxTree, parent: SyntaxNode, field_name: str = "body"
    ) -> SyntaxNode | None:
        statements = [s for s in statements if s.type != "comment"]
        if not statements:
            return None
        body = tree.add_node(
            NodeKind.BODY, statements[0].start_byte, statements[-1].end_byte,
            parent=parent, field_name=field_name,
        )
        for statement in statements:
            self._convert(statement, tree, body)
        return body

    def _convert_scope(
        self, ts_node: Any, tree: SyntaxTree, parent: SyntaxNode, kind: NodeKind, field_name: str | None
    ) -> SyntaxNode:
        name = ts_node.child_by_field_name("name")
        superclass = ts_node.child_by_field_name("superclass")
        node = self._leaf(ts_node, tree, parent, kind, self._text(tree, name) if name else None, field_name)
        if name is not None:
            self._convert(name, tree, node, "name")
        if superclass is not None:
            self._convert(superclass, tree, node, "superclass")
        self._add_body(self._body_statements(ts_node, [name, superclass]), tree, node)
        return node

    def _convert_singleton_class(
        self, ts_node: Any, tree: SyntaxTree, parent: SyntaxNode, field_name: str | None
    ) -> SyntaxNode:
        value = ts_node.child_by_field_name("value")
        node = self._leaf(ts_node, tree, parent, NodeKind.SINGLETON_CLASS, None, field_name)
        if value is not None:
            self._convert(value, tree, node, "value")
        self._add_body(self._body_statements(ts_node, [value]), tree, node)
        return node

    def _convert_method(
        self, ts_node: Any, tree: SyntaxTree, parent: SyntaxNode, field_name: str | None
    ) -> SyntaxNode:
        singleton = ts_node.type == "singleton_method"
        receiver = ts_node.child_by_field_name("object")
        name = ts_node.child_by_field_name("name")
        parameters = ts_node.child_by_field_name("parameters")
        node = self._leaf(
            ts_node, tree, parent,
            NodeKind.DEFS if singleton else NodeKind.DEF,
            self._text(tree, name) if name else None,
            field_name,
        )
        if receiver is not None:
            self._convert(receiver, tree, node, "receiver")
        if parameters is not None:
            self._convert(parameters, tree, node, "parameters")
        self._add_body(self._body_statements(ts_node, [receiver, name, parameters]), tree, node)
        return node

    def _convert_call(
        self, ts_node: Any, tree: SyntaxTree, parent: SyntaxNode, field_name: str | None
    ) -> SyntaxNode:
        receiver = ts_node.child_by_field_name("receiver")
        method = ts_node.child_by_field_name("method")
        arguments = ts_node.child_by_field_name("arguments")
        block = ts_node.child_by_field_name("block")
        node = self._leaf(
            ts_node, tree, parent, NodeKind.CALL,
            self._text(tree, method) if method else None, field_name,
        )
        if receiver is not None:
            self._convert(receiver, tree, node, "receiver")
        if arguments is not None:
            # Arguments hang directly off the call, so `memoize def foo` has the
            # def as a child of the memoize call.
            for argument in arguments.named_children:
                self._convert(argument, tree, node)
        if block is not None:
            self._convert(block, tree, node, "block")
        return node

    def _convert_block(
        self, ts_node: Any, tree: SyntaxTree, parent: SyntaxNode, field_name: str | None
    ) -> SyntaxNode:
        parameters = ts_node.child_by_field_name("parameters")
        node = self._leaf(ts_node, tree, parent, NodeKind.BLOCK, None, field_name)
        if parameters is not None:
            self._convert(parameters, tree, node, "parameters")
        self._add_body(self._body_statements(ts_node, [parameters]), tree, node)
        return node

    # =========================================================================
    # Parameters
    # =========================================================================

    def _convert_parameters(
        self, ts_node: Any, tree: SyntaxTree, parent: SyntaxNode, field_name: str | None
    ) -> SyntaxNode:
        node = self._leaf(ts_node, tree, parent, NodeKind.PARAMETERS, None, field_name)
        for child in ts_node.named_children:
            self._convert_parameter(child, tree, node)
        return node

    def _convert_parameter(self, ts_node: Any, tree: SyntaxTree, parent: SyntaxNode) -> None:
        kind = ts_node.type
        if kind == "identifier":
            self._leaf(ts_node, tree, parent, NodeKind.PARAM, self._text(tree, ts_node), None, "positional")
        elif kind in PARAMETER_TYPES:
            argument_kind, name_field = PARAMETER_TYPES[kind]
            name = ts_node.child_by_field_name(name_field)
            self._leaf(
                ts_node, tree, parent, NodeKind.PARAM,
                self._text(tree, name) if name else None, None, argument_kind,
            )
        elif kind == "destructured_parameter":
            group = self._leaf(ts_node, tree, parent, NodeKind.PARAM, None, None, "destructured")
            for child in ts_node.named_children:
                self._convert_parameter(child, tree, group)
        # forward (`...`), `**nil` and comments carry no nameable parameter
