"""
Syntax tree arena.

Nodes live in a flat list owned by ``SyntaxTree`` and refer to each other by
integer id: a parent id, an ordered list of child ids, and the node's index
among its parent's children. Nothing holds a reference back to the tree.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

from sigcop.tree.buffer import TextBuffer


class NodeKind(str, Enum):
    """Closed set of node kinds the cops care about."""

    PROGRAM = "program"
    CLASS = "class"
    MODULE = "module"
    SINGLETON_CLASS = "singleton_class"  # class << self
    BODY = "body"  # ordered statements of a scope or method
    DEF = "def"
    DEFS = "defs"  # def self.foo
    CALL = "call"
    BLOCK = "block"
    PARAMETERS = "parameters"
    PARAM = "param"
    CONST = "const"
    SYMBOL = "symbol"
    OTHER = "other"


SCOPE_KINDS = frozenset({NodeKind.CLASS, NodeKind.MODULE, NodeKind.SINGLETON_CLASS})


@dataclass
class SyntaxNode:
    """A single node. Treat as read-only once the tree is built."""

    id: int
    kind: NodeKind
    begin: int
    end: int
    name: str | None = None
    detail: str | None = None
    parent: int | None = None
    sibling_index: int = 0
    children: list[int] = field(default_factory=list)
    fields: dict[str, int] = field(default_factory=dict)

    def __repr__(self) -> str:
        label = f" {self.name!r}" if self.name else ""
        return f"<{self.kind.value}#{self.id}{label} {self.begin}..{self.end}>"


class SyntaxTree:
    """Arena of ``SyntaxNode`` objects plus the buffer they index into."""

    def __init__(self, buffer: TextBuffer):
        self.buffer = buffer
        self.nodes: list[SyntaxNode] = []
        self.comments: list[tuple[int, int]] = []
        self.root_id: int | None = None

    # =========================================================================
    # Building
    # =========================================================================

    def add_node(
        self,
        kind: NodeKind,
        begin: int,
        end: int,
        parent: SyntaxNode | None = None,
        name: str | None = None,
        detail: str | None = None,
        field_name: str | None = None,
    ) -> SyntaxNode:
        assert 0 <= begin <= end <= len(self.buffer), f"node range {begin}..{end} outside buffer"
        node = SyntaxNode(id=len(self.nodes), kind=kind, begin=begin, end=end, name=name, detail=detail)
        self.nodes.append(node)
        if parent is None:
            if self.root_id is None:
                self.root_id = node.id
        else:
            node.parent = parent.id
            node.sibling_index = len(parent.children)
            parent.children.append(node.id)
            if field_name:
                parent.fields[field_name] = node.id
        return node

    def add_comment(self, begin: int, end: int) -> None:
        self.comments.append((begin, end))

    # =========================================================================
    # Navigation
    # =========================================================================

    @property
    def root(self) -> SyntaxNode:
        assert self.root_id is not None, "empty tree"
        return self.nodes[self.root_id]

    def parent(self, node: SyntaxNode) -> SyntaxNode | None:
        return None if node.parent is None else self.nodes[node.parent]

    def children(self, node: SyntaxNode) -> list[SyntaxNode]:
        return [self.nodes[i] for i in node.children]

    def field(self, node: SyntaxNode, name: str) -> SyntaxNode | None:
        child_id = node.fields.get(name)
        return None if child_id is None else self.nodes[child_id]

    def ancestors(self, node: SyntaxNode) -> Iterator[SyntaxNode]:
        current = self.parent(node)
        while current is not None:
            yield current
            current = self.parent(current)

    def walk(self, node: SyntaxNode | None = None) -> Iterator[SyntaxNode]:
        """Depth-first, document-order traversal."""
        if self.root_id is None:
            return
        stack = [node or self.root]
        while stack:
            current = stack.pop()
            yield current
            stack.extend(self.nodes[i] for i in reversed(current.children))

    # =========================================================================
    # Source access
    # =========================================================================

    def source_range(self, node: SyntaxNode) -> tuple[int, int]:
        return node.begin, node.end

    def source(self, node: SyntaxNode) -> str:
        return self.buffer.slice(node.begin, node.end)

    def column(self, node: SyntaxNode) -> int:
        return self.buffer.column(node.begin)

    def comment_texts(self) -> list[str]:
        return [self.buffer.slice(begin, end) for begin, end in self.comments]
