"""Sibling and enclosing-scope lookups."""

from sigcop.tree.node import SCOPE_KINDS, NodeKind, SyntaxNode, SyntaxTree


class SiblingLocator:
    """Navigates a node's siblings and ancestors within one tree."""

    def __init__(self, tree: SyntaxTree):
        self.tree = tree

    def next_sibling(self, node: SyntaxNode) -> SyntaxNode | None:
        return self._sibling_at(node, node.sibling_index + 1)

    def previous_sibling(self, node: SyntaxNode) -> SyntaxNode | None:
        return self._sibling_at(node, node.sibling_index - 1)

    def _sibling_at(self, node: SyntaxNode, index: int) -> SyntaxNode | None:
        parent = self.tree.parent(node)
        if parent is None or not 0 <= index < len(parent.children):
            return None
        return self.tree.nodes[parent.children[index]]

    def enclosing_scope(self, node: SyntaxNode) -> SyntaxNode | None:
        """Nearest class, module or ``class << self`` ancestor."""
        for ancestor in self.tree.ancestors(node):
            if ancestor.kind in SCOPE_KINDS:
                return ancestor
        return None

    def scope_body(self, scope: SyntaxNode) -> SyntaxNode | None:
        body = self.tree.field(scope, "body")
        if body is None or body.kind != NodeKind.BODY or not body.children:
            return None
        return body

    def scope_statements(self, scope: SyntaxNode | None) -> list[SyntaxNode]:
        """Direct statements of a scope's body; empty when there is none."""
        if scope is None:
            return []
        body = self.scope_body(scope)
        return self.tree.children(body) if body else []
