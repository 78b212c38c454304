"""
Shape predicates over tree nodes.

Each predicate checks a node's kind plus a few structural guards and returns
the matched node (or a boolean) so callers can chain on the result.
"""

from sigcop.tree.node import NodeKind, SyntaxNode, SyntaxTree

ATTRIBUTE_METHODS = frozenset({"attr_reader", "attr_writer", "attr_accessor"})
SIGNATURE_METHOD = "sig"
CAPABILITY_CONSTANT = "T::Sig"

# tree-sitter node types other than bodies whose children are statements
STATEMENT_CONTAINERS = frozenset({"then", "else", "begin", "ensure", "do", "parenthesized_statements"})


def call_arguments(tree: SyntaxTree, node: SyntaxNode) -> list[SyntaxNode]:
    """Arguments of a call, i.e. its children minus receiver and block."""
    skip = {node.fields.get("receiver"), node.fields.get("block")}
    return [child for child in tree.children(node) if child.id not in skip]


def is_receiverless_call(node: SyntaxNode | None, name: str | None = None) -> bool:
    if node is None or node.kind != NodeKind.CALL or "receiver" in node.fields:
        return False
    return name is None or node.name == name


def is_sig_block(tree: SyntaxTree, node: SyntaxNode | None) -> bool:
    """``sig { ... }`` or ``sig do ... end``."""
    return is_receiverless_call(node, SIGNATURE_METHOD) and "block" in node.fields


def is_extend_t_sig(tree: SyntaxTree, node: SyntaxNode | None) -> bool:
    """``extend T::Sig`` (any receiver is accepted, as ``self.extend T::Sig`` is equivalent)."""
    if node is None or node.kind != NodeKind.CALL or node.name != "extend":
        return False
    arguments = call_arguments(tree, node)
    return (
        len(arguments) == 1
        and arguments[0].kind == NodeKind.CONST
        and arguments[0].name == CAPABILITY_CONSTANT
    )


def is_attribute_declaration(tree: SyntaxTree, node: SyntaxNode | None) -> bool:
    return (
        node is not None
        and node.name in ATTRIBUTE_METHODS
        and is_receiverless_call(node)
        and "block" not in node.fields
        and bool(call_arguments(tree, node))
    )


def signable_definition(tree: SyntaxTree, node: SyntaxNode | None) -> SyntaxNode | None:
    """Return ``node`` if it is a def, a ``def self.x`` or an attr_* declaration."""
    if node is None:
        return None
    if node.kind in (NodeKind.DEF, NodeKind.DEFS):
        return node
    if is_attribute_declaration(tree, node):
        return node
    return None


def is_statement(tree: SyntaxTree, node: SyntaxNode) -> bool:
    """True when ``node`` is a statement of its own rather than part of an expression."""
    parent = tree.parent(node)
    if parent is None:
        return False
    if parent.kind in (NodeKind.BODY, NodeKind.PROGRAM):
        return True
    return parent.kind == NodeKind.OTHER and parent.detail in STATEMENT_CONTAINERS


def wrapping_call(tree: SyntaxTree, node: SyntaxNode) -> SyntaxNode | None:
    """The call a definition is passed to, e.g. ``memoize`` in ``memoize def foo``."""
    parent = tree.parent(node)
    if parent is None or parent.kind != NodeKind.CALL:
        return None
    if node.id in (parent.fields.get("receiver"), parent.fields.get("block")):
        return None
    return parent
