"""
Sorbet/EmptyLineAfterSig.

Checks for blank lines or comments between a signature and its method.

    # bad
    sig { void }

    def foo; end

    # good
    sig { void }
    def foo; end

Comments found in between are moved above the signature, blank lines are
dropped.
"""

from sigcop.cops.base import Cop, CopContext
from sigcop.correction.edits import Edit, Offense
from sigcop.correction.range_editor import RangeEditor
from sigcop.tree.navigation import SiblingLocator
from sigcop.tree.node import NodeKind, SyntaxNode, SyntaxTree
from sigcop.tree.patterns import call_arguments, is_sig_block, signable_definition


def decorated_definition(tree: SyntaxTree, node: SyntaxNode | None) -> SyntaxNode | None:
    """A signable definition, possibly passed to calls like ``memoize def foo``."""
    definition = signable_definition(tree, node)
    if definition is not None or node is None or node.kind != NodeKind.CALL:
        return definition
    for argument in call_arguments(tree, node):
        definition = decorated_definition(tree, argument)
        if definition is not None:
            return definition
    return None


class EmptyLineAfterSig(Cop):
    """Checks for blank lines or comments between a signature and its method."""

    name = "Sorbet/EmptyLineAfterSig"
    node_kinds = frozenset({NodeKind.CALL})

    MSG = "Extra empty line or comment detected"

    def __init__(self, context: CopContext):
        super().__init__(context)
        self.locator = SiblingLocator(self.tree)
        self.editor = RangeEditor(self.buffer)

    def on_candidate(self, node: SyntaxNode) -> Offense | None:
        if not is_sig_block(self.tree, node):
            return None

        following = self.locator.next_sibling(node)
        if decorated_definition(self.tree, following) is None:
            return None

        collapse = self.editor.collapse(node, following)
        if collapse is None:
            return None

        edits: list[Edit] = []
        kept = self.editor.relocatable_text(collapse.begin, collapse.end)
        if kept:
            edits.append(self.editor.insert_before(node, kept))
        edits.append(collapse)
        return self.offense(node, self.MSG, edits, location=(collapse.begin, collapse.end))
