"""
Correction planning for methods that lack a signature.

One missing signature can need two edits: the ``sig`` itself above the
definition, and an ``extend T::Sig`` at the top of the enclosing class or
module when that scope does not extend it yet. The second edit is optional;
when it cannot be placed the first one still goes through. Definitions that
are part of an expression get no edits at all.
"""

import logging

from sigcop.correction.edits import Edit, InsertBefore
from sigcop.correction.range_editor import RangeEditor
from sigcop.correction.signature import IndentationContext, describe_arguments, synthesize
from sigcop.tree.navigation import SiblingLocator
from sigcop.tree.node import SyntaxNode, SyntaxTree
from sigcop.tree.patterns import (
    CAPABILITY_CONSTANT,
    is_extend_t_sig,
    is_sig_block,
    is_statement,
    wrapping_call,
)

logger = logging.getLogger(__name__)

CAPABILITY_DECLARATION = f"extend {CAPABILITY_CONSTANT}"
# the declaration goes above anything else inserted at the same spot
CAPABILITY_PRIORITY = -1


class CorrectionPlanner:
    """Plans the edits that give a definition a starting signature."""

    def __init__(self, tree: SyntaxTree, line_length_limit: int | None = None):
        self.tree = tree
        self.line_length_limit = line_length_limit
        self.locator = SiblingLocator(tree)
        self.editor = RangeEditor(tree.buffer)

    # =========================================================================
    # Queries
    # =========================================================================

    def node_to_decorate(self, definition: SyntaxNode) -> SyntaxNode:
        """The outermost call wrapping ``definition`` (``private memoize def foo``), or itself."""
        node = definition
        wrapper = wrapping_call(self.tree, node)
        while wrapper is not None:
            node = wrapper
            wrapper = wrapping_call(self.tree, node)
        return node

    def indentation_for(self, definition: SyntaxNode) -> IndentationContext:
        return self._indentation(self.node_to_decorate(definition))

    def has_signature(self, definition: SyntaxNode) -> bool:
        previous = self.locator.previous_sibling(self.node_to_decorate(definition))
        return is_sig_block(self.tree, previous)

    def scope_extends_capability(self, definition: SyntaxNode) -> bool:
        scope = self.locator.enclosing_scope(definition)
        return any(is_extend_t_sig(self.tree, s) for s in self.locator.scope_statements(scope))

    # =========================================================================
    # Edits
    # =========================================================================

    def plan(self, definition: SyntaxNode, with_capability: bool = True) -> list[Edit]:
        """Edits for one offense, capability declaration first.

        Empty when the definition is part of an expression (``x = def foo; end``)
        and a signature cannot be placed in front of it.
        """
        signature = self.signature_edit(definition)
        if signature is None:
            return []
        edits: list[Edit] = []
        if with_capability:
            capability = self.capability_edit(definition)
            if capability is not None:
                edits.append(capability)
        edits.append(signature)
        return edits

    def signature_edit(self, definition: SyntaxNode) -> InsertBefore | None:
        target = self.node_to_decorate(definition)
        if not is_statement(self.tree, target):
            logger.debug(f"{target!r} is not a statement, leaving it uncorrected")
            return None
        indentation = self.indentation_for(definition)
        signature = synthesize(
            describe_arguments(self.tree, definition), self.line_length_limit, indentation
        )
        return self._insert_statement(target, signature, indentation)

    def capability_edit(self, definition: SyntaxNode) -> InsertBefore | None:
        scope = self.locator.enclosing_scope(definition)
        if scope is None:
            return None
        statements = self.locator.scope_statements(scope)
        if not statements:
            logger.debug(f"No body statements in {scope!r}, skipping {CAPABILITY_DECLARATION}")
            return None
        if any(is_extend_t_sig(self.tree, s) for s in statements):
            return None

        first = statements[0]
        text = f"{CAPABILITY_DECLARATION}\n"
        if not self.editor.starts_line(first):
            return self.editor.insert_inline(
                first, f"{text}\n{self._indentation(first).prefix}", CAPABILITY_PRIORITY
            )
        leading = self.tree.buffer.leading_text(first.begin)
        return InsertBefore(
            self._comment_block_start(first), f"{leading}{text}\n", CAPABILITY_PRIORITY
        )

    def _indentation(self, node: SyntaxNode) -> IndentationContext:
        padding = self.editor.indentation(node)
        return IndentationContext(len(padding), padding)

    def _comment_block_start(self, node: SyntaxNode) -> int:
        """Line start of the whole-line comments directly above ``node``'s line."""
        buffer = self.tree.buffer
        anchor = buffer.line_start(node.begin)
        for begin, end in reversed(self.tree.comments):
            if begin >= anchor:
                continue
            last_line = buffer.line_index(max(begin, end - 1))
            if not buffer.starts_line(begin) or last_line != buffer.line_index(anchor) - 1:
                break
            anchor = buffer.line_start(begin)
        return anchor

    def _insert_statement(
        self, target: SyntaxNode, text: str, indentation: IndentationContext
    ) -> InsertBefore:
        """Insert ``text`` as a statement of its own right before ``target``."""
        if self.editor.starts_line(target):
            leading = self.tree.buffer.leading_text(target.begin)
            return self.editor.insert_before(target, f"{leading}{text}\n")
        return self.editor.insert_inline(target, f"{text}\n{indentation.prefix}")
