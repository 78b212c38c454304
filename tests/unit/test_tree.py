"""
Tests for the text buffer, tree arena, navigation and shape predicates.

Trees are built by hand here so the checks do not depend on the parser.
"""

import pytest

from sigcop.tree.buffer import TextBuffer
from sigcop.tree.navigation import SiblingLocator
from sigcop.tree.node import NodeKind, SyntaxTree
from sigcop.tree.patterns import (
    is_extend_t_sig,
    is_sig_block,
    signable_definition,
    wrapping_call,
)
from sigcop.tree.sigils import FileModes


# =========================================================================
# Helpers
# =========================================================================


def _span(source: str, snippet: str, start: int = 0) -> tuple[int, int]:
    begin = source.index(snippet, start)
    return begin, begin + len(snippet)


@pytest.fixture
def class_tree():
    """
    class Foo
      extend T::Sig
      sig { void }
      def bar; end
    end
    """
    source = "class Foo\n  extend T::Sig\n  sig { void }\n  def bar; end\nend\n"
    tree = SyntaxTree(TextBuffer(source))
    program = tree.add_node(NodeKind.PROGRAM, 0, len(source))
    klass = tree.add_node(NodeKind.CLASS, *_span(source, "class Foo\n  extend T::Sig\n  sig { void }\n  def bar; end\nend"), parent=program, name="Foo")
    body = tree.add_node(NodeKind.BODY, *_span(source, "extend T::Sig\n  sig { void }\n  def bar; end"), parent=klass, field_name="body")
    extend = tree.add_node(NodeKind.CALL, *_span(source, "extend T::Sig"), parent=body, name="extend")
    tree.add_node(NodeKind.CONST, *_span(source, "T::Sig"), parent=extend, name="T::Sig")
    sig = tree.add_node(NodeKind.CALL, *_span(source, "sig { void }"), parent=body, name="sig")
    tree.add_node(NodeKind.BLOCK, *_span(source, "{ void }"), parent=sig, field_name="block")
    tree.add_node(NodeKind.DEF, *_span(source, "def bar; end"), parent=body, name="bar")
    return tree


# =========================================================================
# TextBuffer
# =========================================================================


class TestTextBuffer:
    def test_line_and_column(self):
        buffer = TextBuffer("ab\ncde\n\nf")
        offset = buffer.data.index(b"d")
        assert buffer.line_number(offset) == 2
        assert buffer.column(offset) == 1
        assert buffer.line_start(offset) == 3
        assert buffer.line_number(len(buffer)) == 4

    def test_leading_text_and_starts_line(self):
        buffer = TextBuffer("x = 1\n    def foo; end; def bar; end\n")
        foo = buffer.data.index(b"def foo")
        bar = buffer.data.index(b"def bar")
        assert buffer.leading_text(foo) == "    "
        assert buffer.starts_line(foo)
        assert not buffer.starts_line(bar)

    def test_offsets_are_bytes(self):
        buffer = TextBuffer("# é\ndef foo; end\n")
        offset = buffer.data.index(b"def")
        assert offset == 5
        assert buffer.slice(offset, offset + 3) == "def"
        assert buffer.column(offset) == 0

    def test_column_counts_characters(self):
        buffer = TextBuffer('x = "é"; y\n')
        offset = buffer.data.index(b"y")
        assert offset == 10
        assert buffer.column(offset) == 9

    def test_alignment_keeps_tabs(self):
        buffer = TextBuffer("\tx = 1; y\n")
        assert buffer.alignment(buffer.data.index(b"y")) == "\t       "

    def test_out_of_range_slice_is_a_contract_violation(self):
        buffer = TextBuffer("abc")
        with pytest.raises(AssertionError):
            buffer.slice(2, 10)


# =========================================================================
# Arena and navigation
# =========================================================================


class TestSyntaxTree:
    def test_parent_and_sibling_indices(self, class_tree):
        body = next(n for n in class_tree.nodes if n.kind == NodeKind.BODY)
        children = class_tree.children(body)
        assert [c.sibling_index for c in children] == [0, 1, 2]
        assert all(class_tree.parent(c) is body for c in children)

    def test_walk_is_document_order(self, class_tree):
        begins = [node.begin for node in class_tree.walk()]
        assert begins == sorted(begins)
        assert next(class_tree.walk()).kind == NodeKind.PROGRAM

    def test_field_lookup(self, class_tree):
        klass = next(n for n in class_tree.nodes if n.kind == NodeKind.CLASS)
        assert class_tree.field(klass, "body").kind == NodeKind.BODY
        assert class_tree.field(klass, "superclass") is None


class TestSiblingLocator:
    def test_next_and_previous(self, class_tree):
        locator = SiblingLocator(class_tree)
        definition = next(n for n in class_tree.nodes if n.kind == NodeKind.DEF)
        previous = locator.previous_sibling(definition)
        assert previous.name == "sig"
        assert locator.next_sibling(previous) is definition
        assert locator.next_sibling(definition) is None

    def test_first_child_has_no_previous_sibling(self, class_tree):
        locator = SiblingLocator(class_tree)
        extend = next(n for n in class_tree.nodes if n.name == "extend")
        assert locator.previous_sibling(extend) is None

    def test_enclosing_scope(self, class_tree):
        locator = SiblingLocator(class_tree)
        definition = next(n for n in class_tree.nodes if n.kind == NodeKind.DEF)
        scope = locator.enclosing_scope(definition)
        assert scope.kind == NodeKind.CLASS
        assert [s.name for s in locator.scope_statements(scope)] == ["extend", "sig", "bar"]

    def test_root_has_no_scope_or_siblings(self, class_tree):
        locator = SiblingLocator(class_tree)
        assert locator.enclosing_scope(class_tree.root) is None
        assert locator.next_sibling(class_tree.root) is None
        assert locator.scope_statements(None) == []


# =========================================================================
# Patterns
# =========================================================================


class TestPatterns:
    def test_sig_block(self, class_tree):
        sig = next(n for n in class_tree.nodes if n.name == "sig")
        extend = next(n for n in class_tree.nodes if n.name == "extend")
        assert is_sig_block(class_tree, sig)
        assert not is_sig_block(class_tree, extend)
        assert not is_sig_block(class_tree, None)

    def test_extend_t_sig(self, class_tree):
        extend = next(n for n in class_tree.nodes if n.name == "extend")
        assert is_extend_t_sig(class_tree, extend)

    def test_signable_definition(self, class_tree):
        definition = next(n for n in class_tree.nodes if n.kind == NodeKind.DEF)
        sig = next(n for n in class_tree.nodes if n.name == "sig")
        assert signable_definition(class_tree, definition) is definition
        assert signable_definition(class_tree, sig) is None

    def test_attribute_declaration_is_signable(self):
        source = "attr_reader :name"
        tree = SyntaxTree(TextBuffer(source))
        program = tree.add_node(NodeKind.PROGRAM, 0, len(source))
        call = tree.add_node(NodeKind.CALL, 0, len(source), parent=program, name="attr_reader")
        tree.add_node(NodeKind.SYMBOL, *_span(source, ":name"), parent=call, name="name")
        assert signable_definition(tree, call) is call

    def test_wrapping_call(self):
        source = "memoize def foo; end"
        tree = SyntaxTree(TextBuffer(source))
        program = tree.add_node(NodeKind.PROGRAM, 0, len(source))
        call = tree.add_node(NodeKind.CALL, 0, len(source), parent=program, name="memoize")
        definition = tree.add_node(NodeKind.DEF, *_span(source, "def foo; end"), parent=call, name="foo")
        assert wrapping_call(tree, definition) is call
        assert wrapping_call(tree, call) is None


# =========================================================================
# Sigils
# =========================================================================


class TestFileModes:
    def test_typed_true(self):
        modes = FileModes.from_comments(["# frozen_string_literal: true", "# typed: true"])
        assert modes.signatures_enabled
        assert not modes.strict

    def test_typed_strict(self):
        modes = FileModes.from_comments(["#typed:strict"])
        assert modes.strict
        assert not modes.signatures_enabled

    def test_sigil_must_be_whole_comment(self):
        modes = FileModes.from_comments(["# typed: true, mostly", "# not typed: strict"])
        assert modes == FileModes()
