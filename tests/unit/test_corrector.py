"""
Tests for merging and applying corrections from several offenses.
"""

import pytest

from sigcop.correction.corrector import EditConflictError, apply_offenses, merge_patches
from sigcop.correction.edits import InsertBefore, Offense, Remove, ReplaceRange
from sigcop.tree.buffer import TextBuffer
from sigcop.tree.node import NodeKind, SyntaxNode


def _offense(*edits, cop_name: str = "Test/Cop") -> Offense:
    node = SyntaxNode(id=0, kind=NodeKind.OTHER, begin=0, end=0)
    return Offense(
        cop_name=cop_name, node=node, message="msg",
        begin=0, end=0, line=1, column=0, corrections=tuple(edits),
    )


class TestMergePatches:
    def test_ascending_order(self):
        patches = merge_patches([
            _offense(InsertBefore(10, "b")),
            _offense(InsertBefore(2, "a")),
        ])
        assert patches == [(2, 2, "a"), (10, 10, "b")]

    def test_insertions_sharing_an_anchor_keep_their_order(self):
        patches = merge_patches([_offense(InsertBefore(4, "first\n"), InsertBefore(4, "second\n"))])
        assert [text for _, _, text in patches] == ["first\n", "second\n"]

    def test_insertion_before_removal_at_same_offset(self):
        patches = merge_patches([_offense(Remove(4, 6), InsertBefore(4, "x"))])
        assert patches == [(4, 4, "x"), (4, 6, "")]

    def test_priority_orders_insertions_across_offenses(self):
        patches = merge_patches([
            _offense(InsertBefore(4, "  # doc\n")),
            _offense(InsertBefore(4, "  extend T::Sig\n\n", priority=-1)),
        ])
        assert [text for _, _, text in patches] == ["  extend T::Sig\n\n", "  # doc\n"]

    def test_identical_insertions_across_offenses_are_emitted_once(self):
        declaration = InsertBefore(10, "  extend T::Sig\n\n")
        patches = merge_patches([
            _offense(declaration, InsertBefore(10, "  sig { void }\n")),
            _offense(declaration, InsertBefore(30, "  sig { void }\n")),
        ])
        assert [text for _, _, text in patches].count("  extend T::Sig\n\n") == 1
        assert len(patches) == 3

    def test_empty_insertions_are_dropped(self):
        assert merge_patches([_offense(InsertBefore(3, ""))]) == []

    def test_overlapping_ranges_are_rejected(self):
        with pytest.raises(EditConflictError):
            merge_patches([_offense(Remove(2, 8)), _offense(ReplaceRange(5, 10, "x"))])

    def test_insertion_inside_removed_range_is_rejected(self):
        with pytest.raises(EditConflictError):
            merge_patches([_offense(Remove(2, 8)), _offense(InsertBefore(5, "x"))])

    def test_touching_ranges_are_allowed(self):
        patches = merge_patches([_offense(Remove(2, 4)), _offense(Remove(4, 6))])
        assert patches == [(2, 4, ""), (4, 6, "")]


class TestApplyOffenses:
    def test_edits_resolve_against_original_offsets(self):
        buffer = TextBuffer("one\ntwo\n\n\nthree\n")
        offenses = [
            _offense(InsertBefore(0, "zero\n")),
            _offense(Remove(8, 10)),
            _offense(ReplaceRange(10, 15, "THREE")),
        ]
        assert apply_offenses(buffer, offenses) == "zero\none\ntwo\nTHREE\n"

    def test_no_offenses_returns_source(self):
        buffer = TextBuffer("def foo; end\n")
        assert apply_offenses(buffer, []) == "def foo; end\n"

    def test_multibyte_text(self):
        buffer = TextBuffer("# é\ndef foo; end\n")
        offset = buffer.data.index(b"def")
        assert apply_offenses(buffer, [_offense(InsertBefore(offset, "sig { void }\n"))]) == (
            "# é\nsig { void }\ndef foo; end\n"
        )


def test_inverted_edit_is_a_contract_violation():
    with pytest.raises(AssertionError):
        Remove(5, 2)
