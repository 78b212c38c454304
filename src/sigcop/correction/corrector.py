"""
Batch application of offense corrections.

All edits refer to offsets of the original buffer. They are merged into one
ascending-offset sequence and spliced in a single pass, so no edit ever sees
a buffer another edit already changed.
"""

import logging

from sigcop.correction.edits import InsertBefore, Offense
from sigcop.tree.buffer import TextBuffer

logger = logging.getLogger(__name__)


class EditConflictError(Exception):
    """Raised when edits of different offenses touch overlapping ranges."""

    pass


def merge_patches(offenses: list[Offense]) -> list[tuple[int, int, str]]:
    """Order the patches of all offenses and reject overlaps.

    Insertions sort before range edits starting at the same offset.
    Insertions sharing an anchor go by priority, then by offense/edit order.
    The same insertion requested by several offenses (e.g. one
    ``extend T::Sig`` for two methods of a class) is emitted once.
    """
    entries: list[tuple[int, int, int, int, int, str]] = []
    seen_insertions: set[tuple[int, str]] = set()
    sequence = 0
    for offense in offenses:
        for edit in offense.corrections:
            begin, end, text = edit.patch
            priority = edit.priority if isinstance(edit, InsertBefore) else 0
            if begin == end:
                if not text or (begin, text) in seen_insertions:
                    continue
                seen_insertions.add((begin, text))
            entries.append((begin, 0 if begin == end else 1, priority, sequence, end, text))
            sequence += 1
    entries.sort()

    ranges = [(begin, end) for begin, width, _, _, end, _ in entries if width]
    for (_, previous_end), (begin, end) in zip(ranges, ranges[1:]):
        if begin < previous_end:
            raise EditConflictError(f"Overlapping edits at {begin}..{end}")
    for begin, width, _, _, _, _ in entries:
        if width:
            continue
        for range_begin, range_end in ranges:
            if range_begin < begin < range_end:
                raise EditConflictError(
                    f"Insertion at {begin} falls inside edited range {range_begin}..{range_end}"
                )

    return [(begin, end, text) for begin, _, _, _, end, text in entries]


def apply_patches(buffer: TextBuffer, patches: list[tuple[int, int, str]]) -> str:
    """Splice already merged patches into the buffer's text."""
    output = bytearray()
    cursor = 0
    for begin, end, text in patches:
        assert cursor <= begin <= end <= len(buffer), f"patch {begin}..{end} out of order"
        output += buffer.data[cursor:begin]
        output += text.encode("utf-8")
        cursor = end
    output += buffer.data[cursor:]
    return output.decode("utf-8")


def apply_offenses(buffer: TextBuffer, offenses: list[Offense]) -> str:
    """Apply every correction of ``offenses`` to the original buffer."""
    patches = merge_patches(offenses)
    logger.debug(f"Applying {len(patches)} patches from {len(offenses)} offenses to {buffer.name}")
    return apply_patches(buffer, patches)
