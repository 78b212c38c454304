"""
Byte-range edits between sibling nodes.
"""

from sigcop.correction.edits import InsertBefore, Remove
from sigcop.tree.buffer import TextBuffer
from sigcop.tree.node import SyntaxNode


class RangeEditor:
    """Computes patches relative to nodes of one buffer."""

    def __init__(self, buffer: TextBuffer):
        self.buffer = buffer

    def lines_between(self, first: SyntaxNode, second: SyntaxNode) -> tuple[int, int] | None:
        """The whole lines strictly between two siblings.

        Starts right after the line break ending ``first``'s line and runs
        through the last line break before ``second``. Returns None when the
        nodes share a line or sit on adjacent lines.
        """
        assert first.end <= second.begin, f"{second!r} precedes {first!r}"
        between = self.buffer.data[first.end:second.begin]
        first_break = between.find(b"\n")
        if first_break == -1:
            return None
        last_break = between.rfind(b"\n")
        begin = first.end + first_break + 1
        end = first.end + last_break + 1
        if end <= begin:
            return None
        return begin, end

    def collapse(self, first: SyntaxNode, second: SyntaxNode) -> Remove | None:
        """Remove the stray lines so exactly one line break separates the nodes."""
        stray = self.lines_between(first, second)
        if stray is None or "\n" not in self.buffer.slice(*stray):
            return None
        return Remove(*stray)

    def relocatable_text(self, begin: int, end: int) -> str:
        """Non-blank lines of a range, e.g. comments worth keeping."""
        lines = self.buffer.slice(begin, end).splitlines(keepends=True)
        return "".join(line for line in lines if line.strip())

    def insert_before(self, node: SyntaxNode, text: str, priority: int = 0) -> InsertBefore:
        """Insert whole lines above the line holding ``node``.

        ``text`` carries its own indentation and trailing line break.
        """
        return InsertBefore(self.buffer.line_start(node.begin), text, priority)

    def insert_inline(self, node: SyntaxNode, text: str, priority: int = 0) -> InsertBefore:
        """Insert right at ``node``'s start, for nodes that do not begin their line."""
        return InsertBefore(node.begin, text, priority)

    def starts_line(self, node: SyntaxNode) -> bool:
        return self.buffer.starts_line(node.begin)

    def indentation(self, node: SyntaxNode) -> str:
        return self.buffer.alignment(node.begin)
