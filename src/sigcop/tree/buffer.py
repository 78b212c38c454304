"""
Immutable source buffer.

All offsets handed around by the engine are byte offsets into this buffer,
matching what tree-sitter reports for node ranges.
"""

from bisect import bisect_right


class TextBuffer:
    """Source text plus byte-offset to line/column mapping."""

    def __init__(self, source: str | bytes, name: str = "(string)"):
        self.data = source.encode("utf-8") if isinstance(source, str) else bytes(source)
        self.name = name
        self._line_starts = [0]
        pos = self.data.find(b"\n")
        while pos != -1:
            self._line_starts.append(pos + 1)
            pos = self.data.find(b"\n", pos + 1)

    def __len__(self) -> int:
        return len(self.data)

    @property
    def source(self) -> str:
        return self.data.decode("utf-8")

    def slice(self, begin: int, end: int) -> str:
        """Return the text between two byte offsets."""
        assert 0 <= begin <= end <= len(self.data), f"range {begin}..{end} outside buffer"
        return self.data[begin:end].decode("utf-8")

    def line_index(self, offset: int) -> int:
        """0-based line containing ``offset``."""
        assert 0 <= offset <= len(self.data), f"offset {offset} outside buffer"
        return bisect_right(self._line_starts, offset) - 1

    def line_number(self, offset: int) -> int:
        """1-based line number, as shown to users."""
        return self.line_index(offset) + 1

    def line_start(self, offset: int) -> int:
        return self._line_starts[self.line_index(offset)]

    def column(self, offset: int) -> int:
        """0-based column in characters, not bytes."""
        return len(self.leading_text(offset))

    def leading_text(self, offset: int) -> str:
        """Text between the start of the line and ``offset``."""
        return self.slice(self.line_start(offset), offset)

    def starts_line(self, offset: int) -> bool:
        """True when only whitespace precedes ``offset`` on its line."""
        return self.leading_text(offset).strip() == ""

    def alignment(self, offset: int) -> str:
        """Whitespace that lines a new line up with ``offset``, keeping tabs."""
        return "".join(c if c == "\t" else " " for c in self.leading_text(offset))
