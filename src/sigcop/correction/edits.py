"""
Edits and offenses.

Edits are always expressed against the ORIGINAL buffer. They are collected
immutably per offense and only composed when the whole batch is applied.
"""

from dataclasses import dataclass, field
from typing import Union

from sigcop.tree.node import SyntaxNode


@dataclass(frozen=True)
class InsertBefore:
    """Insert ``text`` at ``anchor``.

    Insertions sharing an anchor are applied by ascending ``priority``, then
    in the order they were requested.
    """

    anchor: int
    text: str
    priority: int = 0

    @property
    def patch(self) -> tuple[int, int, str]:
        return self.anchor, self.anchor, self.text


@dataclass(frozen=True)
class ReplaceRange:
    begin: int
    end: int
    text: str

    def __post_init__(self):
        assert self.begin <= self.end, f"inverted range {self.begin}..{self.end}"

    @property
    def patch(self) -> tuple[int, int, str]:
        return self.begin, self.end, self.text


@dataclass(frozen=True)
class Remove:
    begin: int
    end: int

    def __post_init__(self):
        assert self.begin <= self.end, f"inverted range {self.begin}..{self.end}"

    @property
    def patch(self) -> tuple[int, int, str]:
        return self.begin, self.end, ""


Edit = Union[InsertBefore, ReplaceRange, Remove]


@dataclass(frozen=True)
class Offense:
    """A detected problem and the edits that repair it."""

    cop_name: str
    node: SyntaxNode
    message: str
    begin: int
    end: int
    line: int
    column: int
    corrections: tuple[Edit, ...] = field(default_factory=tuple)

    @property
    def correctable(self) -> bool:
        return bool(self.corrections)

    def patches(self) -> list[tuple[int, int, str]]:
        return [edit.patch for edit in self.corrections]
