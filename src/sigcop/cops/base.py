"""
Base cop interface.

A cop is instantiated once per inspected file and called back for every node
whose kind it subscribed to, in document order. Cops keep no state between
callbacks; everything they need lives in the ``CopContext``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar

from sigcop.config.models import CopConfig
from sigcop.correction.edits import Edit, Offense
from sigcop.tree.node import NodeKind, SyntaxNode, SyntaxTree
from sigcop.tree.sigils import FileModes


@dataclass(frozen=True)
class CopContext:
    tree: SyntaxTree
    modes: FileModes
    config: CopConfig


class Cop(ABC):
    """Abstract base class for cops."""

    name: ClassVar[str] = ""
    node_kinds: ClassVar[frozenset[NodeKind]] = frozenset()

    def __init__(self, context: CopContext):
        self.context = context
        self.tree = context.tree
        self.buffer = context.tree.buffer
        self.modes = context.modes
        self.config = context.config

    @abstractmethod
    def on_candidate(self, node: SyntaxNode) -> Offense | None:
        """Inspect one node; return an offense or None."""
        pass

    def offense(
        self,
        node: SyntaxNode,
        message: str,
        corrections: list[Edit] | tuple[Edit, ...] = (),
        location: tuple[int, int] | None = None,
    ) -> Offense:
        """Build an offense anchored on ``node`` (or an explicit byte range)."""
        begin, end = location or self.tree.source_range(node)
        return Offense(
            cop_name=self.name,
            node=node,
            message=message,
            begin=begin,
            end=end,
            line=self.buffer.line_number(begin),
            column=self.buffer.column(begin),
            corrections=tuple(corrections),
        )

    @classmethod
    def description(cls) -> str:
        doc = (cls.__doc__ or "").strip()
        return doc.splitlines()[0] if doc else ""
