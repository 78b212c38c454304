"""
Per-file typing sigils.

Sorbet reads the strictness level from a ``# typed: <level>`` comment. Only
two levels matter here: ``true`` enables signature checks and ``strict`` means
Sorbet itself already requires signatures, so the file is skipped entirely.
"""

import re
from dataclasses import dataclass

from sigcop.tree.node import SyntaxTree

TYPED_TRUE_REGEX = re.compile(r"\A#\s*typed:\s*true\Z")
TYPED_STRICT_REGEX = re.compile(r"\A#\s*typed:\s*strict\Z")


@dataclass(frozen=True)
class FileModes:
    strict: bool = False
    signatures_enabled: bool = False

    @classmethod
    def from_comments(cls, comments: list[str]) -> "FileModes":
        stripped = [comment.rstrip() for comment in comments]
        return cls(
            strict=any(TYPED_STRICT_REGEX.match(text) for text in stripped),
            signatures_enabled=any(TYPED_TRUE_REGEX.match(text) for text in stripped),
        )

    @classmethod
    def from_tree(cls, tree: SyntaxTree) -> "FileModes":
        return cls.from_comments(tree.comment_texts())
