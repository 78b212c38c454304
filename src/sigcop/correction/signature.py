"""
Signature synthesis.

Builds a starting ``sig`` for a method from its parameter names, every type
left as ``T.untyped``. The one-line form is used whenever it fits the line
length budget; otherwise the signature is spread over a ``sig do`` block so
the correction never trips a line-length check of its own.
"""

from dataclasses import dataclass
from enum import Enum

from sigcop.tree.node import NodeKind, SyntaxNode, SyntaxTree
from sigcop.tree.patterns import call_arguments

PLACEHOLDER_TYPE = "T.untyped"
ONE_INDENT_LEVEL = "  "


class ArgumentKind(str, Enum):
    POSITIONAL = "positional"
    KEYWORD = "keyword"
    REST = "rest"
    BLOCK = "block"
    DESTRUCTURED = "destructured"


@dataclass(frozen=True)
class ArgumentDescriptor:
    name: str
    kind: ArgumentKind


@dataclass(frozen=True)
class IndentationContext:
    column: int = 0
    # whitespace of the source line up to ``column``, tabs kept
    padding: str | None = None

    def __post_init__(self):
        assert self.column >= 0, "negative indentation"
        assert self.padding is None or len(self.padding) == self.column, "padding does not match column"

    @property
    def prefix(self) -> str:
        return " " * self.column if self.padding is None else self.padding


def describe_arguments(tree: SyntaxTree, method: SyntaxNode) -> list[ArgumentDescriptor]:
    """Flatten a definition's parameters into named descriptors.

    Destructured groups contribute their leaf names. Anonymous parameters
    (``*``, ``**``, ``&``) have no name to type and are left out.
    ``attr_writer`` declarations take the written attribute as parameter.
    """
    if method.kind == NodeKind.CALL:
        if method.name != "attr_writer":
            return []
        symbols = [arg for arg in call_arguments(tree, method) if arg.kind == NodeKind.SYMBOL]
        return [ArgumentDescriptor(symbols[0].name, ArgumentKind.POSITIONAL)] if symbols else []

    parameters = tree.field(method, "parameters")
    if parameters is None:
        return []
    return list(_flatten(tree, tree.children(parameters), inside_group=False))


def _flatten(tree: SyntaxTree, params: list[SyntaxNode], inside_group: bool):
    for param in params:
        if param.kind != NodeKind.PARAM:
            continue
        if param.detail == ArgumentKind.DESTRUCTURED.value:
            yield from _flatten(tree, tree.children(param), inside_group=True)
        elif param.name:
            kind = ArgumentKind.DESTRUCTURED if inside_group else ArgumentKind(param.detail)
            yield ArgumentDescriptor(param.name, kind)


def synthesize(
    arguments: list[ArgumentDescriptor],
    budget: int | None = None,
    indentation: IndentationContext = IndentationContext(),
) -> str:
    """Return signature text, without leading indentation or trailing newline.

    Continuation lines of the multi-line form are indented relative to
    ``indentation``.
    """
    typed = [f"{argument.name}: {PLACEHOLDER_TYPE}" for argument in arguments]
    return_clause = f"returns({PLACEHOLDER_TYPE})"
    params_clause = f"params({', '.join(typed)})." if typed else ""
    one_line = f"sig {{ {params_clause}{return_clause} }}"

    if budget is None or indentation.column + len(one_line) <= budget:
        return one_line

    indent = indentation.prefix
    inner = f"{indent}{ONE_INDENT_LEVEL}"
    if typed:
        joiner = f",\n{inner}{ONE_INDENT_LEVEL}"
        params_clause = (
            "params(\n"
            f"{inner}{ONE_INDENT_LEVEL}{joiner.join(typed)}\n"
            f"{inner})."
        )
    return f"sig do\n{inner}{params_clause}{return_clause}\n{indent}end"
