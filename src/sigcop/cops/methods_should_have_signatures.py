"""
Sorbet/MethodsShouldHaveSignatures.

Flags definitions that are not directly preceded by a ``sig`` and corrects
them with a ``T.untyped`` starting signature, adding ``extend T::Sig`` to the
enclosing scope when it is missing.
"""

from enum import Enum
from pathlib import Path

from sigcop.cops.base import Cop, CopContext
from sigcop.correction.edits import Offense
from sigcop.correction.planner import CorrectionPlanner
from sigcop.tree.node import NodeKind, SyntaxNode
from sigcop.tree.patterns import call_arguments, signable_definition

DOCS_URL = "https://sorbet.org/docs/sigs"
DEFAULT_FILE_PATH = "<file path>"


class DetectionState(str, Enum):
    NO_OFFENSE = "no_offense"
    OFFENSE_NO_CAPABILITY = "offense_no_capability"
    OFFENSE_HAS_CAPABILITY = "offense_has_capability"


class MethodsShouldHaveSignatures(Cop):
    """Methods should have Sorbet signatures."""

    name = "Sorbet/MethodsShouldHaveSignatures"
    node_kinds = frozenset({NodeKind.DEF, NodeKind.DEFS, NodeKind.CALL})

    MESSAGE = (
        "Methods should have Sorbet signatures. Please add a `sig` to method #%s. You can use "
        f"`sigcop check -a --only {name} %s` to get a starting signature you can modify. "
        f"See {DOCS_URL} for more information."
    )

    def __init__(self, context: CopContext):
        super().__init__(context)
        self.planner = CorrectionPlanner(self.tree, self.config.line_length_limit)

    def detect(self, definition: SyntaxNode) -> DetectionState:
        # Sorbet already requires signatures in strict files.
        if self.modes.strict:
            return DetectionState.NO_OFFENSE

        extended = self.planner.scope_extends_capability(definition)
        if not (extended or self.modes.signatures_enabled):
            return DetectionState.NO_OFFENSE
        if self.planner.has_signature(definition):
            return DetectionState.NO_OFFENSE
        if extended:
            return DetectionState.OFFENSE_HAS_CAPABILITY
        return DetectionState.OFFENSE_NO_CAPABILITY

    def on_candidate(self, node: SyntaxNode) -> Offense | None:
        definition = signable_definition(self.tree, node)
        if definition is None:
            return None

        state = self.detect(definition)
        if state == DetectionState.NO_OFFENSE:
            return None

        edits = self.planner.plan(
            definition, with_capability=state == DetectionState.OFFENSE_NO_CAPABILITY
        )
        return self.offense(definition, self.message_for(definition), edits)

    def message_for(self, definition: SyntaxNode) -> str:
        return self.MESSAGE % (self.method_name(definition), self.file_path())

    def method_name(self, definition: SyntaxNode) -> str:
        if definition.kind == NodeKind.CALL:
            names = [arg.name for arg in call_arguments(self.tree, definition) if arg.kind == NodeKind.SYMBOL]
            return names[0] if names else definition.name or ""
        return definition.name or ""

    def file_path(self) -> str:
        name = self.buffer.name
        if not name or not Path(name).exists():
            return DEFAULT_FILE_PATH
        return name
