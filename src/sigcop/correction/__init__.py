"""
Correction engine.

Range editing, signature synthesis and correction planning, plus the batch
corrector that merges the edits of many offenses into one rewritten source.
"""

from sigcop.correction.corrector import EditConflictError, apply_offenses
from sigcop.correction.edits import Edit, InsertBefore, Offense, Remove, ReplaceRange
from sigcop.correction.planner import CorrectionPlanner
from sigcop.correction.range_editor import RangeEditor
from sigcop.correction.signature import ArgumentDescriptor, ArgumentKind, IndentationContext, synthesize

__all__ = [
    "ArgumentDescriptor",
    "ArgumentKind",
    "CorrectionPlanner",
    "Edit",
    "EditConflictError",
    "IndentationContext",
    "InsertBefore",
    "Offense",
    "RangeEditor",
    "Remove",
    "ReplaceRange",
    "apply_offenses",
    "synthesize",
]
