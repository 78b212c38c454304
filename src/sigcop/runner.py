"""
Inspection and autocorrection driver.

Parses each file, walks the tree once in document order dispatching nodes to
the cops subscribed to their kind, and optionally applies corrections until
the source stops changing.
"""

import logging
from dataclasses import dataclass, field
from fnmatch import fnmatch
from pathlib import Path
from typing import Iterable

from sigcop.config.models import AllCopsConfig, SigCopConfig
from sigcop.cops.base import CopContext
from sigcop.cops.registry import CopRegistry
from sigcop.correction.corrector import apply_offenses
from sigcop.correction.edits import Offense
from sigcop.languages.ruby.parser import RubyParser, RubySyntaxError
from sigcop.tree.node import SyntaxTree
from sigcop.tree.sigils import FileModes

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 200


class InfiniteCorrectionLoop(Exception):
    """Raised when autocorrection keeps producing previously seen sources."""

    def __init__(self, path: str, iterations: int):
        self.path = path
        self.iterations = iterations
        super().__init__(f"Infinite correction loop in {path} after {iterations} iterations")


@dataclass
class CorrectionResult:
    source: str
    corrected_source: str
    offenses: list[Offense]
    remaining: list[Offense]
    iterations: int

    @property
    def changed(self) -> bool:
        return self.source != self.corrected_source


@dataclass
class FileReport:
    path: Path
    offenses: list[Offense] = field(default_factory=list)
    remaining: list[Offense] = field(default_factory=list)
    corrected: bool = False
    error: str | None = None


class Runner:
    """Runs the enabled cops over sources and files."""

    def __init__(
        self,
        config: SigCopConfig | None = None,
        only: list[str] | None = None,
        parser: RubyParser | None = None,
    ):
        self.config = config or SigCopConfig()
        self.cop_classes = CopRegistry.enabled_cops(self.config, only)
        self.parser = parser or RubyParser()

    def inspect_tree(self, tree: SyntaxTree) -> list[Offense]:
        """Run every cop over one tree, offenses in document order."""
        modes = FileModes.from_tree(tree)
        cops = [
            cop_class(CopContext(tree, modes, self.config.for_cop(cop_class.name)))
            for cop_class in self.cop_classes
        ]

        offenses: list[Offense] = []
        for node in tree.walk():
            for cop in cops:
                if node.kind not in cop.node_kinds:
                    continue
                offense = cop.on_candidate(node)
                if offense is not None:
                    offenses.append(offense)
        offenses.sort(key=lambda offense: (offense.begin, offense.end))
        return offenses

    def inspect_source(self, source: str, name: str = "(string)") -> list[Offense]:
        return self.inspect_tree(self.parser.parse_source(source, name=name))

    def autocorrect_source(self, source: str, name: str = "(string)") -> CorrectionResult:
        """Correct until no correctable offense is left."""
        seen = {source}
        current = source
        first_offenses: list[Offense] | None = None

        for iteration in range(1, MAX_ITERATIONS + 1):
            tree = self.parser.parse_source(current, name=name)
            offenses = self.inspect_tree(tree)
            if first_offenses is None:
                first_offenses = offenses

            correctable = [offense for offense in offenses if offense.correctable]
            corrected = apply_offenses(tree.buffer, correctable) if correctable else current
            if corrected == current:
                return CorrectionResult(source, current, first_offenses, offenses, iteration)
            if corrected in seen:
                raise InfiniteCorrectionLoop(name, iteration)

            logger.debug(f"{name}: pass {iteration} corrected {len(correctable)} offenses")
            seen.add(corrected)
            current = corrected

        raise InfiniteCorrectionLoop(name, MAX_ITERATIONS)

    def run_file(self, path: Path, autocorrect: bool = False) -> FileReport:
        report = FileReport(path=path)
        try:
            source = path.read_text(encoding="utf-8")
            if autocorrect:
                result = self.autocorrect_source(source, name=str(path))
                report.offenses = result.offenses
                report.remaining = result.remaining
                if result.changed:
                    path.write_text(result.corrected_source, encoding="utf-8")
                    report.corrected = True
            else:
                report.offenses = self.inspect_source(source, name=str(path))
                report.remaining = report.offenses
        except (RubySyntaxError, UnicodeDecodeError, InfiniteCorrectionLoop) as e:
            logger.warning(f"Skipping {path}: {e}")
            report.error = str(e)
        return report

    def run_files(self, paths: Iterable[Path], autocorrect: bool = False) -> list[FileReport]:
        return [self.run_file(path, autocorrect=autocorrect) for path in paths]


def discover_files(paths: Iterable[Path], all_cops: AllCopsConfig) -> list[Path]:
    """Expand directories into the Ruby files they contain.

    Explicitly named files are always inspected; files found by walking a
    directory must match an Include pattern and no Exclude pattern, relative
    to that directory.
    """
    found: list[Path] = []
    for path in paths:
        if path.is_file():
            found.append(path)
            continue
        if not path.is_dir():
            logger.warning(f"No such file or directory: {path}")
            continue
        for candidate in sorted(path.rglob("*")):
            if not candidate.is_file():
                continue
            relative = candidate.relative_to(path).as_posix()
            if not any(fnmatch(relative, pattern) for pattern in all_cops.include):
                continue
            if any(fnmatch(relative, pattern) for pattern in all_cops.exclude):
                continue
            found.append(candidate)
    return found
