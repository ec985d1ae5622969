"""Engine that orchestrates one incremental lint run.

This module implements the Engine class that drives the pipeline per file:
- Fetch and guard the diff (size, emptiness)
- Parse it and decide which files are eligible
- Request lint reports for both revisions from the lint runner
- Correlate them and assemble the net-new findings

Per-file collaborator failures never abort the run. They degrade to the
fail-open fallback and are returned as notes on the result.
"""

from __future__ import annotations

import asyncio
import posixpath
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from lint_diff.config.schema import EngineSettings
from lint_diff.core.correlator import Correlator
from lint_diff.core.diff_parser import DiffParser
from lint_diff.core.finding_parser import FindingParser
from lint_diff.core.line_mapper import LineMapper
from lint_diff.interfaces.vcs import DiffOptions
from lint_diff.models.diff import FileDiff
from lint_diff.models.finding import LintReport
from lint_diff.models.result import CorrelationResult, FileNote, NoteStage
from lint_diff.utils.async_helpers import (
    CollaboratorError,
    DiffTooLargeError,
    EmptyDiffError,
    MalformedDiffError,
    with_timeout,
)

if TYPE_CHECKING:
    from lint_diff.interfaces.linter import LintRunner
    from lint_diff.interfaces.vcs import VCSBackend


@dataclass
class _FileOutcome:
    """What processing one file produced."""

    path: str
    report: LintReport | None = None
    notes: list[FileNote] = field(default_factory=list)


def normalize_diff(diff: str) -> str:
    """Convert CRLF and lone CR line endings to LF."""
    return diff.replace("\r\n", "\n").replace("\r", "\n")


class Engine:
    """Computes net-new lint findings between two revisions.

    The engine is stateless between runs; every run builds its own value
    objects. Eligible files are processed concurrently, bounded by
    ``settings.max_concurrent``.

    Example:
        engine = Engine(GitBackend("."), CommandLintRunner(vcs, linter_config))
        result = await engine.run("v1.0.0", "HEAD")
        for path, report in result.items():
            print(path, report.finding_count)
    """

    def __init__(
        self,
        vcs: VCSBackend,
        linter: LintRunner,
        settings: EngineSettings | None = None,
        diff_parser: DiffParser | None = None,
        finding_parser: FindingParser | None = None,
        correlator: Correlator | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            vcs: Backend producing the diff
            linter: Runner producing raw lint reports per file revision
            settings: Engine settings (defaults if None)
            diff_parser: DiffParser instance
            finding_parser: FindingParser instance
            correlator: Correlator instance (built from settings if None)
        """
        self._vcs = vcs
        self._linter = linter
        self._settings = settings or EngineSettings()
        self._diff_parser = diff_parser or DiffParser()
        self._finding_parser = finding_parser or FindingParser()
        self._correlator = correlator or Correlator(self._settings.match_strategy)

    @property
    def settings(self) -> EngineSettings:
        """The engine settings."""
        return self._settings

    async def run(
        self,
        old_revision: str,
        new_revision: str,
        scope: str = "",
        excluded_extensions: Sequence[str] | None = None,
    ) -> CorrelationResult:
        """Fetch the diff between two revisions and compute net-new findings.

        Args:
            old_revision: Revision before the change
            new_revision: Revision after the change
            scope: Directory within the repository ("" for the root)
            excluded_extensions: Path suffixes to skip; overrides the
                configured list when given

        Returns:
            CorrelationResult with net-new findings per file

        Raises:
            DiffTooLargeError: If the diff exceeds the size guard
            EmptyDiffError: If the diff is empty
            MalformedDiffError: If the diff cannot be parsed
            CollaboratorError: If the diff itself cannot be produced
        """
        diff = await self._vcs.get_diff(
            scope,
            old_revision,
            new_revision,
            DiffOptions(ignore_whitespace=self._settings.ignore_whitespace),
        )
        return await self.run_diff(diff, old_revision, new_revision, scope, excluded_extensions)

    async def run_diff(
        self,
        diff: str,
        old_revision: str,
        new_revision: str,
        scope: str = "",
        excluded_extensions: Sequence[str] | None = None,
    ) -> CorrelationResult:
        """Compute net-new findings for an already produced diff.

        Args:
            diff: Unified diff text between the two revisions
            old_revision: Revision before the change
            new_revision: Revision after the change
            scope: Directory the diff paths are relative to
            excluded_extensions: Path suffixes to skip

        Returns:
            CorrelationResult with net-new findings per file

        Raises:
            DiffTooLargeError: If the diff exceeds the size guard
            EmptyDiffError: If the diff is empty
            MalformedDiffError: If the diff cannot be parsed or names no files
        """
        diff = normalize_diff(diff)

        limit = self._settings.max_diff_size
        if not self._settings.ignore_diff_too_big and len(diff) > limit:
            raise DiffTooLargeError(len(diff), limit)

        if not diff.strip():
            raise EmptyDiffError("The diff is empty; check the revision range")

        file_diffs = self._diff_parser.parse(diff)
        if not file_diffs:
            raise MalformedDiffError("No file headers found in the diff")

        excluded = (
            tuple(excluded_extensions)
            if excluded_extensions is not None
            else tuple(self._settings.excluded_extensions)
        )
        eligible = [fd for fd in file_diffs if self.is_eligible(fd, excluded)]

        semaphore = asyncio.Semaphore(self._settings.max_concurrent)

        async def bounded(file_diff: FileDiff) -> _FileOutcome:
            async with semaphore:
                return await self._process_file(file_diff, old_revision, new_revision, scope)

        outcomes = await asyncio.gather(*(bounded(fd) for fd in eligible))

        files: dict[str, LintReport] = {}
        notes: list[FileNote] = []
        for outcome in outcomes:
            notes.extend(outcome.notes)
            if outcome.report:
                files[outcome.path] = outcome.report

        return CorrelationResult(files, tuple(notes))

    def run_sync(
        self,
        old_revision: str,
        new_revision: str,
        scope: str = "",
        excluded_extensions: Sequence[str] | None = None,
    ) -> CorrelationResult:
        """Blocking wrapper around run() for callers without an event loop."""
        return asyncio.run(self.run(old_revision, new_revision, scope, excluded_extensions))

    def is_eligible(self, file_diff: FileDiff, excluded_extensions: Iterable[str] = ()) -> bool:
        """Decide whether a file is worth linting.

        A file qualifies when it has added lines, is not binary, has an
        allowed extension and does not end with an excluded suffix.
        """
        if not file_diff.has_additions or file_diff.is_binary:
            return False
        if file_diff.extension.lower() not in self._settings.allowed_extensions:
            return False
        return not any(file_diff.path.endswith(ext) for ext in excluded_extensions if ext)

    async def _process_file(
        self,
        file_diff: FileDiff,
        old_revision: str,
        new_revision: str,
        scope: str,
    ) -> _FileOutcome:
        outcome = _FileOutcome(path=file_diff.path)
        target = self._lint_path(scope, file_diff.path)
        old_target = self._lint_path(scope, file_diff.old_path or file_diff.path)

        try:
            new_raw = await self._get_report(target, new_revision)
        except CollaboratorError as e:
            outcome.notes.append(
                FileNote(file_diff.path, new_revision, NoteStage.NEW_REVISION, str(e))
            )
            return outcome

        if not new_raw.strip():
            return outcome

        new_report = self._finding_parser.parse(new_raw)
        if file_diff.is_new_file or not new_report:
            outcome.report = new_report
            return outcome

        try:
            old_raw = await self._get_report(old_target, old_revision)
        except CollaboratorError as e:
            outcome.notes.append(
                FileNote(file_diff.path, old_revision, NoteStage.OLD_REVISION, str(e))
            )
            outcome.report = new_report
            return outcome

        if not old_raw.strip():
            outcome.report = new_report
            return outcome

        old_report = self._finding_parser.parse(old_raw)
        outcome.report = self._correlator.correlate(
            new_report, old_report, LineMapper(file_diff)
        )
        return outcome

    @staticmethod
    def _lint_path(scope: str, path: str) -> str:
        return posixpath.join(scope, path) if scope else path

    async def _get_report(self, path: str, revision: str) -> str:
        return await with_timeout(
            self._linter.get_report(path, revision),
            self._settings.file_timeout,
            f"Linting {path} at {revision} timed out after {self._settings.file_timeout}s",
        )
