"""Data models for the outcome of a correlation run."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .finding import LintReport


class NoteStage(Enum):
    """Which collaborator call a per-file note refers to."""

    NEW_REVISION = "new_revision"
    OLD_REVISION = "old_revision"


@dataclass(frozen=True)
class FileNote:
    """A per-file collaborator failure that did not abort the run."""

    path: str
    revision: str
    stage: NoteStage
    message: str

    def to_dict(self) -> dict[str, str]:
        """Serialize to a JSON-compatible dict."""
        return {
            "path": self.path,
            "revision": self.revision,
            "stage": self.stage.value,
            "message": self.message,
        }


class CorrelationResult(Mapping[str, LintReport]):
    """
    Net-new findings of one run, keyed by file path.

    Files without net-new findings are never present. Notes about
    per-file failures are carried alongside for the caller to log.
    """

    __slots__ = ("_files", "_notes")

    def __init__(
        self,
        files: Mapping[str, LintReport] | None = None,
        notes: tuple[FileNote, ...] = (),
    ) -> None:
        self._files = {path: report for path, report in (files or {}).items() if report}
        self._notes = tuple(notes)

    def __getitem__(self, path: str) -> LintReport:
        return self._files[path]

    def __iter__(self) -> Iterator[str]:
        return iter(self._files)

    def __len__(self) -> int:
        return len(self._files)

    def __repr__(self) -> str:
        return f"CorrelationResult({self._files!r}, notes={self._notes!r})"

    @property
    def notes(self) -> tuple[FileNote, ...]:
        """Per-file failures absorbed during the run."""
        return self._notes

    @property
    def finding_count(self) -> int:
        """Total number of net-new findings."""
        return sum(report.finding_count for report in self._files.values())

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "files": {path: report.to_dict() for path, report in self._files.items()},
            "notes": [note.to_dict() for note in self._notes],
        }
