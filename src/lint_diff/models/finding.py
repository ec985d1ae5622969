"""Data models for lint findings and per-file lint reports."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum, StrEnum
from typing import Any


class Severity(Enum):
    """Normalized severity of a lint finding."""

    ERROR = "ERROR"
    WARNING = "WARNING"
    NOTE = "NOTE"

    @classmethod
    def normalize(cls, raw: str | int | None) -> Severity:
        """
        Map a tool-reported severity onto the three-level taxonomy.

        Unknown values become NOTE so that nothing is silently dropped.
        Integers follow eslint's convention (2 = error, 1 = warning).
        """
        if isinstance(raw, bool) or raw is None:
            return cls.NOTE
        if isinstance(raw, int):
            return {2: cls.ERROR, 1: cls.WARNING}.get(raw, cls.NOTE)

        value = raw.strip().lower()
        if value in ("error", "err", "e", "fatal", "critical", "blocker"):
            return cls.ERROR
        if value in ("warning", "warn", "w"):
            return cls.WARNING
        return cls.NOTE


class MatchStrategy(StrEnum):
    """How an old finding suppresses findings on its mapped line."""

    # Each old finding cancels at most one equal new finding
    EXACT = "exact"
    # Any equal finding on the mapped line drops that whole line
    LINE = "line"


@dataclass(frozen=True)
class Finding:
    """
    A single lint result.

    Two findings are equal when level, column, message and source match.
    The line is left out of comparison because it is the value being
    remapped between revisions.
    """

    level: Severity
    line: int = field(compare=False)
    column: int
    message: str
    source: str

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "level": self.level.value,
            "line": self.line,
            "column": self.column,
            "message": self.message,
            "source": self.source,
        }


class LintReport(Mapping[int, tuple[Finding, ...]]):
    """
    Findings for one file at one revision, indexed by line number.

    Findings on the same line keep the order the tool emitted them in.
    Reports are immutable; filtering produces a new report.
    """

    __slots__ = ("_lines",)

    def __init__(self, lines: Mapping[int, Iterable[Finding]] | None = None) -> None:
        self._lines: dict[int, tuple[Finding, ...]] = {}
        for line_no, findings in (lines or {}).items():
            as_tuple = tuple(findings)
            if as_tuple:
                self._lines[line_no] = as_tuple

    @classmethod
    def from_findings(cls, findings: Iterable[Finding]) -> LintReport:
        """Build a report by grouping findings on their line number."""
        grouped: dict[int, list[Finding]] = {}
        for finding in findings:
            grouped.setdefault(finding.line, []).append(finding)
        return cls(grouped)

    def __getitem__(self, line_no: int) -> tuple[Finding, ...]:
        return self._lines[line_no]

    def __iter__(self) -> Iterator[int]:
        return iter(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, LintReport):
            return self._lines == other._lines
        return super().__eq__(other)

    def __hash__(self) -> int:
        return hash(tuple(self._lines.items()))

    def __repr__(self) -> str:
        return f"LintReport({self._lines!r})"

    @property
    def finding_count(self) -> int:
        """Total number of findings across all lines."""
        return sum(len(findings) for findings in self._lines.values())

    def findings(self) -> Iterator[Finding]:
        """Iterate over every finding, ordered by line then emission order."""
        for line_no in sorted(self._lines):
            yield from self._lines[line_no]

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        """Serialize to a JSON-compatible dict keyed by line number."""
        return {
            str(line_no): [finding.to_dict() for finding in self._lines[line_no]]
            for line_no in sorted(self._lines)
        }
