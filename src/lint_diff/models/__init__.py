"""Data models and value objects."""

from .diff import Added, Context, DiffLine, FileDiff, Removed
from .finding import Finding, LintReport, MatchStrategy, Severity
from .result import CorrelationResult, FileNote, NoteStage

__all__ = [
    # Diff models
    "Added",
    "Removed",
    "Context",
    "DiffLine",
    "FileDiff",
    # Finding models
    "Severity",
    "Finding",
    "LintReport",
    "MatchStrategy",
    # Result models
    "NoteStage",
    "FileNote",
    "CorrelationResult",
]
