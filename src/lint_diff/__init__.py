"""Report only the lint findings that a diff introduces."""

from lint_diff.core import CachingEngine, Correlator, DiffParser, Engine, FindingParser, LineMapper
from lint_diff.models import CorrelationResult, Finding, LintReport, Severity

__all__ = [
    "CachingEngine",
    "CorrelationResult",
    "Correlator",
    "DiffParser",
    "Engine",
    "Finding",
    "FindingParser",
    "LineMapper",
    "LintReport",
    "Severity",
]
