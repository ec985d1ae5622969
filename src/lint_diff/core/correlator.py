"""Correlation of old- and new-revision lint reports.

A finding is pre-existing when an equal finding (same level, column,
message and source) was reported in the old revision at a line that maps
onto the finding's new line. Everything else is net-new.
"""

from __future__ import annotations

from lint_diff.core.line_mapper import LineMapper
from lint_diff.models.finding import Finding, LintReport, MatchStrategy


class Correlator:
    """Computes net-new findings between two revisions of a file.

    Example:
        correlator = Correlator()
        net_new = correlator.correlate(new_report, old_report, LineMapper(file_diff))
    """

    def __init__(self, strategy: MatchStrategy | str = MatchStrategy.EXACT) -> None:
        """Initialize the correlator.

        Args:
            strategy: Matching strategy. LINE reproduces the whole-line
                suppression of older tooling and can hide distinct findings
                that share a line with a pre-existing one.
        """
        self._strategy = MatchStrategy(strategy)

    @property
    def strategy(self) -> MatchStrategy:
        """The configured matching strategy."""
        return self._strategy

    def correlate(
        self,
        new_report: LintReport,
        old_report: LintReport,
        mapping: LineMapper,
    ) -> LintReport:
        """Filter the new report down to net-new findings.

        Args:
            new_report: Findings of the new revision
            old_report: Findings of the old revision
            mapping: Line mapper built from the file's diff

        Returns:
            A new LintReport; neither input is modified
        """
        remaining: dict[int, list[Finding]] = {
            line_no: list(findings) for line_no, findings in new_report.items()
        }

        for old_line_no, old_findings in old_report.items():
            new_line_no = mapping.map_line(old_line_no)
            candidates = remaining.get(new_line_no)
            if not candidates:
                continue

            if self._strategy is MatchStrategy.LINE:
                if any(finding in candidates for finding in old_findings):
                    del remaining[new_line_no]
                continue

            for old_finding in old_findings:
                try:
                    candidates.remove(old_finding)
                except ValueError:
                    continue

        return LintReport(remaining)
