"""Tests for the Correlator."""

import pytest

from lint_diff.core.correlator import Correlator
from lint_diff.core.line_mapper import LineMapper
from lint_diff.models.diff import Added, Context, FileDiff
from lint_diff.models.finding import Finding, LintReport, MatchStrategy, Severity


def finding(
    line: int,
    message: str = "X",
    level: Severity = Severity.WARNING,
    column: int = 3,
    source: str = "Rule.A",
) -> Finding:
    return Finding(level=level, line=line, column=column, message=message, source=source)


@pytest.fixture
def mapping() -> LineMapper:
    """Mapper shifting everything from old line 50 on by +5."""
    fd = FileDiff(
        path="src/plugin.php",
        lines=(
            Context(old_line_no=1, new_line_no=1),
            Added(new_line_no=2),
            Added(new_line_no=3),
            Added(new_line_no=4),
            Added(new_line_no=5),
            Added(new_line_no=6),
            Context(old_line_no=50, new_line_no=55),
        ),
    )
    return LineMapper(fd)


class TestCorrelator:
    """Test net-new computation."""

    def test_self_correlation_is_empty(self) -> None:
        """Test that a report correlated against itself has no net-new findings."""
        report = LintReport.from_findings(
            [finding(3), finding(3, "Y"), finding(9, level=Severity.ERROR)]
        )
        result = Correlator().correlate(report, report, LineMapper())
        assert result == LintReport()

    def test_empty_old_report_returns_new(self) -> None:
        """Test that nothing is suppressed without old findings."""
        report = LintReport.from_findings([finding(3), finding(4, "Y")])
        result = Correlator().correlate(report, LintReport(), LineMapper())
        assert result == report

    def test_shifted_finding_is_suppressed(self, mapping: LineMapper) -> None:
        """Test that an old finding is matched at its shifted line."""
        old = LintReport.from_findings([finding(50)])
        new = LintReport.from_findings([finding(55), finding(56, "new problem")])

        result = Correlator().correlate(new, old, mapping)

        assert list(result) == [56]
        assert result[56][0].message == "new problem"

    def test_unshifted_line_does_not_match(self, mapping: LineMapper) -> None:
        """Test that the same finding at the unmapped line is net-new."""
        old = LintReport.from_findings([finding(50)])
        new = LintReport.from_findings([finding(50)])
        result = Correlator().correlate(new, old, mapping)
        assert list(result) == [50]

    @pytest.mark.parametrize(
        "changed",
        [
            {"level": Severity.ERROR},
            {"column": 4},
            {"message": "Y"},
            {"source": "Rule.B"},
        ],
    )
    def test_any_field_difference_is_net_new(self, changed: dict[str, object]) -> None:
        """Test that level, column, message and source all take part in matching."""
        old = LintReport.from_findings([finding(7)])
        new = LintReport.from_findings([finding(7, **changed)])  # type: ignore[arg-type]
        result = Correlator().correlate(new, old, LineMapper())
        assert result.finding_count == 1

    def test_inputs_are_not_modified(self) -> None:
        """Test that correlation builds a new report."""
        old = LintReport.from_findings([finding(3)])
        new = LintReport.from_findings([finding(3), finding(3, "Y")])

        Correlator().correlate(new, old, LineMapper())

        assert new.finding_count == 2
        assert old.finding_count == 1


class TestMatchStrategies:
    """Test exact versus whole-line suppression."""

    def test_exact_removes_one_occurrence_per_old_finding(self) -> None:
        """Test that duplicates are matched occurrence for occurrence."""
        old = LintReport.from_findings([finding(5)])
        new = LintReport.from_findings([finding(5), finding(5)])

        result = Correlator(MatchStrategy.EXACT).correlate(new, old, LineMapper())

        assert result.finding_count == 1

    def test_exact_keeps_distinct_finding_on_same_line(self) -> None:
        """Test that a new finding sharing a line with an old one survives."""
        old = LintReport.from_findings([finding(5)])
        new = LintReport.from_findings([finding(5), finding(5, "Y")])

        result = Correlator().correlate(new, old, LineMapper())

        assert [f.message for f in result[5]] == ["Y"]

    def test_line_strategy_drops_whole_line(self) -> None:
        """Test the legacy whole-line suppression."""
        old = LintReport.from_findings([finding(5)])
        new = LintReport.from_findings([finding(5), finding(5), finding(5, "Y")])

        result = Correlator(MatchStrategy.LINE).correlate(new, old, LineMapper())

        assert result == LintReport()

    def test_line_strategy_needs_a_match(self) -> None:
        """Test that whole-line suppression only triggers on an equal finding."""
        old = LintReport.from_findings([finding(5, "Z")])
        new = LintReport.from_findings([finding(5), finding(5, "Y")])

        result = Correlator("line").correlate(new, old, LineMapper())

        assert result.finding_count == 2

    def test_strategy_from_string(self) -> None:
        """Test that strategies can be given by value."""
        assert Correlator("line").strategy is MatchStrategy.LINE

    def test_unknown_strategy_rejected(self) -> None:
        """Test that an unknown strategy raises."""
        with pytest.raises(ValueError):
            Correlator("fuzzy")
