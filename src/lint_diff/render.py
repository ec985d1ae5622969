"""Rendering of correlation results for terminals, PR comments and tools."""

from __future__ import annotations

import json
import re
from enum import StrEnum

from lint_diff.models.finding import Finding, Severity
from lint_diff.models.result import CorrelationResult

NO_ISSUES_MESSAGE = "There are no lint issues in the diff."

FIXABLE_MARKER = re.compile(r"^\[[ x]\]\s*")

TABLE_LEVEL_NAMES = {
    Severity.ERROR: "Blocker",
    Severity.WARNING: "Warning",
    Severity.NOTE: "Note",
}

MARKDOWN_SECTIONS = (
    (Severity.ERROR, "### Blockers"),
    (Severity.WARNING, "### Warnings"),
    (Severity.NOTE, "### Notes"),
)


class OutputFormat(StrEnum):
    """Supported output formats."""

    TABLE = "table"
    MARKDOWN = "markdown"
    JSON = "json"


def clean_message(message: str) -> str:
    """Strip the "[ ]" or "[x]" fixable marker some reports prefix messages with."""
    return FIXABLE_MARKER.sub("", message)


def render(result: CorrelationResult, output_format: OutputFormat | str) -> str:
    """Render a result in the requested format."""
    output_format = OutputFormat(output_format)
    if output_format is OutputFormat.JSON:
        return render_json(result)
    if not result:
        return NO_ISSUES_MESSAGE
    if output_format is OutputFormat.MARKDOWN:
        return render_markdown(result)
    return render_table(result)


def render_table(result: CorrelationResult) -> str:
    """Render one ASCII table per file."""
    blocks: list[str] = []
    for path, report in result.items():
        rows = [
            (str(line_no), TABLE_LEVEL_NAMES[finding.level], clean_message(finding.message))
            for line_no in sorted(report)
            for finding in report[line_no]
        ]
        table = _ascii_table(("line", "level", "message"), rows)
        blocks.append(f"File: {path} ({len(rows)})\n{table}")
    return "\n".join(blocks)


def render_markdown(result: CorrelationResult) -> str:
    """Render findings grouped into Blockers, Warnings and Notes sections."""
    grouped: dict[Severity, list[str]] = {level: [] for level, _ in MARKDOWN_SECTIONS}
    for path, report in result.items():
        for line_no in sorted(report):
            for finding in report[line_no]:
                grouped[finding.level].append(_markdown_item(path, line_no, finding))

    sections: list[str] = []
    for level, heading in MARKDOWN_SECTIONS:
        if grouped[level]:
            sections.append("\n".join([heading, *grouped[level]]))
    return "\n".join(sections)


def render_json(result: CorrelationResult) -> str:
    """Render the result as indented JSON."""
    return json.dumps(result.to_dict(), indent=2)


def _markdown_item(path: str, line_no: int, finding: Finding) -> str:
    return f"* {path}#L{line_no} : {clean_message(finding.message)}"


def _ascii_table(header: tuple[str, ...], rows: list[tuple[str, ...]]) -> str:
    widths = [len(column) for column in header]
    for row in rows:
        widths = [max(width, len(cell)) for width, cell in zip(widths, row, strict=True)]

    border = "+" + "+".join("-" * (width + 2) for width in widths) + "+"

    def format_row(cells: tuple[str, ...]) -> str:
        padded = (f" {cell.ljust(width)} " for cell, width in zip(cells, widths, strict=True))
        return "|" + "|".join(padded) + "|"

    lines = [border, format_row(header), border]
    lines.extend(format_row(row) for row in rows)
    lines.append(border)
    return "\n".join(lines)
