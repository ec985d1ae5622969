"""Parser for raw lint tool reports.

This module implements the FindingParser class that turns the textual
report of a lint tool into a line-indexed LintReport. It supports:
- PHP_CodeSniffer JSON reports (--report=json)
- eslint JSON reports (--format json)
- Line-oriented "emacs" style reports (phpcs --report=emacs, gcc-style)

Reports that cannot be parsed yield an empty LintReport: a tool that
found nothing and a tool whose output we do not understand both mean
there is nothing to correlate.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterator
from typing import Any

from lint_diff.models.finding import Finding, LintReport, Severity


class FindingParser:
    """Parser for lint tool reports.

    Example:
        parser = FindingParser()
        report = parser.parse(phpcs_json_output)
        for line_no, findings in report.items():
            ...
    """

    # path:line[:column]: severity - message (Source.Rule)
    # path:line[:column]: severity: message [source]
    EMACS_PATTERN = re.compile(
        r"^(?P<path>.+?):(?P<line>\d+):(?:(?P<column>\d+):)?\s*"
        r"(?P<severity>[A-Za-z]+)\s*(?:-|:)\s*"
        r"(?P<message>.*?)"
        r"(?:\s+(?:\((?P<paren_source>[\w.\-/@]+)\)|\[(?P<bracket_source>[\w.\-/@]+)\]))?\s*$"
    )

    def parse(self, raw: str) -> LintReport:
        """Parse a raw report into findings indexed by line.

        Args:
            raw: Report text as produced by the lint tool

        Returns:
            LintReport, empty if the report is empty or unparsable
        """
        text = (raw or "").strip()
        if not text:
            return LintReport()

        if text[0] in "{[":
            try:
                data = json.loads(text)
            except json.JSONDecodeError:
                return LintReport()
            return LintReport.from_findings(self._parse_json(data))

        return LintReport.from_findings(self._parse_lines(text))

    def _parse_json(self, data: Any) -> Iterator[Finding]:
        if isinstance(data, dict):
            files = data.get("files")
            if isinstance(files, dict):
                for file_entry in files.values():
                    if isinstance(file_entry, dict):
                        yield from self._parse_messages(file_entry.get("messages"))
            elif "messages" in data:
                yield from self._parse_messages(data.get("messages"))
        elif isinstance(data, list):
            for file_entry in data:
                if isinstance(file_entry, dict):
                    yield from self._parse_messages(file_entry.get("messages"))

    def _parse_messages(self, messages: Any) -> Iterator[Finding]:
        if not isinstance(messages, list):
            return
        for message in messages:
            if not isinstance(message, dict):
                continue
            finding = self._finding_from_json(message)
            if finding is not None:
                yield finding

    def _finding_from_json(self, message: dict[str, Any]) -> Finding | None:
        line = self._as_int(message.get("line"))
        if line is None:
            return None

        # phpcs: "type": "ERROR", "severity": 5 (a weight, not a level)
        # eslint: "severity": 2, "ruleId": "no-unused-vars"
        if "type" in message:
            level = Severity.normalize(str(message["type"]))
        else:
            level = Severity.normalize(message.get("severity"))

        source = message.get("source")
        if source is None:
            source = message.get("ruleId")

        return Finding(
            level=level,
            line=line,
            column=self._as_int(message.get("column")) or 0,
            message=str(message.get("message", "")),
            source="" if source is None else str(source),
        )

    def _parse_lines(self, text: str) -> Iterator[Finding]:
        for line in text.splitlines():
            match = self.EMACS_PATTERN.match(line.strip())
            if not match:
                continue
            yield Finding(
                level=Severity.normalize(match.group("severity")),
                line=int(match.group("line")),
                column=int(match.group("column") or 0),
                message=match.group("message"),
                source=match.group("paren_source") or match.group("bracket_source") or "",
            )

    @staticmethod
    def _as_int(value: Any) -> int | None:
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, str) and value.strip().isdigit():
            return int(value.strip())
        return None
