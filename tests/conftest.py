"""Shared test fixtures for lint-diff."""

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

# Get the fixtures directory
FIXTURES_DIR = Path(__file__).parent / "fixtures"
DIFFS_DIR = FIXTURES_DIR / "diffs"
REPORTS_DIR = FIXTURES_DIR / "reports"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def git_multi_diff() -> str:
    """Load a git diff touching modified, new, deleted and binary files."""
    return (DIFFS_DIR / "git_multi.diff").read_text()


@pytest.fixture
def git_rename_diff() -> str:
    """Load a git diff of a renamed file."""
    return (DIFFS_DIR / "git_rename.diff").read_text()


@pytest.fixture
def svn_diff() -> str:
    """Load a Subversion diff with a modified and an added file."""
    return (DIFFS_DIR / "svn.diff").read_text()


@pytest.fixture
def phpcs_json_report() -> str:
    """Load a PHP_CodeSniffer JSON report."""
    return (REPORTS_DIR / "phpcs.json").read_text()


@pytest.fixture
def eslint_json_report() -> str:
    """Load an eslint JSON report."""
    return (REPORTS_DIR / "eslint.json").read_text()


@pytest.fixture
def emacs_report() -> str:
    """Load a phpcs emacs-style report."""
    return (REPORTS_DIR / "phpcs.emacs").read_text()


@pytest.fixture
def phpcs_report() -> Callable[..., str]:
    """Return a builder for phpcs JSON reports.

    Each message is a (type, line, column, message, source) tuple.
    """

    def build(*messages: tuple[str, int, int, str, str]) -> str:
        entries: list[dict[str, Any]] = [
            {
                "message": message,
                "source": source,
                "severity": 5,
                "fixable": False,
                "type": level,
                "line": line,
                "column": column,
            }
            for level, line, column, message, source in messages
        ]
        return json.dumps({"files": {"STDIN": {"messages": entries}}})

    return build


@pytest.fixture
def make_linter() -> Callable[..., MagicMock]:
    """Return a factory for fake lint runners.

    Reports and errors are keyed by (path, revision). Unknown keys
    produce an empty report.
    """

    def factory(
        reports: dict[tuple[str, str], str] | None = None,
        errors: dict[tuple[str, str], Exception] | None = None,
    ) -> MagicMock:
        reports = reports or {}
        errors = errors or {}

        async def get_report(path: str, revision: str) -> str:
            if (path, revision) in errors:
                raise errors[(path, revision)]
            return reports.get((path, revision), "")

        linter = MagicMock()
        linter.get_report = AsyncMock(side_effect=get_report)
        return linter

    return factory


@pytest.fixture
def make_vcs() -> Callable[[str], MagicMock]:
    """Return a factory for fake VCS backends serving a fixed diff."""

    def factory(diff: str) -> MagicMock:
        vcs = MagicMock()
        vcs.get_diff = AsyncMock(return_value=diff)
        vcs.get_file_at_revision = AsyncMock(return_value=None)
        return vcs

    return factory
