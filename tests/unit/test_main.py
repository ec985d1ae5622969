"""Tests for the command line entry point."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import structlog

from lint_diff.__main__ import apply_overrides, main, parse_args, run_lint_diff
from lint_diff.config.schema import LintDiffConfig
from lint_diff.render import NO_ISSUES_MESSAGE
from lint_diff.utils.async_helpers import VCSError
from lint_diff.utils.security import ValidationError

NEW_FILE_DIFF = """diff --git a/inc/widget.php b/inc/widget.php
new file mode 100644
--- /dev/null
+++ b/inc/widget.php
@@ -0,0 +1,3 @@
+<?php
+echo $a;
+echo $b;
"""

BASE_ARGS = ["--start-revision", "r100", "--end-revision", "r105"]


class TestParseArgs:
    """Tests for argument parsing."""

    def test_defaults(self) -> None:
        """Test default values."""
        args = parse_args(BASE_ARGS)
        assert args.start_revision == "r100"
        assert args.end_revision == "r105"
        assert args.format == "table"
        assert args.dir == ""
        assert args.config is None
        assert args.ignore_diff_too_big is False

    def test_all_options(self) -> None:
        """Test parsing every option."""
        args = parse_args(
            [
                *BASE_ARGS,
                "--vcs",
                "svn",
                "--repo",
                "https://svn.example.com/theme",
                "--dir",
                "trunk",
                "--standard",
                "WordPress-VIP",
                "--format",
                "markdown",
                "--excluded-exts",
                "min.js,test.php",
                "--ignore-diff-too-big",
                "-c",
                "config.yaml",
                "-d",
                "--log-format",
                "json",
            ]
        )
        assert args.vcs == "svn"
        assert args.dir == "trunk"
        assert args.config == Path("config.yaml")
        assert args.debug is True
        assert args.log_format == "json"

    def test_revisions_required(self) -> None:
        """Test that missing revisions are a usage error."""
        with pytest.raises(SystemExit):
            parse_args(["--start-revision", "r100"])

    def test_rejects_unknown_format(self) -> None:
        """Test that the format is restricted."""
        with pytest.raises(SystemExit):
            parse_args([*BASE_ARGS, "--format", "xml"])


class TestApplyOverrides:
    """Tests for command line overrides."""

    def test_no_overrides(self) -> None:
        """Test that the configuration is unchanged without overrides."""
        config = LintDiffConfig()
        assert apply_overrides(config, parse_args(BASE_ARGS)) == config

    def test_overrides(self) -> None:
        """Test vcs, repository, standard and size guard overrides."""
        args = parse_args(
            [
                *BASE_ARGS,
                "--vcs",
                "svn",
                "--repo",
                "svn://host/repo",
                "--standard",
                "WordPress-VIP",
                "--ignore-diff-too-big",
            ]
        )
        config = apply_overrides(LintDiffConfig(), args)

        assert config.vcs.provider == "svn"
        assert config.vcs.repository == "svn://host/repo"
        assert config.linter.standard == "WordPress-VIP"
        assert config.engine.ignore_diff_too_big is True

    def test_unknown_standard_rejected(self) -> None:
        """Test that overriding with an unknown standard fails validation."""
        args = parse_args([*BASE_ARGS, "--standard", "MyCompany"])
        with pytest.raises(ValueError, match="Unknown standard"):
            apply_overrides(LintDiffConfig(), args)


class TestRunLintDiff:
    """Tests for a full command run with fake collaborators."""

    @pytest.fixture
    def collaborators(
        self,
        make_vcs: Callable[[str], MagicMock],
        make_linter: Callable[..., MagicMock],
        phpcs_report: Callable[..., str],
    ):
        """Patch the adapter factories with fakes serving a new file."""
        vcs = make_vcs(NEW_FILE_DIFF)
        linter = make_linter(
            {
                ("inc/widget.php", "r105"): phpcs_report(
                    ("ERROR", 2, 6, "Variable $a is undefined", "Generic.Vars")
                )
            }
        )
        with (
            patch("lint_diff.adapters.create_backend", return_value=vcs),
            patch("lint_diff.adapters.create_linter", return_value=linter),
        ):
            yield vcs, linter

    async def test_prints_table(self, collaborators, capsys: pytest.CaptureFixture[str]) -> None:
        """Test a successful run rendered as a table."""
        exit_code = await run_lint_diff(parse_args(BASE_ARGS))

        assert exit_code == 0
        out = capsys.readouterr().out
        assert "File: inc/widget.php (1)" in out
        assert "| 2    | Blocker | Variable $a is undefined |" in out

    async def test_prints_json(self, collaborators, capsys: pytest.CaptureFixture[str]) -> None:
        """Test JSON output."""
        exit_code = await run_lint_diff(parse_args([*BASE_ARGS, "--format", "json"]))

        assert exit_code == 0
        data = json.loads(capsys.readouterr().out)
        assert data["files"]["inc/widget.php"]["2"][0]["source"] == "Generic.Vars"

    async def test_scope_passed_to_vcs(self, collaborators) -> None:
        """Test that --dir limits the diff and prefixes lint paths."""
        vcs, linter = collaborators

        await run_lint_diff(parse_args([*BASE_ARGS, "--dir", "theme"]))

        assert vcs.get_diff.await_args.args[:3] == ("theme", "r100", "r105")
        linter.get_report.assert_any_await("theme/inc/widget.php", "r105")

    async def test_excluded_extensions(
        self, collaborators, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test that --excluded-exts skips matching files."""
        _, linter = collaborators

        exit_code = await run_lint_diff(parse_args([*BASE_ARGS, "--excluded-exts", "widget.php"]))

        assert exit_code == 0
        linter.get_report.assert_not_awaited()
        assert NO_ISSUES_MESSAGE in capsys.readouterr().out

    async def test_empty_diff_fails(
        self, collaborators, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test that an empty diff is an error with nothing on stdout."""
        vcs, _ = collaborators
        vcs.get_diff.return_value = ""

        assert await run_lint_diff(parse_args(BASE_ARGS)) == 1
        assert capsys.readouterr().out == ""

    async def test_vcs_failure(self, collaborators) -> None:
        """Test that a failed diff is an error."""
        vcs, _ = collaborators
        vcs.get_diff.side_effect = VCSError("git diff failed: bad revision")

        assert await run_lint_diff(parse_args(BASE_ARGS)) == 1

    async def test_rejected_input(self, collaborators) -> None:
        """Test that validation failures from the backend are errors."""
        vcs, linter = collaborators
        vcs.get_diff.side_effect = ValidationError("Invalid revision: 'a..b'")

        assert await run_lint_diff(parse_args(BASE_ARGS)) == 1
        linter.get_report.assert_not_awaited()

    async def test_run_context_cleared(self, collaborators) -> None:
        """Test that revisions bound for a run do not leak into later log calls."""
        vcs, _ = collaborators

        assert await run_lint_diff(parse_args(BASE_ARGS)) == 0
        assert structlog.contextvars.get_contextvars() == {}

        vcs.get_diff.side_effect = VCSError("git diff failed: bad revision")
        assert await run_lint_diff(parse_args(BASE_ARGS)) == 1
        assert structlog.contextvars.get_contextvars() == {}

    async def test_each_run_fetches_the_diff(self, collaborators) -> None:
        """Test that repeated runs go to the VCS each time."""
        vcs, _ = collaborators

        await run_lint_diff(parse_args(BASE_ARGS))
        await run_lint_diff(parse_args(BASE_ARGS))

        assert vcs.get_diff.await_count == 2

    async def test_missing_config_file(self, tmp_path: Path) -> None:
        """Test that a missing configuration file is an error."""
        args = parse_args([*BASE_ARGS, "-c", str(tmp_path / "missing.yaml")])
        assert await run_lint_diff(args) == 1

    async def test_invalid_config_file(self, tmp_path: Path) -> None:
        """Test that an invalid configuration file is an error."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("engine:\n  max_concurrent: 0\n")
        args = parse_args([*BASE_ARGS, "-c", str(config_file)])
        assert await run_lint_diff(args) == 1


class TestMain:
    """Tests for the synchronous entry point."""

    def test_main_returns_exit_code(self) -> None:
        """Test that main runs the command and returns its exit code."""
        with patch("lint_diff.__main__.run_lint_diff", new=AsyncMock(return_value=0)) as mock_run:
            assert main(BASE_ARGS) == 0
        mock_run.assert_awaited_once()

    def test_keyboard_interrupt(self) -> None:
        """Test that an interrupt exits with status 130."""
        with (
            patch("lint_diff.__main__.run_lint_diff", new=MagicMock()),
            patch("lint_diff.__main__.asyncio.run", side_effect=KeyboardInterrupt),
        ):
            assert main(BASE_ARGS) == 130
