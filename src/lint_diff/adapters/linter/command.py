"""Lint runner that pipes file content through a command-line linter.

The file content at the requested revision is fetched from the VCS
backend and written to the linter's standard input, so no checkout of
either revision is needed. The default arguments target
PHP_CodeSniffer's JSON report; other tools (eslint, ...) are configured
through ``LinterConfig.arguments``.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import structlog

from ...config.schema import LinterConfig, RetryConfig
from ...utils.async_helpers import LintToolError, create_retry
from ...utils.logging import LogEventNames
from ...utils.safe_subprocess import CommandError, CommandResult, SafeCommandRunner

if TYPE_CHECKING:
    from ...interfaces.vcs import VCSBackend

log = structlog.get_logger()


class CommandLintRunner:
    """LintRunner implementation backed by an external command.

    Example:
        runner = CommandLintRunner(GitBackend("."), LinterConfig(standard="WordPress-VIP"))
        raw = await runner.get_report("functions.php", "HEAD")
    """

    def __init__(
        self,
        vcs: VCSBackend,
        config: LinterConfig | None = None,
        retry: RetryConfig | None = None,
    ) -> None:
        """Initialize the runner.

        Args:
            vcs: Backend used to fetch file content at a revision.
            config: Linter configuration (defaults to phpcs).
            retry: Retry policy for timed-out lint calls.

        Raises:
            CommandNotFoundError: If the lint command is not found.
        """
        self._vcs = vcs
        self._config = config or LinterConfig()
        self._tool = SafeCommandRunner(self._config.command, default_timeout=self._config.timeout)

        retry = retry or RetryConfig()
        self._run_tool = create_retry(
            max_attempts=retry.max_attempts,
            min_wait=retry.initial_delay,
            max_wait=retry.max_delay,
        )(self._run_tool_once)

    def build_args(self, path: str) -> list[str]:
        """Build the lint command arguments for one file.

        Args:
            path: Repository-relative path, used for extension-based rules.

        Returns:
            Argument list (without the executable).
        """
        args: list[str] = []
        if self._config.standards_location:
            args.extend(
                [
                    "--runtime-set",
                    "installed_paths",
                    os.path.expanduser(self._config.standards_location),
                ]
            )
        args.extend(self._config.extra_args)
        args.extend(
            arg.replace("{path}", path).replace("{standard}", self._config.standard)
            for arg in self._config.arguments
        )
        return args

    async def get_report(self, path: str, revision: str) -> str:
        """Lint a file as of a revision.

        Returns:
            Raw report text, or "" if the file does not exist at the revision.

        Raises:
            VCSError: If the content cannot be fetched.
            LintToolError: If the lint tool fails.
            CommandTimeoutError: If the tool keeps timing out.
        """
        content = await self._vcs.get_file_at_revision(path, revision)
        if content is None:
            return ""

        result = await self._run_tool(self.build_args(path), content)
        return result.stdout

    async def _run_tool_once(self, args: list[str], content: str) -> CommandResult:
        try:
            return await self._tool.run(
                args,
                stdin=content,
                ok_codes=tuple(self._config.ok_exit_codes),
            )
        except CommandError as e:
            log.warning(
                LogEventNames.LINT_TOOL_FAILED,
                command=self._config.command,
                return_code=e.result.return_code,
                error=str(e),
            )
            raise LintToolError(str(e)) from e
