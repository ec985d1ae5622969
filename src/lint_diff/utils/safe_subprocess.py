"""Safe subprocess wrapper for VCS and lint tool commands.

This module provides a wrapper around external executables that:
- Never uses shell=True
- Runs blocking subprocess calls in a worker thread
- Enforces timeouts on all operations
- Optionally feeds file content on stdin
"""

from __future__ import annotations

import asyncio
import shutil
import subprocess
from dataclasses import dataclass

import structlog

from lint_diff.utils.async_helpers import CollaboratorError, CollaboratorTimeoutError

log = structlog.get_logger()


class CommandError(CollaboratorError):
    """Raised when a command exits with an unexpected status.

    Attributes:
        result: The failed command result.
    """

    def __init__(self, message: str, result: CommandResult) -> None:
        super().__init__(message)
        self.result = result


class CommandNotFoundError(CollaboratorError):
    """Raised when the executable cannot be located."""


class CommandTimeoutError(CollaboratorTimeoutError):
    """Raised when a command times out."""


@dataclass
class CommandResult:
    """Result of a command execution."""

    stdout: str
    stderr: str
    return_code: int
    command: list[str]

    @property
    def success(self) -> bool:
        """Return True if the command succeeded."""
        return self.return_code == 0


class SafeCommandRunner:
    """Safe wrapper for one external executable.

    Example:
        git = SafeCommandRunner("git")
        result = await git.run(["diff", "HEAD~1", "HEAD"], cwd=repo_path)
        print(result.stdout)
    """

    # Default timeout for commands (seconds)
    DEFAULT_TIMEOUT = 60

    def __init__(
        self,
        executable: str,
        path: str | None = None,
        default_timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the runner.

        Args:
            executable: Name of the executable to look up in PATH.
            path: Explicit path to the executable. Skips the PATH lookup.
            default_timeout: Default timeout for commands in seconds.

        Raises:
            CommandNotFoundError: If the executable is not found.
        """
        resolved_path = path or shutil.which(executable)
        if not resolved_path:
            raise CommandNotFoundError(f"{executable} not found in PATH")

        self._executable = executable
        self._path: str = resolved_path
        self._default_timeout = default_timeout

    @property
    def path(self) -> str:
        """Resolved executable path."""
        return self._path

    async def run(
        self,
        args: list[str],
        cwd: str | None = None,
        stdin: str | None = None,
        timeout: float | None = None,
        ok_codes: tuple[int, ...] = (0,),
    ) -> CommandResult:
        """Run the executable with the given arguments.

        Args:
            args: Command arguments (without the executable).
            cwd: Working directory.
            stdin: Text to write to the process's standard input.
            timeout: Timeout in seconds (uses default if None).
            ok_codes: Exit codes that count as success.

        Returns:
            CommandResult with stdout, stderr, and return code.

        Raises:
            CommandTimeoutError: If the command times out.
            CommandError: If the exit code is not in ok_codes.
        """
        cmd = [self._path, *args]
        effective_timeout = timeout or self._default_timeout

        log.debug("executing_command", command=cmd, cwd=cwd, timeout=effective_timeout)

        def run_sync() -> subprocess.CompletedProcess[str]:
            return subprocess.run(
                cmd,
                input=stdin,
                capture_output=True,
                text=True,
                cwd=cwd,
                timeout=effective_timeout,
                shell=False,  # CRITICAL: Never use shell=True
            )

        try:
            proc = await asyncio.wait_for(
                asyncio.to_thread(run_sync),
                timeout=effective_timeout + 5,  # Extra buffer for thread overhead
            )
        except (subprocess.TimeoutExpired, TimeoutError) as e:
            msg = f"Command timed out after {effective_timeout}s: {cmd}"
            log.error("command_timeout", command=cmd, timeout=effective_timeout)
            raise CommandTimeoutError(msg) from e
        except OSError as e:
            raise CommandError(
                f"Could not execute {self._executable}: {e}",
                CommandResult(stdout="", stderr=str(e), return_code=-1, command=cmd),
            ) from e

        result = CommandResult(
            stdout=proc.stdout,
            stderr=proc.stderr,
            return_code=proc.returncode,
            command=cmd,
        )

        if result.return_code not in ok_codes:
            log.debug(
                "command_failed",
                command=cmd,
                return_code=result.return_code,
                stderr=result.stderr.strip()[:500],
            )
            raise CommandError(
                f"{self._executable} exited with status {result.return_code}: "
                f"{result.stderr.strip() or result.stdout.strip()}",
                result,
            )

        return result
