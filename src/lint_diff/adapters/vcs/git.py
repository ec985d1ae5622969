"""Git VCS backend using the git CLI.

This module implements the VCSBackend protocol for local git checkouts.

Security features:
- Revisions and paths validated before use
- List-based subprocess calls through SafeCommandRunner
- External diff drivers and textconv filters disabled
- Timeout enforcement on all operations
"""

from __future__ import annotations

from pathlib import Path

import structlog

from ...interfaces.vcs import DiffOptions
from ...utils.async_helpers import VCSError
from ...utils.logging import LogEventNames
from ...utils.safe_subprocess import CommandError, SafeCommandRunner
from ...utils.security import ensure_relative_path, ensure_revision, validate_relative_path

log = structlog.get_logger()

# Exit status and messages of "git show <rev>:<path>" for a missing path
MISSING_PATH_STATUS = 128
MISSING_PATH_MARKERS = ("does not exist in", "exists on disk, but not in")


class GitBackend:
    """Git backend implementing the VCSBackend protocol.

    Example:
        git = GitBackend("/srv/checkouts/my-theme")
        diff = await git.get_diff("", "v1.0.0", "HEAD")
        content = await git.get_file_at_revision("functions.php", "HEAD")
    """

    def __init__(
        self,
        repository: str | Path = ".",
        binary: str | None = None,
        timeout: float = 120,
    ) -> None:
        """Initialize the git backend.

        Args:
            repository: Path to the working tree or bare repository.
            binary: Path to the git executable. If None, uses PATH.
            timeout: Timeout for git commands in seconds.

        Raises:
            CommandNotFoundError: If git is not found.
        """
        self._repository = str(repository)
        self._git = SafeCommandRunner("git", path=binary, default_timeout=timeout)

    @property
    def repository(self) -> str:
        """Repository location."""
        return self._repository

    async def get_diff(
        self,
        scope: str,
        from_revision: str,
        to_revision: str,
        options: DiffOptions | None = None,
    ) -> str:
        """Produce a unified diff between two revisions.

        Paths in the output are relative to ``scope``.

        Raises:
            ValidationError: If a revision or the scope is unsafe.
            VCSError: If git fails.
        """
        ensure_revision(from_revision)
        ensure_revision(to_revision)
        ensure_relative_path(scope)
        options = options or DiffOptions()

        args = ["diff", "--no-color", "--no-ext-diff", "--no-textconv"]
        if options.ignore_whitespace:
            args.append("-w")
        if scope:
            args.append(f"--relative={scope.strip('/')}")
        args.extend([from_revision, to_revision, "--"])

        try:
            result = await self._git.run(args, cwd=self._repository)
        except CommandError as e:
            log.error("git_diff_failed", repository=self._repository, error=str(e))
            raise VCSError(f"git diff failed: {e}") from e

        log.debug(
            LogEventNames.DIFF_FETCHED,
            repository=self._repository,
            from_revision=from_revision,
            to_revision=to_revision,
            size=len(result.stdout),
        )
        return result.stdout

    async def get_file_at_revision(
        self,
        path: str,
        revision: str,
    ) -> str | None:
        """Fetch file content as of a revision.

        Returns:
            File contents, or None if the path does not exist at the revision.

        Raises:
            VCSError: If the path or revision is unsafe, or git fails.
        """
        if not validate_relative_path(path):
            raise VCSError(f"Refusing to read unsafe path: {path!r}")
        ensure_revision(revision)

        try:
            result = await self._git.run(
                ["show", "--no-textconv", f"{revision}:{path}"],
                cwd=self._repository,
                ok_codes=(0, MISSING_PATH_STATUS),
            )
        except CommandError as e:
            raise VCSError(f"git show failed for {path}@{revision}: {e}") from e

        if result.return_code == MISSING_PATH_STATUS:
            if any(marker in result.stderr for marker in MISSING_PATH_MARKERS):
                log.debug(LogEventNames.FILE_CONTENT_MISSING, path=path, revision=revision)
                return None
            raise VCSError(f"git show failed for {path}@{revision}: {result.stderr.strip()}")

        return result.stdout
