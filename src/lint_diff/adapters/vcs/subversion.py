"""Subversion VCS backend using the svn CLI.

Implements the VCSBackend protocol against a repository URL, so no
working copy is required.
"""

from __future__ import annotations

import structlog

from ...interfaces.vcs import DiffOptions
from ...utils.async_helpers import VCSError
from ...utils.logging import LogEventNames
from ...utils.safe_subprocess import CommandError, SafeCommandRunner
from ...utils.security import ensure_relative_path, ensure_revision, validate_relative_path

log = structlog.get_logger()

# svn error codes for paths missing at a revision
MISSING_PATH_CODES = ("E160013", "W160013", "E200009", "E195012")


class SubversionBackend:
    """Subversion backend implementing the VCSBackend protocol.

    Example:
        svn = SubversionBackend("https://svn.example.com/themes/my-theme")
        diff = await svn.get_diff("", "99998", "100000")
    """

    def __init__(
        self,
        repository_url: str,
        binary: str | None = None,
        timeout: float = 120,
    ) -> None:
        """Initialize the Subversion backend.

        Args:
            repository_url: URL of the repository (or a directory inside it).
            binary: Path to the svn executable. If None, uses PATH.
            timeout: Timeout for svn commands in seconds.

        Raises:
            CommandNotFoundError: If svn is not found.
        """
        self._repository_url = repository_url.rstrip("/")
        self._svn = SafeCommandRunner("svn", path=binary, default_timeout=timeout)

    @property
    def repository(self) -> str:
        """Repository URL."""
        return self._repository_url

    def _url(self, path: str) -> str:
        path = path.strip("/")
        return f"{self._repository_url}/{path}" if path else self._repository_url

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
            VCSError: If svn fails.
        """
        ensure_revision(from_revision)
        ensure_revision(to_revision)
        ensure_relative_path(scope)
        options = options or DiffOptions()

        args = ["diff", "--non-interactive", "--internal-diff"]
        if options.ignore_whitespace:
            args.extend(["-x", "-w"])
        args.extend(["-r", f"{from_revision}:{to_revision}", self._url(scope)])

        try:
            result = await self._svn.run(args)
        except CommandError as e:
            log.error("svn_diff_failed", repository=self._repository_url, error=str(e))
            raise VCSError(f"svn diff failed: {e}") from e

        log.debug(
            LogEventNames.DIFF_FETCHED,
            repository=self._repository_url,
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
            VCSError: If the path is unsafe or svn fails.
        """
        if not validate_relative_path(path):
            raise VCSError(f"Refusing to read unsafe path: {path!r}")
        ensure_revision(revision)

        # Peg revision so paths containing "@" are not misread
        target = f"{self._url(path)}@{revision}"

        try:
            result = await self._svn.run(["cat", "--non-interactive", target])
        except CommandError as e:
            if any(code in e.result.stderr for code in MISSING_PATH_CODES):
                log.debug(LogEventNames.FILE_CONTENT_MISSING, path=path, revision=revision)
                return None
            raise VCSError(f"svn cat failed for {path}@{revision}: {e}") from e

        return result.stdout
