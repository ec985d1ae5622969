"""Abstract interface for lint tool integrations."""

from typing import Protocol


class LintRunner(Protocol):
    """Abstract interface for running a lint tool on one file revision."""

    async def get_report(
        self,
        path: str,
        revision: str,
    ) -> str:
        """
        Lint a file's content as of a revision and return the raw report.

        Args:
            path: Path relative to the repository root
            revision: Revision identifier

        Returns:
            Raw report text. Empty text means "no findings" or
            "file absent at this revision".

        Raises:
            LintToolError: If the lint tool fails
            VCSError: If the file content cannot be fetched
            CollaboratorTimeoutError: If the tool or VCS times out
        """
        ...
