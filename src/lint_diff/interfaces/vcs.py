"""Abstract interface for version control system backends."""

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class DiffOptions:
    """Options passed through to the VCS diff command."""

    ignore_whitespace: bool = False


class VCSBackend(Protocol):
    """Abstract interface for version control backends.

    This protocol defines the contract that all VCS adapters
    (git, Subversion) must implement.
    """

    async def get_diff(
        self,
        scope: str,
        from_revision: str,
        to_revision: str,
        options: DiffOptions | None = None,
    ) -> str:
        """
        Produce a unified diff between two revisions.

        Paths in the diff must be relative to ``scope`` so that joining
        scope and path addresses the file in the repository.

        Args:
            scope: Directory within the repository ("" for the root)
            from_revision: Old revision
            to_revision: New revision
            options: Diff options such as whitespace insensitivity

        Returns:
            Unified diff text

        Raises:
            VCSError: If the diff cannot be produced
        """
        ...

    async def get_file_at_revision(
        self,
        path: str,
        revision: str,
    ) -> str | None:
        """
        Fetch the content of a file as of a revision.

        Args:
            path: Path relative to the repository root
            revision: Revision identifier

        Returns:
            File contents, or None if the file does not exist at that revision

        Raises:
            VCSError: If the VCS command fails for another reason
        """
        ...
