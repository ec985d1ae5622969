"""Data models for parsed unified diffs."""

from dataclasses import dataclass
from typing import TypeAlias


@dataclass(frozen=True)
class Added:
    """A line that exists only in the new revision."""

    new_line_no: int


@dataclass(frozen=True)
class Removed:
    """A line that exists only in the old revision."""

    old_line_no: int


@dataclass(frozen=True)
class Context:
    """An unchanged line present in both revisions."""

    old_line_no: int
    new_line_no: int


DiffLine: TypeAlias = Added | Removed | Context


@dataclass(frozen=True)
class FileDiff:
    """Change record for one file of a unified diff."""

    path: str
    lines: tuple[DiffLine, ...] = ()
    is_new_file: bool = False
    is_deleted_file: bool = False
    is_binary: bool = False
    old_path: str | None = None  # Set when the file was renamed

    @property
    def lines_added(self) -> int:
        """Number of added lines."""
        return sum(1 for line in self.lines if isinstance(line, Added))

    @property
    def lines_removed(self) -> int:
        """Number of removed lines."""
        return sum(1 for line in self.lines if isinstance(line, Removed))

    @property
    def has_additions(self) -> bool:
        """True if at least one line was added."""
        return any(isinstance(line, Added) for line in self.lines)

    @property
    def context_lines(self) -> tuple[Context, ...]:
        """Unchanged lines, in diff order."""
        return tuple(line for line in self.lines if isinstance(line, Context))

    @property
    def extension(self) -> str:
        """
        File extension without the leading dot.

        Returns an empty string for files without an extension.
        """
        name = self.path.rsplit("/", 1)[-1]
        if "." not in name.lstrip("."):
            return ""
        return name.rsplit(".", 1)[-1]
