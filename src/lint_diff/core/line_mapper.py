"""Line-number mapping between the old and new revision of a file."""

from __future__ import annotations

from lint_diff.models.diff import Context, FileDiff


class LineMapper:
    """Maps old-revision line numbers onto the new revision.

    Anchors are the unchanged (context) lines of a file's diff. A line is
    shifted by the offset of the closest anchor at or before it; lines
    preceding every anchor are not shifted.

    Example:
        mapper = LineMapper(file_diff)
        new_line = mapper.map_line(50)
    """

    def __init__(self, file_diff: FileDiff | None = None) -> None:
        """Initialize the mapper.

        Args:
            file_diff: Diff of the file. None builds a mapper without anchors.
        """
        context_lines = file_diff.context_lines if file_diff is not None else ()
        mapping: dict[int, int] = {}
        for line in context_lines:
            mapping[line.old_line_no] = line.new_line_no
        self._anchors: tuple[Context, ...] = tuple(
            Context(old_line_no=old, new_line_no=new)
            for old, new in sorted(mapping.items(), reverse=True)
        )

    @property
    def anchors(self) -> tuple[Context, ...]:
        """Context anchors ordered by descending old line number."""
        return self._anchors

    def offset_for(self, old_line_no: int) -> int:
        """Offset to add to an old line number to get its new line number."""
        for anchor in self._anchors:
            if anchor.old_line_no <= old_line_no:
                return anchor.new_line_no - anchor.old_line_no
        return 0

    def map_line(self, old_line_no: int) -> int:
        """Best-effort new-revision line number for an old line number."""
        return old_line_no + self.offset_for(old_line_no)
