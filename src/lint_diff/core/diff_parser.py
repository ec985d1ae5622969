"""Parser for unified diffs.

This module implements the DiffParser class that turns unified diff text
into per-file change records. Parsing is delegated to unidiff, which
handles:
- git diffs (including new, deleted, renamed and binary files)
- Subversion diffs (Index: headers, revision annotations)
- Plain ---/+++ diffs as produced by diff -u

Hunk bodies are validated against the lengths declared in their headers,
so a truncated or corrupted diff is rejected instead of producing wrong
line numbers.
"""

from __future__ import annotations

import re
from collections.abc import Iterator

from unidiff import PatchedFile, PatchSet
from unidiff.errors import UnidiffParseError

from lint_diff.models.diff import Added, Context, DiffLine, FileDiff, Removed
from lint_diff.utils.async_helpers import MalformedDiffError

DEV_NULL = "/dev/null"


class DiffParser:
    """Parser for unified diff text.

    Example:
        parser = DiffParser()
        for file_diff in parser.parse(diff_text):
            print(file_diff.path, file_diff.lines_added)
    """

    HUNK_HEADER = re.compile(r"^@@ -\d+(?:,\d+)? \+\d+(?:,\d+)? @@")

    # svn marks files created by the change with these annotations
    SVN_NEW_FILE = re.compile(r"\((?:revision 0|nonexistent)\)")

    # svn property blocks are not unified diff hunks
    SVN_PROPERTIES = re.compile(
        r"(?:^\n)*^Property changes on: .*?(?=^Index: |\Z)",
        re.MULTILINE | re.DOTALL,
    )

    # base85 payload of git --binary output, up to the next file
    GIT_BINARY_PATCH = re.compile(
        r"^(GIT binary patch\n).*?(?=^diff --git |\Z)",
        re.MULTILINE | re.DOTALL,
    )

    def parse(self, text: str) -> list[FileDiff]:
        """Parse diff text into FileDiffs, in diff order.

        Args:
            text: Unified diff with LF line endings

        Returns:
            One FileDiff per file header. Text without file headers
            yields an empty list.

        Raises:
            MalformedDiffError: If a hunk header is unparsable, a hunk
                appears outside of a file, or a hunk body does not match
                its declared lengths.
        """
        self._check_hunk_headers(text)
        text = self.SVN_PROPERTIES.sub("", text)
        text = self.GIT_BINARY_PATCH.sub(r"\1", text)

        try:
            patch = PatchSet.from_string(text)
        except UnidiffParseError as e:
            raise MalformedDiffError(f"Malformed diff: {e}") from e

        return [self._file_diff(patched_file) for patched_file in patch]

    def _check_hunk_headers(self, text: str) -> None:
        # unidiff keeps unparsable @@ lines as header noise
        for line_no, line in enumerate(text.split("\n"), start=1):
            if line.startswith("@@") and not self.HUNK_HEADER.match(line):
                raise MalformedDiffError(f"Invalid hunk header at line {line_no}: {line!r}")

    def _file_diff(self, patched_file: PatchedFile) -> FileDiff:
        old_path = self._clean_path(patched_file.source_file, "a/")
        new_path = self._clean_path(patched_file.target_file, "b/")
        path = new_path or old_path or patched_file.path

        is_new_file = patched_file.is_added_file or bool(
            self.SVN_NEW_FILE.search(patched_file.source_timestamp or "")
        )
        is_binary = patched_file.is_binary_file or any(
            line.startswith("GIT binary patch") for line in patched_file.patch_info or ()
        )

        return FileDiff(
            path=path,
            lines=tuple(self._lines(patched_file)),
            is_new_file=is_new_file,
            is_deleted_file=patched_file.is_removed_file,
            is_binary=is_binary,
            old_path=old_path if old_path not in (None, path) else None,
        )

    @staticmethod
    def _clean_path(raw: str | None, prefix: str) -> str | None:
        """Strip quoting and the a/ or b/ prefix; /dev/null becomes None."""
        if raw is None:
            return None
        path = raw.strip()
        if len(path) >= 2 and path[0] == path[-1] == '"':
            path = path[1:-1]
        if not path or path == DEV_NULL:
            return None
        if path.startswith(prefix):
            path = path[len(prefix) :]
        return path

    @staticmethod
    def _lines(patched_file: PatchedFile) -> Iterator[DiffLine]:
        for hunk in patched_file:
            for line in hunk:
                if line.is_added:
                    yield Added(new_line_no=line.target_line_no)
                elif line.is_removed:
                    yield Removed(old_line_no=line.source_line_no)
                elif line.is_context:
                    yield Context(
                        old_line_no=line.source_line_no,
                        new_line_no=line.target_line_no,
                    )
