"""Input validation for values passed to external commands.

Revisions, paths and extensions end up as arguments of git, svn and lint
tool invocations. This module rejects values that could be interpreted as
command-line options, escape the repository, or carry control characters.
Validation fails closed: anything not clearly safe is refused.
"""

from __future__ import annotations

import re

import structlog

log = structlog.get_logger()


class SecurityError(Exception):
    """Base exception for security-related errors."""


class ValidationError(SecurityError):
    """Raised when input validation fails."""


# Branch names, tags, SHAs, svn revision numbers and keywords (HEAD, BASE...)
# plus git revision suffixes like HEAD~2 or main^.
REVISION_PATTERN = re.compile(r"^[A-Za-z0-9_.][A-Za-z0-9_./@{}~^:+-]*$")

EXTENSION_PATTERN = re.compile(r"^\.?[A-Za-z0-9_.+-]+$")

CONTROL_CHARACTERS = frozenset(["\n", "\r", "\t", "\x00"])


def validate_revision(revision: str) -> bool:
    """
    Validate a revision identifier.

    Args:
        revision: Commit SHA, branch, tag or svn revision number

    Returns:
        True if the revision is safe to pass to a VCS command
    """
    if not revision or len(revision) > 255:
        return False
    if ".." in revision:
        return False
    return bool(REVISION_PATTERN.fullmatch(revision))


def validate_relative_path(path: str) -> bool:
    """
    Validate a repository-relative path.

    Rejects absolute paths, parent directory traversal, option-like
    values and control characters. An empty path (repository root) is
    allowed.

    Args:
        path: Path relative to the repository root

    Returns:
        True if the path is safe to use
    """
    if path == "":
        return True
    if any(char in path for char in CONTROL_CHARACTERS):
        return False
    if path.startswith(("/", "-", "\\")):
        return False
    parts = path.replace("\\", "/").split("/")
    return ".." not in parts


def validate_extension(extension: str) -> bool:
    """
    Validate a file extension filter such as "php" or ".min.js".

    Args:
        extension: Extension with or without leading dot

    Returns:
        True if the extension is well formed
    """
    return bool(EXTENSION_PATTERN.fullmatch(extension))


def ensure_revision(revision: str) -> str:
    """
    Return the revision unchanged, or raise if it is unsafe.

    Raises:
        ValidationError: If the revision is rejected
    """
    if not validate_revision(revision):
        log.warning("revision_rejected", revision=revision)
        raise ValidationError(f"Invalid revision: {revision!r}")
    return revision


def ensure_relative_path(path: str) -> str:
    """
    Return the path unchanged, or raise if it is unsafe.

    Raises:
        ValidationError: If the path is rejected
    """
    if not validate_relative_path(path):
        log.warning("path_rejected", path=path)
        raise ValidationError(f"Invalid repository path: {path!r}")
    return path
