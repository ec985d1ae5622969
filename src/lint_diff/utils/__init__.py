"""Utility functions and helpers.

This module provides various utilities for lint-diff:
- async_helpers: Error taxonomy, retry and timeout helpers
- safe_subprocess: Safe subprocess execution
- security: Validation of revisions, paths and extensions
- logging: Structured logging configuration
"""

from lint_diff.utils.async_helpers import (
    CollaboratorError,
    CollaboratorTimeoutError,
    DiffTooLargeError,
    EmptyDiffError,
    LintDiffError,
    LintToolError,
    MalformedDiffError,
    VCSError,
    create_retry,
    with_timeout,
)
from lint_diff.utils.logging import (
    LogEventNames,
    LogFormat,
    LogLevel,
    bind_context,
    clear_context,
    configure_logging,
)
from lint_diff.utils.safe_subprocess import (
    CommandError,
    CommandNotFoundError,
    CommandResult,
    CommandTimeoutError,
    SafeCommandRunner,
)
from lint_diff.utils.security import SecurityError, ValidationError

__all__ = [
    # Errors
    "CollaboratorError",
    "CollaboratorTimeoutError",
    "CommandError",
    "CommandNotFoundError",
    "CommandTimeoutError",
    "DiffTooLargeError",
    "EmptyDiffError",
    "LintDiffError",
    "LintToolError",
    "MalformedDiffError",
    "SecurityError",
    "VCSError",
    "ValidationError",
    # Logging
    "LogEventNames",
    "LogFormat",
    "LogLevel",
    "bind_context",
    "clear_context",
    "configure_logging",
    # Subprocess
    "CommandResult",
    "SafeCommandRunner",
    # Async
    "create_retry",
    "with_timeout",
]
