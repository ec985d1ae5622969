"""Async utility functions and the error taxonomy.

This module provides:
- Custom exceptions for structural and per-file failures
- Retry decorators with exponential backoff for collaborator calls
- Timeout wrappers for async operations

Structural errors (malformed, oversized or empty diffs) abort a run.
Collaborator errors are absorbed per file by the engine.
"""

from __future__ import annotations

import asyncio
import builtins
from collections.abc import Awaitable, Callable
from typing import ParamSpec, TypeVar

import structlog
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

log = structlog.get_logger()

P = ParamSpec("P")
T = TypeVar("T")


# =============================================================================
# Custom Exceptions
# =============================================================================


class LintDiffError(Exception):
    """Base exception for all lint-diff errors."""


class MalformedDiffError(LintDiffError):
    """Diff text could not be parsed into file headers and hunks."""


class DiffTooLargeError(LintDiffError):
    """Diff exceeds the configured size guard.

    Attributes:
        size: Length of the diff text.
        limit: Configured maximum length.
    """

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(f"The diff is too big to parse ({size} > {limit} characters)")
        self.size = size
        self.limit = limit


class EmptyDiffError(LintDiffError):
    """Diff text is empty after normalization."""


class CollaboratorError(LintDiffError):
    """An external collaborator (VCS or lint tool) failed."""


class VCSError(CollaboratorError):
    """Version control command failed."""


class LintToolError(CollaboratorError):
    """Lint tool failed or produced an unexpected exit status."""


class CollaboratorTimeoutError(CollaboratorError):
    """Collaborator call timed out."""


# =============================================================================
# Retry Decorator
# =============================================================================


def _log_retry(retry_state: RetryCallState) -> None:
    """Log retry attempts for debugging."""
    if retry_state.outcome is None:
        return

    exception = retry_state.outcome.exception()
    if exception:
        log.warning(
            "retrying_operation",
            attempt=retry_state.attempt_number,
            exception_type=type(exception).__name__,
            exception_message=str(exception),
            wait_time=retry_state.next_action.sleep if retry_state.next_action else 0,
        )


def create_retry(
    max_attempts: int = 3,
    min_wait: float = 1.0,
    max_wait: float = 30.0,
    retry_on: tuple[type[Exception], ...] = (CollaboratorTimeoutError,),
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """Create a customized retry decorator.

    Args:
        max_attempts: Maximum number of attempts (1 disables retrying).
        min_wait: Minimum wait time between retries (seconds).
        max_wait: Maximum wait time between retries (seconds).
        retry_on: Tuple of exception types to retry on.

    Returns:
        A retry decorator configured with the given parameters.
    """
    return retry(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=1, min=min_wait, max=max_wait),
        retry=retry_if_exception_type(retry_on),
        before_sleep=_log_retry,
        reraise=True,
    )


# =============================================================================
# Timeout Utilities
# =============================================================================


async def with_timeout(
    coro: Awaitable[T],
    timeout: float,
    error_message: str | None = None,
) -> T:
    """Execute an awaitable with a timeout.

    Args:
        coro: The coroutine to execute.
        timeout: Timeout in seconds.
        error_message: Custom error message for timeout.

    Returns:
        The result of the coroutine.

    Raises:
        CollaboratorTimeoutError: If the operation times out.
    """
    try:
        return await asyncio.wait_for(coro, timeout=timeout)
    except builtins.TimeoutError as e:
        msg = error_message or f"Operation timed out after {timeout}s"
        raise CollaboratorTimeoutError(msg) from e
