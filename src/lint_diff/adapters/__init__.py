"""Concrete implementations of collaborator interfaces."""

from __future__ import annotations

from ..config.schema import LintDiffConfig
from ..interfaces.linter import LintRunner
from ..interfaces.vcs import VCSBackend
from .linter.command import CommandLintRunner
from .vcs.git import GitBackend
from .vcs.subversion import SubversionBackend


def create_backend(config: LintDiffConfig) -> VCSBackend:
    """Instantiate the VCS backend selected in the configuration.

    Raises:
        ValueError: If the provider is unsupported
        CommandNotFoundError: If the VCS executable is not installed
    """
    vcs = config.vcs
    if vcs.provider == "git":
        return GitBackend(vcs.repository, binary=vcs.binary, timeout=vcs.timeout)
    if vcs.provider == "svn":
        return SubversionBackend(vcs.repository, binary=vcs.binary, timeout=vcs.timeout)
    raise ValueError(f"Unsupported VCS provider: {vcs.provider}")


def create_linter(vcs: VCSBackend, config: LintDiffConfig) -> LintRunner:
    """Instantiate the lint runner for the configured tool."""
    return CommandLintRunner(vcs, config.linter, config.retry)


__all__ = [
    "CommandLintRunner",
    "GitBackend",
    "SubversionBackend",
    "create_backend",
    "create_linter",
]
