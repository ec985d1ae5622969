"""Abstract interfaces for external collaborators."""

from .linter import LintRunner
from .vcs import DiffOptions, VCSBackend

__all__ = ["DiffOptions", "LintRunner", "VCSBackend"]
