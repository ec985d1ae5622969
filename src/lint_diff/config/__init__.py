"""Configuration loading and validation."""

from .loader import load_config
from .schema import (
    EngineSettings,
    LinterConfig,
    LintDiffConfig,
    LoggingConfig,
    RetryConfig,
    VCSConfig,
)

__all__ = [
    # Loader
    "load_config",
    # Root config
    "LintDiffConfig",
    # Section configs
    "VCSConfig",
    "LinterConfig",
    "EngineSettings",
    "LoggingConfig",
    "RetryConfig",
]
