"""Pydantic models for configuration schema."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..models.finding import MatchStrategy

KNOWN_STANDARDS = ("WordPress", "WordPress-VIP", "WordPressVIPminimum")

# Diffs beyond this size are almost always generated or vendored code
DEFAULT_MAX_DIFF_SIZE = 25_000_000


def _split_extensions(v: object) -> object:
    """Accept "php,js" as well as ["php", "js"]."""
    if isinstance(v, str):
        return [part.strip() for part in v.split(",") if part.strip()]
    return v


class VCSConfig(BaseModel):
    """Version control backend configuration."""

    provider: Literal["git", "svn"] = "git"
    repository: str = "."
    binary: str | None = None
    timeout: int = Field(120, ge=1, le=3600, description="VCS command timeout in seconds")


class LinterConfig(BaseModel):
    """Lint tool configuration."""

    command: str = "phpcs"
    standard: str = "WordPress"
    allow_custom_standard: bool = False
    standards_location: str | None = None
    extra_args: list[str] = []
    # {path} and {standard} are substituted per file
    arguments: list[str] = [
        "--report=json",
        "--standard={standard}",
        "--stdin-path={path}",
        "-",
    ]
    # phpcs exits 1 or 2 when it found violations
    ok_exit_codes: list[int] = [0, 1, 2]
    timeout: int = Field(120, ge=1, le=3600, description="Lint command timeout in seconds")

    @model_validator(mode="after")
    def check_standard(self) -> "LinterConfig":
        """Restrict the coding standard unless custom standards are allowed."""
        if not self.allow_custom_standard and self.standard not in KNOWN_STANDARDS:
            raise ValueError(
                f"Unknown standard {self.standard!r}. Expected one of "
                f"{', '.join(KNOWN_STANDARDS)} or set allow_custom_standard=true."
            )
        return self


class EngineSettings(BaseModel):
    """Settings for the correlation engine."""

    allowed_extensions: list[str] = ["php", "js"]
    excluded_extensions: list[str] = []
    max_diff_size: int = Field(DEFAULT_MAX_DIFF_SIZE, ge=1)
    ignore_diff_too_big: bool = False
    max_concurrent: int = Field(5, ge=1, le=64, description="Files linted in parallel")
    file_timeout: float = Field(
        120.0, gt=0, le=3600, description="Budget per lint call in seconds"
    )
    match_strategy: MatchStrategy = MatchStrategy.EXACT
    ignore_whitespace: bool = False

    @field_validator("allowed_extensions", "excluded_extensions", mode="before")
    @classmethod
    def split_extensions(cls, v: object) -> object:
        """Allow comma-separated strings for extension lists."""
        return _split_extensions(v)

    @field_validator("allowed_extensions")
    @classmethod
    def normalize_allowed(cls, v: list[str]) -> list[str]:
        """Store allowed extensions without a leading dot."""
        from ..utils.security import validate_extension

        for ext in v:
            if not validate_extension(ext):
                raise ValueError(f"Invalid extension: {ext!r}")
        return [ext.lstrip(".").lower() for ext in v]

    @field_validator("excluded_extensions")
    @classmethod
    def validate_excluded(cls, v: list[str]) -> list[str]:
        """Validate excluded extension suffixes."""
        from ..utils.security import validate_extension

        for ext in v:
            if not validate_extension(ext):
                raise ValueError(f"Invalid extension: {ext!r}")
        return v


class FileLoggingConfig(BaseModel):
    """File logging configuration."""

    enabled: bool = False
    path: Path = Path("lint-diff.log")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["json", "console"] = "console"
    file: FileLoggingConfig = FileLoggingConfig()


class RetryConfig(BaseModel):
    """Retry configuration for timed-out collaborator calls."""

    max_attempts: int = Field(1, ge=1, le=10)
    initial_delay: float = Field(1.0, ge=0.1, le=10.0)
    max_delay: float = Field(30.0, ge=1.0, le=300.0)


class LintDiffConfig(BaseSettings):
    """Root configuration for lint-diff."""

    vcs: VCSConfig = VCSConfig()
    linter: LinterConfig = LinterConfig()
    engine: EngineSettings = EngineSettings()
    logging: LoggingConfig = LoggingConfig()
    retry: RetryConfig = RetryConfig()

    model_config = SettingsConfigDict(
        env_prefix="LINT_DIFF_",
        env_nested_delimiter="__",
    )
