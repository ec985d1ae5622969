"""Configuration loader with YAML parsing and environment variable substitution."""

import os
import re
from pathlib import Path

import yaml

from .schema import LintDiffConfig


def substitute_env_vars(text: str) -> str:
    """
    Replace ${VAR_NAME} patterns with environment variable values.

    Args:
        text: Text containing ${VAR_NAME} patterns

    Returns:
        Text with environment variables substituted

    Raises:
        ValueError: If a referenced environment variable is not found
    """

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        value = os.environ.get(var_name)
        if value is None:
            raise ValueError(f"Environment variable {var_name} not found")
        return value

    return re.sub(r"\$\{([^}]+)\}", replacer, text)


def load_config(path: Path | None = None) -> LintDiffConfig:
    """
    Load configuration from a YAML file with environment variable substitution.

    Without a path, defaults and LINT_DIFF_* environment variables apply.

    Args:
        path: Path to YAML configuration file

    Returns:
        Validated LintDiffConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If environment variables are missing or config is invalid
        ValidationError: If config doesn't match schema
    """
    if path is None:
        config = LintDiffConfig()
        validate_config(config)
        return config

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with path.open() as f:
        raw_yaml = f.read()

    yaml_with_env = substitute_env_vars(raw_yaml)

    config_dict = yaml.safe_load(yaml_with_env) or {}
    if not isinstance(config_dict, dict):
        raise ValueError(f"Configuration file must contain a mapping: {path}")

    config = LintDiffConfig.model_validate(config_dict)

    validate_config(config)

    return config


def validate_config(config: LintDiffConfig) -> None:
    """
    Perform additional cross-field validation.

    Args:
        config: Configuration to validate

    Raises:
        ValueError: If the configuration is inconsistent
    """
    if config.vcs.provider == "svn" and "://" not in config.vcs.repository:
        raise ValueError("Subversion provider selected but repository is not a URL")

    overlap = set(config.engine.allowed_extensions) & {
        ext.lstrip(".").lower() for ext in config.engine.excluded_extensions
    }
    if overlap and overlap == set(config.engine.allowed_extensions):
        raise ValueError("Every allowed extension is also excluded; nothing would be linted")
