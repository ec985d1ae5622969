"""Command line entry point for lint-diff.

This module provides the ``lint-diff`` command. It handles:
- Configuration loading and command line overrides
- Logging setup
- Adapter instantiation
- Rendering the result to stdout
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from lint_diff._version import __version__

if TYPE_CHECKING:
    from lint_diff.config.schema import LintDiffConfig

log = structlog.get_logger()


def setup_logging(
    debug: bool = False,
    log_format: str = "console",
    level: str = "WARNING",
    file_path: Path | None = None,
    file_enabled: bool = False,
) -> None:
    """Configure structured logging.

    Args:
        debug: Force debug logging if True
        log_format: Output format ("json" or "console")
        level: Log level used when debug is off
        file_path: Path to log file (if file logging enabled)
        file_enabled: Whether to enable file logging
    """
    from lint_diff.utils.logging import LogFormat, LogLevel, configure_logging

    configure_logging(
        level=LogLevel.DEBUG if debug else LogLevel(level.upper()),
        log_format=LogFormat(log_format.lower()),
        file_path=file_path,
        file_enabled=file_enabled,
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        argv: Argument list (defaults to sys.argv[1:])

    Returns:
        Parsed argument namespace
    """
    parser = argparse.ArgumentParser(
        prog="lint-diff",
        description="Report only the lint findings introduced between two revisions",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--start-revision",
        required=True,
        help="Revision before the change",
    )

    parser.add_argument(
        "--end-revision",
        required=True,
        help="Revision after the change",
    )

    parser.add_argument(
        "--vcs",
        choices=["git", "svn"],
        help="Version control system (overrides config)",
    )

    parser.add_argument(
        "--repo",
        help="Repository path (git) or URL (svn) (overrides config)",
    )

    parser.add_argument(
        "--dir",
        default="",
        help="Directory within the repository to limit the diff to",
    )

    parser.add_argument(
        "--standard",
        help="Coding standard passed to the linter (overrides config)",
    )

    parser.add_argument(
        "--format",
        choices=["table", "markdown", "json"],
        default="table",
        help="Report format (default: table)",
    )

    parser.add_argument(
        "--excluded-exts",
        help="Comma-separated file suffixes to skip, e.g. 'min.js,test.php'",
    )

    parser.add_argument(
        "--ignore-diff-too-big",
        action="store_true",
        help="Process the diff even when it exceeds the size guard",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: built-in defaults)",
    )

    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--log-format",
        choices=["json", "console"],
        default=None,
        help="Log output format (overrides config)",
    )

    return parser.parse_args(argv)


def apply_overrides(config: "LintDiffConfig", args: argparse.Namespace) -> "LintDiffConfig":
    """Return a copy of the configuration with command line overrides applied."""
    vcs = config.vcs
    if args.vcs:
        vcs = vcs.model_copy(update={"provider": args.vcs})
    if args.repo:
        vcs = vcs.model_copy(update={"repository": args.repo})

    linter = config.linter
    if args.standard:
        linter = type(linter).model_validate({**linter.model_dump(), "standard": args.standard})

    engine = config.engine
    if args.ignore_diff_too_big:
        engine = engine.model_copy(update={"ignore_diff_too_big": True})

    return config.model_copy(update={"vcs": vcs, "linter": linter, "engine": engine})


async def run_lint_diff(args: argparse.Namespace) -> int:
    """Run one incremental lint and print the report.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    from lint_diff.adapters import create_backend, create_linter
    from lint_diff.config.loader import load_config, validate_config
    from lint_diff.core import Engine
    from lint_diff.render import render
    from lint_diff.utils.async_helpers import LintDiffError
    from lint_diff.utils.logging import LogEventNames, bind_context, clear_context
    from lint_diff.utils.security import SecurityError

    try:
        config = load_config(args.config)
        config = apply_overrides(config, args)
        validate_config(config)
    except FileNotFoundError as e:
        log.error(LogEventNames.CONFIG_INVALID, path=str(args.config), error=str(e))
        return 1
    except ValueError as e:
        log.error(LogEventNames.CONFIG_INVALID, error=str(e))
        return 1

    setup_logging(
        debug=args.debug,
        log_format=args.log_format or config.logging.format,
        level=config.logging.level,
        file_path=config.logging.file.path,
        file_enabled=config.logging.file.enabled,
    )
    log.debug(LogEventNames.CONFIG_LOADED, provider=config.vcs.provider)

    excluded = None
    if args.excluded_exts is not None:
        excluded = [ext.strip() for ext in args.excluded_exts.split(",") if ext.strip()]

    bind_context(
        repository=config.vcs.repository,
        old_revision=args.start_revision,
        new_revision=args.end_revision,
    )

    try:
        vcs = create_backend(config)
        linter = create_linter(vcs, config)
        engine = Engine(vcs, linter, config.engine)

        log.info(LogEventNames.RUN_STARTED, scope=args.dir)
        result = await engine.run(
            args.start_revision,
            args.end_revision,
            scope=args.dir,
            excluded_extensions=excluded,
        )
    except (LintDiffError, SecurityError) as e:
        log.error(LogEventNames.RUN_FAILED, error=str(e), error_type=type(e).__name__)
        clear_context()
        return 1

    for note in result.notes:
        log.warning(
            LogEventNames.FILE_NOTE,
            path=note.path,
            revision=note.revision,
            stage=note.stage.value,
            message=note.message,
        )

    log.info(
        LogEventNames.RUN_COMPLETE,
        files=len(result),
        findings=result.finding_count,
        notes=len(result.notes),
    )
    clear_context()

    print(render(result, args.format))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    # Until the configuration is loaded
    setup_logging(debug=args.debug, log_format=args.log_format or "console")

    try:
        return asyncio.run(run_lint_diff(args))
    except KeyboardInterrupt:
        log.info("interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
