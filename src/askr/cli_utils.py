"""CLI utility functions for askr.

Provides helper functions for:
- Error formatting: Consistent user-friendly error messages with exit codes
- Logging setup: Rich console handler or a log file
- Settings wiring: Passing Typer options to load_settings
- Option factories shared by the priority flags
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.logging import RichHandler

from askr.config import AskrSettings, load_settings
from askr.errors import EXIT_INVALID_ARGUMENTS, EXIT_VALIDATION_FAILED

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DEFAULT_LOG_LEVEL = "WARNING"


# -----------------------------------------------------------------------------
# Error Formatting Helpers
# -----------------------------------------------------------------------------


def error(msg: str, *, exit_code: int = EXIT_VALIDATION_FAILED) -> NoReturn:
    """Print an error message and exit with the given exit code.

    Args:
        msg: The error message to display.
        exit_code: Exit code to use (default: EXIT_VALIDATION_FAILED=1).

    Raises:
        typer.Exit: Always raises to exit the program.
    """
    styled_prefix = typer.style("Error:", fg=typer.colors.RED, bold=True)
    typer.echo(f"{styled_prefix} {msg}", err=True)
    raise typer.Exit(code=exit_code)


def warning(msg: str) -> None:
    """Print a warning message to stderr."""
    styled_prefix = typer.style("Warning:", fg=typer.colors.YELLOW, bold=True)
    typer.echo(f"{styled_prefix} {msg}", err=True)


# -----------------------------------------------------------------------------
# Logging
# -----------------------------------------------------------------------------


def setup_logging(
    level: str | None = None,
    log_file: Path | str | None = None,
    console: Console | None = None,
) -> logging.Logger:
    """Configure the ``askr`` logger.

    Log records go to a file when one is given (or ``ASKR_LOG_FILE`` is
    set), which keeps them out of the way of the interactive editor.
    Otherwise they are rendered on stderr through a RichHandler.

    Args:
        level: Level name; defaults to ``ASKR_LOG_LEVEL`` or WARNING.
        log_file: Log file path; defaults to ``ASKR_LOG_FILE``.
        console: Console for the Rich handler (default: stderr).

    Returns:
        The configured ``askr`` logger.

    Raises:
        ValueError: If the level name is unknown.
    """
    level_name = (level or os.environ.get("ASKR_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper()
    numeric_level = logging.getLevelName(level_name)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level_name}")

    log_file = log_file or os.environ.get("ASKR_LOG_FILE") or None

    logger = logging.getLogger("askr")
    logger.setLevel(numeric_level)
    logger.propagate = False

    # Remove existing handlers to avoid duplicates
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handler: logging.Handler
    if log_file:
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    else:
        # RichHandler formats internally, so no formatter is set
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            show_time=False,
        )
    handler.setLevel(numeric_level)
    logger.addHandler(handler)
    return logger


# -----------------------------------------------------------------------------
# Settings Wiring Helper
# -----------------------------------------------------------------------------


def wire_settings(
    no_color: bool | None = None,
    width: int | None = None,
    timeout: float | None = None,
    max_attempts: int | None = None,
    output: str | None = None,
    start_dir: Path | None = None,
) -> AskrSettings:
    """Wire CLI options to load_settings with appropriate overrides.

    Flags that were not given on the command line are passed as None so
    that lower-precedence sources can fill them in.

    Raises:
        typer.Exit: If the resulting settings are invalid.
    """
    cli_overrides: dict[str, Any] = {
        "no_color": no_color or None,
        "width": width,
        "timeout": timeout,
        "max_attempts": max_attempts,
        "output": output,
    }
    try:
        return load_settings(cli_overrides=cli_overrides, start_dir=start_dir)
    except ValueError as e:
        error(f"Invalid configuration: {e}", exit_code=EXIT_INVALID_ARGUMENTS)


# -----------------------------------------------------------------------------
# Typer Option Factory Functions
# -----------------------------------------------------------------------------
# Typer consumes Option objects when decorating commands, so every
# parameter needs a fresh instance.


def priority_option(flag: str, default_label: str) -> Any:
    """Create a Typer Option for one of the ``--*-priority`` flags.

    Args:
        flag: The option name, e.g. "--length-priority".
        default_label: Priority used when the flag is absent (for help text).

    Returns:
        Typer Option with default None.
    """
    family = flag.removeprefix("--").removesuffix("-priority")
    return typer.Option(
        None,
        flag,
        help=f"Priority for {family} validation (default: {default_label}).",
        case_sensitive=False,
    )
