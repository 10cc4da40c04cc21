"""Tests for askr CLI utility functions."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
import typer
from rich.logging import RichHandler
from typer.testing import CliRunner

from askr.cli_utils import error, priority_option, setup_logging, warning, wire_settings
from askr.errors import EXIT_INVALID_ARGUMENTS, EXIT_VALIDATION_FAILED

# Default CliRunner - note that stderr is mixed into stdout by default
runner = CliRunner()


@pytest.fixture
def reset_askr_logger() -> Generator[None, None, None]:
    """Close and drop handlers installed by setup_logging."""
    yield
    logger = logging.getLogger("askr")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


class TestErrorFormatting:
    """Tests for error and warning helpers."""

    def test_error_exits_with_validation_code_by_default(self) -> None:
        app = typer.Typer()

        @app.command()
        def cmd() -> None:
            error("Test error message")

        result = runner.invoke(app, [])
        assert result.exit_code == EXIT_VALIDATION_FAILED
        assert "Error:" in result.output
        assert "Test error message" in result.output

    def test_error_exits_with_custom_exit_code(self) -> None:
        app = typer.Typer()

        @app.command()
        def cmd() -> None:
            error("Bad flag", exit_code=EXIT_INVALID_ARGUMENTS)

        result = runner.invoke(app, [])
        assert result.exit_code == EXIT_INVALID_ARGUMENTS

    def test_warning_does_not_exit(self) -> None:
        app = typer.Typer()

        @app.command()
        def cmd() -> None:
            warning("Careful")
            typer.echo("done")

        result = runner.invoke(app, [])
        assert result.exit_code == 0
        assert "Warning: Careful" in result.output
        assert "done" in result.output


@pytest.mark.usefixtures("reset_askr_logger")
class TestSetupLogging:
    """Tests for setup_logging."""

    def test_defaults_to_rich_handler_at_warning(self) -> None:
        logger = setup_logging()
        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], RichHandler)
        assert not logger.propagate

    def test_level_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ASKR_LOG_LEVEL", "debug")
        assert setup_logging().level == logging.DEBUG

    def test_explicit_level_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ASKR_LOG_LEVEL", "debug")
        assert setup_logging("error").level == logging.ERROR

    def test_unknown_level(self) -> None:
        with pytest.raises(ValueError, match="Unknown log level: LOUD"):
            setup_logging("loud")

    def test_log_file(self, tmp_path: Path) -> None:
        log_file = tmp_path / "askr.log"
        logger = setup_logging("info", log_file)
        logging.getLogger("askr.session").info("collected %d characters", 3)
        for handler in logger.handlers:
            handler.flush()
        assert "INFO askr.session: collected 3 characters" in log_file.read_text()

    def test_log_file_from_environment(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        log_file = tmp_path / "env.log"
        monkeypatch.setenv("ASKR_LOG_FILE", str(log_file))
        logger = setup_logging()
        assert isinstance(logger.handlers[0], logging.FileHandler)

    def test_handlers_not_duplicated(self) -> None:
        setup_logging()
        logger = setup_logging()
        assert len(logger.handlers) == 1


class TestWireSettings:
    """Tests for wire_settings."""

    def test_cli_values_override_defaults(self, tmp_path: Path) -> None:
        settings = wire_settings(timeout=5, width=60, output="raw", start_dir=tmp_path)
        assert settings.timeout == 5
        assert settings.width == 60
        assert settings.output == "raw"

    def test_unset_flag_keeps_file_value(self, tmp_path: Path) -> None:
        (tmp_path / ".askrrc").write_text("no_color = true\nmax_attempts = 4\n")
        settings = wire_settings(no_color=False, start_dir=tmp_path)
        assert settings.no_color
        assert settings.max_attempts == 4

    def test_invalid_environment_exits(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("ASKR_TIMEOUT", "abc")
        app = typer.Typer()

        @app.command()
        def cmd() -> None:
            wire_settings(start_dir=tmp_path)

        result = runner.invoke(app, [])
        assert result.exit_code == EXIT_INVALID_ARGUMENTS
        assert "Invalid configuration: ASKR_TIMEOUT must be a number" in result.output


class TestPriorityOption:
    def test_help_and_default(self) -> None:
        option = priority_option("--length-priority", "medium")
        assert option.default is None
        assert option.help == "Priority for length validation (default: medium)."
