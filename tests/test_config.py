"""Tests for askr configuration management."""

from __future__ import annotations

from pathlib import Path

import pytest

from askr.config import (
    AskrSettings,
    ChoiceConfig,
    InteractionConfig,
    PromptConfig,
    UiConfig,
    _load_from_env,
    _merge_configs,
    detect_separator,
    find_config_file,
    load_settings,
    parse_range,
    split_choices,
)
from askr.errors import ConfigurationError
from askr.validation import Priority


class TestAskrSettings:
    """Tests for the AskrSettings dataclass."""

    def test_default_values(self) -> None:
        settings = AskrSettings()
        assert settings.no_color is False
        assert settings.width is None
        assert settings.timeout == 300.0
        assert settings.max_attempts is None
        assert settings.output == "default"

    def test_validation_output(self) -> None:
        with pytest.raises(ValueError, match="output"):
            AskrSettings(output="yaml")

    def test_validation_timeout(self) -> None:
        with pytest.raises(ValueError, match="timeout"):
            AskrSettings(timeout=0)

    def test_validation_max_attempts(self) -> None:
        with pytest.raises(ValueError, match="max_attempts"):
            AskrSettings(max_attempts=0)

    def test_validation_width(self) -> None:
        with pytest.raises(ValueError, match="width"):
            AskrSettings(width=0)


class TestFindConfigFile:
    """Tests for find_config_file."""

    def test_finds_file_in_parent(self, tmp_path: Path) -> None:
        (tmp_path / ".askrrc").write_text("")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config_file(".askrrc", nested) == (tmp_path / ".askrrc").resolve()

    def test_missing_file(self, tmp_path: Path) -> None:
        assert find_config_file("does-not-exist.askrrc", tmp_path) is None


class TestLoadSettings:
    """Tests for load_settings precedence."""

    def test_defaults(self, tmp_path: Path) -> None:
        settings = load_settings(start_dir=tmp_path, environ={})
        assert settings == AskrSettings()

    def test_pyproject_section(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text("[tool.askr]\nwidth = 60\nunknown = 1\n")
        settings = load_settings(start_dir=tmp_path, environ={})
        assert settings.width == 60

    def test_askrrc_overrides_pyproject(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text("[tool.askr]\nwidth = 60\n")
        (tmp_path / ".askrrc").write_text("width = 70\noutput = \"json\"\n")
        settings = load_settings(start_dir=tmp_path, environ={})
        assert settings.width == 70
        assert settings.output == "json"

    def test_env_overrides_files(self, tmp_path: Path) -> None:
        (tmp_path / ".askrrc").write_text("timeout = 10\n")
        settings = load_settings(start_dir=tmp_path, environ={"ASKR_TIMEOUT": "20"})
        assert settings.timeout == 20.0

    def test_cli_overrides_everything(self, tmp_path: Path) -> None:
        (tmp_path / ".askrrc").write_text("max_attempts = 2\n")
        settings = load_settings(
            cli_overrides={"max_attempts": 5, "width": None},
            start_dir=tmp_path,
            environ={"ASKR_MAX_ATTEMPTS": "3"},
        )
        assert settings.max_attempts == 5

    def test_malformed_file_ignored(self, tmp_path: Path) -> None:
        (tmp_path / ".askrrc").write_text("this is = = not toml")
        assert load_settings(start_dir=tmp_path, environ={}) == AskrSettings()

    def test_invalid_value_raises(self, tmp_path: Path) -> None:
        (tmp_path / ".askrrc").write_text("timeout = -1\n")
        with pytest.raises(ValueError):
            load_settings(start_dir=tmp_path, environ={})


class TestEnvironment:
    """Tests for environment variable parsing."""

    def test_no_color_convention(self) -> None:
        assert _load_from_env({"NO_COLOR": "1"}) == {"no_color": True}
        assert _load_from_env({"NO_COLOR": ""}) == {}

    def test_askr_variables(self) -> None:
        env = {
            "ASKR_NO_COLOR": "yes",
            "ASKR_WIDTH": "100",
            "ASKR_TIMEOUT": "2.5",
            "ASKR_MAX_ATTEMPTS": "4",
            "ASKR_OUTPUT": "JSON",
        }
        assert _load_from_env(env) == {
            "no_color": True,
            "width": 100,
            "timeout": 2.5,
            "max_attempts": 4,
            "output": "json",
        }

    def test_askr_no_color_false_wins(self) -> None:
        assert _load_from_env({"NO_COLOR": "1", "ASKR_NO_COLOR": "0"}) == {"no_color": False}

    @pytest.mark.parametrize(
        "env",
        [{"ASKR_WIDTH": "wide"}, {"ASKR_TIMEOUT": "soon"}, {"ASKR_NO_COLOR": "maybe"}],
    )
    def test_bad_values(self, env: dict[str, str]) -> None:
        with pytest.raises(ValueError):
            _load_from_env(env)

    def test_merge_skips_none(self) -> None:
        assert _merge_configs({"a": 1, "b": 2}, {"a": None, "b": 3}) == {"a": 1, "b": 3}


class TestPromptConfig:
    """Tests for the per-run configuration types."""

    def test_defaults(self) -> None:
        config = PromptConfig()
        assert config.prompt == "Enter input:"
        assert not config.has_choices
        assert config.interaction.timeout == 300.0

    def test_unknown_output_format(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown output format"):
            PromptConfig(output_format="xml")

    def test_interaction_bounds(self) -> None:
        with pytest.raises(ConfigurationError, match="Timeout"):
            InteractionConfig(timeout=0)
        with pytest.raises(ConfigurationError, match="attempts"):
            InteractionConfig(max_attempts=0)
        assert InteractionConfig(timeout=None).timeout is None

    def test_ui_width(self) -> None:
        with pytest.raises(ConfigurationError, match="Width"):
            UiConfig(width=0)

    def test_choice_to_spec(self) -> None:
        choice = ChoiceConfig(
            choices=("a", "b", "c"),
            min_choices=2,
            case_sensitive=True,
            choice_separator="\n",
        )
        spec = choice.to_spec(Priority.LOW)
        assert spec.kind == "choice"
        assert spec.priority is Priority.LOW
        assert spec.params["separator"] == "\n"
        assert spec.params["min_choices"] == 2
        assert "max_choices" not in spec.params


class TestParseRange:
    """Tests for parse_range."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("1-100", (1.0, 100.0)),
            ("-10--1", (-10.0, -1.0)),
            ("0.5..2", (0.5, 2.0)),
            ("-5..5", (-5.0, 5.0)),
            ("5..", (5.0, None)),
            ("..10", (None, 10.0)),
            ("3-3", (3.0, 3.0)),
        ],
    )
    def test_valid(self, text: str, expected: tuple[float | None, float | None]) -> None:
        assert parse_range(text) == expected

    @pytest.mark.parametrize("text", ["", "abc", "1-", "-", "..", "1..2..3"])
    def test_malformed(self, text: str) -> None:
        with pytest.raises(ConfigurationError):
            parse_range(text)

    def test_min_greater_than_max(self) -> None:
        with pytest.raises(ConfigurationError, match="cannot be greater"):
            parse_range("10-1")


class TestSplitChoices:
    """Tests for choice list parsing."""

    def test_comma_separated(self) -> None:
        assert split_choices("red, green ,blue,") == ("red", "green", "blue")

    def test_newline_separated_detected(self) -> None:
        assert detect_separator("a, b\nc\n") == "\n"
        assert split_choices("a, b\nc\n") == ("a, b", "c")

    def test_explicit_separator(self) -> None:
        assert split_choices("a|b|c", "|") == ("a", "b", "c")

    def test_empty_list(self) -> None:
        with pytest.raises(ConfigurationError):
            split_choices(" , ,")

    def test_empty_separator(self) -> None:
        with pytest.raises(ConfigurationError, match="must not be empty"):
            split_choices("a,b", "")
