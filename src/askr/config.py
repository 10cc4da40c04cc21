"""Configuration management for askr.

Two layers live here:

* ``AskrSettings``: persistent defaults resolved from multiple sources with
  precedence CLI args > environment variables > .askrrc > pyproject.toml >
  defaults.
* ``PromptConfig``: the finished, immutable description of one prompt run
  (prompt text, validator specs, interaction, UI and choice options) that
  the core consumes. The core never reads the environment itself.
"""

from __future__ import annotations

import os
import re
import sys
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Literal

from askr.errors import ConfigurationError
from askr.validation.factory import ValidatorSpec
from askr.validation.priority import Priority

# tomllib is only available in Python 3.11+
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found]

OutputFormat = Literal["default", "json", "raw"]
OUTPUT_FORMATS: tuple[str, ...] = ("default", "json", "raw")

DEFAULT_TIMEOUT = 300.0
DEFAULT_PROMPT = "Enter input:"
DEFAULT_SEPARATOR = ","

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


# -----------------------------------------------------------------------------
# Persistent settings
# -----------------------------------------------------------------------------


@dataclass
class AskrSettings:
    """User-level defaults for askr.

    Attributes:
        no_color: Disable colored output.
        width: Fixed rendering width in columns (None = terminal width).
        timeout: Seconds without input before the prompt gives up.
        max_attempts: Rejected submits allowed before giving up (None = unlimited).
        output: Output format ("default", "json" or "raw").
    """

    no_color: bool = False
    width: int | None = None
    timeout: float = DEFAULT_TIMEOUT
    max_attempts: int | None = None
    output: str = "default"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Validate configuration values.

        Raises:
            ValueError: If any configuration value is invalid.
        """
        if not isinstance(self.no_color, bool):
            raise ValueError("no_color must be a boolean")

        if self.width is not None and (
            isinstance(self.width, bool) or not isinstance(self.width, int) or self.width < 1
        ):
            raise ValueError("width must be a positive integer")

        if isinstance(self.timeout, bool) or not isinstance(self.timeout, (int, float)):
            raise ValueError("timeout must be a number of seconds")
        if self.timeout <= 0:
            raise ValueError("timeout must be greater than 0")

        if self.max_attempts is not None and (
            isinstance(self.max_attempts, bool)
            or not isinstance(self.max_attempts, int)
            or self.max_attempts < 1
        ):
            raise ValueError("max_attempts must be a positive integer")

        if self.output not in OUTPUT_FORMATS:
            raise ValueError(f"output must be one of: {', '.join(OUTPUT_FORMATS)}")


def _get_settings_field_names() -> set[str]:
    return {f.name for f in fields(AskrSettings)}


def find_config_file(filename: str = ".askrrc", start_dir: Path | None = None) -> Path | None:
    """Find a configuration file by traversing up the directory tree.

    Args:
        filename: Name of the config file to find.
        start_dir: Directory to start searching from. Defaults to current directory.

    Returns:
        Path to the config file if found, None otherwise.
    """
    current = (start_dir or Path.cwd()).resolve()

    while True:
        config_path = current / filename
        if config_path.is_file():
            return config_path

        parent = current.parent
        if parent == current:
            # Reached filesystem root
            return None
        current = parent


def _load_toml_file(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        result: dict[str, Any] = tomllib.load(f)
        return result


def _load_from_askrrc(start_dir: Path | None = None) -> dict[str, Any]:
    """Load settings from the nearest .askrrc (TOML) file.

    Unreadable or malformed files are ignored.
    """
    config_path = find_config_file(".askrrc", start_dir)
    if config_path is None:
        return {}

    try:
        data = _load_toml_file(config_path)
    except (tomllib.TOMLDecodeError, OSError):
        return {}
    valid_fields = _get_settings_field_names()
    return {k: v for k, v in data.items() if k in valid_fields}


def _load_from_pyproject(start_dir: Path | None = None) -> dict[str, Any]:
    """Load settings from the pyproject.toml [tool.askr] section."""
    config_path = find_config_file("pyproject.toml", start_dir)
    if config_path is None:
        return {}

    try:
        data = _load_toml_file(config_path)
    except (tomllib.TOMLDecodeError, OSError):
        return {}
    askr_section = data.get("tool", {}).get("askr", {})
    valid_fields = _get_settings_field_names()
    return {k: v for k, v in askr_section.items() if k in valid_fields}


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean (got '{value}')")


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value.strip())
    except ValueError:
        raise ValueError(f"{name} must be an integer (got '{value}')") from None


def _parse_float(name: str, value: str) -> float:
    try:
        return float(value.strip())
    except ValueError:
        raise ValueError(f"{name} must be a number (got '{value}')") from None


def _load_from_env(environ: dict[str, str] | None = None) -> dict[str, Any]:
    """Load settings from environment variables.

    Recognized: ASKR_NO_COLOR, NO_COLOR (any non-empty value disables
    color), ASKR_WIDTH, ASKR_TIMEOUT, ASKR_MAX_ATTEMPTS and ASKR_OUTPUT.

    Raises:
        ValueError: If a variable holds a value of the wrong type.
    """
    env = os.environ if environ is None else environ
    result: dict[str, Any] = {}

    if env.get("NO_COLOR"):
        result["no_color"] = True
    if "ASKR_NO_COLOR" in env:
        result["no_color"] = _parse_bool("ASKR_NO_COLOR", env["ASKR_NO_COLOR"])
    if env.get("ASKR_WIDTH"):
        result["width"] = _parse_int("ASKR_WIDTH", env["ASKR_WIDTH"])
    if env.get("ASKR_TIMEOUT"):
        result["timeout"] = _parse_float("ASKR_TIMEOUT", env["ASKR_TIMEOUT"])
    if env.get("ASKR_MAX_ATTEMPTS"):
        result["max_attempts"] = _parse_int("ASKR_MAX_ATTEMPTS", env["ASKR_MAX_ATTEMPTS"])
    if env.get("ASKR_OUTPUT"):
        result["output"] = env["ASKR_OUTPUT"].strip().lower()

    return result


def _merge_configs(*configs: dict[str, Any]) -> dict[str, Any]:
    """Merge configuration dictionaries; later ones win, None values are skipped."""
    result: dict[str, Any] = {}
    for config in configs:
        for key, value in config.items():
            if value is not None:
                result[key] = value
    return result


def load_settings(
    cli_overrides: dict[str, Any] | None = None,
    start_dir: Path | None = None,
    environ: dict[str, str] | None = None,
) -> AskrSettings:
    """Load settings with the full precedence chain.

    Precedence (highest to lowest):
    1. CLI arguments (cli_overrides)
    2. Environment variables (ASKR_*, NO_COLOR)
    3. .askrrc file
    4. pyproject.toml [tool.askr] section
    5. Default values

    Args:
        cli_overrides: Overrides from CLI arguments (None values ignored).
        start_dir: Directory to start searching for config files.
        environ: Environment mapping; defaults to ``os.environ``.

    Returns:
        Fully resolved AskrSettings instance.

    Raises:
        ValueError: If the resulting configuration is invalid.
    """
    valid_fields = _get_settings_field_names()
    cli_config = {
        k: v for k, v in (cli_overrides or {}).items() if k in valid_fields and v is not None
    }

    merged = _merge_configs(
        _load_from_pyproject(start_dir),
        _load_from_askrrc(start_dir),
        _load_from_env(environ),
        cli_config,
    )
    return AskrSettings(**merged)


# -----------------------------------------------------------------------------
# Per-run prompt configuration
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class InteractionConfig:
    """How the user interacts with the prompt.

    Attributes:
        timeout: Seconds to wait for each key press (None waits forever).
        max_attempts: Rejected submits allowed (None = unlimited).
        default_value: Value used when the user submits empty input.
        mask_input: Echo ``*`` instead of the typed characters.
        require_confirmation: Ask for the value twice.
    """

    timeout: float | None = DEFAULT_TIMEOUT
    max_attempts: int | None = None
    default_value: str | None = None
    mask_input: bool = False
    require_confirmation: bool = False

    def __post_init__(self) -> None:
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigurationError("Timeout must be greater than 0")
        if self.max_attempts is not None and self.max_attempts < 1:
            raise ConfigurationError("Maximum attempts must be at least 1")


@dataclass(frozen=True)
class UiConfig:
    no_color: bool = False
    width: int | None = None
    help_text: str | None = None

    def __post_init__(self) -> None:
        if self.width is not None and self.width < 1:
            raise ConfigurationError("Width must be at least 1")


@dataclass(frozen=True)
class ChoiceConfig:
    """Options for selection prompts.

    Attributes:
        choices: The options, in display order.
        min_choices: Minimum selections (None = rule default).
        max_choices: Maximum selections (None = rule default).
        case_sensitive: Compare typed entries case-sensitively.
        choice_separator: Separator the option list was split on. Selections
            are joined with it for validation, so no option contains it.
        selection_separator: Separator used to join selections in the output.
    """

    choices: tuple[str, ...]
    min_choices: int | None = None
    max_choices: int | None = None
    case_sensitive: bool = False
    choice_separator: str = DEFAULT_SEPARATOR
    selection_separator: str = DEFAULT_SEPARATOR

    def to_spec(self, priority: Priority | None = None) -> ValidatorSpec:
        """Describe the choice rule enforcing these options."""
        params: dict[str, Any] = {
            "choices": self.choices,
            "case_sensitive": self.case_sensitive,
            "separator": self.choice_separator,
        }
        if self.min_choices is not None:
            params["min_choices"] = self.min_choices
        if self.max_choices is not None:
            params["max_choices"] = self.max_choices
        return ValidatorSpec("choice", priority=priority, params=params)


@dataclass(frozen=True)
class PromptConfig:
    """Everything needed to run one prompt.

    Attributes:
        prompt_text: Text shown before the input (None = "Enter input:").
        validators: Validator specs, in registration order. A choice rule,
            when present, is included here.
        interaction: Interaction options.
        ui: Display options.
        choice: Choice options when the prompt is a selection.
        output_format: Output format for the final summary.
        quiet: Read the value from stdin without any UI.
        verbose: Print the validation details to stderr.
    """

    prompt_text: str | None = None
    validators: tuple[ValidatorSpec, ...] = ()
    interaction: InteractionConfig = field(default_factory=InteractionConfig)
    ui: UiConfig = field(default_factory=UiConfig)
    choice: ChoiceConfig | None = None
    output_format: str = "default"
    quiet: bool = False
    verbose: bool = False

    def __post_init__(self) -> None:
        if self.output_format not in OUTPUT_FORMATS:
            raise ConfigurationError(
                f"Unknown output format '{self.output_format}'. "
                f"Valid formats: {', '.join(OUTPUT_FORMATS)}"
            )

    @property
    def prompt(self) -> str:
        return self.prompt_text or DEFAULT_PROMPT

    @property
    def has_choices(self) -> bool:
        return self.choice is not None


# -----------------------------------------------------------------------------
# Argument parsing helpers
# -----------------------------------------------------------------------------

_NUMBER = r"[+-]?(?:\d+(?:\.\d+)?|\.\d+)(?:[eE][+-]?\d+)?"
_RANGE_RE = re.compile(rf"\s*(?P<min>{_NUMBER})?\s*(?P<sep>\.\.|-)\s*(?P<max>{_NUMBER})?\s*")


def parse_range(text: str) -> tuple[float | None, float | None]:
    """Parse a numeric range such as "1-100", "-10--1" or "0.5..2".

    With the ``..`` separator either bound may be omitted ("5..", "..10").

    Args:
        text: Range expression.

    Returns:
        Tuple of (minimum, maximum); None marks an open bound.

    Raises:
        ConfigurationError: If the expression is malformed or min > max.
    """
    match = _RANGE_RE.fullmatch(text)
    if match is None:
        raise ConfigurationError(
            f"Invalid range format: '{text}'. Expected format: 'min-max' or 'min..max'"
        )

    low = float(match["min"]) if match["min"] is not None else None
    high = float(match["max"]) if match["max"] is not None else None
    if match["sep"] == "-" and (low is None or high is None):
        raise ConfigurationError(
            f"Invalid range format: '{text}'. Expected format: 'min-max' or 'min..max'"
        )
    if low is None and high is None:
        raise ConfigurationError(f"Range '{text}' has no bounds")
    if low is not None and high is not None and low > high:
        raise ConfigurationError(
            f"Range minimum ({low:g}) cannot be greater than maximum ({high:g})"
        )
    return low, high


def detect_separator(text: str) -> str:
    """Pick the separator for a choice list: newline when the list spans lines."""
    return "\n" if "\n" in text.strip() else DEFAULT_SEPARATOR


def split_choices(text: str, separator: str | None = None) -> tuple[str, ...]:
    """Split a choice list into trimmed, non-empty options.

    Without an explicit separator, newline-separated input (for example the
    output of another command) is split on newlines, anything else on commas.

    Raises:
        ConfigurationError: If no options remain.
    """
    if separator is None:
        separator = detect_separator(text)
    elif separator == "":
        raise ConfigurationError("Choice separator must not be empty")
    choices = tuple(part.strip() for part in text.split(separator) if part.strip())
    if not choices:
        raise ConfigurationError("No choices given")
    return choices
