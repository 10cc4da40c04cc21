"""askr CLI - Main entry point.

Usage: askr [PROMPT] [OPTIONS]

The collected value is printed on stdout; prompts, errors and diagnostics go
to stderr so the tool composes in shell pipelines.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

import typer
from rich.console import Console
from rich.table import Table

from askr import __version__
from askr.cli_utils import error, priority_option, setup_logging, wire_settings
from askr.config import (
    AskrSettings,
    ChoiceConfig,
    InteractionConfig,
    PromptConfig,
    UiConfig,
    detect_separator,
    parse_range,
    split_choices,
)
from askr.errors import (
    EXIT_INTERRUPTED,
    EXIT_INVALID_ARGUMENTS,
    EXIT_VALIDATION_FAILED,
    AskrError,
    ConfigurationError,
)
from askr.output import get_formatter
from askr.session import collect_value
from askr.validation.factory import ValidatorSpec, build_engine
from askr.validation.priority import Priority
from askr.validation.result import ValidationSummary

app = typer.Typer(
    name="askr",
    help="Interactive CLI input tool with real-time validation and choice menus.",
    add_completion=True,
)

# Prompts and diagnostics render on stderr; stdout carries only the value
err_console = Console(stderr=True)


class OutputChoice(str, Enum):
    default = "default"
    json = "json"
    raw = "raw"


class PriorityChoice(str, Enum):
    critical = "critical"
    high = "high"
    medium = "medium"
    low = "low"


# -----------------------------------------------------------------------------
# Argument Translation
# -----------------------------------------------------------------------------


@dataclass
class PromptArgs:
    """Raw command-line options, before they are turned into a PromptConfig."""

    prompt_text: str | None = None
    quiet: bool = False
    verbose: bool = False
    # Basic rules
    required: bool = False
    min_length: int | None = None
    max_length: int | None = None
    patterns: list[str] = field(default_factory=list)
    pattern_messages: list[str] = field(default_factory=list)
    # Formats
    validate_email: bool = False
    validate_hostname: bool = False
    validate_url: bool = False
    validate_ipv4: bool = False
    validate_ipv6: bool = False
    # Numbers
    number: bool = False
    integer: bool = False
    float_: bool = False
    range_: str | None = None
    positive: bool = False
    negative: bool = False
    # Dates
    date: bool = False
    date_format: str | None = None
    time: bool = False
    time_format: str | None = None
    datetime: bool = False
    datetime_format: str | None = None
    # Choices
    choices: str | None = None
    choice_separator: str | None = None
    selection_separator: str | None = None
    choices_case_sensitive: bool = False
    min_choices: int | None = None
    max_choices: int | None = None
    # Filesystem
    file_exists: bool = False
    dir_exists: bool = False
    path_exists: bool = False
    readable: bool = False
    writable: bool = False
    executable: bool = False
    # Priorities
    required_priority: str | None = None
    length_priority: str | None = None
    pattern_priority: str | None = None
    format_priority: str | None = None
    # Interaction and display
    default: str | None = None
    mask: bool = False
    confirm: bool = False
    help_text: str | None = None


def _priority(label: str | None) -> Priority | None:
    if label is None:
        return None
    try:
        return Priority.parse(label)
    except ValueError as e:
        raise ConfigurationError(str(e)) from e


def build_validator_specs(args: PromptArgs) -> tuple[list[ValidatorSpec], ChoiceConfig | None]:
    """Translate rule flags into validator specs, in a fixed order.

    Returns:
        Tuple of (specs, choice_config). The choice rule, when present, is
        the last spec.

    Raises:
        ConfigurationError: If a flag value is malformed.
    """
    specs: list[ValidatorSpec] = []
    length = _priority(args.length_priority)
    pattern = _priority(args.pattern_priority)
    fmt = _priority(args.format_priority)

    if args.required:
        specs.append(ValidatorSpec("required", _priority(args.required_priority)))

    if args.min_length is not None:
        specs.append(ValidatorSpec("min_length", length, params={"min_length": args.min_length}))
    if args.max_length is not None:
        specs.append(ValidatorSpec("max_length", length, params={"max_length": args.max_length}))

    for i, regex in enumerate(args.patterns):
        message = args.pattern_messages[i] if i < len(args.pattern_messages) else None
        specs.append(ValidatorSpec("pattern", pattern, message, params={"pattern": regex}))

    for enabled, kind in (
        (args.validate_email, "email"),
        (args.validate_hostname, "hostname"),
        (args.validate_url, "url"),
        (args.validate_ipv4, "ipv4"),
        (args.validate_ipv6, "ipv6"),
        (args.integer, "integer"),
        (args.float_, "float"),
        (args.number, "float"),
    ):
        if enabled:
            specs.append(ValidatorSpec(kind, fmt))

    if args.range_ is not None:
        low, high = parse_range(args.range_)
        specs.append(ValidatorSpec("range", fmt, params={"min_value": low, "max_value": high}))
    if args.positive:
        specs.append(ValidatorSpec("positive", fmt))
    if args.negative:
        specs.append(ValidatorSpec("negative", fmt))

    for enabled, kind, date_fmt in (
        (args.date, "date", args.date_format),
        (args.time, "time", args.time_format),
        (args.datetime, "datetime", args.datetime_format),
    ):
        if enabled:
            params = {"fmt": date_fmt} if date_fmt else {}
            specs.append(ValidatorSpec(kind, fmt, params=params))

    for enabled, kind in (
        (args.file_exists, "file_exists"),
        (args.dir_exists, "dir_exists"),
        (args.path_exists, "path_exists"),
        (args.readable, "readable"),
        (args.writable, "writable"),
        (args.executable, "executable"),
    ):
        if enabled:
            specs.append(ValidatorSpec(kind, fmt))

    choice: ChoiceConfig | None = None
    if args.choices is not None:
        separator = args.choice_separator or detect_separator(args.choices)
        choice = ChoiceConfig(
            choices=split_choices(args.choices, separator),
            min_choices=args.min_choices,
            max_choices=args.max_choices,
            case_sensitive=args.choices_case_sensitive,
            choice_separator=separator,
            selection_separator=args.selection_separator or ",",
        )
        specs.append(choice.to_spec(fmt))
    elif args.min_choices is not None or args.max_choices is not None:
        raise ConfigurationError("--min-choices and --max-choices require --choices")

    return specs, choice


def build_prompt_config(args: PromptArgs, settings: AskrSettings) -> PromptConfig:
    """Combine parsed options and resolved settings into a PromptConfig.

    Raises:
        ConfigurationError: If the options are inconsistent.
    """
    specs, choice = build_validator_specs(args)
    return PromptConfig(
        prompt_text=args.prompt_text,
        validators=tuple(specs),
        interaction=InteractionConfig(
            timeout=settings.timeout,
            max_attempts=settings.max_attempts,
            default_value=args.default,
            mask_input=args.mask,
            require_confirmation=args.confirm,
        ),
        ui=UiConfig(
            no_color=settings.no_color,
            width=settings.width,
            help_text=args.help_text,
        ),
        choice=choice,
        output_format=settings.output,
        quiet=args.quiet,
        verbose=args.verbose,
    )


# -----------------------------------------------------------------------------
# Output Helpers
# -----------------------------------------------------------------------------


def _print_verbose(summary: ValidationSummary) -> None:
    """Print the per-rule results on stderr."""
    table = Table(title="Validation Results")
    table.add_column("Rule", style="cyan")
    table.add_column("Priority")
    table.add_column("Status")
    table.add_column("Message")

    for result in summary.validation_results:
        status = "[green]pass[/green]" if result.passed else "[red]fail[/red]"
        table.add_row(result.rule_name, result.priority.label, status, result.message or "-")

    err_console.print(table)
    meta = summary.metadata
    err_console.print(
        f"{meta.rules_passed}/{meta.rules_checked} rules passed "
        f"in {meta.validation_time_ms:.3f} ms"
    )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"askr version {__version__}")
        raise typer.Exit()


# -----------------------------------------------------------------------------
# Main Command
# -----------------------------------------------------------------------------


@app.command()
def main(
    prompt_text: str | None = typer.Argument(
        None, metavar="PROMPT", help="Prompt text to display (default: 'Enter input:')."
    ),
    output: OutputChoice | None = typer.Option(
        None, "--output", help="Output format.", case_sensitive=False
    ),
    quiet: bool = typer.Option(
        False, "--quiet", help="Read the value from stdin without any UI."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", help="Show validation details on stderr."
    ),
    # Basic rules
    required: bool = typer.Option(False, "--required", help="Input must not be empty."),
    max_length: int | None = typer.Option(
        None, "--max-length", min=0, help="Maximum input length in characters."
    ),
    min_length: int | None = typer.Option(
        None, "--min-length", min=0, help="Minimum input length in characters."
    ),
    pattern: list[str] | None = typer.Option(
        None, "--pattern", help="Regular expression the input must match (repeatable)."
    ),
    pattern_message: list[str] | None = typer.Option(
        None, "--pattern-message", help="Custom message for the matching --pattern."
    ),
    # Formats
    validate_email: bool = typer.Option(False, "--validate-email", help="Email address."),
    validate_hostname: bool = typer.Option(False, "--validate-hostname", help="Hostname."),
    validate_url: bool = typer.Option(False, "--validate-url", help="URL."),
    validate_ipv4: bool = typer.Option(False, "--validate-ipv4", help="IPv4 address."),
    validate_ipv6: bool = typer.Option(False, "--validate-ipv6", help="IPv6 address."),
    # Numbers
    number: bool = typer.Option(False, "--number", help="Any number (integer or float)."),
    integer: bool = typer.Option(False, "--integer", help="Integer."),
    float_: bool = typer.Option(False, "--float", help="Floating point number."),
    range_: str | None = typer.Option(
        None, "--range", help="Numeric range, e.g. '1-100' or '-5..5'."
    ),
    positive: bool = typer.Option(False, "--positive", help="Number greater than zero."),
    negative: bool = typer.Option(False, "--negative", help="Number less than zero."),
    # Dates
    date: bool = typer.Option(False, "--date", help="Date."),
    date_format: str | None = typer.Option(
        None, "--date-format", help="Expected date format (default: %Y-%m-%d)."
    ),
    time: bool = typer.Option(False, "--time", help="Time of day."),
    time_format: str | None = typer.Option(
        None, "--time-format", help="Expected time format (default: %H:%M:%S)."
    ),
    datetime: bool = typer.Option(False, "--datetime", help="Date and time."),
    datetime_format: str | None = typer.Option(
        None,
        "--datetime-format",
        help="Expected datetime format (default: %Y-%m-%d %H:%M:%S).",
    ),
    # Choices
    choices: str | None = typer.Option(
        None, "--choices", help="Options to choose from (comma or newline separated)."
    ),
    choice_separator: str | None = typer.Option(
        None,
        "--choice-separator",
        help="Separator for parsing --choices (default: auto-detect comma/newline).",
    ),
    selection_separator: str | None = typer.Option(
        None,
        "--selection-separator",
        help="Separator for joining multiple selections in the output (default: comma).",
    ),
    choices_case_sensitive: bool = typer.Option(
        False, "--choices-case-sensitive", help="Match typed choices case-sensitively."
    ),
    min_choices: int | None = typer.Option(
        None, "--min-choices", min=0, help="Minimum number of choices (default: 1)."
    ),
    max_choices: int | None = typer.Option(
        None, "--max-choices", min=1, help="Maximum number of choices (default: 1)."
    ),
    # Filesystem
    file_exists: bool = typer.Option(False, "--file-exists", help="Existing file."),
    dir_exists: bool = typer.Option(False, "--dir-exists", help="Existing directory."),
    path_exists: bool = typer.Option(False, "--path-exists", help="Existing path."),
    readable: bool = typer.Option(False, "--readable", help="Readable path."),
    writable: bool = typer.Option(False, "--writable", help="Writable path."),
    executable: bool = typer.Option(False, "--executable", help="Executable file."),
    # Priorities
    required_priority: PriorityChoice | None = priority_option("--required-priority", "critical"),
    length_priority: PriorityChoice | None = priority_option("--length-priority", "medium"),
    pattern_priority: PriorityChoice | None = priority_option("--pattern-priority", "high"),
    format_priority: PriorityChoice | None = priority_option("--format-priority", "high"),
    # Interaction
    max_attempts: int | None = typer.Option(
        None, "--max-attempts", min=1, help="Maximum submit attempts (default: unlimited)."
    ),
    timeout: float | None = typer.Option(
        None, "--timeout", min=0, help="Seconds to wait for input (default: 300)."
    ),
    default: str | None = typer.Option(
        None, "--default", help="Value used when the input is left empty."
    ),
    mask: bool = typer.Option(False, "--mask", help="Mask input (for passwords)."),
    confirm: bool = typer.Option(False, "--confirm", help="Ask for the value twice."),
    # Display
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output."),
    width: int | None = typer.Option(None, "--width", min=1, help="Maximum display width."),
    help_text: str | None = typer.Option(
        None, "--help-text", help="Additional help text displayed below the prompt."
    ),
    version: bool | None = typer.Option(
        None,
        "--version",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Prompt for a value, validate it as it is typed, and print it on stdout."""
    try:
        setup_logging(console=err_console)
    except ValueError as e:
        error(str(e), exit_code=EXIT_INVALID_ARGUMENTS)

    settings = wire_settings(
        no_color=no_color,
        width=width,
        timeout=timeout,
        max_attempts=max_attempts,
        output=output.value if output else None,
    )
    args = PromptArgs(
        prompt_text=prompt_text,
        quiet=quiet,
        verbose=verbose,
        required=required,
        min_length=min_length,
        max_length=max_length,
        patterns=list(pattern or []),
        pattern_messages=list(pattern_message or []),
        validate_email=validate_email,
        validate_hostname=validate_hostname,
        validate_url=validate_url,
        validate_ipv4=validate_ipv4,
        validate_ipv6=validate_ipv6,
        number=number,
        integer=integer,
        float_=float_,
        range_=range_,
        positive=positive,
        negative=negative,
        date=date,
        date_format=date_format,
        time=time,
        time_format=time_format,
        datetime=datetime,
        datetime_format=datetime_format,
        choices=choices,
        choice_separator=choice_separator,
        selection_separator=selection_separator,
        choices_case_sensitive=choices_case_sensitive,
        min_choices=min_choices,
        max_choices=max_choices,
        file_exists=file_exists,
        dir_exists=dir_exists,
        path_exists=path_exists,
        readable=readable,
        writable=writable,
        executable=executable,
        required_priority=required_priority.value if required_priority else None,
        length_priority=length_priority.value if length_priority else None,
        pattern_priority=pattern_priority.value if pattern_priority else None,
        format_priority=format_priority.value if format_priority else None,
        default=default,
        mask=mask,
        confirm=confirm,
        help_text=help_text,
    )

    try:
        config = build_prompt_config(args, settings)
        engine = build_engine(config.validators)
    except ConfigurationError as e:
        error(str(e), exit_code=e.exit_code)

    try:
        summary = collect_value(config, engine, console=err_console)
    except AskrError as e:
        error(str(e), exit_code=e.exit_code)
    except KeyboardInterrupt:
        error("User interrupted", exit_code=EXIT_INTERRUPTED)

    if config.verbose:
        _print_verbose(summary)

    rendered = get_formatter(config.output_format).format(summary)
    if rendered:
        typer.echo(rendered)

    if not summary.valid:
        error(summary.error or "Validation failed", exit_code=EXIT_VALIDATION_FAILED)


if __name__ == "__main__":
    app()
