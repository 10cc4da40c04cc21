"""One prompt run: pick the input mode, collect the value, validate it.

Modes, in order of preference:

1. quiet: read all of stdin, no UI at all.
2. fallback: the terminal lacks cursor control, so print the prompt and
   read one line.
3. interactive: the choice menu when a choice rule is configured,
   otherwise the line editor.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

from rich.console import Console

from askr.config import PromptConfig
from askr.errors import ValidationFailed
from askr.ui.choice_menu import ChoiceMenu
from askr.ui.interactive import InteractivePrompt
from askr.ui.terminal import Terminal, TerminalCapabilities
from askr.validation.engine import ValidationEngine
from askr.validation.result import ValidationSummary
from askr.validation.rules.basic import MatchValidator
from askr.validation.rules.choice import ChoiceValidator

logger = logging.getLogger(__name__)

CONFIRM_PREFIX = "Confirm:"


def find_choice_validator(engine: ValidationEngine) -> ChoiceValidator | None:
    """Return the engine's choice rule, if it has one."""
    for validator in engine.validators:
        if isinstance(validator, ChoiceValidator):
            return validator
    return None


def collect_value(
    config: PromptConfig,
    engine: ValidationEngine,
    terminal: Terminal | None = None,
    console: Console | None = None,
    stdin: TextIO | None = None,
) -> ValidationSummary:
    """Collect one value from the user and validate it.

    Args:
        config: The prompt configuration.
        engine: Engine holding every configured rule.
        terminal: Terminal to drive; probed from ``console`` when omitted.
        console: Console the UI renders to (default: stderr).
        stdin: Input stream (default: ``sys.stdin``).

    Returns:
        The final ValidationSummary. Its ``valid`` flag decides the exit code.

    Raises:
        PromptCancelled: The user interrupted the prompt.
        PromptTimeout: No input arrived in time.
        MaxAttemptsExceeded: Too many rejected submits.
        ValidationFailed: Confirmation did not match in fallback mode.
        TerminalError: Terminal I/O failed.
    """
    stdin = stdin if stdin is not None else sys.stdin
    choice_rule = find_choice_validator(engine)

    if config.quiet:
        value = stdin.read().strip()
        logger.debug("Quiet mode read %d characters", len(value))
        return _finish(config, engine, choice_rule, value)

    if terminal is None:
        console = console or Console(stderr=True)
        capabilities = TerminalCapabilities.detect(
            console,
            width_override=config.ui.width,
            no_color=config.ui.no_color,
            stdin=stdin,
        )
        terminal = Terminal(console, capabilities, stdin=stdin)

    if not terminal.capabilities.cursor_control:
        logger.debug("No cursor control; using line fallback")
        value = _read_fallback(config, terminal.console, stdin)
        return _finish(config, engine, choice_rule, value)

    if choice_rule is not None:
        selections = _run_menu(config, terminal, choice_rule)
        joined = choice_rule.separator.join(selections)
        summary = engine.validate(joined)
        return summary.with_value(_selection_separator(config).join(selections))

    value = _run_editor(config, terminal, engine)
    return engine.validate(value)


# -----------------------------------------------------------------------------
# Interactive modes
# -----------------------------------------------------------------------------


def _run_editor(config: PromptConfig, terminal: Terminal, engine: ValidationEngine) -> str:
    editor = InteractivePrompt(
        terminal,
        engine,
        prompt_text=config.prompt,
        interaction=config.interaction,
        ui=config.ui,
    )
    value = editor.prompt()

    if config.interaction.require_confirmation:
        confirm_engine = ValidationEngine([MatchValidator(value)], cache_size=0)
        confirm = InteractivePrompt(
            terminal,
            confirm_engine,
            prompt_text=f"{CONFIRM_PREFIX} {config.prompt}",
            interaction=config.interaction,
            ui=config.ui,
        )
        confirm.prompt()
    return value


def _run_menu(config: PromptConfig, terminal: Terminal, rule: ChoiceValidator) -> list[str]:
    menu = ChoiceMenu(
        terminal,
        rule.choices,
        min_choices=rule.min_choices,
        max_choices=rule.max_choices,
        prompt_text=config.prompt,
        timeout=config.interaction.timeout,
        no_color=config.ui.no_color,
        width=config.ui.width,
    )
    return menu.show()


# -----------------------------------------------------------------------------
# Non-interactive modes
# -----------------------------------------------------------------------------


def _read_fallback(config: PromptConfig, console: Console, stdin: TextIO) -> str:
    value = _read_line(f"{config.prompt} ", console, stdin)
    if not value and config.interaction.default_value is not None:
        value = config.interaction.default_value

    if config.interaction.require_confirmation:
        again = _read_line(f"{CONFIRM_PREFIX} {config.prompt} ", console, stdin)
        if not again and config.interaction.default_value is not None:
            again = config.interaction.default_value
        if again != value:
            raise ValidationFailed("Values do not match")
    return value


def _read_line(prompt: str, console: Console, stdin: TextIO) -> str:
    console.print(prompt, end="", markup=False, highlight=False)
    console.file.flush()
    return stdin.readline().strip()


def _selection_separator(config: PromptConfig) -> str:
    return config.choice.selection_separator if config.choice else ","


def _finish(
    config: PromptConfig,
    engine: ValidationEngine,
    choice_rule: ChoiceValidator | None,
    value: str,
) -> ValidationSummary:
    summary = engine.validate(value)
    if choice_rule is None or not summary.valid:
        return summary
    # Report typed selections in their configured spelling
    entries = [choice_rule.canonical(entry) or entry for entry in choice_rule.parse(value)]
    return summary.with_value(_selection_separator(config).join(entries))
