"""Color schemes and styled text fragments for the interactive UI."""

from __future__ import annotations

from dataclasses import dataclass

from rich.style import Style
from rich.text import Text

from askr.validation.priority import Priority
from askr.validation.result import ValidationResult

NO_STYLE = Style.null()


@dataclass(frozen=True)
class ColorScheme:
    """Styles used for each UI element."""

    valid_text: Style = NO_STYLE
    invalid_text: Style = Style(color="red")
    prompt_text: Style = Style(bold=True)
    help_text: Style = Style(color="bright_black")
    error: Style = Style(color="red")
    warning: Style = Style(color="yellow")
    info: Style = Style(color="blue")
    success: Style = Style(color="green")
    highlight: Style = Style(color="black", bgcolor="white", bold=True)

    @classmethod
    def default(cls) -> ColorScheme:
        return cls()

    @classmethod
    def no_color(cls) -> ColorScheme:
        return cls(
            valid_text=NO_STYLE,
            invalid_text=NO_STYLE,
            prompt_text=NO_STYLE,
            help_text=NO_STYLE,
            error=NO_STYLE,
            warning=NO_STYLE,
            info=NO_STYLE,
            success=NO_STYLE,
            highlight=Style(reverse=True),
        )


class Colorizer:
    """Builds styled ``Text`` fragments.

    With color disabled, messages carry textual prefixes (``[ERROR]`` and
    friends) instead of icons so they stay readable in plain logs.
    """

    def __init__(self, scheme: ColorScheme | None = None, no_color: bool = False) -> None:
        self.no_color = no_color
        self.scheme = ColorScheme.no_color() if no_color else (scheme or ColorScheme.default())

    def prompt(self, text: str) -> Text:
        return Text(text, style=self.scheme.prompt_text)

    def valid(self, text: str) -> Text:
        return Text(text, style=self.scheme.valid_text)

    def invalid(self, text: str) -> Text:
        return Text(text, style=self.scheme.invalid_text)

    def help(self, text: str) -> Text:
        return Text(text, style=self.scheme.help_text)

    def highlighted(self, text: str) -> Text:
        return Text(text, style=self.scheme.highlight)

    def input_text(self, text: str, first_error_pos: int | None) -> Text:
        """Render typed input, marking everything from the first error on."""
        if first_error_pos is None or first_error_pos >= len(text):
            return self.valid(text)
        rendered = self.valid(text[:first_error_pos])
        rendered.append_text(self.invalid(text[first_error_pos:]))
        return rendered

    def error_message(self, text: str) -> Text:
        return self._message(text, "❌", "[ERROR]", self.scheme.error)

    def warning_message(self, text: str) -> Text:
        return self._message(text, "⚠️", "[WARN]", self.scheme.warning)

    def info_message(self, text: str) -> Text:
        return self._message(text, "💡", "[INFO]", self.scheme.info)

    def success_message(self, text: str) -> Text:
        return self._message(text, "✅", "[OK]", self.scheme.success)

    def result_message(self, result: ValidationResult) -> Text:
        """Render a failing result with the marker for its priority."""
        message = result.message or "Validation failed"
        if result.priority <= Priority.HIGH:
            return self.error_message(message)
        if result.priority == Priority.MEDIUM:
            return self.warning_message(message)
        return self.info_message(message)

    def _message(self, text: str, icon: str, prefix: str, style: Style) -> Text:
        marker = prefix if self.no_color else icon
        return Text(f"{marker} {text}", style=style)
