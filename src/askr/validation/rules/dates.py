"""Date and time validators backed by ``datetime.strptime``."""

from __future__ import annotations

from datetime import datetime

from askr.errors import ConfigurationError
from askr.validation.base import BaseValidator
from askr.validation.priority import Priority
from askr.validation.result import PartialValidationResult, ValidationResult

DEFAULT_DATE_FORMAT = "%Y-%m-%d"
DEFAULT_TIME_FORMAT = "%H:%M:%S"
DEFAULT_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

# Directives that always render to a fixed number of digits.
FIXED_WIDTH_DIRECTIVES = {
    "Y": 4,
    "m": 2,
    "d": 2,
    "H": 2,
    "M": 2,
    "S": 2,
    "y": 2,
    "j": 3,
}

DIGIT = None  # template slot accepting any decimal digit


def compile_template(fmt: str) -> tuple[list[str | None], bool]:
    """Turn a strftime format into a per-character template.

    Each slot is either ``DIGIT`` or the literal character expected there.
    Compilation stops at the first directive with a variable width.

    Args:
        fmt: strftime-style format string.

    Returns:
        Tuple of (template, complete) where ``complete`` is True when the
        whole format was compiled and the input length is therefore fixed.
    """
    template: list[str | None] = []
    i = 0
    while i < len(fmt):
        ch = fmt[i]
        if ch != "%":
            template.append(ch)
            i += 1
            continue
        if i + 1 >= len(fmt):
            return template, False
        directive = fmt[i + 1]
        if directive == "%":
            template.append("%")
        elif directive in FIXED_WIDTH_DIRECTIVES:
            template.extend([DIGIT] * FIXED_WIDTH_DIRECTIVES[directive])
        else:
            return template, False
        i += 2
    return template, True


class _TemporalValidator(BaseValidator):
    """Shared implementation for date, time and datetime rules."""

    default_priority = Priority.HIGH
    kind = ""
    default_format = ""

    def __init__(
        self,
        fmt: str | None = None,
        *,
        priority: Priority | None = None,
        message: str | None = None,
    ) -> None:
        fmt = fmt or self.default_format
        if "%" not in fmt:
            raise ConfigurationError(f"Invalid {self.kind} format '{fmt}': no directives")
        super().__init__(priority=priority, message=message)
        self.format = fmt
        self._template, self._fixed = compile_template(fmt)

    @property
    def description(self) -> str:
        return f"{self.name} ({self.format})"

    def validate(self, value: str) -> ValidationResult:
        try:
            datetime.strptime(value, self.format)
        except ValueError:
            return self._failure(
                f"Must be a valid {self.kind} in format: {self.format}",
                format=self.format,
            )
        return self._success(format=self.format)

    def partial_validate(self, value: str, cursor_pos: int) -> PartialValidationResult:
        for i, ch in enumerate(value):
            if i >= len(self._template):
                if self._fixed:
                    return PartialValidationResult.error_at(i).blocking().with_suggestion(
                        f"Expected format: {self.format}"
                    )
                break
            expected = self._template[i]
            if expected is DIGIT:
                if not (ch.isascii() and ch.isdigit()):
                    return PartialValidationResult.error_at(i).blocking()
            elif ch != expected:
                return PartialValidationResult.error_at(i).blocking().with_suggestion(
                    f"Expected '{expected}'"
                )
        return PartialValidationResult.valid()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(format={self.format!r}, priority={self.priority.label})"


class DateValidator(_TemporalValidator):
    """Validates a calendar date (default ``%Y-%m-%d``)."""

    name = "date"
    kind = "date"
    default_format = DEFAULT_DATE_FORMAT


class TimeValidator(_TemporalValidator):
    """Validates a time of day (default ``%H:%M:%S``)."""

    name = "time"
    kind = "time"
    default_format = DEFAULT_TIME_FORMAT


class DateTimeValidator(_TemporalValidator):
    """Validates a combined date and time (default ``%Y-%m-%d %H:%M:%S``).

    Timezone directives (``%z``, ``%Z``) are handled by ``strptime`` itself.
    """

    name = "datetime"
    kind = "datetime"
    default_format = DEFAULT_DATETIME_FORMAT
