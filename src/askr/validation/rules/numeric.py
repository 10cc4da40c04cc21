"""Numeric validators: integer, float, range, positive and negative."""

from __future__ import annotations

import math
import re

from askr.errors import ConfigurationError
from askr.validation.base import BaseValidator
from askr.validation.priority import Priority
from askr.validation.result import PartialValidationResult, ValidationResult

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_INTEGER_RE = re.compile(r"[+-]?\d+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|[+-]?(?:inf|infinity|nan)",
    re.IGNORECASE,
)


def parse_integer(value: str) -> int | None:
    """Parse a signed 64-bit integer, rejecting whitespace and underscores."""
    if not _INTEGER_RE.fullmatch(value):
        return None
    number = int(value)
    if not INT64_MIN <= number <= INT64_MAX:
        return None
    return number


def parse_float(value: str) -> float | None:
    """Parse a decimal number, rejecting whitespace and underscores."""
    if not _FLOAT_RE.fullmatch(value):
        return None
    return float(value)


def format_number(number: float) -> str:
    """Render a bound without a trailing ".0" for whole numbers."""
    if math.isfinite(number) and number == int(number):
        return str(int(number))
    return str(number)


def check_partial_integer(value: str) -> PartialValidationResult:
    """Allow an optional leading sign followed by digits."""
    for i, ch in enumerate(value):
        if i == 0 and ch in "+-":
            continue
        if not ch.isascii() or not ch.isdigit():
            return PartialValidationResult.error_at(i)
    return PartialValidationResult.valid()


def check_partial_float(value: str) -> PartialValidationResult:
    """Allow an in-progress sign, decimal point and exponent."""
    has_dot = False
    has_exp = False

    for i, ch in enumerate(value):
        if ch in "+-":
            if i != 0 and value[i - 1] not in "eE":
                return PartialValidationResult.error_at(i)
        elif ch == ".":
            if has_dot or has_exp:
                return PartialValidationResult.error_at(i)
            has_dot = True
        elif ch in "eE":
            if has_exp:
                return PartialValidationResult.error_at(i)
            has_exp = True
        elif not (ch.isascii() and ch.isdigit()):
            return PartialValidationResult.error_at(i)

    return PartialValidationResult.valid()


class IntegerValidator(BaseValidator):
    """Accepts signed 64-bit integers."""

    name = "integer"
    default_priority = Priority.HIGH

    def validate(self, value: str) -> ValidationResult:
        if parse_integer(value) is None:
            return self._failure("Must be a valid integer")
        return self._success()

    def partial_validate(self, value: str, cursor_pos: int) -> PartialValidationResult:
        return check_partial_integer(value)


class FloatValidator(BaseValidator):
    """Accepts any decimal number, including exponent notation."""

    name = "float"
    default_priority = Priority.HIGH

    def validate(self, value: str) -> ValidationResult:
        if parse_float(value) is None:
            return self._failure("Must be a valid number")
        return self._success()

    def partial_validate(self, value: str, cursor_pos: int) -> PartialValidationResult:
        return check_partial_float(value)


class RangeValidator(BaseValidator):
    """Requires a number within optional inclusive bounds."""

    name = "range"
    default_priority = Priority.MEDIUM

    def __init__(
        self,
        min_value: float | None = None,
        max_value: float | None = None,
        *,
        priority: Priority | None = None,
        message: str | None = None,
    ) -> None:
        """Configure the bounds.

        Raises:
            ConfigurationError: If a bound is NaN or min exceeds max.
        """
        for bound in (min_value, max_value):
            if bound is not None and math.isnan(bound):
                raise ConfigurationError("Range bounds must be numbers, got NaN")
        if min_value is not None and max_value is not None and min_value > max_value:
            raise ConfigurationError(
                f"Range minimum ({format_number(min_value)}) must not exceed "
                f"maximum ({format_number(max_value)})"
            )
        super().__init__(priority=priority, message=message)
        self.min_value = min_value
        self.max_value = max_value

    @classmethod
    def between(cls, min_value: float, max_value: float) -> RangeValidator:
        return cls(min_value, max_value)

    @classmethod
    def at_least(cls, min_value: float) -> RangeValidator:
        return cls(min_value=min_value)

    @classmethod
    def at_most(cls, max_value: float) -> RangeValidator:
        return cls(max_value=max_value)

    @property
    def description(self) -> str:
        return self._bounds_message().lower()

    def _bounds_message(self) -> str:
        low, high = self.min_value, self.max_value
        if low is not None and high is not None:
            return f"Must be between {format_number(low)} and {format_number(high)}"
        if low is not None:
            return f"Must be at least {format_number(low)}"
        if high is not None:
            return f"Must be at most {format_number(high)}"
        return "Must be a valid number"

    def validate(self, value: str) -> ValidationResult:
        number = parse_float(value)
        if number is None or math.isnan(number):
            return self._failure("Must be a valid number")

        violated: list[str] = []
        if self.min_value is not None and number < self.min_value:
            violated.append("min")
        if self.max_value is not None and number > self.max_value:
            violated.append("max")

        if violated:
            return self._failure(
                self._bounds_message(),
                violated=violated,
                min=self.min_value,
                max=self.max_value,
            )
        return self._success()

    def partial_validate(self, value: str, cursor_pos: int) -> PartialValidationResult:
        return check_partial_float(value)


class PositiveValidator(BaseValidator):
    """Requires a number strictly greater than zero."""

    name = "positive"
    default_priority = Priority.MEDIUM

    def validate(self, value: str) -> ValidationResult:
        number = parse_float(value)
        if number is None:
            return self._failure("Must be a valid number")
        if number > 0:
            return self._success()
        return self._failure("Must be a positive number")

    def partial_validate(self, value: str, cursor_pos: int) -> PartialValidationResult:
        if value.startswith("-"):
            return PartialValidationResult.error_at(0)
        return check_partial_float(value)


class NegativeValidator(BaseValidator):
    """Requires a number strictly less than zero."""

    name = "negative"
    default_priority = Priority.MEDIUM

    def validate(self, value: str) -> ValidationResult:
        number = parse_float(value)
        if number is None:
            return self._failure("Must be a valid number")
        if number < 0:
            return self._success()
        return self._failure("Must be a negative number")

    def partial_validate(self, value: str, cursor_pos: int) -> PartialValidationResult:
        if value.startswith("+"):
            return PartialValidationResult.error_at(0)
        return check_partial_float(value)
