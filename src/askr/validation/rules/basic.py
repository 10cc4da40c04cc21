"""Basic validators: required, length bounds, regular expressions and equality."""

from __future__ import annotations

import re

from askr.errors import ConfigurationError
from askr.validation.base import BaseValidator
from askr.validation.priority import Priority
from askr.validation.result import PartialValidationResult, ValidationResult


class RequiredValidator(BaseValidator):
    """Fails when the trimmed input is empty."""

    name = "required"
    default_priority = Priority.CRITICAL

    def validate(self, value: str) -> ValidationResult:
        if not value.strip():
            return self._failure("This field is required")
        return self._success()

    def partial_validate(self, value: str, cursor_pos: int) -> PartialValidationResult:
        if not value.strip():
            return PartialValidationResult.error_at(0)
        return PartialValidationResult.valid()


class MinLengthValidator(BaseValidator):
    """Requires at least ``min_length`` characters."""

    name = "min_length"
    default_priority = Priority.MEDIUM

    def __init__(
        self,
        min_length: int,
        *,
        priority: Priority | None = None,
        message: str | None = None,
    ) -> None:
        if min_length < 0:
            raise ConfigurationError(f"min_length must be non-negative, got {min_length}")
        super().__init__(priority=priority, message=message)
        self.min_length = min_length

    @property
    def description(self) -> str:
        return f"at least {self.min_length} characters"

    def validate(self, value: str) -> ValidationResult:
        length = len(value)
        if length < self.min_length:
            return self._failure(
                f"Minimum length is {self.min_length} characters (currently {length})",
                min_length=self.min_length,
                actual_length=length,
            )
        return self._success()

    def partial_validate(self, value: str, cursor_pos: int) -> PartialValidationResult:
        # Too short can still be fixed by typing more
        missing = self.min_length - len(value)
        if missing > 0:
            return PartialValidationResult.valid().with_suggestion(
                f"Need {missing} more characters"
            )
        return PartialValidationResult.valid()


class MaxLengthValidator(BaseValidator):
    """Allows at most ``max_length`` characters."""

    name = "max_length"
    default_priority = Priority.MEDIUM

    def __init__(
        self,
        max_length: int,
        *,
        priority: Priority | None = None,
        message: str | None = None,
    ) -> None:
        if max_length < 0:
            raise ConfigurationError(f"max_length must be non-negative, got {max_length}")
        super().__init__(priority=priority, message=message)
        self.max_length = max_length

    @property
    def description(self) -> str:
        return f"at most {self.max_length} characters"

    def validate(self, value: str) -> ValidationResult:
        length = len(value)
        if length > self.max_length:
            return self._failure(
                f"Maximum length is {self.max_length} characters (currently {length})",
                max_length=self.max_length,
                actual_length=length,
            )
        return self._success()

    def partial_validate(self, value: str, cursor_pos: int) -> PartialValidationResult:
        excess = len(value) - self.max_length
        if excess > 0:
            return (
                PartialValidationResult.error_at(self.max_length)
                .with_suggestion(f"Too long by {excess} characters")
                .blocking()
            )
        return PartialValidationResult.valid()


class PatternValidator(BaseValidator):
    """Requires the input to contain a match for a regular expression.

    Matching uses ``re.search`` semantics; anchor the pattern with ``^``/``$``
    to require a full match.
    """

    name = "pattern"
    default_priority = Priority.HIGH

    def __init__(
        self,
        pattern: str,
        *,
        priority: Priority | None = None,
        message: str | None = None,
    ) -> None:
        """Compile the pattern.

        Args:
            pattern: Regular expression source.
            priority: Override for the default High priority.
            message: Custom failure message.

        Raises:
            ConfigurationError: If the pattern does not compile.
        """
        try:
            compiled = re.compile(pattern)
        except re.error as e:
            raise ConfigurationError(f"Invalid regex pattern '{pattern}': {e}") from e
        super().__init__(priority=priority, message=message)
        self.pattern = pattern
        self._regex = compiled

    @property
    def description(self) -> str:
        return self.pattern

    def validate(self, value: str) -> ValidationResult:
        if self._regex.search(value):
            return self._success()
        return self._failure(f"Must match pattern: {self.pattern}", pattern=self.pattern)

    def partial_validate(self, value: str, cursor_pos: int) -> PartialValidationResult:
        if not value or self._regex.search(value):
            return PartialValidationResult.valid()

        for end in range(1, len(value) + 1):
            if not self._regex.search(value[:end]):
                return PartialValidationResult.error_at(end - 1)

        return PartialValidationResult.error_at(0)


class MatchValidator(BaseValidator):
    """Requires the input to equal an expected value (confirmation prompts)."""

    name = "match"
    default_priority = Priority.CRITICAL

    def __init__(
        self,
        expected: str,
        *,
        priority: Priority | None = None,
        message: str | None = None,
    ) -> None:
        super().__init__(priority=priority, message=message)
        self.expected = expected

    def validate(self, value: str) -> ValidationResult:
        if value == self.expected:
            return self._success()
        return self._failure("Values do not match")

    def partial_validate(self, value: str, cursor_pos: int) -> PartialValidationResult:
        if self.expected.startswith(value):
            return PartialValidationResult.valid()
        for i, (typed, wanted) in enumerate(zip(value, self.expected)):
            if typed != wanted:
                return PartialValidationResult.error_at(i)
        return PartialValidationResult.error_at(len(self.expected))

    def __repr__(self) -> str:
        # Never echo the expected value; it may be a password.
        return f"MatchValidator(priority={self.priority.label})"
