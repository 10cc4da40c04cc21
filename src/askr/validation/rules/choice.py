"""Choice-set validator."""

from __future__ import annotations

from collections.abc import Iterable

from askr.errors import ConfigurationError
from askr.validation.base import BaseValidator
from askr.validation.priority import Priority
from askr.validation.result import PartialValidationResult, ValidationResult

DEFAULT_SEPARATOR = ","


class ChoiceValidator(BaseValidator):
    """Validates that the input names between ``min_choices`` and
    ``max_choices`` distinct options from a fixed list.

    The input is split on ``separator``; entries are trimmed and empty
    entries dropped. Comparison is case-insensitive unless
    ``case_sensitive`` is set.

    Attributes:
        choices: The valid options, in display order.
        min_choices: Minimum number of selections.
        max_choices: Maximum number of selections.
    """

    name = "choice"
    default_priority = Priority.HIGH

    def __init__(
        self,
        choices: Iterable[str],
        *,
        min_choices: int | None = None,
        max_choices: int | None = None,
        case_sensitive: bool = False,
        separator: str = DEFAULT_SEPARATOR,
        priority: Priority | None = None,
        message: str | None = None,
    ) -> None:
        options = tuple(choices)
        if not options:
            raise ConfigurationError("Choice validator needs at least one option")
        if not separator:
            raise ConfigurationError("Choice separator must not be empty")
        for option in options:
            if separator in option:
                raise ConfigurationError(
                    f"Choice '{option}' contains the separator '{separator}'"
                )

        if min_choices is None:
            min_choices = 1
            if max_choices is None:
                max_choices = 1
        elif max_choices is None:
            max_choices = len(options)

        if min_choices < 0:
            raise ConfigurationError("Minimum choices must not be negative")
        if max_choices == 0:
            raise ConfigurationError("Maximum choices must be at least 1")
        if min_choices > max_choices:
            raise ConfigurationError(
                f"Minimum choices ({min_choices}) cannot be greater than "
                f"maximum choices ({max_choices})"
            )

        super().__init__(priority=priority, message=message)
        self.choices = options
        self.min_choices = min_choices
        self.max_choices = max_choices
        self.case_sensitive = case_sensitive
        self.separator = separator

    @property
    def multi_select(self) -> bool:
        return self.max_choices > 1

    def parse(self, value: str) -> list[str]:
        """Split ``value`` into trimmed, non-empty entries."""
        return [part.strip() for part in value.split(self.separator) if part.strip()]

    def canonical(self, entry: str) -> str | None:
        """Return the configured spelling of ``entry``, or None if unknown."""
        if self.case_sensitive:
            return entry if entry in self.choices else None
        folded = entry.casefold()
        for option in self.choices:
            if option.casefold() == folded:
                return option
        return None

    def validate(self, value: str) -> ValidationResult:
        entries = self.parse(value)
        count = len(entries)

        if count < self.min_choices:
            return self._failure(
                f"At least {self.min_choices} choice(s) required", selected=count
            )
        if count > self.max_choices:
            return self._failure(
                f"At most {self.max_choices} choice(s) allowed", selected=count
            )

        seen: set[str] = set()
        duplicates: list[str] = []
        for entry in entries:
            option = self.canonical(entry)
            if option is None:
                continue
            if option in seen:
                duplicates.append(option)
            seen.add(option)
        if duplicates:
            return self._failure(
                f"Duplicate choices not allowed: {', '.join(duplicates)}",
                duplicates=duplicates,
            )

        invalid = [entry for entry in entries if self.canonical(entry) is None]
        if invalid:
            return self._failure(
                f"Invalid choice(s): {', '.join(invalid)}. "
                f"Valid options: {', '.join(self.choices)}",
                invalid=invalid,
            )

        return self._success(selected=count)

    def _has_prefix_match(self, text: str) -> bool:
        if self.case_sensitive:
            return any(option.startswith(text) for option in self.choices)
        folded = text.casefold()
        return any(option.casefold().startswith(folded) for option in self.choices)

    def partial_validate(self, value: str, cursor_pos: int) -> PartialValidationResult:
        offset = value.rfind(self.separator)
        offset = 0 if offset == -1 else offset + len(self.separator)
        current = value[offset:]

        stripped = current.lstrip()
        if not stripped:
            return PartialValidationResult.valid()
        offset += len(current) - len(stripped)
        stripped = stripped.rstrip()

        if self._has_prefix_match(stripped):
            return PartialValidationResult.valid()
        for i in range(1, len(stripped) + 1):
            if not self._has_prefix_match(stripped[:i]):
                return PartialValidationResult.error_at(offset + i - 1).with_suggestion(
                    f"Valid options: {', '.join(self.choices)}"
                )
        return PartialValidationResult.valid()

    def __repr__(self) -> str:
        return (
            f"ChoiceValidator(choices={list(self.choices)!r}, "
            f"min={self.min_choices}, max={self.max_choices})"
        )
