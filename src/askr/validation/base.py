"""Base validator class for the askr validation framework.

Every rule implements the same two-method contract: ``validate`` judges a
complete input and ``partial_validate`` judges an input that is still being
typed. Validators are configured once at construction and never mutated
afterwards; the builder-style ``with_priority`` / ``with_message`` helpers
return adjusted copies.
"""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from typing import Any, TypeVar

from askr.validation.priority import Priority
from askr.validation.result import PartialValidationResult, ValidationResult

V = TypeVar("V", bound="BaseValidator")


class BaseValidator(ABC):
    """Abstract base class for all validators.

    Subclasses set ``name`` and ``default_priority`` and implement
    ``validate`` and ``partial_validate``.

    Attributes:
        name: Rule identifier reported in results (e.g. "min_length").
        default_priority: Priority used when no override is configured.
    """

    name: str = ""
    default_priority: Priority = Priority.MEDIUM

    def __init__(
        self,
        *,
        priority: Priority | None = None,
        message: str | None = None,
    ) -> None:
        """Initialize validator.

        Args:
            priority: Override for the rule's default priority.
            message: Custom failure message replacing the default one.
        """
        self._priority = priority if priority is not None else self.default_priority
        self._custom_message = message

    @property
    def priority(self) -> Priority:
        return self._priority

    @property
    def custom_message(self) -> str | None:
        return self._custom_message

    @property
    def description(self) -> str:
        """Human-readable description of the rule."""
        return self.name

    def with_priority(self: V, priority: Priority) -> V:
        """Return a copy of this validator using ``priority``."""
        clone = copy.copy(self)
        clone._priority = priority
        return clone

    def with_message(self: V, message: str) -> V:
        """Return a copy of this validator using a custom failure message."""
        clone = copy.copy(self)
        clone._custom_message = message
        return clone

    @abstractmethod
    def validate(self, value: str) -> ValidationResult:
        """Validate a complete input.

        Args:
            value: The candidate value.

        Returns:
            ValidationResult for this rule.
        """

    @abstractmethod
    def partial_validate(self, value: str, cursor_pos: int) -> PartialValidationResult:
        """Validate an input that is still being typed.

        Args:
            value: The value typed so far.
            cursor_pos: Character offset of the cursor.

        Returns:
            PartialValidationResult locating the earliest problem, if any.
        """

    def _success(self, **metadata: Any) -> ValidationResult:
        return ValidationResult.success(self.name, self._priority, **metadata)

    def _failure(self, default_message: str, **metadata: Any) -> ValidationResult:
        message = self._custom_message or default_message
        return ValidationResult.failure(self.name, self._priority, message, **metadata)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(priority={self._priority.label})"
