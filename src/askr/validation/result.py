"""Result types produced by validators and the validation engine."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any

from askr.validation.priority import Priority


def _sort_key(result: ValidationResult) -> tuple[int, str]:
    return (int(result.priority), result.rule_name)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of one validator for one input.

    Attributes:
        rule_name: Name of the validator that produced the result.
        passed: Whether the input satisfied the rule.
        priority: Severity of the rule.
        message: Human-readable failure message (None when passed).
        metadata: Read-only, ordered extra details (bounds, lengths, ...).
    """

    rule_name: str
    passed: bool
    priority: Priority = Priority.MEDIUM
    message: str | None = None
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    @classmethod
    def success(
        cls, rule_name: str, priority: Priority = Priority.MEDIUM, **metadata: Any
    ) -> ValidationResult:
        """Create a passing result."""
        return cls(rule_name=rule_name, passed=True, priority=priority, metadata=metadata)

    @classmethod
    def failure(
        cls, rule_name: str, priority: Priority, message: str, **metadata: Any
    ) -> ValidationResult:
        """Create a failing result with a message."""
        return cls(
            rule_name=rule_name,
            passed=False,
            priority=priority,
            message=message,
            metadata=metadata,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to plain JSON-compatible types."""
        return {
            "rule_name": self.rule_name,
            "passed": self.passed,
            "priority": self.priority.label,
            "message": self.message,
            "metadata": dict(self.metadata),
        }


@dataclass(frozen=True)
class PartialValidationResult:
    """Judgement of an in-progress input.

    Attributes:
        first_error_pos: Character offset of the earliest problem, if any.
        can_continue: False when no extension of the input can become valid.
        suggestion: Optional hint for the user.
    """

    first_error_pos: int | None = None
    can_continue: bool = True
    suggestion: str | None = None

    @classmethod
    def valid(cls) -> PartialValidationResult:
        return cls()

    @classmethod
    def error_at(cls, pos: int) -> PartialValidationResult:
        return cls(first_error_pos=pos)

    def with_suggestion(self, suggestion: str) -> PartialValidationResult:
        return replace(self, suggestion=suggestion)

    def blocking(self) -> PartialValidationResult:
        return replace(self, can_continue=False)

    @property
    def has_error(self) -> bool:
        return self.first_error_pos is not None


@dataclass(frozen=True)
class ValidationMetadata:
    """Timing and count information attached to a summary."""

    validation_time_ms: float = 0.0
    rules_checked: int = 0
    rules_passed: int = 0
    input_length: int = 0
    attempts: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "validation_time_ms": self.validation_time_ms,
            "rules_checked": self.rules_checked,
            "rules_passed": self.rules_passed,
            "input_length": self.input_length,
            "attempts": self.attempts,
        }


@dataclass(frozen=True)
class ValidationSummary:
    """Full, sorted verdict for one input across all validators.

    Attributes:
        value: The input that was validated.
        valid: True iff every result passed.
        error: Message of the most severe failing result, None when valid.
        metadata: Timing and counts.
        validation_results: Results sorted by (priority, rule_name).
    """

    value: str
    valid: bool
    error: str | None
    metadata: ValidationMetadata
    validation_results: tuple[ValidationResult, ...]

    @classmethod
    def from_results(
        cls,
        value: str,
        results: Iterable[ValidationResult],
        validation_time_ms: float = 0.0,
    ) -> ValidationSummary:
        """Build a summary, sorting results and deriving the verdict.

        Args:
            value: The validated input.
            results: Validator results in any order.
            validation_time_ms: Time spent producing the results.

        Returns:
            A new ValidationSummary.
        """
        ordered = tuple(sorted(results, key=_sort_key))
        valid = all(r.passed for r in ordered)

        error: str | None = None
        if not valid:
            first_failure = next(r for r in ordered if not r.passed)
            error = first_failure.message or "Validation failed"

        metadata = ValidationMetadata(
            validation_time_ms=validation_time_ms,
            rules_checked=len(ordered),
            rules_passed=sum(1 for r in ordered if r.passed),
            input_length=len(value),
        )
        return cls(
            value=value,
            valid=valid,
            error=error,
            metadata=metadata,
            validation_results=ordered,
        )

    @property
    def failures(self) -> list[ValidationResult]:
        """Failing results in summary order."""
        return [r for r in self.validation_results if not r.passed]

    def with_attempts(self, attempts: int) -> ValidationSummary:
        """Return a copy recording the number of submit attempts."""
        return replace(self, metadata=replace(self.metadata, attempts=attempts))

    def with_value(self, value: str) -> ValidationSummary:
        """Return a copy reporting a different value (verdict unchanged)."""
        return replace(self, value=value)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON output shape."""
        return {
            "value": self.value,
            "valid": self.valid,
            "error": self.error,
            "metadata": self.metadata.to_dict(),
            "validation_results": [r.to_dict() for r in self.validation_results],
        }
