"""Validation engine orchestrating an ordered chain of validators.

The engine runs every registered validator against an input, memoizes the
per-input result vectors, and derives the summary verdict and the
prioritized list of errors shown while the user types.
"""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from collections.abc import Iterable

from askr.validation.base import BaseValidator
from askr.validation.priority import Priority
from askr.validation.result import (
    PartialValidationResult,
    ValidationResult,
    ValidationSummary,
)

logger = logging.getLogger(__name__)

DEFAULT_CACHE_SIZE = 1024

# Display budget per priority tier
MAX_MEDIUM_ERRORS = 3
MAX_LOW_ERRORS = 2


class ValidationEngine:
    """Runs validators, caches full results and filters errors for display.

    The cache maps an exact input string to the validator results computed
    for it. It is cleared whenever the validator set changes and evicts the
    least recently used entry once ``cache_size`` entries are held. Entries
    are pure functions of the input, so eviction is never observable.

    Example:
        >>> engine = ValidationEngine()
        >>> engine.add_validator(RequiredValidator())
        >>> engine.validate("").valid
        False
    """

    def __init__(
        self,
        validators: Iterable[BaseValidator] = (),
        cache_size: int | None = DEFAULT_CACHE_SIZE,
    ) -> None:
        """Initialize the engine.

        Args:
            validators: Validators to register, in order.
            cache_size: Maximum cached inputs. None for unbounded, 0 disables
                caching.
        """
        self._validators: list[BaseValidator] = []
        self._cache_size = cache_size
        self._cache: OrderedDict[str, tuple[ValidationResult, ...]] = OrderedDict()
        for validator in validators:
            self.add_validator(validator)

    @classmethod
    def without_cache(cls, validators: Iterable[BaseValidator] = ()) -> ValidationEngine:
        """Create an engine that never caches results."""
        return cls(validators, cache_size=0)

    # -------------------------------------------------------------------------
    # Validator management
    # -------------------------------------------------------------------------

    def add_validator(self, validator: BaseValidator) -> None:
        """Append a validator and invalidate cached results."""
        self._validators.append(validator)
        self.clear_cache()

    @property
    def validators(self) -> tuple[BaseValidator, ...]:
        return tuple(self._validators)

    @property
    def validator_count(self) -> int:
        return len(self._validators)

    @property
    def cache_enabled(self) -> bool:
        return self._cache_size != 0

    @property
    def cached_inputs(self) -> int:
        return len(self._cache)

    def clear_cache(self) -> None:
        self._cache.clear()

    def has_rule(self, name: str) -> bool:
        """Check whether a validator with the given rule name is registered."""
        return any(v.name == name for v in self._validators)

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate(self, value: str) -> ValidationSummary:
        """Validate a complete input against every validator.

        Cached result vectors are reused for inputs seen before; the summary
        and its timing are always built fresh.

        Args:
            value: The candidate value.

        Returns:
            ValidationSummary with results sorted by (priority, rule_name).
        """
        start = time.perf_counter()

        results = self._get_cached(value)
        if results is None:
            results = tuple(self._run_validator(v, value) for v in self._validators)
            self._store(value, results)

        elapsed_ms = (time.perf_counter() - start) * 1000
        return ValidationSummary.from_results(value, results, round(elapsed_ms, 3))

    def partial_validate(self, value: str, cursor_pos: int) -> PartialValidationResult:
        """Judge an in-progress input across all validators.

        The earliest reported error position wins, continuation is blocked if
        any validator blocks it, and suggestions are joined with "; " in
        registration order.

        Args:
            value: The text typed so far.
            cursor_pos: Character offset of the cursor.

        Returns:
            Aggregated PartialValidationResult.
        """
        first_error_pos: int | None = None
        can_continue = True
        suggestions: list[str] = []

        for validator in self._validators:
            try:
                result = validator.partial_validate(value, cursor_pos)
            except Exception:
                logger.exception("Validator %r raised during partial validation", validator)
                continue

            if result.first_error_pos is not None:
                if first_error_pos is None:
                    first_error_pos = result.first_error_pos
                else:
                    first_error_pos = min(first_error_pos, result.first_error_pos)

            if not result.can_continue:
                can_continue = False

            if result.suggestion:
                suggestions.append(result.suggestion)

        return PartialValidationResult(
            first_error_pos=first_error_pos,
            can_continue=can_continue,
            suggestion="; ".join(suggestions) if suggestions else None,
        )

    def get_display_errors(
        self, value: str, max_errors: int | None = None
    ) -> list[ValidationResult]:
        """Return the failing results worth showing for ``value``.

        Critical and High failures are always shown. At most three Medium
        failures are shown. Low failures are shown (at most two) only when no
        Critical or High failure exists. The list is then capped at
        ``max_errors`` when given.

        Args:
            value: The candidate value.
            max_errors: Optional overall cap.

        Returns:
            Failing results in summary order.
        """
        summary = self.validate(value)
        return filter_display_errors(summary.validation_results, max_errors)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _run_validator(self, validator: BaseValidator, value: str) -> ValidationResult:
        try:
            return validator.validate(value)
        except Exception as e:
            logger.exception("Validator %r raised during validation", validator)
            return ValidationResult.failure(
                validator.name or type(validator).__name__,
                validator.priority,
                f"Internal validator error: {e}",
            )

    def _get_cached(self, value: str) -> tuple[ValidationResult, ...] | None:
        if not self.cache_enabled:
            return None
        results = self._cache.get(value)
        if results is None:
            logger.debug("Validation cache miss (%d chars)", len(value))
            return None
        self._cache.move_to_end(value)
        logger.debug("Validation cache hit (%d chars)", len(value))
        return results

    def _store(self, value: str, results: tuple[ValidationResult, ...]) -> None:
        if not self.cache_enabled:
            return
        self._cache[value] = results
        self._cache.move_to_end(value)
        if self._cache_size is not None:
            while len(self._cache) > self._cache_size:
                self._cache.popitem(last=False)


def filter_display_errors(
    results: Iterable[ValidationResult], max_errors: int | None = None
) -> list[ValidationResult]:
    """Apply the priority-tiered display budget to a set of results.

    Args:
        results: Validation results (any order; sorted here).
        max_errors: Optional overall cap.

    Returns:
        The failing results to display, most severe first.
    """
    if max_errors is not None and max_errors <= 0:
        return []

    ordered = sorted(results, key=lambda r: (int(r.priority), r.rule_name))
    failed = [r for r in ordered if not r.passed]

    display: list[ValidationResult] = []
    critical_high = 0
    medium = 0
    low = 0

    for result in failed:
        if result.priority in (Priority.CRITICAL, Priority.HIGH):
            critical_high += 1
            include = True
        elif result.priority is Priority.MEDIUM:
            medium += 1
            include = medium <= MAX_MEDIUM_ERRORS
        else:
            low += 1
            include = critical_high == 0 and low <= MAX_LOW_ERRORS

        if include:
            display.append(result)
            if max_errors is not None and len(display) >= max_errors:
                break

    return display
