"""Validation framework for askr.

Provides the validator contract, the built-in rules and the engine that
runs them with priority ordering, partial validation and result caching.
"""

from __future__ import annotations

from askr.validation.base import BaseValidator
from askr.validation.engine import ValidationEngine, filter_display_errors
from askr.validation.priority import Priority
from askr.validation.result import (
    PartialValidationResult,
    ValidationMetadata,
    ValidationResult,
    ValidationSummary,
)

__all__ = [
    # Base types
    "BaseValidator",
    "PartialValidationResult",
    "Priority",
    "ValidationMetadata",
    "ValidationResult",
    "ValidationSummary",
    # Engine
    "ValidationEngine",
    "filter_display_errors",
]
