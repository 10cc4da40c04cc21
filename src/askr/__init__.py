"""askr - interactive CLI input with real-time validation and choice menus."""

from __future__ import annotations

__version__ = "0.1.6"

from askr.errors import (
    AskrError,
    ConfigurationError,
    MaxAttemptsExceeded,
    PromptCancelled,
    PromptTimeout,
    ValidationFailed,
)
from askr.validation import (
    PartialValidationResult,
    Priority,
    ValidationEngine,
    ValidationResult,
    ValidationSummary,
)

__all__ = [
    "__version__",
    # Errors
    "AskrError",
    "ConfigurationError",
    "MaxAttemptsExceeded",
    "PromptCancelled",
    "PromptTimeout",
    "ValidationFailed",
    # Validation
    "PartialValidationResult",
    "Priority",
    "ValidationEngine",
    "ValidationResult",
    "ValidationSummary",
]
