"""Exception hierarchy for askr.

Validation failures inside the core are plain data (see
``askr.validation.result``). The exceptions here cover the other outcomes:
bad configuration detected before prompting, the interaction-abort
conditions of an interactive session, and terminal failures. Each carries
the process exit code the CLI uses for it.
"""

from __future__ import annotations

# Exit code conventions
EXIT_SUCCESS = 0
EXIT_VALIDATION_FAILED = 1
EXIT_INVALID_ARGUMENTS = 2
EXIT_MAX_ATTEMPTS = 3
EXIT_TIMEOUT = 124
EXIT_INTERRUPTED = 130


class AskrError(Exception):
    """Base class for all askr errors."""

    exit_code: int = EXIT_VALIDATION_FAILED


class ConfigurationError(AskrError, ValueError):
    """Raised when a validator or prompt configuration is invalid.

    Always raised before any interactive session starts.
    """

    exit_code = EXIT_INVALID_ARGUMENTS


class ValidationFailed(AskrError):
    """Raised by the CLI layer when the final value does not validate."""

    exit_code = EXIT_VALIDATION_FAILED

    def __init__(self, message: str = "Validation failed") -> None:
        self.message = message
        super().__init__(message)


class MaxAttemptsExceeded(AskrError):
    """Raised when the user exhausts the configured submit attempts."""

    exit_code = EXIT_MAX_ATTEMPTS

    def __init__(self, attempts: int) -> None:
        self.attempts = attempts
        super().__init__(f"Maximum attempts exceeded ({attempts})")


class PromptTimeout(AskrError):
    """Raised when no key event arrives before the per-wait deadline."""

    exit_code = EXIT_TIMEOUT

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"Timeout exceeded ({timeout:g}s without input)")


class PromptCancelled(AskrError):
    """Raised when the user cancels the prompt (Ctrl-C / Ctrl-D)."""

    exit_code = EXIT_INTERRUPTED

    def __init__(self) -> None:
        super().__init__("User interrupted")


class TerminalError(AskrError):
    """Raised when the terminal cannot be put into the required mode."""

    exit_code = EXIT_VALIDATION_FAILED
