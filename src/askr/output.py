"""Output formatters for the final validation summary."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod

from askr.config import OUTPUT_FORMATS
from askr.errors import ConfigurationError
from askr.validation.result import ValidationSummary


class OutputFormatter(ABC):
    """Turns a ValidationSummary into the text printed on stdout."""

    name: str = ""

    @abstractmethod
    def format(self, summary: ValidationSummary) -> str:
        """Render ``summary``. An empty string means print nothing."""


class DefaultFormatter(OutputFormatter):
    """The value when valid, nothing otherwise (the exit code tells why)."""

    name = "default"

    def format(self, summary: ValidationSummary) -> str:
        return summary.value if summary.valid else ""


class JsonFormatter(OutputFormatter):
    """Pretty-printed JSON of the full summary."""

    name = "json"

    def format(self, summary: ValidationSummary) -> str:
        return json.dumps(summary.to_dict(), indent=2, ensure_ascii=False)


class RawFormatter(OutputFormatter):
    """The value, whether or not it passed validation."""

    name = "raw"

    def format(self, summary: ValidationSummary) -> str:
        return summary.value


_FORMATTERS: dict[str, type[OutputFormatter]] = {
    DefaultFormatter.name: DefaultFormatter,
    JsonFormatter.name: JsonFormatter,
    RawFormatter.name: RawFormatter,
}


def get_formatter(name: str) -> OutputFormatter:
    """Look up a formatter by output format name.

    Raises:
        ConfigurationError: If the name is not a known format.
    """
    formatter_class = _FORMATTERS.get(name)
    if formatter_class is None:
        raise ConfigurationError(
            f"Unknown output format '{name}'. Valid formats: {', '.join(OUTPUT_FORMATS)}"
        )
    return formatter_class()
