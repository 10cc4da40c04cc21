"""Severity tiers for validation results.

Lower values are more severe and sort first. The ordering drives both the
order of results in a summary and the display budget applied by the
engine.
"""

from __future__ import annotations

from enum import IntEnum


class Priority(IntEnum):
    """Severity of a validation rule.

    ``CRITICAL < HIGH < MEDIUM < LOW``.
    """

    CRITICAL = 0
    HIGH = 1
    MEDIUM = 2
    LOW = 3

    @classmethod
    def parse(cls, value: str | Priority) -> Priority:
        """Parse a priority name case-insensitively.

        Args:
            value: Priority name (e.g. "critical", "High") or a Priority.

        Returns:
            The matching Priority.

        Raises:
            ValueError: If the name is not a known priority.
        """
        if isinstance(value, Priority):
            return value
        try:
            return cls[value.strip().upper()]
        except KeyError:
            valid = ", ".join(p.label for p in cls)
            raise ValueError(
                f"Unknown priority '{value}'. Valid priorities: {valid}"
            ) from None

    @property
    def label(self) -> str:
        """Lowercase name used in output and configuration."""
        return self.name.lower()

    @property
    def icon(self) -> str:
        """Icon shown next to messages of this priority."""
        if self in (Priority.CRITICAL, Priority.HIGH):
            return "❌"
        if self is Priority.MEDIUM:
            return "⚠️"
        return "💡"

    def __str__(self) -> str:
        return self.label
