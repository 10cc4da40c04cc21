"""Filesystem validators.

These rules query the live filesystem, so their results are only as stable
as the paths they look at. Paths starting with ``~`` are expanded.
"""

from __future__ import annotations

import os
import sys
from abc import abstractmethod
from pathlib import Path

from askr.validation.base import BaseValidator
from askr.validation.priority import Priority
from askr.validation.result import PartialValidationResult, ValidationResult

_WINDOWS_INVALID = frozenset('<>:"|?*')


def expand_path(value: str) -> Path:
    return Path(value).expanduser()


def find_invalid_path_char(value: str, windows: bool | None = None) -> int | None:
    """Return the index of the first character no path may contain.

    Args:
        value: Path text typed so far.
        windows: Apply Windows rules; defaults to the running platform.

    Returns:
        Character offset, or None when every character is acceptable.
    """
    if windows is None:
        windows = sys.platform == "win32"
    for i, ch in enumerate(value):
        if ch == "\0":
            return i
        if not windows:
            continue
        # Drive letter colon, as in C:\
        if ch == ":" and i == 1 and value[0].isalpha():
            continue
        if ch in _WINDOWS_INVALID or ord(ch) < 32:
            return i
    return None


class _PathValidator(BaseValidator):
    default_priority = Priority.HIGH
    failure_message = ""

    def validate(self, value: str) -> ValidationResult:
        if not value or "\0" in value:
            return self._failure(self.failure_message, path=value)
        path = expand_path(value)
        try:
            ok = self.check(path)
        except OSError:
            ok = False
        if ok:
            return self._success(path=str(path))
        return self._failure(self.failure_message, path=str(path))

    @abstractmethod
    def check(self, path: Path) -> bool:
        """Return True when ``path`` satisfies the rule."""

    def partial_validate(self, value: str, cursor_pos: int) -> PartialValidationResult:
        pos = find_invalid_path_char(value)
        if pos is None:
            return PartialValidationResult.valid()
        return PartialValidationResult.error_at(pos).blocking().with_suggestion(
            "Path contains an invalid character"
        )


class FileExistsValidator(_PathValidator):
    """Path must name an existing regular file."""

    name = "file_exists"
    failure_message = "File does not exist"

    def check(self, path: Path) -> bool:
        return path.is_file()


class DirExistsValidator(_PathValidator):
    """Path must name an existing directory."""

    name = "dir_exists"
    failure_message = "Directory does not exist"

    def check(self, path: Path) -> bool:
        return path.is_dir()


class PathExistsValidator(_PathValidator):
    name = "path_exists"
    failure_message = "Path does not exist"

    def check(self, path: Path) -> bool:
        return path.exists()


class ReadableValidator(_PathValidator):
    name = "readable"
    failure_message = "Path is not readable"

    def check(self, path: Path) -> bool:
        return path.exists() and os.access(path, os.R_OK)


class WritableValidator(_PathValidator):
    """Path must be writable, or not exist yet inside a writable directory."""

    name = "writable"
    failure_message = "Path is not writable"

    def check(self, path: Path) -> bool:
        if path.exists():
            return os.access(path, os.W_OK)
        parent = path.parent if str(path.parent) else Path(".")
        return parent.is_dir() and os.access(parent, os.W_OK)


class ExecutableValidator(_PathValidator):
    name = "executable"
    failure_message = "Path is not executable"

    def check(self, path: Path) -> bool:
        return path.is_file() and os.access(path, os.X_OK)
