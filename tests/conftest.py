"""Pytest configuration and fixtures for askr tests."""

from __future__ import annotations

import io
import os
from collections.abc import Iterable, Iterator
from contextlib import contextmanager

import pytest
from rich.console import Console

# Set a fixed terminal width to prevent line wrapping issues in CI
# This must be set before any Rich imports
os.environ.setdefault("COLUMNS", "200")
os.environ.setdefault("LINES", "50")
# Disable Rich's terminal detection to ensure consistent output
os.environ.setdefault("TERM", "dumb")

from askr.ui.keys import Key, KeyEvent  # noqa: E402
from askr.ui.terminal import TerminalCapabilities  # noqa: E402

_ENV_VARS = (
    "NO_COLOR",
    "ASKR_NO_COLOR",
    "ASKR_WIDTH",
    "ASKR_TIMEOUT",
    "ASKR_MAX_ATTEMPTS",
    "ASKR_OUTPUT",
    "ASKR_LOG_LEVEL",
    "ASKR_LOG_FILE",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's askr settings out of the tests."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class ScriptedTerminal:
    """Terminal double that replays a fixed list of key events.

    Rendering goes to an in-memory console. Once the script runs out,
    ``read_key`` reports a timeout.
    """

    def __init__(
        self,
        keys: Iterable[KeyEvent] = (),
        width: int = 80,
        height: int = 24,
    ) -> None:
        self.keys = list(keys)
        self.output = io.StringIO()
        self.console = Console(
            file=self.output,
            force_terminal=True,
            color_system=None,
            width=width,
            height=height,
        )
        self.capabilities = TerminalCapabilities(
            colors_supported=False,
            cursor_control=True,
            width=width,
            height=height,
        )
        self.raw_entered = 0
        self.raw_exited = 0
        self.timeouts: list[float | None] = []

    @contextmanager
    def raw_mode(self) -> Iterator[ScriptedTerminal]:
        self.raw_entered += 1
        try:
            yield self
        finally:
            self.raw_exited += 1

    def read_key(self, timeout: float | None = None) -> KeyEvent | None:
        self.timeouts.append(timeout)
        if not self.keys:
            return None
        return self.keys.pop(0)


def type_keys(text: str) -> list[KeyEvent]:
    """Key events for typing ``text`` character by character."""
    return [KeyEvent.of_char(ch) for ch in text]


ENTER = KeyEvent(Key.ENTER)
BACKSPACE = KeyEvent(Key.BACKSPACE)
UP = KeyEvent(Key.UP)
DOWN = KeyEvent(Key.DOWN)
SPACE = KeyEvent.of_char(" ")
CTRL_C = KeyEvent.ctrl_char("c")


@pytest.fixture
def make_terminal():
    """Factory fixture building a ScriptedTerminal from key events."""

    def factory(keys: Iterable[KeyEvent] = (), **kwargs: int) -> ScriptedTerminal:
        return ScriptedTerminal(keys, **kwargs)

    return factory
